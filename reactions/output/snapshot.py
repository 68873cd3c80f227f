from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from ..particles import ParticleRecord


@dataclass(frozen=True)
class History:
    collisions_per_particle: int
    formation_time: float
    cross_section_scaling_factor: float
    process_id_origin: int
    process_type_origin: int
    time_of_origin: float
    parent_pdgs: Tuple[int, int]


@dataclass(frozen=True)
class ParticleSnapshot:
    """Read-only per-particle line as seen by output backends."""

    t: float
    x: float
    y: float
    z: float
    mass: float
    p0: float
    px: float
    py: float
    pz: float
    pdg: int
    id: int
    charge: int
    history: Optional[History] = None


def snapshot_particle(p: ParticleRecord, time: float = 0.0, extended: bool = False) -> ParticleSnapshot:
    x, y, z = (float(c) for c in p.position)
    E, px, py, pz = p.momentum.to_tuple()
    history = None
    if extended:
        history = History(
            collisions_per_particle=p.collisions_per_particle,
            formation_time=p.formation_time,
            cross_section_scaling_factor=p.cross_section_scaling_factor,
            process_id_origin=p.process_id_origin,
            process_type_origin=p.process_type_origin,
            time_of_origin=p.time_of_origin,
            parent_pdgs=p.parent_pdgs,
        )
    return ParticleSnapshot(time, x, y, z, p.effective_mass, E, px, py, pz,
                            p.pdg_code, p.id, p.charge, history)


def snapshot_particles(particles: Iterable[ParticleRecord], time: float = 0.0,
                       extended: bool = False) -> Iterator[ParticleSnapshot]:
    for p in particles:
        yield snapshot_particle(p, time, extended)
