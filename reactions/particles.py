import csv
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import numpy as np

from .config import DEFAULT_DB_PATH
from .errors import UnknownParticleError
from .kinematics import FourVector

logger = logging.getLogger(__name__)

# PDG code reserved for "no particle"
INVALID_PDG = 0


@dataclass(frozen=True)
class ParticleType:
    """Immutable species data. Masses and widths in GeV."""

    name: str
    pdg_code: int
    mass: float
    width: float = 0.0
    minimum_mass: Optional[float] = None
    charge: int = 0

    def __post_init__(self):
        if self.minimum_mass is None:
            object.__setattr__(self, "minimum_mass", self.mass)

    @property
    def is_stable(self) -> bool:
        return self.width <= 0.0

    def __str__(self):
        return f"{self.name}({self.pdg_code})"


class ParticleTypeCatalog:
    """
    Species lookup by PDG code or name.

    Backed by a ``particle_types`` table in sqlite or by a CSV file with the
    same columns: name, pdg_code, mass, width, minimum_mass, charge.
    """

    def __init__(self, types: Iterable[ParticleType] = ()):
        self._by_pdg: Dict[int, ParticleType] = {}
        self._by_name: Dict[str, ParticleType] = {}
        for t in types:
            self.add(t)

    def add(self, ptype: ParticleType) -> None:
        self._by_pdg[ptype.pdg_code] = ptype
        self._by_name[ptype.name.lower()] = ptype

    # -------------------- Lookup --------------------

    def find(self, pdg_code: int) -> ParticleType:
        try:
            return self._by_pdg[pdg_code]
        except KeyError:
            raise UnknownParticleError(f"Particle with PDG code {pdg_code} not in catalogue") from None

    def find_by_name(self, name: str) -> ParticleType:
        try:
            return self._by_name[name.lower()]
        except KeyError:
            raise UnknownParticleError(f"Particle '{name}' not in catalogue") from None

    def __contains__(self, pdg_code: int) -> bool:
        return pdg_code in self._by_pdg

    def __iter__(self) -> Iterator[ParticleType]:
        return iter(self._by_pdg.values())

    def __len__(self) -> int:
        return len(self._by_pdg)

    # -------------------- Loaders --------------------

    @staticmethod
    def _row_to_type(row) -> ParticleType:
        minimum = row["minimum_mass"]
        return ParticleType(
            name=str(row["name"]),
            pdg_code=int(row["pdg_code"]),
            mass=float(row["mass"]),
            width=float(row["width"] or 0.0),
            minimum_mass=float(minimum) if minimum not in (None, "") else None,
            charge=int(row["charge"] or 0),
        )

    @classmethod
    def from_sqlite(cls, db_path: Path = DEFAULT_DB_PATH) -> "ParticleTypeCatalog":
        """Load every row of the ``particle_types`` table."""
        if not Path(db_path).exists():
            raise FileNotFoundError(f"Particle database not found at {db_path}")

        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        try:
            cur = conn.cursor()
            cur.execute("SELECT name, pdg_code, mass, width, minimum_mass, charge FROM particle_types")
            rows = cur.fetchall()
        finally:
            conn.close()

        catalog = cls(cls._row_to_type(r) for r in rows)
        logger.debug(f"Loaded {len(catalog)} particle types from {db_path}")
        return catalog

    @classmethod
    def from_csv(cls, csv_path: Path) -> "ParticleTypeCatalog":
        with open(csv_path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            catalog = cls(cls._row_to_type(row) for row in reader)
        logger.debug(f"Loaded {len(catalog)} particle types from {csv_path}")
        return catalog


@dataclass(eq=False)
class ParticleRecord:
    """
    One live particle.

    ``id_process`` is the lineage token: the id of the action that last
    produced or modified this particle. Actions compare it at commit time.
    """

    type: ParticleType
    momentum: FourVector = field(default_factory=FourVector.zero)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    id: int = -1
    id_process: int = 0
    # history, consumed by output backends
    collisions_per_particle: int = 0
    formation_time: float = 0.0
    cross_section_scaling_factor: float = 1.0
    process_id_origin: int = 0
    process_type_origin: int = 0
    time_of_origin: float = 0.0
    parent_pdgs: Tuple[int, int] = (INVALID_PDG, INVALID_PDG)

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)

    @property
    def pdg_code(self) -> int:
        return self.type.pdg_code

    @property
    def charge(self) -> int:
        return self.type.charge

    @property
    def effective_mass(self) -> float:
        return self.momentum.mass

    def copy(self) -> "ParticleRecord":
        return ParticleRecord(
            type=self.type,
            momentum=type(self.momentum)(*self.momentum.to_tuple()),
            position=self.position.copy(),
            id=self.id,
            id_process=self.id_process,
            collisions_per_particle=self.collisions_per_particle,
            formation_time=self.formation_time,
            cross_section_scaling_factor=self.cross_section_scaling_factor,
            process_id_origin=self.process_id_origin,
            process_type_origin=self.process_type_origin,
            time_of_origin=self.time_of_origin,
            parent_pdgs=self.parent_pdgs,
        )

    def __str__(self):
        x, y, z = self.position
        return (f"#{self.id} {self.type} (id_process={self.id_process}) "
                f"p={self.momentum} r=({x:.4f}, {y:.4f}, {z:.4f})")


class ParticleRegistry:
    """
    Minimal in-memory particle store keyed by identity.

    Only the lookup side (``has_data`` / ``data``) is used to validate actions.
    ``replace`` applies a committed action.
    """

    def __init__(self, particles: Iterable[ParticleRecord] = ()):
        self._data: Dict[int, ParticleRecord] = {}
        self._next_id = 0
        self._last_process_id = 0
        for p in particles:
            self.insert(p)

    @property
    def last_process_id(self) -> int:
        """Lineage token of the most recent committed process (0 before any)."""
        return self._last_process_id

    def next_process_id(self) -> int:
        return self._last_process_id + 1

    def insert(self, particle: ParticleRecord) -> int:
        particle.id = self._next_id
        self._data[particle.id] = particle
        self._next_id += 1
        return particle.id

    def has_data(self, pid: int) -> bool:
        return pid in self._data

    def data(self, pid: int) -> ParticleRecord:
        return self._data[pid]

    def remove(self, pid: int) -> ParticleRecord:
        return self._data.pop(pid)

    def replace(self, incoming: List[ParticleRecord], outgoing: List[ParticleRecord],
                id_process: int, keep_identities: bool = False) -> List[ParticleRecord]:
        """
        Swap ``incoming`` for ``outgoing``.

        With ``keep_identities`` (elastic scattering) the outgoing particles
        take over the incoming ids one to one; otherwise the incoming ids are
        removed and the outgoing particles get fresh ids. Either way every
        outgoing particle gets ``id_process``, which must be larger than any
        token handed out before.
        """
        if id_process <= self._last_process_id:
            raise ValueError(f"Process id {id_process} is not above the last committed "
                             f"process id {self._last_process_id}")
        if keep_identities and len(incoming) != len(outgoing):
            raise ValueError("identity-preserving replace needs equal particle counts")

        self._last_process_id = id_process
        if keep_identities:
            for old, new in zip(incoming, outgoing):
                new.id = old.id
                new.id_process = id_process
                self._data[new.id] = new
            return outgoing

        for old in incoming:
            self.remove(old.id)
        for new in outgoing:
            new.id_process = id_process
            self.insert(new)
        return outgoing

    def __iter__(self) -> Iterator[ParticleRecord]:
        return iter(sorted(self._data.values(), key=lambda p: p.id))

    def __len__(self) -> int:
        return len(self._data)
