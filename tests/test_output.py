import logging

import pytest

from reactions import ParticleRecord, ParticleRegistry
from reactions.output import LogOutput, MemoryOutput, create_output, list_backends, snapshot_particles
from conftest import make_record


def _registry(catalog):
    pi = make_record(catalog.find(211), 0.0, 0.0, 0.4, position=(1.0, 2.0, 3.0))
    pi.parent_pdgs = (2224, 0)
    pi.process_id_origin = 6
    return ParticleRegistry([pi, make_record(catalog.find(2212))])


def test_snapshots_carry_particle_fields(catalog):
    snaps = list(snapshot_particles(_registry(catalog), time=1.5))
    first = snaps[0]
    assert (first.t, first.x, first.y, first.z) == (1.5, 1.0, 2.0, 3.0)
    assert first.pdg == 211 and first.id == 0 and first.charge == 1
    assert abs(first.mass - 0.138) < 1e-9
    assert first.history is None


def test_extended_snapshots_include_history(catalog):
    first = next(snapshot_particles(_registry(catalog), extended=True))
    assert first.history.parent_pdgs == (2224, 0)
    assert first.history.process_id_origin == 6


def test_intermediate_blocks_unless_only_final(catalog):
    registry = _registry(catalog)
    out = MemoryOutput()
    out.at_eventstart(registry, 0)
    out.at_intermediate_time(registry, 0, 0.5)
    out.at_eventend(registry, 0, impact_parameter=2.0)
    assert [b.kind for b in out.blocks] == ["start", "intermediate"]
    assert out.finished_events == [(0, 2.0)]


def test_only_final_writes_single_end_block(catalog):
    registry = _registry(catalog)
    out = create_output("memory", only_final=True)
    out.at_eventstart(registry, 3)
    out.at_intermediate_time(registry, 3, 0.5)
    out.at_eventend(registry, 3)
    assert [(b.kind, b.event_number, len(b.particles)) for b in out.blocks] == [("end", 3, 2)]


def test_log_backend(catalog, caplog):
    out = create_output("LOG")
    assert isinstance(out, LogOutput)
    with caplog.at_level(logging.INFO, logger="reactions.output.log_output"):
        out.at_eventstart(_registry(catalog), 1)
        out.at_eventend(_registry(catalog), 1)
    messages = [r.message for r in caplog.records]
    assert any("event 1 [start]: 2 particles" in m for m in messages)
    assert any("event 1 end" in m for m in messages)


def test_unknown_backend():
    assert set(list_backends()) == {"memory", "log"}
    with pytest.raises(ValueError):
        create_output("vtk")
