import math

import numpy as np
import pytest

from reactions import (
    Action,
    Frame,
    FrameMismatchError,
    ParticleType,
    ProcessBranch,
    ProcessType,
    format_action_list,
)
from reactions.kinematics import FourVector
from conftest import FixedDraws


def _assert_close(a, b, tol=1e-9):
    assert abs(a - b) < tol, f"Values differ: {a} vs {b} (tol={tol})"


def elastic_and_formation(catalog):
    return [
        ProcessBranch((catalog.find(211), catalog.find(2212)), 0.3, ProcessType.ELASTIC),
        ProcessBranch((catalog.find(2224),), 0.7, ProcessType.TWO_TO_ONE),
    ]


# --------------------------- Weight bookkeeping ---------------------------
def test_total_weight_tracks_single_and_bulk_additions(pion_proton, catalog):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.1)
    weights = [0.25, 0.0, 1.5]
    action.add_process(ProcessBranch((catalog.find(211),), 0.125))
    action.add_processes(ProcessBranch((catalog.find(111),), w) for w in weights)
    action.add_process(ProcessBranch((), 0.375))  # placeholder counts too
    action.add_processes([])
    assert math.isclose(action.weight, 0.125 + sum(weights) + 0.375)
    assert len(action.branches) == 5


def test_outgoing_empty_until_resolved(pion_proton):
    _, pi, p = pion_proton
    assert Action([pi, p], 0.0).outgoing_particles == []


# ------------------------------ Snapshot ----------------------------------
def test_incoming_snapshot_is_not_shared(pion_proton):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    pi.position[0] = 99.0
    pi.id_process = 42
    pi.momentum = FourVector(5.0, 0, 0, 0)
    captured = action.incoming_particles()
    assert captured[0].position[0] == 0.0
    assert captured[0].id_process == 0
    captured[0].id_process = 7
    assert action.incoming_particles()[0].id_process == 0


def test_interaction_point_is_mean_position(pion_proton):
    _, pi, p = pion_proton
    assert np.allclose(Action([pi, p], 0.0).interaction_point(), [0.0, 0.0, 0.0])


# ------------------------------- Validity ---------------------------------
def test_is_valid_tracks_lineage(pion_proton):
    registry, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    assert action.is_valid(registry)

    registry.data(pi.id).id_process = 3
    assert not action.is_valid(registry)

    registry.data(pi.id).id_process = 0
    assert action.is_valid(registry)


def test_is_valid_fails_for_consumed_particle(pion_proton):
    registry, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    registry.remove(p.id)
    assert not action.is_valid(registry)


# ------------------------------ Resolution --------------------------------
def test_choose_channel_sets_outgoing_and_process_type(pion_proton, catalog):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    action.add_processes(elastic_and_formation(catalog))
    out = action.choose_channel(FixedDraws(0.5))
    assert [o.pdg_code for o in out] == [2224]
    assert action.process_type is ProcessType.TWO_TO_ONE
    assert action.outgoing_particles is out


def test_cms_sampling_then_boost_conserves(pion_proton, catalog):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    action.add_processes(elastic_and_formation(catalog))
    rng = np.random.default_rng(11)
    action.choose_channel(FixedDraws(0.1))
    action.sample_cms_momenta(rng)

    a, b = action.outgoing_particles
    assert a.momentum.frame is Frame.CM
    _assert_close(a.momentum.E + b.momentum.E, action.sqrt_s())

    with pytest.raises(FrameMismatchError):
        action.check_conservation(1)

    action.boost_to_lab()
    assert all(o.momentum.frame is Frame.LAB for o in action.outgoing_particles)
    diag = action.check_conservation(1, tolerance=1e-9)
    assert diag['conserved'], diag
    _assert_close(a.effective_mass, catalog.find(211).mass)


def test_sample_cms_requires_two_body(pion_proton, catalog):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    action.add_processes(elastic_and_formation(catalog))
    action.choose_channel(FixedDraws(0.9))
    with pytest.raises(ValueError, match="two-body"):
        action.sample_cms_momenta(np.random.default_rng(0))


def test_sqrt_s_of_incoming_pair(pion_proton):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.0)
    total = pi.momentum + p.momentum
    _assert_close(action.sqrt_s(), total.mass)


# ---------------------------- Representation ------------------------------
def test_diagnostic_dump_lists_everything(pion_proton, catalog):
    _, pi, p = pion_proton
    action = Action([pi, p], 0.25)
    action.add_processes(elastic_and_formation(catalog))
    text = str(action)
    assert "t=0.250000" in text
    assert "total_weight=1" in text
    assert "Proton" in text and "Delta++" in text
    assert "branches (2)" in text

    listing = format_action_list([action, action])
    assert listing.startswith("ActionList {")
    assert listing.count("- Action(") == 2
    assert listing.endswith("}")
