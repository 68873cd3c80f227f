import logging
import math

import numpy as np
import pytest

from reactions import CMFourVector, FourVector, FrameMismatchError, InsufficientEnergyError, ParticleType
from reactions.kinematics import Angles, lorentz_boost_array, sample_two_body_cms, two_body_energy
from conftest import FixedDraws


def _assert_close(a, b, tol=1e-9, msg=""):
    assert abs(a - b) < tol, msg or f"Values differ: {a} vs {b} (tol={tol})"


STABLE_A = ParticleType("A", 9001, 0.5)
STABLE_B = ParticleType("B", 9002, 0.5)


# ------------------------------ FourVector --------------------------------
def test_fourvector_mass_and_arithmetic():
    p1 = FourVector(7.0, 0, 0, 7.0)
    p2 = FourVector(7.0, 0, 0, -7.0)
    total = p1 + p2
    _assert_close(total.mass, 14.0)
    assert (total - p2) == p1
    assert (-p1).E == -7.0


def test_mixing_frames_raises():
    with pytest.raises(FrameMismatchError):
        FourVector(1, 0, 0, 0) + CMFourVector(1, 0, 0, 0)


def test_cm_vector_boost_to_lab_restores_total():
    lab_total = FourVector(3.0, 0.5, -0.4, 1.2)
    beta = lab_total.beta()
    rest = CMFourVector(lab_total.mass, 0.0, 0.0, 0.0)
    back = rest.to_lab(beta)
    assert type(back) is FourVector
    for a, b in zip(back.to_tuple(), lab_total.to_tuple()):
        _assert_close(a, b)


def test_boost_rejects_superluminal():
    with pytest.raises(ValueError):
        lorentz_boost_array(np.array([1.0, 0, 0, 0]), np.array([0.0, 0.0, 1.0]))


# ---------------------------- Two-body sampling ---------------------------
def test_two_body_energy_formula():
    _assert_close(two_body_energy(2.0, 0.938, 0.138), (4.0 + 0.938**2 - 0.138**2) / 4.0)


def test_two_body_energy_rejects_zero_invariant_mass():
    with pytest.raises(ValueError):
        two_body_energy(0.0, 0.0, 0.0)


def test_massless_pair_at_zero_energy_is_insufficient(catalog):
    photon = catalog.find(22)
    with pytest.raises(InsufficientEnergyError) as exc:
        sample_two_body_cms(photon, photon, 0.0, np.random.default_rng(0))
    assert exc.value.sqrt_s == 0.0


def test_threshold_equal_masses_zero_momentum(caplog):
    with caplog.at_level(logging.WARNING, logger="reactions.kinematics"):
        p_a, p_b = sample_two_body_cms(STABLE_A, STABLE_B, 1.0, np.random.default_rng(1))
    _assert_close(p_a.E, 0.5)
    _assert_close(p_a.magnitude, 0.0)
    _assert_close(p_b.magnitude, 0.0)
    assert any("Non-positive radial momentum" in r.message for r in caplog.records)


@pytest.mark.parametrize("sqrt_s", [1.08, 1.5, 2.7, 10.0])
def test_stable_pair_properties(catalog, sqrt_s):
    pi = catalog.find(211)
    p = catalog.find(2212)
    rng = np.random.default_rng(int(sqrt_s * 100))
    for _ in range(50):
        p_a, p_b = sample_two_body_cms(pi, p, sqrt_s, rng)
        assert isinstance(p_a, CMFourVector) and isinstance(p_b, CMFourVector)
        _assert_close(p_a.E + p_b.E, sqrt_s)
        _assert_close(p_a.magnitude, p_b.magnitude)
        assert np.allclose(p_a.p, -p_b.p, atol=1e-12)
        _assert_close(p_a.mass, pi.mass)
        _assert_close(p_b.mass, p.mass)


def test_insufficient_energy_carries_values(catalog):
    lam = catalog.find(3122)
    kaon = catalog.find(321)
    with pytest.raises(InsufficientEnergyError) as exc:
        sample_two_body_cms(lam, kaon, 1.5, np.random.default_rng(0))
    err = exc.value
    assert err.sqrt_s == 1.5
    assert err.minimum_mass_a == lam.minimum_mass
    assert err.minimum_mass_b == kaon.minimum_mass
    assert (err.pdg_a, err.pdg_b) == (3122, 321)
    assert isinstance(err, ValueError)


def test_threshold_uses_minimum_mass_of_resonance(catalog):
    delta = catalog.find(2224)
    pi0 = catalog.find(111)
    # below pole sum but above minimum-mass sum
    sqrt_s = 1.3
    assert sqrt_s < delta.mass + pi0.mass
    p_a, p_b = sample_two_body_cms(delta, pi0, sqrt_s, np.random.default_rng(4))
    assert delta.minimum_mass <= p_a.mass <= sqrt_s - pi0.mass + 1e-9
    _assert_close(p_b.mass, pi0.mass)


def test_resonance_second_slot_is_sampled(catalog):
    pi0 = catalog.find(111)
    delta = catalog.find(2224)
    calls = []

    def sampler(resonance, partner, cms_energy, rng):
        calls.append((resonance.pdg_code, partner.pdg_code, cms_energy))
        return 1.2

    p_a, p_b = sample_two_body_cms(pi0, delta, 2.0, np.random.default_rng(0), sampler)
    assert calls == [(2224, 111, 2.0)]
    _assert_close(p_b.mass, 1.2)
    _assert_close(p_a.mass, pi0.mass)


def test_both_unstable_only_first_sampled(catalog):
    delta = catalog.find(2224)
    rho = catalog.find(113)
    p_a, p_b = sample_two_body_cms(delta, rho, 3.0, np.random.default_rng(9))
    _assert_close(p_b.mass, rho.mass)
    assert delta.minimum_mass <= p_a.mass <= 3.0 - rho.mass + 1e-9


def test_draw_order_mass_then_direction(catalog):
    delta = catalog.find(2224)
    pi0 = catalog.find(111)
    # mass draw, phi draw, cos(theta) draw
    draws = FixedDraws(0.5, 0.25, 0.5)
    p_a, _ = sample_two_body_cms(delta, pi0, 2.0, draws)
    unit = p_a.p / p_a.magnitude
    # phi = pi/2, cos(theta) = 0 -> +y
    assert np.allclose(unit, [0.0, 1.0, 0.0], atol=1e-9)


# ------------------------------- Isotropy ---------------------------------
def _chi2_uniform(values, bins, low, high):
    counts, _ = np.histogram(values, bins=bins, range=(low, high))
    expected = len(values) / bins
    return float(np.sum((counts - expected) ** 2 / expected))


def test_isotropic_angles_are_uniform():
    rng = np.random.default_rng(2024)
    angles = [Angles.isotropic(rng) for _ in range(20_000)]
    phi = np.array([a.phi for a in angles])
    cost = np.array([a.costheta for a in angles])
    assert phi.min() >= 0.0 and phi.max() < 2 * math.pi
    assert cost.min() >= -1.0 and cost.max() <= 1.0
    # chi2 critical value, 9 dof, p = 0.001
    assert _chi2_uniform(phi, 10, 0.0, 2 * math.pi) < 27.88
    assert _chi2_uniform(cost, 10, -1.0, 1.0) < 27.88


def test_direction_is_unit_vector():
    rng = np.random.default_rng(5)
    for _ in range(100):
        _assert_close(float(np.linalg.norm(Angles.isotropic(rng).threevec())), 1.0)
