"""
Kinematics helpers for the reaction engine.

Units: GeV (natural units c = 1).

Four-vectors carry their reference frame in their type: ``FourVector`` is the
lab (computational) frame, ``CMFourVector`` is the two-body centre-of-mass
frame. Mixing the two in arithmetic raises ``FrameMismatchError``; the only
way from CM to lab is an explicit ``to_lab`` boost.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Tuple
import numpy as np

from .errors import FrameMismatchError, InsufficientEnergyError
from .resonances import sample_resonance_mass

if TYPE_CHECKING:
    from .particles import ParticleType

logger = logging.getLogger(__name__)


class Frame(Enum):
    LAB = "lab"
    CM = "cm"


# -----------------------------
# FourVector
# -----------------------------
@dataclass
class FourVector:
    E: float
    px: float
    py: float
    pz: float

    frame = Frame.LAB

    @property
    def p(self) -> np.ndarray:
        return np.array([self.px, self.py, self.pz], dtype=float)

    @property
    def magnitude(self) -> float:
        return float(np.linalg.norm(self.p))

    @property
    def mass(self) -> float:
        m2 = self.E * self.E - self.magnitude * self.magnitude
        return math.sqrt(max(m2, 0.0))

    def beta(self) -> np.ndarray:
        if self.E == 0.0:
            return np.zeros(3, dtype=float)
        return self.p / self.E

    def boost(self, beta: np.ndarray) -> "FourVector":
        boosted = lorentz_boost_array(self.to_array(), beta)
        return type(self)(float(boosted[0]), float(boosted[1]), float(boosted[2]), float(boosted[3]))

    def to_array(self) -> np.ndarray:
        return np.array([self.E, self.px, self.py, self.pz], dtype=float)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.E, self.px, self.py, self.pz)

    def _same_frame(self, other: "FourVector") -> None:
        if self.frame is not other.frame:
            raise FrameMismatchError(
                f"cannot combine {self.frame.value}-frame and {other.frame.value}-frame four-vectors"
            )

    def __add__(self, other: "FourVector") -> "FourVector":
        self._same_frame(other)
        return type(self)(self.E + other.E, self.px + other.px, self.py + other.py, self.pz + other.pz)

    def __sub__(self, other: "FourVector") -> "FourVector":
        self._same_frame(other)
        return type(self)(self.E - other.E, self.px - other.px, self.py - other.py, self.pz - other.pz)

    def __neg__(self) -> "FourVector":
        return type(self)(-self.E, -self.px, -self.py, -self.pz)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(E={self.E:.6f}, px={self.px:.6f}, py={self.py:.6f}, pz={self.pz:.6f})"

    @classmethod
    def zero(cls) -> "FourVector":
        return cls(0.0, 0.0, 0.0, 0.0)


class CMFourVector(FourVector):
    """Four-momentum expressed in the two-body centre-of-mass frame."""

    frame = Frame.CM

    def to_lab(self, beta: np.ndarray) -> FourVector:
        """Boost into the lab frame, where the CM system moves with velocity ``beta``."""
        boosted = lorentz_boost_array(self.to_array(), beta)
        return FourVector(float(boosted[0]), float(boosted[1]), float(boosted[2]), float(boosted[3]))


def total_four_momentum(vectors) -> FourVector:
    vectors = list(vectors)
    if not vectors:
        return FourVector.zero()
    return sum(vectors[1:], start=vectors[0])


# -----------------------------
# Lorentz boost
# -----------------------------
def lorentz_boost_array(p4: np.ndarray, beta: np.ndarray) -> np.ndarray:
    beta = np.asarray(beta, dtype=float)
    p4 = np.asarray(p4, dtype=float)
    beta2 = float(np.dot(beta, beta))
    if beta2 >= 1.0:
        raise ValueError("beta^2 < 1 required.")
    if beta2 <= 1e-18:
        return p4.copy()
    gamma = 1.0 / math.sqrt(1.0 - beta2)
    bp = float(np.dot(beta, p4[1:]))
    Eprime = gamma * (p4[0] + bp)
    factor = ((gamma - 1.0) * bp / beta2) + gamma * p4[0]
    pprime = p4[1:] + factor * beta
    return np.array([Eprime, pprime[0], pprime[1], pprime[2]], dtype=float)


# -----------------------------
# Isotropic direction
# -----------------------------
@dataclass(frozen=True)
class Angles:
    phi: float
    costheta: float

    @classmethod
    def isotropic(cls, rng: np.random.Generator) -> "Angles":
        # azimuth first, then polar cosine
        phi = rng.uniform(0.0, 2.0 * math.pi)
        costheta = rng.uniform(-1.0, 1.0)
        return cls(float(phi), float(costheta))

    @property
    def sintheta(self) -> float:
        return math.sqrt(max(0.0, 1.0 - self.costheta * self.costheta))

    def threevec(self) -> np.ndarray:
        s = self.sintheta
        return np.array([s * math.cos(self.phi), s * math.sin(self.phi), self.costheta], dtype=float)

    def __str__(self) -> str:
        return f"phi={self.phi:.6f}, cos(theta)={self.costheta:.6f}"


def isotropic_direction(rng: Optional[np.random.Generator] = None) -> np.ndarray:
    rng = rng or np.random.default_rng()
    return Angles.isotropic(rng).threevec()


# -----------------------------
# Two-body CM kinematics
# -----------------------------
def two_body_energy(sqrt_s: float, mass_a: float, mass_b: float) -> float:
    """Energy of particle a in the CM frame of a -> a + b with total energy sqrt_s."""
    if sqrt_s <= 0.0:
        raise ValueError(f"two_body_energy needs a positive invariant mass, got sqrt_s={sqrt_s}")
    return (sqrt_s * sqrt_s + mass_a * mass_a - mass_b * mass_b) / (2.0 * sqrt_s)


MassSampler = Callable[["ParticleType", "ParticleType", float, np.random.Generator], float]


def sample_two_body_cms(type_a: "ParticleType",
                        type_b: "ParticleType",
                        sqrt_s: float,
                        rng: np.random.Generator,
                        mass_sampler: MassSampler = sample_resonance_mass) -> Tuple[CMFourVector, CMFourVector]:
    """
    Sample outgoing CM-frame four-momenta for a two-body final state.

    Parameters
    ----------
    type_a, type_b : ParticleType
        Outgoing species, in branch order.
    sqrt_s : float
        Invariant mass of the incoming system (GeV).
    rng : numpy Generator
        Random stream. Draw order is mass (if a resonance is present),
        then azimuth, then polar cosine.
    mass_sampler : callable
        (resonance, partner, sqrt_s, rng) -> mass.

    Returns
    -------
    (CMFourVector, CMFourVector)
        Back-to-back momenta with E_a + E_b == sqrt_s.

    Raises
    ------
    InsufficientEnergyError
        If sqrt_s is below the summed minimum masses, or is not positive.

    Notes
    -----
    Only one resonance mass is sampled. If both species are unstable, b stays
    at its pole mass.
    """
    mass_a = type_a.mass
    mass_b = type_b.mass

    if sqrt_s <= 0.0 or sqrt_s < type_a.minimum_mass + type_b.minimum_mass:
        raise InsufficientEnergyError(sqrt_s, type_a.minimum_mass, type_b.minimum_mass,
                                      type_a.pdg_code, type_b.pdg_code)

    if not type_a.is_stable:
        mass_a = mass_sampler(type_a, type_b, sqrt_s, rng)
    elif not type_b.is_stable:
        mass_b = mass_sampler(type_b, type_a, sqrt_s, rng)

    energy_a = two_body_energy(sqrt_s, mass_a, mass_b)
    radicand = energy_a * energy_a - mass_a * mass_a
    momentum_radial = math.sqrt(max(radicand, 0.0))
    if not momentum_radial > 0.0:
        logger.warning(
            f"Non-positive radial momentum {momentum_radial:.3e} (E_a^2 - m_a^2 = {radicand:.3e}) "
            f"for {type_a.pdg_code} + {type_b.pdg_code} at sqrt_s={sqrt_s:.6f}, "
            f"m_a={mass_a:.6f}, m_b={mass_b:.6f}"
        )

    angles = Angles.isotropic(rng)
    p_vec = momentum_radial * angles.threevec()

    p_a = CMFourVector(energy_a, float(p_vec[0]), float(p_vec[1]), float(p_vec[2]))
    p_b = CMFourVector(sqrt_s - energy_a, float(-p_vec[0]), float(-p_vec[1]), float(-p_vec[2]))

    logger.debug(f"p_a: {p_a} (m={mass_a:.6f}), p_b: {p_b} (m={mass_b:.6f}), {angles}")
    return p_a, p_b
