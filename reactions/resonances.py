"""
Resonance mass sampling.

The reaction engine treats the mass sampler as a black box with the signature
``(resonance, partner, sqrt_s, rng) -> mass``. The default here is a
Breit–Wigner (Cauchy) line shape truncated to the kinematically allowed window
[minimum_mass, sqrt_s - m_partner], inverted from a single uniform draw so the
number of random numbers consumed per action is fixed.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Protocol
import numpy as np

if TYPE_CHECKING:
    from .particles import ParticleType


class ResonanceMassSampler(Protocol):
    def __call__(self, resonance: "ParticleType", partner: "ParticleType",
                 cms_energy: float, rng: np.random.Generator) -> float:
        ...


def breit_wigner_cdf_bounds(pole: float, width: float, m_min: float, m_max: float):
    """Return the arctan bounds of the truncated Cauchy inverse CDF."""
    half = 0.5 * width
    return math.atan((m_min - pole) / half), math.atan((m_max - pole) / half)


def sample_resonance_mass(resonance: "ParticleType",
                          partner: "ParticleType",
                          cms_energy: float,
                          rng: np.random.Generator) -> float:
    """Sample the mass of ``resonance`` produced together with ``partner`` at ``cms_energy``."""
    if resonance.is_stable:
        return resonance.mass

    m_min = resonance.minimum_mass
    m_max = cms_energy - partner.mass
    if m_max <= m_min:
        return m_min

    lo, hi = breit_wigner_cdf_bounds(resonance.mass, resonance.width, m_min, m_max)
    u = rng.random()
    mass = resonance.mass + 0.5 * resonance.width * math.tan(lo + u * (hi - lo))
    # guard the window against tan() round-off at the edges
    return min(max(mass, m_min), m_max)
