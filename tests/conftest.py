import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reactions import ParticleRecord, ParticleRegistry, ParticleTypeCatalog
from reactions.config import DEFAULT_CSV_PATH
from reactions.kinematics import FourVector


class FixedDraws:
    """Stand-in for numpy Generator that replays given uniform [0, 1) values."""

    def __init__(self, *values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)

    def uniform(self, low=0.0, high=1.0):
        return low + (high - low) * self.random()


@pytest.fixture(scope="session")
def catalog():
    return ParticleTypeCatalog.from_csv(DEFAULT_CSV_PATH)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


def make_record(ptype, px=0.0, py=0.0, pz=0.0, position=(0.0, 0.0, 0.0)):
    E = (ptype.mass**2 + px**2 + py**2 + pz**2) ** 0.5
    return ParticleRecord(type=ptype, momentum=FourVector(E, px, py, pz), position=np.array(position))


@pytest.fixture
def pion_proton(catalog):
    """Registry holding one pi+ and one proton approaching along z."""
    pi = make_record(catalog.find(211), 0.1, 0.0, 0.9, position=(0.0, 0.0, -1.0))
    p = make_record(catalog.find(2212), 0.0, 0.2, -0.5, position=(0.0, 0.0, 1.0))
    registry = ParticleRegistry([pi, p])
    return registry, pi, p
