from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Tuple

from .particles import INVALID_PDG, ParticleRecord, ParticleType


class ProcessType(IntEnum):
    """Kind of reaction a branch describes. Values match the output process_type column."""

    NONE = 0
    ELASTIC = 1
    TWO_TO_ONE = 2
    TWO_TO_TWO = 3
    DECAY = 5


class BranchKind(Enum):
    REAL = "real"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class ProcessBranch:
    """
    One candidate outgoing channel and its weight.

    The weight is a rate in whatever units the producing cross-section code
    uses; only ratios between branches of one action matter.
    """

    particle_types: Tuple[ParticleType, ...]
    weight: float
    process_type: ProcessType = ProcessType.TWO_TO_TWO

    def __post_init__(self):
        object.__setattr__(self, "particle_types", tuple(self.particle_types))
        if not self.weight >= 0.0:
            raise ValueError(f"Branch weight must be non-negative, got {self.weight}")

    @property
    def kind(self) -> BranchKind:
        if not self.particle_types or self.particle_types[0].pdg_code == INVALID_PDG:
            return BranchKind.PLACEHOLDER
        return BranchKind.REAL

    @property
    def pdg_codes(self) -> Tuple[int, ...]:
        return tuple(t.pdg_code for t in self.particle_types)

    def particle_list(self) -> List[ParticleRecord]:
        """Fresh outgoing particles of this channel, momenta still unset."""
        return [ParticleRecord(type=t) for t in self.particle_types]

    def __str__(self):
        species = " ".join(t.name for t in self.particle_types) or "<none>"
        return f"{self.process_type.name} -> {species} (w={self.weight:.6g}, {self.kind.value})"
