from dataclasses import dataclass, field
from typing import List

from .base import OutputInterface
from .snapshot import ParticleSnapshot


@dataclass
class Block:
    kind: str
    event_number: int
    particles: List[ParticleSnapshot] = field(default_factory=list)


class MemoryOutput(OutputInterface):
    """Keeps every block in memory. Used by tests and the driver's summary."""

    name = "memory"

    def __init__(self, only_final: bool = False, extended: bool = False):
        super().__init__(only_final, extended)
        self.blocks: List[Block] = []
        self.finished_events: List[tuple] = []

    def write_block(self, kind, event_number, snapshots):
        self.blocks.append(Block(kind, event_number, snapshots))

    def end_event(self, event_number, impact_parameter):
        self.finished_events.append((event_number, impact_parameter))
