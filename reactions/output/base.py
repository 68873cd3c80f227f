from abc import ABC, abstractmethod
from typing import Iterable, List

from ..particles import ParticleRecord
from .snapshot import ParticleSnapshot, snapshot_particles


class OutputInterface(ABC):
    """
    Base class for consumers of finalized particle lists.

    Backends only implement ``write_block``; the event hooks decide which
    blocks are written:

    - ``only_final=False``: a block at event start and at every intermediate
      time, none at event end.
    - ``only_final=True``: a single block at event end.

    ``extended`` adds the history fields to every snapshot.
    """

    name: str = "abstract"

    def __init__(self, only_final: bool = False, extended: bool = False):
        self.only_final = only_final
        self.extended = extended

    def _snapshots(self, particles: Iterable[ParticleRecord], time: float) -> List[ParticleSnapshot]:
        return list(snapshot_particles(particles, time, self.extended))

    def at_eventstart(self, particles: Iterable[ParticleRecord], event_number: int) -> None:
        if not self.only_final:
            self.write_block("start", event_number, self._snapshots(particles, 0.0))

    def at_intermediate_time(self, particles: Iterable[ParticleRecord], event_number: int, time: float) -> None:
        if not self.only_final:
            self.write_block("intermediate", event_number, self._snapshots(particles, time))

    def at_eventend(self, particles: Iterable[ParticleRecord], event_number: int,
                    impact_parameter: float = 0.0, time: float = 0.0) -> None:
        if self.only_final:
            self.write_block("end", event_number, self._snapshots(particles, time))
        self.end_event(event_number, impact_parameter)

    @abstractmethod
    def write_block(self, kind: str, event_number: int, snapshots: List[ParticleSnapshot]) -> None:
        """Consume one block of particle snapshots."""

    @abstractmethod
    def end_event(self, event_number: int, impact_parameter: float) -> None:
        """Mark the end of an event."""
