import logging

from .base import OutputInterface

logger = logging.getLogger(__name__)


class LogOutput(OutputInterface):
    """Writes a one-line summary per block to the log."""

    name = "log"

    def __init__(self, only_final: bool = False, extended: bool = False, level: int = logging.INFO):
        super().__init__(only_final, extended)
        self.level = level

    def write_block(self, kind, event_number, snapshots):
        energy = sum(s.p0 for s in snapshots)
        charge = sum(s.charge for s in snapshots)
        logger.log(self.level, f"event {event_number} [{kind}]: {len(snapshots)} particles, "
                               f"E={energy:.6f} GeV, Q={charge:+d}")
        for s in snapshots:
            logger.debug(f"  {s}")

    def end_event(self, event_number, impact_parameter):
        logger.log(self.level, f"event {event_number} end (b={impact_parameter:.3f} fm)")
