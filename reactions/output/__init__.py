"""
Output backends for finalized particle lists.

Usage:
    from reactions.output import create_output

    out = create_output("log", only_final=True)
    out.at_eventend(registry, event_number=0)
"""
from .base import OutputInterface
from .snapshot import History, ParticleSnapshot, snapshot_particle, snapshot_particles
from .memory import MemoryOutput
from .log_output import LogOutput
from .registry import register, create_output, list_backends

__all__ = [
    "OutputInterface",
    "History",
    "ParticleSnapshot",
    "snapshot_particle",
    "snapshot_particles",
    "MemoryOutput",
    "LogOutput",
    "register",
    "create_output",
    "list_backends",
]
