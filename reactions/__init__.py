"""
Reaction resolution for particle-transport simulations.

Usage:
    from reactions import Action, ProcessBranch, commit_actions

    action = Action([pion, proton], time_of_execution=0.5)
    action.add_processes(branches)
    outcomes = commit_actions([action], registry, seed=42)
"""
from .errors import (
    ReactionError,
    InsufficientEnergyError,
    ChannelSelectionError,
    FrameMismatchError,
    UnknownParticleError,
)
from .kinematics import FourVector, CMFourVector, Frame, Angles, sample_two_body_cms
from .particles import INVALID_PDG, ParticleType, ParticleTypeCatalog, ParticleRecord, ParticleRegistry
from .process_branch import ProcessType, BranchKind, ProcessBranch
from .action import Action, format_action_list
from .channel_selector import choose_channel
from .conservation import check_energy_momentum, audit_conservation
from .resonances import sample_resonance_mass
from .resolution import ActionStatus, ActionOutcome, perform_action, commit_actions, spawn_streams

__all__ = [
    "ReactionError",
    "InsufficientEnergyError",
    "ChannelSelectionError",
    "FrameMismatchError",
    "UnknownParticleError",
    "FourVector",
    "CMFourVector",
    "Frame",
    "Angles",
    "sample_two_body_cms",
    "INVALID_PDG",
    "ParticleType",
    "ParticleTypeCatalog",
    "ParticleRecord",
    "ParticleRegistry",
    "ProcessType",
    "BranchKind",
    "ProcessBranch",
    "Action",
    "format_action_list",
    "choose_channel",
    "check_energy_momentum",
    "audit_conservation",
    "sample_resonance_mass",
    "ActionStatus",
    "ActionOutcome",
    "perform_action",
    "commit_actions",
    "spawn_streams",
]
