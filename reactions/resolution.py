"""
Commit pass for one timestep's worth of actions.

Actions may share incoming particles. They are resolved one at a time in
execution-time order; each re-validates against the live registry before it
touches anything, so an action invalidated by an earlier commit is dropped
without side effects. Every action draws from its own random stream, spawned
deterministically from one seed, in the order: channel, resonance mass,
direction.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import numpy as np

from .action import Action
from .errors import InsufficientEnergyError
from .kinematics import MassSampler
from .particles import INVALID_PDG, ParticleRecord, ParticleRegistry
from .process_branch import ProcessType
from .resonances import sample_resonance_mass

logger = logging.getLogger(__name__)


class ActionStatus(Enum):
    COMMITTED = "committed"
    INVALID = "invalid"
    INSUFFICIENT_ENERGY = "insufficient_energy"


@dataclass
class ActionOutcome:
    status: ActionStatus
    action: Action
    id_process: Optional[int] = None
    outgoing: List[ParticleRecord] = field(default_factory=list)
    conservation: Optional[dict] = None

    @property
    def committed(self) -> bool:
        return self.status is ActionStatus.COMMITTED


def spawn_streams(seed: Optional[int], n: int) -> List[np.random.Generator]:
    """Independent, reproducible generators, one per action."""
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(s) for s in children]


def _stamp_history(action: Action, outgoing: Sequence[ParticleRecord], id_process: int) -> None:
    incoming = action.incoming_particles()
    pdgs = [p.pdg_code for p in incoming[:2]]
    pdgs += [INVALID_PDG] * (2 - len(pdgs))
    n_coll = max((p.collisions_per_particle for p in incoming), default=0) + 1
    position = action.interaction_point()
    for p in outgoing:
        p.position = position.copy()
        p.process_id_origin = id_process
        p.process_type_origin = int(action.process_type)
        p.time_of_origin = action.time_of_execution
        p.formation_time = action.time_of_execution
        p.parent_pdgs = (pdgs[0], pdgs[1])
        p.collisions_per_particle = n_coll


def perform_action(action: Action,
                   registry: ParticleRegistry,
                   rng: np.random.Generator,
                   id_process: int,
                   mass_sampler: MassSampler = sample_resonance_mass,
                   tolerance: Optional[float] = None) -> ActionOutcome:
    """
    Validate, resolve and commit a single action.

    Returns an ``ActionOutcome``; the registry is only modified when the
    status is COMMITTED. ``ChannelSelectionError`` is not caught here: it
    means the run is broken.
    """
    if not action.is_valid(registry):
        logger.debug(f"Discarding invalid action {action!r}")
        return ActionOutcome(ActionStatus.INVALID, action)

    outgoing = action.choose_channel(rng)

    try:
        if len(outgoing) == 2:
            action.sample_cms_momenta(rng, mass_sampler)
            action.boost_to_lab()
        elif len(outgoing) == 1:
            # resonance formation: the resonance carries everything
            outgoing[0].momentum = action.total_momentum()
        else:
            raise NotImplementedError(f"{len(outgoing)}-body final states are not supported")
    except InsufficientEnergyError as e:
        logger.info(f"Dropping action {action!r}: {e}")
        action.outgoing_particles = []
        return ActionOutcome(ActionStatus.INSUFFICIENT_ENERGY, action)

    diag = action.check_conservation(id_process, tolerance)
    _stamp_history(action, outgoing, id_process)

    incoming = [registry.data(p.id) for p in action.incoming_particles()]
    keep_ids = action.process_type is ProcessType.ELASTIC and len(incoming) == len(outgoing)
    registry.replace(incoming, outgoing, id_process, keep_identities=keep_ids)

    logger.debug(f"Committed process {id_process}: "
                 f"{[p.pdg_code for p in incoming]} -> {[p.pdg_code for p in outgoing]}")
    return ActionOutcome(ActionStatus.COMMITTED, action, id_process, list(outgoing), diag)


def commit_actions(actions: Sequence[Action],
                   registry: ParticleRegistry,
                   seed: Optional[int] = None,
                   first_process_id: Optional[int] = None,
                   mass_sampler: MassSampler = sample_resonance_mass,
                   tolerance: Optional[float] = None) -> List[ActionOutcome]:
    """
    Resolve ``actions`` serially in execution-time order.

    Process ids are handed out consecutively to committed actions only,
    continuing from the registry's last committed id unless
    ``first_process_id`` is given. Tokens therefore keep increasing across
    passes over the same registry.
    """
    ordered = sorted(actions, key=lambda a: a.time_of_execution)
    streams = spawn_streams(seed, len(ordered))
    next_id = registry.next_process_id() if first_process_id is None else first_process_id
    if next_id <= registry.last_process_id:
        raise ValueError(f"first_process_id {next_id} would reuse a lineage token "
                         f"(last committed: {registry.last_process_id})")
    outcomes = []

    for action, rng in zip(ordered, streams):
        outcome = perform_action(action, registry, rng, next_id, mass_sampler, tolerance)
        if outcome.committed:
            next_id += 1
        outcomes.append(outcome)

    n_ok = sum(o.committed for o in outcomes)
    logger.info(f"Resolved {len(outcomes)} actions: {n_ok} committed, {len(outcomes) - n_ok} discarded")
    return outcomes
