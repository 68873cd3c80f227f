"""
Action: one candidate interaction between a captured group of particles.

An action is built by the scheduler from a snapshot of its incoming particles
and a set of weighted outgoing channels. At commit time the resolution pass
calls, in order:

    is_valid -> choose_channel -> sample_cms_momenta -> boost_to_lab
             -> check_conservation

and then hands ``outgoing_particles`` to the registry.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .channel_selector import choose_channel
from .conservation import audit_conservation
from .errors import FrameMismatchError
from .kinematics import CMFourVector, Frame, FourVector, MassSampler, sample_two_body_cms, total_four_momentum
from .particles import ParticleRecord
from .process_branch import ProcessBranch, ProcessType
from .resonances import sample_resonance_mass

logger = logging.getLogger(__name__)


class Action:
    def __init__(self, incoming: Iterable[ParticleRecord], time_of_execution: float):
        self._incoming: Tuple[ParticleRecord, ...] = tuple(p.copy() for p in incoming)
        self.time_of_execution = float(time_of_execution)
        self._branches: List[ProcessBranch] = []
        self._total_weight = 0.0
        self.outgoing_particles: List[ParticleRecord] = []
        self.process_type = ProcessType.NONE

    # -------------------- Branch bookkeeping --------------------

    @property
    def weight(self) -> float:
        """Sum of all branch weights, placeholders included."""
        return self._total_weight

    @property
    def branches(self) -> Tuple[ProcessBranch, ...]:
        return tuple(self._branches)

    def add_process(self, branch: ProcessBranch) -> None:
        self._total_weight += branch.weight
        self._branches.append(branch)

    def add_processes(self, branches: Iterable[ProcessBranch]) -> None:
        for branch in branches:
            self.add_process(branch)

    # -------------------- Incoming snapshot --------------------

    def incoming_particles(self) -> List[ParticleRecord]:
        """Copies of the captured incoming particles."""
        return [p.copy() for p in self._incoming]

    def interaction_point(self) -> np.ndarray:
        """Mean position of the incoming particles (computational frame)."""
        return np.mean([p.position for p in self._incoming], axis=0)

    def total_momentum(self) -> FourVector:
        return total_four_momentum(p.momentum for p in self._incoming)

    def sqrt_s(self) -> float:
        return self.total_momentum().mass

    # -------------------- Validity --------------------

    def is_valid(self, registry) -> bool:
        """
        True if every incoming particle still exists in ``registry`` with the
        lineage token captured at construction.

        A missing id means the particle decayed or scattered inelastically; a
        changed ``id_process`` means another action touched it (e.g. an
        elastic scatter) after this action was proposed.
        """
        for part in self._incoming:
            if not registry.has_data(part.id):
                return False
            if registry.data(part.id).id_process != part.id_process:
                return False
        return True

    # -------------------- Resolution --------------------

    def choose_channel(self, rng: Optional[np.random.Generator] = None) -> List[ParticleRecord]:
        """Pick an outgoing channel by weight; sets and returns ``outgoing_particles``."""
        branch = choose_channel(self._branches, self._total_weight, rng, describe=self.__str__)
        self.process_type = branch.process_type
        self.outgoing_particles = branch.particle_list()
        return self.outgoing_particles

    def sample_cms_momenta(self, rng: Optional[np.random.Generator] = None,
                           mass_sampler: MassSampler = sample_resonance_mass) -> None:
        """Fill the two outgoing momenta in the centre-of-mass frame."""
        if len(self.outgoing_particles) != 2:
            raise ValueError(f"sample_cms_momenta needs a two-body final state, "
                             f"got {len(self.outgoing_particles)} outgoing particles")
        rng = rng or np.random.default_rng()
        p_a, p_b = self.outgoing_particles
        p_a.momentum, p_b.momentum = sample_two_body_cms(
            p_a.type, p_b.type, self.sqrt_s(), rng, mass_sampler
        )

    def boost_to_lab(self) -> None:
        """Boost CM-frame outgoing momenta into the frame of the incoming particles."""
        beta = self.total_momentum().beta()
        for p in self.outgoing_particles:
            if isinstance(p.momentum, CMFourVector):
                p.momentum = p.momentum.to_lab(beta)

    def check_conservation(self, id_process: int, tolerance: Optional[float] = None) -> dict:
        """Warn about four-momentum imbalance between incoming and outgoing particles."""
        if any(p.momentum.frame is Frame.CM for p in self.outgoing_particles):
            raise FrameMismatchError(
                f"Process {id_process}: outgoing momenta are still in the CM frame, call boost_to_lab() first"
            )
        return audit_conservation(
            [p.momentum for p in self._incoming],
            [p.momentum for p in self.outgoing_particles],
            id_process,
            tolerance,
        )

    # -------------------- Representation --------------------

    def __str__(self) -> str:
        lines = [f"Action(t={self.time_of_execution:.6f}, total_weight={self._total_weight:.6g}, "
                 f"process_type={self.process_type.name})"]
        lines.append("  incoming:")
        lines.extend(f"    {p}" for p in self._incoming)
        lines.append(f"  branches ({len(self._branches)}):")
        lines.extend(f"    {b}" for b in self._branches)
        if self.outgoing_particles:
            lines.append("  outgoing:")
            lines.extend(f"    {p}" for p in self.outgoing_particles)
        return "\n".join(lines)

    def __repr__(self) -> str:
        ids = [p.id for p in self._incoming]
        return f"Action(incoming={ids}, t={self.time_of_execution}, weight={self._total_weight:.6g})"


def format_action_list(actions: Sequence[Action]) -> str:
    out = ["ActionList {"]
    for a in actions:
        out.append(f"- {a}")
    out.append("}")
    return "\n".join(out)
