import logging
from typing import Callable, Optional, Sequence
import numpy as np

from .errors import ChannelSelectionError
from .process_branch import BranchKind, ProcessBranch

logger = logging.getLogger(__name__)


def choose_channel(branches: Sequence[ProcessBranch],
                   total_weight: float,
                   rng: Optional[np.random.Generator] = None,
                   describe: Optional[Callable[[], str]] = None) -> ProcessBranch:
    """
    Pick one real branch with probability weight / total_weight.

    Placeholder branches are skipped: their weight is part of
    ``total_weight`` but never of the accumulated probability, so a draw can
    land in the unreachable remainder. That is treated as broken weight
    bookkeeping upstream and raises ``ChannelSelectionError`` after logging
    the full state; ``describe`` supplies the dump of the owning action.
    """
    rng = rng or np.random.default_rng()
    if not total_weight > 0.0:
        logger.critical(f"Problem in choose_channel: total weight {total_weight!r}\n{describe() if describe else ''}")
        raise ChannelSelectionError(f"cannot select from total weight {total_weight!r}")

    random_interaction = rng.random()
    interaction_probability = 0.0

    for branch in branches:
        if branch.kind is BranchKind.PLACEHOLDER:
            continue
        interaction_probability += branch.weight / total_weight
        if random_interaction <= interaction_probability:
            return branch

    logger.critical(
        f"Problem in choose_channel: {len(branches)} branches, "
        f"accumulated probability {interaction_probability!r}, "
        f"total weight {total_weight!r}, draw {random_interaction!r}\n{describe() if describe else ''}"
    )
    raise ChannelSelectionError(
        f"no branch matched draw {random_interaction!r} "
        f"(accumulated {interaction_probability!r} of total weight {total_weight!r})"
    )
