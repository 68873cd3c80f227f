# conservation.py
# Four-momentum bookkeeping for committed actions.
#
# The audit is diagnostic only: violations are logged, never raised, and the
# action proceeds. Baryon number, charge and the other quantum numbers are
# not checked here.
import logging
from typing import Optional, Sequence

from .config import conservation_tolerance
from .kinematics import FourVector, total_four_momentum

logger = logging.getLogger(__name__)

COMPONENTS = ("E", "px", "py", "pz")


def check_energy_momentum(initial_vectors: Sequence[FourVector],
                          final_vectors: Sequence[FourVector],
                          tol: float = 1e-6) -> dict:
    """Return diagnostic dict for full 4-momentum conservation.

    Returns dict with deltas (initial - final) for energy and momentum
    components and a boolean 'conserved' key summarizing result within
    tolerance. Mixing lab- and CM-frame vectors raises FrameMismatchError.
    """
    total_in = total_four_momentum(initial_vectors)
    total_out = total_four_momentum(final_vectors)
    delta = total_in - total_out
    deltas = dict(zip(COMPONENTS, delta.to_tuple()))
    return {
        'conserved': all(abs(v) <= tol for v in deltas.values()),
        'deltaE': deltas["E"],
        'deltaPx': deltas["px"],
        'deltaPy': deltas["py"],
        'deltaPz': deltas["pz"],
        'E_initial': total_in.E,
        'E_final': total_out.E,
    }


def audit_conservation(initial_vectors: Sequence[FourVector],
                       final_vectors: Sequence[FourVector],
                       id_process: int,
                       tol: Optional[float] = None) -> dict:
    """
    Log a warning for every four-momentum component off by more than ``tol``.

    Returns the ``check_energy_momentum`` diagnostics so callers can count
    violations, but never raises on an imbalance.
    """
    tol = conservation_tolerance() if tol is None else tol
    diag = check_energy_momentum(initial_vectors, final_vectors, tol)
    for name, key in zip(COMPONENTS, ('deltaE', 'deltaPx', 'deltaPy', 'deltaPz')):
        value = diag[key]
        if abs(value) > tol:
            logger.warning(f"Process {id_process}: {name} conservation violation {value:.6e} GeV")
    return diag
