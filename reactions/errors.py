"""
Exceptions raised while resolving actions.

Only ``InsufficientEnergyError`` is recoverable per action. A
``ChannelSelectionError`` means the branch weights are corrupted and the run
has to stop.
"""


class ReactionError(Exception):
    """Base class for all reaction-engine errors."""


class InsufficientEnergyError(ReactionError, ValueError):
    """CM energy is below the summed minimum masses of a two-body final state."""

    def __init__(self, sqrt_s: float, minimum_mass_a: float, minimum_mass_b: float,
                 pdg_a: int, pdg_b: int):
        self.sqrt_s = sqrt_s
        self.minimum_mass_a = minimum_mass_a
        self.minimum_mass_b = minimum_mass_b
        self.pdg_a = pdg_a
        self.pdg_b = pdg_b
        super().__init__(
            f"not enough energy for {pdg_a} + {pdg_b}: sqrt_s={sqrt_s:.6f} GeV < "
            f"{minimum_mass_a:.6f} + {minimum_mass_b:.6f} GeV"
        )


class ChannelSelectionError(ReactionError, RuntimeError):
    """No branch matched the weighted draw."""


class FrameMismatchError(ReactionError, ValueError):
    """Momenta from different reference frames were combined."""


class UnknownParticleError(ReactionError, KeyError):
    """Species not present in the particle type catalogue."""
