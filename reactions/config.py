"""
Runtime configuration for the reaction engine.

Everything is read from environment variables so the driver scripts and the
tests can override it without touching code:

- REACTIONS_DB_PATH: sqlite file holding the ``particle_types`` table
- REACTIONS_SEED: seed for the random streams (unset = fresh entropy)
- REACTIONS_CONSERVATION_TOL: absolute tolerance of the four-momentum audit (GeV)
- REACTIONS_OUTPUT: output backend name ("memory" or "log")
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
"""

from __future__ import annotations
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DB_PATH = BASE_DIR / "reactions.db"
DEFAULT_CSV_PATH = BASE_DIR / "data" / "particle_types.csv"

# Absolute tolerance for "numerically zero" in GeV
REALLY_SMALL = 1e-6

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    seed: Optional[int] = None
    conservation_tolerance: float = REALLY_SMALL
    output: str = "memory"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        seed = os.getenv("REACTIONS_SEED")
        return cls(
            db_path=Path(os.getenv("REACTIONS_DB_PATH", DEFAULT_DB_PATH)),
            seed=int(seed) if seed not in (None, "") else None,
            conservation_tolerance=float(os.getenv("REACTIONS_CONSERVATION_TOL", REALLY_SMALL)),
            output=os.getenv("REACTIONS_OUTPUT", "memory").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def conservation_tolerance() -> float:
    """Tolerance used by the conservation audit when none is passed explicitly."""
    return float(os.getenv("REACTIONS_CONSERVATION_TOL", REALLY_SMALL))


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stderr handler on the ``reactions`` logger.

    Call once at application startup. Calling again only updates the level.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric = getattr(logging, level_name, None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level_name}")

    root = logging.getLogger("reactions")
    root.setLevel(numeric)
    if not any(getattr(h, "_reactions_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._reactions_handler = True
        root.addHandler(handler)
