"""Sampled Delta++ masses in pi0 Delta++ production at a few CM energies."""
import sys
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reactions import ParticleTypeCatalog, sample_resonance_mass
from reactions.config import DEFAULT_CSV_PATH

SQRT_S = [1.4, 1.6, 2.0, 3.0]  # GeV


def main(n=20_000, seed=7):
    catalog = ParticleTypeCatalog.from_csv(DEFAULT_CSV_PATH)
    delta = catalog.find_by_name("Delta++")
    pi0 = catalog.find_by_name("Pion0")
    rng = np.random.default_rng(seed)

    plt.figure(figsize=(7, 5))
    for sqrt_s in SQRT_S:
        masses = [sample_resonance_mass(delta, pi0, sqrt_s, rng) for _ in range(n)]
        plt.hist(masses, bins=80, range=(delta.minimum_mass, 2.0), density=True,
                 histtype="step", label=rf"$\sqrt{{s}}$ = {sqrt_s} GeV")

    plt.axvline(delta.mass, color="k", ls=":", label="pole")
    plt.xlabel(r"$m_\Delta$ [GeV]")
    plt.ylabel("Normalized counts")
    plt.title(r"Truncated Breit-Wigner: $\pi^0 \Delta^{++}$")
    plt.grid(alpha=0.3)
    plt.legend()
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
