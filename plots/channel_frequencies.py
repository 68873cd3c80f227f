"""Observed vs expected channel frequencies of the weighted selector."""
import sys
from collections import Counter
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reactions import ParticleType, ProcessBranch, choose_channel

WEIGHTS = [0.1, 0.25, 0.4, 0.25]


def main(n=100_000, seed=3):
    branches = [
        ProcessBranch((ParticleType(f"X{i}", 100 + i, 0.1),), w) for i, w in enumerate(WEIGHTS)
    ]
    total = sum(WEIGHTS)
    rng = np.random.default_rng(seed)
    counts = Counter(choose_channel(branches, total, rng).pdg_codes[0] for _ in range(n))

    labels = [b.particle_types[0].name for b in branches]
    observed = [counts[b.pdg_codes[0]] / n for b in branches]
    expected = [w / total for w in WEIGHTS]

    x = np.arange(len(labels))
    plt.figure(figsize=(7, 5))
    plt.bar(x - 0.2, observed, width=0.4, label="observed")
    plt.bar(x + 0.2, expected, width=0.4, label="weight / total")
    plt.xticks(x, labels)
    plt.ylabel("Fraction")
    plt.title(f"Channel selection ({n} draws)")
    plt.legend()
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
