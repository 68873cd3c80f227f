"""Histogram azimuth and cos(theta) of sampled two-body directions."""
import sys
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reactions.kinematics import Angles

N_DRAWS = 50_000


def main(seed=42):
    rng = np.random.default_rng(seed)
    angles = [Angles.isotropic(rng) for _ in range(N_DRAWS)]
    phi = np.array([a.phi for a in angles])
    cost = np.array([a.costheta for a in angles])

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(11, 4.5))
    ax1.hist(phi, bins=36, range=(0, 2 * np.pi), density=True, alpha=0.8)
    ax1.axhline(1 / (2 * np.pi), color="r", ls="--", label="uniform")
    ax1.set_xlabel(r"$\phi$")
    ax1.legend()

    ax2.hist(cost, bins=40, range=(-1, 1), density=True, alpha=0.8)
    ax2.axhline(0.5, color="r", ls="--", label="uniform")
    ax2.set_xlabel(r"$\cos\theta$")
    ax2.legend()

    fig.suptitle(f"Isotropic direction sampling ({N_DRAWS} draws)")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
