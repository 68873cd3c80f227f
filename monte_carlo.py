#!/usr/bin/env python3
"""
Monte Carlo driver for the reaction engine.

Builds a box of pi+ p pairs, proposes one action per pair (plus optional
competing actions that share a particle), and resolves everything in a single
commit pass.

Examples:
    python monte_carlo.py --pairs 1000
    python monte_carlo.py --pairs 200 --overlap 0.3 --seed 42 --output log
"""

import argparse
import logging
from collections import Counter

import numpy as np

from reactions import (
    Action,
    ParticleRecord,
    ParticleRegistry,
    ParticleTypeCatalog,
    ProcessBranch,
    ProcessType,
    commit_actions,
)
from reactions.config import DEFAULT_CSV_PATH, Settings, configure_logging
from reactions.kinematics import FourVector
from reactions.output import create_output

logger = logging.getLogger("reactions.monte_carlo")


def load_catalog(settings: Settings) -> ParticleTypeCatalog:
    if settings.db_path.exists():
        return ParticleTypeCatalog.from_sqlite(settings.db_path)
    logger.info(f"{settings.db_path} not found, reading {DEFAULT_CSV_PATH}")
    return ParticleTypeCatalog.from_csv(DEFAULT_CSV_PATH)


def make_particle(ptype, rng, sigma_p: float, box: float) -> ParticleRecord:
    px, py, pz = rng.normal(0.0, sigma_p, size=3)
    E = float(np.sqrt(ptype.mass**2 + px**2 + py**2 + pz**2))
    return ParticleRecord(type=ptype, momentum=FourVector(E, float(px), float(py), float(pz)),
                          position=rng.uniform(-box, box, size=3))


def pion_proton_branches(catalog: ParticleTypeCatalog, w_elastic: float, w_resonance: float,
                         w_inelastic: float):
    pi_plus = catalog.find_by_name("Pion+")
    proton = catalog.find_by_name("Proton")
    delta = catalog.find_by_name("Delta++")
    pi_zero = catalog.find_by_name("Pion0")
    return [
        ProcessBranch((pi_plus, proton), w_elastic, ProcessType.ELASTIC),
        ProcessBranch((delta,), w_resonance, ProcessType.TWO_TO_ONE),
        ProcessBranch((pi_zero, delta), w_inelastic, ProcessType.TWO_TO_TWO),
    ]


def build_actions(catalog, registry, n_pairs, overlap, rng, sigma_p, box, weights):
    pi_plus = catalog.find_by_name("Pion+")
    proton = catalog.find_by_name("Proton")

    pions, protons = [], []
    for _ in range(n_pairs):
        pi = make_particle(pi_plus, rng, sigma_p, box)
        p = make_particle(proton, rng, sigma_p, box)
        registry.insert(pi)
        registry.insert(p)
        pions.append(pi)
        protons.append(p)

    actions = []
    for i in range(n_pairs):
        a = Action([pions[i], protons[i]], time_of_execution=rng.uniform(0.0, 1.0))
        a.add_processes(pion_proton_branches(catalog, *weights))
        actions.append(a)

        # competing partner for the same pion
        if n_pairs > 1 and rng.random() < overlap:
            j = (i + 1 + int(rng.integers(n_pairs - 1))) % n_pairs
            b = Action([pions[i], protons[j]], time_of_execution=rng.uniform(0.0, 1.0))
            b.add_processes(pion_proton_branches(catalog, *weights))
            actions.append(b)
    return actions


def build_parser():
    return argparse.ArgumentParser(
        description="Reaction engine Monte Carlo driver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  python monte_carlo.py --pairs 1000
  python monte_carlo.py --pairs 200 --overlap 0.3 --seed 42
  python monte_carlo.py --pairs 50 --output log --extended"""
    )


def main(argv=None):
    settings = Settings.from_env()

    parser = build_parser()
    parser.add_argument("--pairs", type=int, default=100, help="Number of pi+ p pairs (default 100)")
    parser.add_argument("--overlap", type=float, default=0.0,
                        help="Probability of an extra competing action per pair (default 0)")
    parser.add_argument("--seed", type=int, default=settings.seed, help="Random seed (optional)")
    parser.add_argument("--sigma-p", type=float, default=0.4, help="Momentum spread per axis in GeV")
    parser.add_argument("--box", type=float, default=5.0, help="Half-length of the position box in fm")
    parser.add_argument("--weights", type=float, nargs=3, default=(0.3, 0.5, 0.2),
                        metavar=("ELASTIC", "RESONANCE", "INELASTIC"), help="Branch weights")
    parser.add_argument("--output", default=settings.output, help="Output backend (memory, log)")
    parser.add_argument("--extended", action="store_true", help="Extended particle snapshots")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level (default INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    print("\n" + "=" * 60)
    print("Reaction engine Monte Carlo")
    print("=" * 60)
    print(f"Pairs            : {args.pairs}")
    print(f"Overlap          : {args.overlap}")
    print(f"Random Seed      : {args.seed if args.seed is not None else 'None'}")
    print(f"Branch weights   : {tuple(args.weights)}")
    print(f"Output backend   : {args.output}")
    print("=" * 60 + "\n")

    catalog = load_catalog(settings)
    registry = ParticleRegistry()
    rng = np.random.default_rng(args.seed)
    actions = build_actions(catalog, registry, args.pairs, args.overlap, rng,
                            args.sigma_p, args.box, args.weights)

    output = create_output(args.output, extended=args.extended)
    output.at_eventstart(registry, event_number=0)

    outcomes = commit_actions(actions, registry, seed=args.seed,
                              tolerance=settings.conservation_tolerance)

    output.at_eventend(registry, event_number=0, time=1.0)

    statuses = Counter(o.status.value for o in outcomes)
    channels = Counter(o.action.process_type.name for o in outcomes if o.committed)
    violations = sum(1 for o in outcomes if o.conservation and not o.conservation["conserved"])

    print("\n" + "=" * 60)
    print("Resolution complete")
    print("=" * 60)
    print(f"Actions proposed  : {len(actions)}")
    for status, count in sorted(statuses.items()):
        print(f"  {status:18s}: {count}")
    print("Committed channels:")
    for name, count in channels.most_common():
        print(f"  {name:18s}: {count}")
    print(f"Conservation violations : {violations}")
    print(f"Particles after pass    : {len(registry)}")
    print("=" * 60 + "\n")
    return outcomes


if __name__ == "__main__":
    main()
