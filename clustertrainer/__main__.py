"""Run with ``python -m clustertrainer dbscan`` or ``python -m clustertrainer kmeans``."""

import argparse

from .config import configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(prog="clustertrainer", description="Step-by-step clustering trainer")
    parser.add_argument("algorithm", choices=("kmeans", "dbscan"))
    parser.add_argument("--seed", type=int, default=None, help="seed for the random point sets")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    configure_logging(args.log_level.upper())

    if args.algorithm == "dbscan":
        from .app.dbscan_app import main as run
    else:
        from .app.kmeans_app import main as run
    run(seed=args.seed)


if __name__ == "__main__":
    main()
