"""Command-line interface: opens the interactive chunk viewer."""
import argparse
import logging

from .chunk_data import CHUNK_SIZE, MIN_CHUNK_SIZE
from .logging_config import setup_logging
from .sweep import CELL_INTERVAL, DEFAULT_ISOLEVEL, SweepConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="voxel-march", description=__doc__)
    parser.add_argument("--size", type=int, default=CHUNK_SIZE,
                        help="chunk edge length in lattice points")
    parser.add_argument("--isolevel", type=float, default=DEFAULT_ISOLEVEL)
    parser.add_argument("--throttled", action="store_true",
                        help="march one cell per --interval seconds")
    parser.add_argument("--interval", type=float, default=CELL_INTERVAL)
    parser.add_argument("--sphere", action="store_true",
                        help="start from a sphere-shaped field instead of an empty chunk")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)

    args = parser.parse_args(argv)
    if args.size < MIN_CHUNK_SIZE:
        parser.error(f"--size must be at least {MIN_CHUNK_SIZE}")
    return args


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    # GL stack is only needed for the viewer itself
    from .viewer import demo_chunk, run_viewer

    config = SweepConfig(
        isolevel=args.isolevel,
        throttled=args.throttled,
        cell_interval=args.interval,
    )
    run_viewer(demo_chunk(args.size, sphere=args.sphere), config)


if __name__ == "__main__":
    main()
