"""Demo harness: insert a few keys, then print the levels, contents and size."""

import argparse
import logging
import sys
from typing import List, Optional

from skiplist_collections._config import config
from skiplist_collections._diagnostics import format_sketch, log_sketch
from skiplist_collections._skiplistset import SkipListSet


DEMO_KEYS = [9.0, 7.0, 6.0, 1.0, 3.0]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m skiplist_collections",
        description="Insert keys into a skip list and print its levels.",
    )
    parser.add_argument("keys", nargs="*", type=float, help="Keys to insert (default: 9 7 6 1 3)")
    parser.add_argument("--p", type=float, default=0.6, help="Promotion probability")
    parser.add_argument("--max-level", type=int, default=config.default_max_level, help="Maximum tower height")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the coin flips")
    parser.add_argument("--verbose", action="store_true", help="Also log the level dump at DEBUG")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        s = SkipListSet(p=args.p, max_level=args.max_level, seed=args.seed)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    for k in args.keys or DEMO_KEYS:
        s.add(k)

    print(format_sketch(s))
    print("skiplist: " + " ".join(str(k) for k in s))
    print(f"size = {len(s)}")
    log_sketch(s)
    return 0


if __name__ == "__main__":
    sys.exit(main())
