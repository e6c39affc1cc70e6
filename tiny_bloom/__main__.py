"""
Command-line wrapper around tiny-bloom filters.

Builds a filter from numeric arguments, inserts values, and reports which query
values may be present::

    python -m tiny_bloom 1000 --error-rate 0.01 --insert alice bob --query alice carol
"""

import argparse
import logging
import sys
from typing import List, Optional

from tiny_bloom.algorithms.bloom import BloomFilter, CountingBloomFilter
from tiny_bloom.algorithms.bloom.indexing import HASH_FUNCTIONS
from tiny_bloom.core.exceptions import InvalidParameter

DEFAULT_CAPACITY = 1000
DEFAULT_ERROR_RATE = 0.01

logger = logging.getLogger("tiny_bloom")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tiny-bloom",
        description="Probabilistic set membership testing with Bloom filters",
    )
    parser.add_argument(
        "capacity",
        nargs="?",
        type=int,
        default=DEFAULT_CAPACITY,
        help=f"Expected number of distinct values (default: {DEFAULT_CAPACITY})",
    )
    parser.add_argument(
        "--error-rate",
        type=float,
        default=DEFAULT_ERROR_RATE,
        help=f"Target false positive rate in (0, 1) (default: {DEFAULT_ERROR_RATE})",
    )
    parser.add_argument(
        "--counting", action="store_true", help="Use a counting filter (enables --remove)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Hash seed")
    parser.add_argument(
        "--hash-function",
        choices=sorted(HASH_FUNCTIONS),
        default="blake2b",
        help="Base hash function (default: blake2b)",
    )
    parser.add_argument("--insert", nargs="+", default=[], metavar="VALUE")
    parser.add_argument("--remove", nargs="+", default=[], metavar="VALUE")
    parser.add_argument("--query", nargs="+", default=[], metavar="VALUE")
    parser.add_argument(
        "--stdin", action="store_true", help="Insert one value per line read from stdin"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.remove and not args.counting:
        parser.error("--remove requires --counting")

    filter_class = CountingBloomFilter if args.counting else BloomFilter
    try:
        bloom = filter_class(
            capacity=args.capacity,
            false_positive_rate=args.error_rate,
            seed=args.seed,
            hash_function=args.hash_function,
        )
    except InvalidParameter as e:
        print(f"tiny-bloom: invalid argument: {e}", file=sys.stderr)
        return 1

    params = bloom.parameters
    print(f"capacity: {params.capacity}")
    print(f"false positive rate: {params.false_positive_rate}")
    print(f"address space size: {params.address_space_size}")
    print(f"hash count: {params.hash_count}")

    for value in args.insert:
        bloom.insert(value)
    if args.stdin:
        for line in sys.stdin:
            value = line.rstrip("\n")
            if value:
                bloom.insert(value)
    for value in args.remove:
        bloom.remove(value)

    logger.debug("Processed %d insertions", bloom.items_processed)

    for value in args.query:
        print(f"{value}: {'maybe' if bloom.contains(value) else 'no'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
