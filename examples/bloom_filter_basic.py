"""
Basic Bloom Filter Demo for tiny-bloom.

Shows how a filter is sized from its capacity and target false positive rate,
that inserted values are always found, and how the observed false positive
rate climbs once the filter is filled past its capacity.
"""

import logging

from tiny_bloom import BloomFilter, compute_parameters


def demonstrate_sizing():
    """Print the derived parameters for a few capacity/rate pairs."""
    print("\n=== Sizing ===")
    for capacity, rate in [(1000, 0.01), (10000, 0.001), (100, 0.1)]:
        params = compute_parameters(capacity, rate)
        print(
            f"  n={capacity:>6,} p={rate:<6} -> m={params.address_space_size:>7,} slots, "
            f"k={params.hash_count}, {params.bits_per_item:.2f} bits/item"
        )


def demonstrate_membership():
    """Insert a handful of values and query a mix of members and strangers."""
    print("\n=== Membership ===")
    bf = BloomFilter(capacity=1000, false_positive_rate=0.01, seed=42)
    print(f"  {bf!r}")

    fruits = ["apple", "banana", "cherry", "date", "fig"]
    for fruit in fruits:
        bf.insert(fruit)

    for value in fruits + ["orange", "pear", "plum"]:
        verdict = "maybe" if value in bf else "no"
        print(f"  {value:<8} {verdict}")


def demonstrate_false_positive_rate():
    """Measure the false positive rate as the filter fills."""
    print("\n=== False positives vs. fill ===")
    capacity = 1000
    bf = BloomFilter(capacity=capacity, false_positive_rate=0.05, seed=123)

    inserted = 0
    for target in (100, 500, 1000, 1500, 2000):
        while inserted < target:
            bf.insert(f"member-{inserted}")
            inserted += 1

        queries = 5000
        observed = sum(bf.contains(f"stranger-{i}") for i in range(queries)) / queries
        print(
            f"  {inserted:>5} inserted: observed {observed:.4f}, "
            f"estimated {bf.false_positive_probability():.4f}, "
            f"cardinality ~{bf.estimate_cardinality()}"
        )


def demonstrate_merging():
    """Union two filters that share parameters."""
    print("\n=== Merging ===")
    bf_a = BloomFilter(capacity=500, false_positive_rate=0.02, seed=88)
    bf_b = BloomFilter(capacity=500, false_positive_rate=0.02, seed=88)

    for i in range(200):
        bf_a.insert(f"a-{i}")
        bf_b.insert(f"b-{i}")

    merged = bf_a.merge(bf_b)
    found = sum(merged.contains(f"a-{i}") and merged.contains(f"b-{i}") for i in range(200))
    print(f"  merged filter finds {found}/200 pairs, ~{merged.estimate_cardinality()} distinct values")

    try:
        bf_a.merge(BloomFilter(capacity=500, false_positive_rate=0.02, seed=89))
    except ValueError as e:
        print(f"  refused: {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    demonstrate_sizing()
    demonstrate_membership()
    demonstrate_false_positive_rate()
    demonstrate_merging()
