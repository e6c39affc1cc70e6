"""
Counting Bloom Filter Demo for tiny-bloom.

Demonstrates removal, multiset behaviour, counter saturation, and the risk of
removing values that were never inserted.
"""

import logging

from tiny_bloom import BloomFilter, CountingBloomFilter


def demonstrate_removal():
    """Insert words, remove some, and check what is still reported."""
    print("\n=== Insert and remove ===")
    cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01, seed=42)

    words = ["apple", "banana", "cherry", "date", "elderberry"]
    for word in words:
        cbf.insert(word)

    cbf.remove("banana")
    cbf.remove("date")

    for word in words:
        print(f"  {word:<11} {'maybe' if cbf.contains(word) else 'no'}")


def demonstrate_multiset():
    """Repeated insertions need as many removals."""
    print("\n=== Repeated insertions ===")
    cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
    for _ in range(3):
        cbf.insert("token")

    while cbf.contains("token"):
        print(f"  estimated count {cbf.estimate_count('token')}, removing once")
        cbf.remove("token")
    print("  token no longer reported")


def demonstrate_saturation():
    """Counters stop at 255 and stay put for later removals."""
    print("\n=== Counter saturation ===")
    cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
    for _ in range(400):
        cbf.insert("hot")

    counter_stats = cbf.get_stats()["counter_stats"]
    print(f"  estimated count of 'hot': {cbf.estimate_count('hot')}")
    print(f"  saturated counters: {counter_stats['saturated_counter_pct']:.2f}%")
    print(f"  overflow risk: {cbf.get_stats()['overflow_risk']['risk_category']}")


def demonstrate_unsafe_removal():
    """Removing a stranger can hide real members that share its slots."""
    print("\n=== Removing values that were never inserted ===")
    cbf = CountingBloomFilter(capacity=200, false_positive_rate=0.05, seed=7)
    members = [f"member-{i}" for i in range(200)]
    for member in members:
        cbf.insert(member)

    for i in range(200):
        cbf.remove(f"stranger-{i}")

    lost = sum(not cbf.contains(member) for member in members)
    print(f"  {lost} of {len(members)} members now report 'no'")
    print(f"  deletion safety: {cbf.get_stats()['deletion_safety']['risk_category']}")


def compare_memory():
    plain = BloomFilter(capacity=10000, false_positive_rate=0.01)
    counting = CountingBloomFilter(capacity=10000, false_positive_rate=0.01)
    print("\n=== Memory ===")
    print(f"  BloomFilter:         {plain.estimate_size():>8,} bytes")
    print(f"  CountingBloomFilter: {counting.estimate_size():>8,} bytes")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    demonstrate_removal()
    demonstrate_multiset()
    demonstrate_saturation()
    demonstrate_unsafe_removal()
    compare_memory()
