"""
Unit tests for Counting Bloom Filter implementation.
"""

import unittest

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.counting import CountingBloomFilter


class TestCountingBloomFilter(unittest.TestCase):
    """Test cases for Counting Bloom Filter."""

    def test_init(self):
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01)
        self.assertEqual(cbf.address_space_size, 9586)
        self.assertEqual(cbf.hash_count, 7)
        self.assertEqual(cbf.COUNTER_MAX, 255)
        self.assertTrue(cbf.is_empty())
        self.assertIsInstance(cbf, BloomFilter)

    def test_storage_is_eight_times_larger(self):
        plain = BloomFilter(capacity=10000, false_positive_rate=0.01)
        counting = CountingBloomFilter(capacity=10000, false_positive_rate=0.01)
        plain_bytes = plain.analyze_performance()["memory_efficiency"]["storage_bytes"]
        counting_bytes = counting.analyze_performance()["memory_efficiency"]["storage_bytes"]
        # word rounding allows up to one extra word either side
        self.assertAlmostEqual(counting_bytes / plain_bytes, 8, delta=0.1)

    def test_insert_remove_round_trip(self):
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        cbf.insert("x")
        self.assertTrue(cbf.contains("x"))
        self.assertIsNone(cbf.remove("x"))
        self.assertFalse(cbf.contains("x"))
        self.assertTrue(cbf.is_empty())

    def test_multiset_semantics(self):
        """Inserting twice and removing once leaves the value present."""
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        cbf.insert("x")
        cbf.insert("x")
        self.assertEqual(cbf.estimate_count("x"), 2)
        cbf.remove("x")
        self.assertTrue(cbf.contains("x"))
        self.assertEqual(cbf.estimate_count("x"), 1)
        cbf.remove("x")
        self.assertFalse(cbf.contains("x"))

    def test_removal_keeps_other_values(self):
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01)
        keep = [f"keep-{i}" for i in range(300)]
        drop = [f"drop-{i}" for i in range(300)]
        for item in keep + drop:
            cbf.insert(item)
        for item in drop:
            cbf.remove(item)

        missing = [item for item in keep if not cbf.contains(item)]
        self.assertEqual(missing, [], "Removing inserted values caused false negatives")
        still_present = sum(cbf.contains(item) for item in drop)
        self.assertLess(still_present, 30)

    def test_counter_saturation(self):
        """Counters stop at 255 and never wrap to zero."""
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        for _ in range(300):
            cbf.insert("hot")
        for index in cbf.indices_for("hot"):
            self.assertEqual(cbf._storage.get(index), 255)
        self.assertTrue(cbf.contains("hot"))
        self.assertEqual(cbf.estimate_count("hot"), 255)

    def test_saturation_loses_insertions_beyond_the_maximum(self):
        """Insertions past 255 are not tracked, so 255 removals clear the value."""
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        for _ in range(300):
            cbf.insert("hot")
        for _ in range(254):
            cbf.remove("hot")
        self.assertTrue(cbf.contains("hot"))
        self.assertEqual(cbf.estimate_count("hot"), 1)

        cbf.remove("hot")
        # 45 insertions remain, but the counters only remembered 255
        self.assertFalse(cbf.contains("hot"))
        self.assertTrue(cbf.is_empty())

    def test_remove_floors_at_zero(self):
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        cbf.remove("never-inserted")
        self.assertTrue(cbf.is_empty())
        cbf.insert("x")
        cbf.remove("x")
        cbf.remove("x")
        cbf.insert("x")
        self.assertTrue(cbf.contains("x"))
        self.assertEqual(cbf.estimate_count("x"), 1)

    def test_no_false_negatives(self):
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01)
        items = [f"item-{i}" for i in range(1500)]
        for item in items:
            cbf.insert(item)
        self.assertTrue(all(cbf.contains(item) for item in items))

    def test_false_positive_rate_bound(self):
        target_fpp = 0.01
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=target_fpp, seed=11)
        for i in range(1000):
            cbf.insert(f"member-{i}")
        observed = sum(cbf.contains(f"stranger-{i}") for i in range(10000)) / 10000
        self.assertGreaterEqual(observed, target_fpp * 0.5)
        self.assertLessEqual(observed, target_fpp * 2)

    def test_merge(self):
        cbf1 = CountingBloomFilter(capacity=100, false_positive_rate=0.01, seed=3)
        cbf2 = CountingBloomFilter(capacity=100, false_positive_rate=0.01, seed=3)
        cbf1.insert("shared")
        cbf2.insert("shared")
        cbf2.insert("only-two")

        merged = cbf1.merge(cbf2)
        self.assertIsInstance(merged, CountingBloomFilter)
        self.assertTrue(merged.contains("shared"))
        self.assertTrue(merged.contains("only-two"))
        self.assertEqual(merged.estimate_count("shared"), 2)
        self.assertEqual(merged.items_processed, 3)

        merged.remove("shared")
        self.assertTrue(merged.contains("shared"))

        with self.assertRaises(ValueError):
            cbf1.merge(CountingBloomFilter(capacity=100, false_positive_rate=0.05, seed=3))
        with self.assertRaises(TypeError):
            cbf1.merge(BloomFilter(capacity=100, false_positive_rate=0.01, seed=3))

    def test_merge_saturates(self):
        cbf1 = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        cbf2 = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        for _ in range(200):
            cbf1.insert("hot")
            cbf2.insert("hot")
        self.assertEqual(cbf1.merge(cbf2).estimate_count("hot"), 255)

    def test_estimate_cardinality_after_removal(self):
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01)
        for i in range(400):
            cbf.insert(f"item-{i}")
        for i in range(200):
            cbf.remove(f"item-{i}")
        self.assertAlmostEqual(cbf.estimate_cardinality(), 200, delta=200 * 0.2)

    def test_stats(self):
        cbf = CountingBloomFilter(capacity=100, false_positive_rate=0.01)
        empty_stats = cbf.get_stats()
        self.assertEqual(empty_stats["deletion_safety"]["risk_category"], "unknown")
        self.assertNotIn("overflow_risk", empty_stats)

        for i in range(50):
            cbf.insert(f"item-{i}")
        stats = cbf.get_stats()
        for key in (
            "counter_bits",
            "counter_max",
            "deletion_support",
            "counter_stats",
            "deletion_safety",
            "overflow_risk",
            "fill_ratio",
            "current_fpp",
            "counter_overflow_probability",
        ):
            self.assertIn(key, stats)
        self.assertEqual(stats["counter_bits"], 8)
        self.assertEqual(stats["counter_max"], 255)
        self.assertTrue(stats["deletion_support"])

        counter_stats = stats["counter_stats"]
        self.assertEqual(counter_stats["counters"], cbf.address_space_size)
        self.assertAlmostEqual(sum(counter_stats["counter_distribution"].values()), 100.0)
        self.assertEqual(stats["overflow_risk"]["risk_category"], "very_low")
        self.assertLess(stats["counter_overflow_probability"], 1e-9)

    def test_analyze_performance(self):
        cbf = CountingBloomFilter(capacity=50, false_positive_rate=0.1)
        for i in range(50):
            cbf.insert(f"item-{i}")
        analysis = cbf.analyze_performance()
        self.assertEqual(analysis["algorithm"], "Counting Bloom Filter")
        self.assertIn("deletion_safety", analysis)
        self.assertIn("overflow_assessment", analysis)
        self.assertIsInstance(analysis["recommendations"], list)

    def test_create_from_memory_limit(self):
        memory = 16384
        plain = BloomFilter.create_from_memory_limit(memory)
        counting = CountingBloomFilter.create_from_memory_limit(memory)
        self.assertIsInstance(counting, CountingBloomFilter)
        self.assertLess(counting.capacity, plain.capacity)
        self.assertLessEqual(counting.estimate_size(), memory)
        self.assertLessEqual(plain.estimate_size(), memory)


if __name__ == "__main__":
    unittest.main()
