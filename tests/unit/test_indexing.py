"""
Unit tests for double-hashing index generation.
"""

import unittest
from unittest import mock

from tiny_bloom.algorithms.bloom import indexing
from tiny_bloom.algorithms.bloom.indexing import HashIndexGenerator
from tiny_bloom.core.exceptions import InvalidParameter


class TestHashIndexGenerator(unittest.TestCase):
    """Test cases for HashIndexGenerator."""

    def test_indices_in_range(self):
        for hash_function in ("blake2b", "murmur3", "fnv1a"):
            gen = HashIndexGenerator(997, 7, hash_function=hash_function)
            for i in range(500):
                indices = gen.indices_for(f"value-{i}")
                self.assertEqual(len(indices), 7)
                self.assertTrue(all(0 <= idx < 997 for idx in indices))

    def test_deterministic_across_instances(self):
        a = HashIndexGenerator(9586, 7, seed=3)
        b = HashIndexGenerator(9586, 7, seed=3)
        for value in ["alice", 42, (1, "x"), b"raw", 2.5]:
            self.assertEqual(a.indices_for(value), a.indices_for(value))
            self.assertEqual(a.indices_for(value), b.indices_for(value))

    def test_seed_changes_indices(self):
        a = HashIndexGenerator(9586, 7, seed=0)
        b = HashIndexGenerator(9586, 7, seed=1)
        self.assertNotEqual(a.indices_for("alice"), b.indices_for("alice"))

    def test_arithmetic_progression(self):
        """index_i = (h1 + i * h2) mod m."""
        gen = HashIndexGenerator(1009, 5)
        h1, h2 = gen.base_hashes("progression")
        expected = [(h1 + i * h2) % 1009 for i in range(5)]
        self.assertEqual(gen.indices_for("progression"), expected)
        self.assertTrue(0 < h2 < 1009)

    def test_collapse_guard(self):
        """A second hash congruent to zero is replaced so indices stay distinct."""

        def degenerate(data, seed):
            return 1000 if data.startswith(indexing.SECOND_HASH_SALT) else 5

        with mock.patch.dict(indexing.HASH_FUNCTIONS, {"degenerate": degenerate}):
            gen = HashIndexGenerator(100, 5, hash_function="degenerate")
            self.assertEqual(gen.base_hashes("anything"), (5, 1))
            self.assertEqual(gen.indices_for("anything"), [5, 6, 7, 8, 9])

    def test_single_slot(self):
        gen = HashIndexGenerator(1, 3)
        self.assertEqual(gen.indices_for("x"), [0, 0, 0])

    def test_key_encoder(self):
        """A custom encoder decides which values share indices."""
        gen = HashIndexGenerator(1000, 4, key_encoder=lambda v: str(v).lower().encode())
        self.assertEqual(gen.indices_for("Alice"), gen.indices_for("ALICE"))
        default = HashIndexGenerator(1000, 4)
        self.assertNotEqual(default.indices_for("Alice"), default.indices_for("ALICE"))

    def test_compatibility(self):
        a = HashIndexGenerator(100, 3)
        self.assertTrue(a.is_compatible(HashIndexGenerator(100, 3)))
        self.assertFalse(a.is_compatible(HashIndexGenerator(101, 3)))
        self.assertFalse(a.is_compatible(HashIndexGenerator(100, 4)))
        self.assertFalse(a.is_compatible(HashIndexGenerator(100, 3, seed=9)))
        self.assertFalse(a.is_compatible(HashIndexGenerator(100, 3, hash_function="fnv1a")))

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidParameter):
            HashIndexGenerator(0, 3)
        with self.assertRaises(InvalidParameter):
            HashIndexGenerator(10, 0)
        with self.assertRaises(InvalidParameter):
            HashIndexGenerator(10, 3, hash_function="md5")


if __name__ == "__main__":
    unittest.main()
