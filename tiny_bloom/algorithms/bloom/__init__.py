"""
Bloom Filter implementations for tiny-bloom.

This module provides Bloom Filter implementations for efficient set membership testing
with bounded memory usage.

This includes:
- BloomFilter: Standard Bloom filter for membership testing
- CountingBloomFilter: Bloom filter variant that supports item deletion
"""

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.counting import CountingBloomFilter
from tiny_bloom.algorithms.bloom.indexing import HashIndexGenerator
from tiny_bloom.algorithms.bloom.storage import BitArray, CounterArray, SaturatingCounter

__all__ = [
    "BloomFilter",
    "CountingBloomFilter",
    "HashIndexGenerator",
    "BitArray",
    "CounterArray",
    "SaturatingCounter",
]
