"""
Algorithm implementations for tiny-bloom.
"""

from tiny_bloom.algorithms.bloom import BloomFilter, CountingBloomFilter

__all__ = [
    "BloomFilter",
    "CountingBloomFilter",
]
