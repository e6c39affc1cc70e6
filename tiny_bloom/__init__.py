"""
tiny-bloom - Lightweight Approximate Membership Library

tiny-bloom is a Python library for space-efficient, probabilistic set membership
testing: answers are "possibly present" or "definitely absent", with no false
negatives and a tunable false positive rate.
"""

import logging

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_bloom.algorithms.bloom import BloomFilter, CountingBloomFilter
from tiny_bloom.core.exceptions import InvalidParameter
from tiny_bloom.core.params import FilterParameters, compute_parameters

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Filters
    "BloomFilter",
    "CountingBloomFilter",
    # Sizing
    "FilterParameters",
    "compute_parameters",
    # Errors
    "InvalidParameter",
]
