"""
Core functionality for tiny-bloom.
"""

from tiny_bloom.core.base import MembershipSummary
from tiny_bloom.core.exceptions import InvalidParameter
from tiny_bloom.core.hash import blake2b_64, fnv1a_32, murmurhash3_32, to_bytes
from tiny_bloom.core.params import (
    FilterParameters,
    capacity_for_size,
    compute_parameters,
    optimal_address_space_size,
    optimal_hash_count,
)

__all__ = [
    # Base classes
    "MembershipSummary",
    # Errors
    "InvalidParameter",
    # Sizing
    "FilterParameters",
    "compute_parameters",
    "capacity_for_size",
    "optimal_address_space_size",
    "optimal_hash_count",
    # Utility functions
    "to_bytes",
    "murmurhash3_32",
    "fnv1a_32",
    "blake2b_64",
]
