"""
Bloom Filter implementation for tiny-bloom with benchmarking hooks.

This module provides an implementation of the Bloom Filter, a space-efficient
probabilistic data structure used for testing set membership with tunable
false positive rates and no false negatives.

The filter is sized once at construction from its capacity and target false
positive rate and never grows. Bits are only ever set, so there is no removal;
see CountingBloomFilter for a variant that supports it.

Instances are not thread-safe. Share one across threads only behind a single
lock that guards every call.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import logging
import math
import sys
from typing import Any, Callable, Dict, List, Optional, TypeVar

from tiny_bloom.algorithms.bloom.indexing import HashIndexGenerator
from tiny_bloom.algorithms.bloom.storage import WORD_BITS, WORD_BYTES, BitArray
from tiny_bloom.core.base import MembershipSummary
from tiny_bloom.core.params import FilterParameters, capacity_for_size, compute_parameters

T = TypeVar("T")  # Type for the values being tested

logger = logging.getLogger(__name__)


class BloomFilter(MembershipSummary[T]):
    """
    Bloom Filter for efficient set membership testing.

    A query returns either "possibly in set" or "definitely not in set". Once a
    value has been inserted, ``contains`` returns True for it forever. The false
    positive rate stays close to the configured target as long as no more than
    ``capacity`` distinct values are inserted, and rises beyond that.

    Example:
        # Create a filter with 1% false positive rate for 1000 items
        bloom = BloomFilter(capacity=1000, false_positive_rate=0.01)

        bloom.insert("apple")
        bloom.insert("banana")

        bloom.contains("apple")   # True
        "orange" in bloom         # False (with high probability)

        stats = bloom.get_stats()
    """

    def __init__(
        self,
        capacity: int = 10000,
        false_positive_rate: float = 0.01,
        seed: Optional[int] = None,
        hash_function: str = "blake2b",
        key_encoder: Optional[Callable[[Any], bytes]] = None,
        memory_limit_bytes: Optional[int] = None,
    ):
        """
        Initialize a new Bloom filter.

        Args:
            capacity: Expected number of distinct values to be inserted.
            false_positive_rate: Target false positive rate (between 0 and 1).
            seed: Optional seed for the hash functions. Defaults to 0.
            hash_function: Name of the base hash: "blake2b", "murmur3" or "fnv1a".
            key_encoder: Optional callable turning values into bytes for hashing.
            memory_limit_bytes: Optional memory budget, only recorded for
                                ``check_memory_limit`` and ``get_stats``.

        Raises:
            InvalidParameter: If capacity is not a positive integer, the false
                              positive rate is not in (0, 1), or the hash
                              function is unknown.
        """
        super().__init__(memory_limit_bytes)

        self._params = compute_parameters(capacity, false_positive_rate)
        self._seed = seed if seed is not None else 0
        self._indexer = HashIndexGenerator(
            self._params.address_space_size,
            self._params.hash_count,
            seed=self._seed,
            hash_function=hash_function,
            key_encoder=key_encoder,
        )
        self._key_encoder = key_encoder
        self._storage = self._allocate_storage(self._params.address_space_size)
        self._capacity_warned = False

        logger.debug(
            "Created %s: capacity=%d fpr=%g slots=%d hashes=%d words=%d",
            self.__class__.__name__,
            self._params.capacity,
            self._params.false_positive_rate,
            self._params.address_space_size,
            self._params.hash_count,
            self._storage.word_count,
        )

    def _allocate_storage(self, size: int) -> Any:
        return BitArray(size)

    # --- Parameters ---

    @property
    def parameters(self) -> FilterParameters:
        """The immutable sizing parameters of this filter."""
        return self._params

    @property
    def capacity(self) -> int:
        return self._params.capacity

    @property
    def false_positive_rate(self) -> float:
        return self._params.false_positive_rate

    @property
    def address_space_size(self) -> int:
        return self._params.address_space_size

    @property
    def hash_count(self) -> int:
        return self._params.hash_count

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def hash_function(self) -> str:
        return self._indexer.hash_function

    def indices_for(self, value: T) -> List[int]:
        """The slot indices this filter uses for ``value``."""
        return self._indexer.indices_for(value)

    # --- Membership ---

    def _note_insert(self, started: Optional[float]) -> None:
        self._record_update(started)
        if not self._capacity_warned and self._items_processed > self._params.capacity:
            self._capacity_warned = True
            logger.warning(
                "%s filled beyond its capacity of %d items; the false positive "
                "rate will rise above %g",
                self.__class__.__name__,
                self._params.capacity,
                self._params.false_positive_rate,
            )

    def insert(self, value: T) -> None:
        """
        Add a value to the Bloom filter.

        Sets the bit at every index derived from the value.

        Args:
            value: The value to add to the filter.
        """
        started = self._start_timer()
        for index in self._indexer.indices_for(value):
            self._storage.set(index)
        self._note_insert(started)

    def contains(self, value: T) -> bool:
        """
        Test if a value might be in the set.

        Args:
            value: The value to test.

        Returns:
            True if the value might be in the set, False if definitely not.
        """
        for index in self._indexer.indices_for(value):
            if not self._storage.test(index):
                return False
        return True

    # --- Combination ---

    def _check_compatible(self, other: "BloomFilter[T]") -> None:
        self._check_same_type(other)
        if not self._indexer.is_compatible(other._indexer):
            raise ValueError(
                f"Cannot merge filters with different parameters: "
                f"{self._indexer!r} and {other._indexer!r}"
            )

    def _empty_copy(self) -> "BloomFilter[T]":
        return self.__class__(
            capacity=self._params.capacity,
            false_positive_rate=self._params.false_positive_rate,
            seed=self._seed,
            hash_function=self._indexer.hash_function,
            key_encoder=self._key_encoder,
            memory_limit_bytes=self._memory_limit_bytes,
        )

    def merge(self, other: "BloomFilter[T]") -> "BloomFilter[T]":
        """
        Merge this Bloom filter with another one into a new filter.

        Both filters must have the same size, hash count, seed, hash function
        and key encoder. The result reports every value either input reports.

        Args:
            other: Another BloomFilter with the same parameters.

        Returns:
            A new merged BloomFilter.

        Raises:
            TypeError: If other is not a BloomFilter of the same class.
            ValueError: If the filters have incompatible parameters.
        """
        self._check_compatible(other)
        result = self._empty_copy()
        result._storage.union_update(self._storage)
        result._storage.union_update(other._storage)
        result._items_processed = self._items_processed + other._items_processed
        return result

    # --- Estimates ---

    def _occupied_slots(self) -> int:
        return self._storage.count()

    def is_empty(self) -> bool:
        """Check whether no slot has been touched."""
        return self._occupied_slots() == 0

    def estimate_cardinality(self) -> int:
        """
        Estimate the number of distinct values in the filter.

        Uses ``n ~= -m * ln(1 - X/m) / k`` where X is the number of occupied
        slots. The estimate degrades as the filter saturates and is capped at
        the number of insertions processed.

        Returns:
            Estimated number of distinct values.
        """
        occupied = self._occupied_slots()
        m = self._params.address_space_size
        if occupied == 0:
            return 0
        if occupied >= m:
            return self._items_processed

        estimate = -m * math.log(1.0 - occupied / m) / self._params.hash_count
        return min(max(0, int(round(estimate))), self._items_processed)

    def false_positive_probability(self) -> float:
        """
        Estimate the current false positive probability from the fill ratio.

        This reflects the actual state of the filter, not the configured
        target: ``(occupied / m) ** k``.

        Returns:
            Current estimated false positive probability in [0, 1].
        """
        fill_ratio = self._occupied_slots() / self._params.address_space_size
        return max(0.0, min(fill_ratio**self._params.hash_count, 1.0))

    @classmethod
    def create_from_memory_limit(
        cls,
        memory_bytes: int,
        false_positive_rate: float = 0.01,
        seed: Optional[int] = None,
        **kwargs: Any,
    ) -> "BloomFilter[T]":
        """
        Create the largest-capacity filter whose storage fits a memory budget.

        The budget covers the filter object and its storage; what is left after
        the fixed overhead is turned into slots, and the capacity is the largest
        one whose optimal size fits in those slots.

        Args:
            memory_bytes: Maximum desired memory usage in bytes.
            false_positive_rate: Target false positive rate.
            seed: Optional seed for the hash functions.
            **kwargs: Further constructor arguments (hash_function, key_encoder).

        Returns:
            A new filter sized for the memory budget.

        Raises:
            ValueError: If memory_bytes cannot hold even a minimal filter.
            InvalidParameter: If the false positive rate is invalid.
        """
        if memory_bytes <= 0:
            raise ValueError("Memory limit must be positive")

        # a minimal filter carries the full fixed overhead and a single storage word
        header = cls(
            capacity=1, false_positive_rate=0.5, memory_limit_bytes=memory_bytes, **kwargs
        )
        overhead = header.estimate_size() - header._storage.word_count * WORD_BYTES
        words = (memory_bytes - overhead) // WORD_BYTES
        slots = words * (WORD_BITS // cls._bits_per_slot())
        if slots < 1:
            raise ValueError(
                f"Memory limit {memory_bytes} bytes is too small. "
                f"Estimated overhead is {overhead} bytes."
            )

        capacity = capacity_for_size(slots, false_positive_rate)
        instance = cls(
            capacity=capacity,
            false_positive_rate=false_positive_rate,
            seed=seed,
            memory_limit_bytes=memory_bytes,
            **kwargs,
        )
        if not instance.check_memory_limit():
            logger.warning(
                "Filter estimated size (%d bytes) exceeds memory limit (%d bytes)",
                instance.estimate_size(),
                memory_bytes,
            )
        return instance

    @classmethod
    def _bits_per_slot(cls) -> int:
        return 1

    # --- Benchmarking hooks ---

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes, including storage.
        """
        size = super().estimate_size()
        size += self._storage.estimate_size()
        size += sys.getsizeof(self._indexer)
        return size

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the Bloom filter.

        Returns:
            A dictionary with the parameters, fill ratio, estimated distinct
            values, current false positive estimate and error bounds.
        """
        stats = super().get_stats()

        m = self._params.address_space_size
        occupied = self._occupied_slots()
        fill_ratio = occupied / m

        stats.update(
            {
                "capacity": self._params.capacity,
                "false_positive_rate": self._params.false_positive_rate,
                "address_space_size": m,
                "hash_count": self._params.hash_count,
                "hash_function": self._indexer.hash_function,
                "seed": self._seed,
                "storage_words": self._storage.word_count,
                "occupied_slots": occupied,
                "fill_ratio": fill_ratio,
                "estimated_unique_items": self.estimate_cardinality(),
                "current_fpp": self.false_positive_probability(),
            }
        )

        if self._items_processed > 0:
            theoretical_fill = 1.0 - math.exp(
                -(self._params.hash_count * self._items_processed) / m
            )
            stats["theoretical_fill_ratio"] = theoretical_fill
            stats["observed_vs_theoretical_ratio"] = (
                fill_ratio / theoretical_fill if theoretical_fill > 0 else 0
            )
            stats["bits_per_item"] = m / self._items_processed

        stats.update(self.error_bounds())
        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this filter.

        Returns:
            The optimal false positive rate for the chosen size, the theoretical
            rate after the insertions processed so far, and a coarse error margin.
        """
        bounds = super().error_bounds()

        params = self._params
        items = self._items_processed
        # best achievable rate at capacity for this many slots per item
        optimal_fpp = 0.6185 ** params.bits_per_item
        bounds["theoretical_optimal_fpp"] = optimal_fpp

        if items > 0:
            current_fpp = params.expected_false_positive_rate(items)
            fill_ratio = 1 - math.exp(-(params.hash_count * items) / params.address_space_size)
            bounds["current_theoretical_fpp"] = current_fpp
            bounds["fpp_ratio"] = current_fpp / optimal_fpp if optimal_fpp > 0 else float("inf")
            if fill_ratio < 0.5:
                bounds["error_margin"] = "low"
            elif fill_ratio < 0.8:
                bounds["error_margin"] = "moderate"
            else:
                bounds["error_margin"] = "high"

        return bounds

    def analyze_performance(self) -> Dict[str, Any]:
        """
        Summarise memory efficiency, accuracy and saturation with recommendations.

        Returns:
            A dictionary of metrics plus a list of human-readable recommendations.
        """
        stats = self.get_stats()
        params = self._params

        analysis: Dict[str, Any] = {
            "algorithm": "Bloom Filter",
            "memory_efficiency": {
                "bits_per_item": stats.get("bits_per_item", 0),
                "total_bytes": self.estimate_size(),
                "storage_bytes": self._storage.word_count * WORD_BYTES,
                "optimal_bits_per_item": -math.log(params.false_positive_rate)
                / (math.log(2) ** 2),
            },
            "accuracy": {
                "target_fpp": params.false_positive_rate,
                "current_fpp": stats["current_fpp"],
                "address_space_size": params.address_space_size,
                "hash_count": params.hash_count,
            },
            "saturation": {
                "fill_ratio": stats["fill_ratio"],
                "items_ratio": self._items_processed / params.capacity,
            },
        }

        recommendations = []
        if analysis["saturation"]["fill_ratio"] > 0.8:
            recommendations.append(
                "Filter is nearing saturation (>80% full). False positive rate "
                "will be higher than configured."
            )
        if analysis["saturation"]["items_ratio"] > 1.2:
            recommendations.append(
                f"Items processed ({self._items_processed}) exceeds capacity "
                f"({params.capacity}) by >20%. Consider creating a larger filter."
            )
        analysis["recommendations"] = recommendations

        return analysis

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(capacity={self._params.capacity}, "
            f"false_positive_rate={self._params.false_positive_rate}, "
            f"address_space_size={self._params.address_space_size}, "
            f"hash_count={self._params.hash_count})"
        )
