"""
Counting Bloom Filter implementation for tiny-bloom.

This module provides an implementation of the Counting Bloom Filter, an extension
of the Bloom Filter that supports deletion by replacing single bits with 8-bit
saturating counters.

References:
    - Fan, L., Cao, P., Almeida, J., & Broder, A. Z. (2000).
      Summary cache: a scalable wide-area web cache sharing protocol.
      IEEE/ACM Transactions on Networking, 8(3), 281-293.
"""

import math
from typing import Any, Dict, TypeVar

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.storage import COUNTER_BITS, CounterArray, SaturatingCounter

T = TypeVar("T")  # Type for the values being tested


class CountingBloomFilter(BloomFilter[T]):
    """
    Counting Bloom Filter for set membership testing with deletion support.

    Each slot holds an 8-bit counter instead of a bit. Inserting a value
    increments the counters at its indices, removing it decrements them, and
    ``contains`` is true only if every counter is non-zero. Memory use is eight
    times that of a BloomFilter with the same parameters.

    Counters saturate at 255 and floor at 0. Saturation trades precision for
    bounded memory: once a counter sticks at 255 it stops tracking further
    insertions, so removals can bring it to zero while values still rely on it.
    A value inserted more than 255 times can then report absent after 255
    removals, and other values sharing that slot can disappear with it.

    ``remove`` is only safe for values that were inserted, and no more times
    than they were inserted. Removing anything else decrements counters shared
    with other values and can make those values disappear. The filter cannot
    detect this misuse.

    Example:
        cbf = CountingBloomFilter(capacity=1000, false_positive_rate=0.01)
        cbf.insert("apple")
        cbf.contains("apple")  # True
        cbf.remove("apple")
        cbf.contains("apple")  # False, unless another value covers its slots
    """

    COUNTER_MAX = SaturatingCounter.MAX

    def _allocate_storage(self, size: int) -> CounterArray:
        return CounterArray(size)

    @classmethod
    def _bits_per_slot(cls) -> int:
        return COUNTER_BITS

    def insert(self, value: T) -> None:
        """
        Add a value to the Counting Bloom filter.

        Increments the counter at every index derived from the value.

        Args:
            value: The value to add to the filter.
        """
        started = self._start_timer()
        for index in self._indexer.indices_for(value):
            self._storage.increment(index)
        self._note_insert(started)

    def remove(self, value: T) -> None:
        """
        Remove one occurrence of a value from the filter.

        Decrements the counter at every index derived from the value; counters
        already at zero stay at zero.

        Args:
            value: A value previously inserted (and not yet removed as many
                   times as it was inserted).
        """
        for index in self._indexer.indices_for(value):
            self._storage.decrement(index)

    def contains(self, value: T) -> bool:
        """
        Test if a value might be in the set (all its counters are non-zero).

        Args:
            value: The value to test.

        Returns:
            True if the value might be in the set, False if definitely not.
        """
        for index in self._indexer.indices_for(value):
            if not self._storage.is_nonzero(index):
                return False
        return True

    def estimate_count(self, value: T) -> int:
        """
        Upper bound on how many times a value is currently inserted.

        This is the smallest counter among the value's indices, so it can
        over-count because of collisions and never exceeds 255.

        Args:
            value: The value to look up.

        Returns:
            The minimum counter value across the value's indices.
        """
        return min(self._storage.get(index) for index in self._indexer.indices_for(value))

    def merge(self, other: "CountingBloomFilter[T]") -> "CountingBloomFilter[T]":
        """
        Merge this Counting Bloom filter with another one into a new filter.

        Counters are summed and capped at 255.

        Args:
            other: Another CountingBloomFilter with the same parameters.

        Returns:
            A new merged CountingBloomFilter.

        Raises:
            TypeError: If other is not a CountingBloomFilter.
            ValueError: If the filters have incompatible parameters.
        """
        self._check_compatible(other)
        result = self._empty_copy()
        result._storage.merge_update(self._storage)
        result._storage.merge_update(other._storage)
        result._items_processed = self._items_processed + other._items_processed
        return result

    def _occupied_slots(self) -> int:
        return self._storage.nonzero_count()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the filter.

        Extends the BloomFilter statistics with counter distribution, overflow
        risk and deletion safety.

        Returns:
            A dictionary containing various statistics about the filter state.
        """
        stats = super().get_stats()
        stats.update(
            {
                "counter_bits": COUNTER_BITS,
                "counter_max": self.COUNTER_MAX,
                "deletion_support": True,
                "counter_stats": self._calculate_counter_stats(),
                "deletion_safety": self._assess_deletion_safety(),
            }
        )
        if self._items_processed > 0:
            stats["overflow_risk"] = self._assess_overflow_risk()
        return stats

    def _calculate_counter_stats(self) -> Dict[str, Any]:
        """Summarise the distribution of counter values."""
        total = len(self._storage)
        nonzero = 0
        saturated = 0
        counter_sum = 0
        max_observed = 0
        distribution: Dict[str, int] = {}

        for value in self._storage.values():
            if value:
                nonzero += 1
                counter_sum += value
            if value == self.COUNTER_MAX:
                saturated += 1
            max_observed = max(max_observed, value)
            label = self._get_counter_bin(value)
            distribution[label] = distribution.get(label, 0) + 1

        return {
            "counters": total,
            "zero_counter_pct": ((total - nonzero) / total) * 100,
            "saturated_counter_pct": (saturated / total) * 100,
            "max_observed": max_observed,
            "avg_counter": counter_sum / total,
            "avg_nonzero_counter": counter_sum / nonzero if nonzero else 0.0,
            "counter_distribution": {
                label: (count / total) * 100 for label, count in distribution.items()
            },
        }

    def _get_counter_bin(self, value: int) -> str:
        if value <= 2:
            return str(value)
        if value == self.COUNTER_MAX:
            return f"max({self.COUNTER_MAX})"
        for upper, label in ((5, "3-5"), (10, "6-10"), (20, "11-20"), (50, "21-50"), (100, "51-100")):
            if value <= upper:
                return label
        return f"101-{self.COUNTER_MAX - 1}"

    def _assess_overflow_risk(self) -> Dict[str, Any]:
        """
        Assess how close the counters are to saturating.

        Returns:
            Average non-zero counter value, its ratio to the maximum, a risk
            category and a rough count of remaining insertions before overflow.
        """
        nonzero = [value for value in self._storage.values() if value]
        if not nonzero:
            return {
                "avg_counter_value": 0,
                "fill_ratio": 0,
                "risk_category": "unknown",
                "note": "Insufficient data for overflow risk assessment",
            }

        avg_nonzero = sum(nonzero) / len(nonzero)
        fill_ratio = avg_nonzero / self.COUNTER_MAX
        if fill_ratio < 0.1:
            risk_category = "very_low"
        elif fill_ratio < 0.3:
            risk_category = "low"
        elif fill_ratio < 0.6:
            risk_category = "moderate"
        elif fill_ratio < 0.8:
            risk_category = "high"
        else:
            risk_category = "very_high"

        remaining_ops = (self.COUNTER_MAX - avg_nonzero) * len(nonzero) / self._params.hash_count
        return {
            "avg_counter_value": avg_nonzero,
            "max_counter_value": self.COUNTER_MAX,
            "fill_ratio": fill_ratio,
            "headroom": 1.0 - fill_ratio,
            "risk_category": risk_category,
            "saturated_counters": self._storage.saturated_count(),
            "estimated_remaining_operations": int(remaining_ops),
        }

    def _assess_deletion_safety(self) -> Dict[str, Any]:
        """
        Estimate the risk that a removal disturbs another value.

        A removal can only hurt another value if it touches a counter that value
        also relies on, so the risk grows with the share of occupied slots.

        Returns:
            Fill ratio, collision probability, risk and a risk category.
        """
        fill_ratio = self._occupied_slots() / self._params.address_space_size
        if fill_ratio == 0:
            return {
                "fill_ratio": 0.0,
                "collision_probability": 0,
                "risk_category": "unknown",
                "note": "Insufficient data for deletion safety assessment",
            }

        collision_prob = 1 - (1 - fill_ratio) ** self._params.hash_count
        unsafe_deletion_risk = collision_prob * fill_ratio
        if unsafe_deletion_risk < 0.01:
            risk_category = "very_low"
        elif unsafe_deletion_risk < 0.05:
            risk_category = "low"
        elif unsafe_deletion_risk < 0.15:
            risk_category = "moderate"
        elif unsafe_deletion_risk < 0.3:
            risk_category = "high"
        else:
            risk_category = "very_high"

        return {
            "fill_ratio": fill_ratio,
            "collision_probability": collision_prob,
            "unsafe_deletion_risk": unsafe_deletion_risk,
            "risk_category": risk_category,
        }

    def error_bounds(self) -> Dict[str, Any]:
        """
        Calculate the theoretical error bounds for this filter.

        Adds deletion support and the probability that any one counter ever
        reaches saturation to the BloomFilter bounds.
        """
        bounds = super().error_bounds()
        bounds["deletion_supported"] = True

        if self._items_processed > 0:
            # Poisson tail P(X >= 255) for the load of a single counter
            load = self._params.hash_count * self._items_processed / self._params.address_space_size
            term = math.exp(-load)
            below = 0.0
            for j in range(self.COUNTER_MAX):
                below += term
                term *= load / (j + 1)
            bounds["counter_overflow_probability"] = max(0.0, 1.0 - below)
            bounds["deletion_risk_category"] = self._assess_deletion_safety()["risk_category"]

        return bounds

    def analyze_performance(self) -> Dict[str, Any]:
        """
        Summarise the filter like BloomFilter does, plus counter health.

        Returns:
            A dictionary of metrics plus a list of human-readable recommendations.
        """
        analysis = super().analyze_performance()
        analysis["algorithm"] = "Counting Bloom Filter"

        recommendations = analysis["recommendations"]
        safety = self._assess_deletion_safety()
        analysis["deletion_safety"] = safety
        if safety["risk_category"] in ("high", "very_high"):
            recommendations.append(
                f"High deletion risk detected ({safety['unsafe_deletion_risk']:.1%} "
                f"chance of disturbing other values). Consider migrating to a new "
                f"filter with a lower fill ratio."
            )

        if self._items_processed > 0:
            overflow = self._assess_overflow_risk()
            analysis["overflow_assessment"] = overflow
            if overflow["risk_category"] in ("high", "very_high"):
                recommendations.append(
                    f"Counter overflow risk is {overflow['risk_category']}. "
                    f"Saturated counters can no longer be cleared by removals."
                )

        return analysis
