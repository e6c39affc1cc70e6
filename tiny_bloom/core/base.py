"""
Base class and interface for tiny-bloom membership filters.

This module defines the abstract base class every filter implements so that the
plain and counting variants expose a consistent interface. It includes
benchmarking hooks for measuring update latency and memory footprint.
"""

import abc
import sys
import time
from collections import deque
from typing import Any, Deque, Dict, Generic, Optional, TypeVar

T = TypeVar("T")  # Type for the values being tested


class MembershipSummary(Generic[T], abc.ABC):
    """
    Abstract base class for approximate set membership structures.

    Subclasses implement ``insert`` and ``contains``. The base class keeps the
    count of processed insertions, optional per-insert timing, and memory
    accounting, and offers ``get_stats`` / ``error_bounds`` hooks that
    subclasses extend.
    """

    def __init__(self, memory_limit_bytes: Optional[int] = None):
        """
        Initialize a new membership summary.

        Args:
            memory_limit_bytes: Optional maximum memory usage in bytes.
                                None means no explicit limit.
        """
        self._memory_limit_bytes = memory_limit_bytes
        self._items_processed = 0

        # Performance tracking attributes
        self._last_update_time: float = 0.0
        self._total_update_time: float = 0.0
        self._update_count: int = 0
        self._track_recent_updates: bool = False
        self._recent_update_times: Optional[Deque[float]] = None
        self._max_update_history: int = 100

    @abc.abstractmethod
    def insert(self, value: T) -> None:
        """
        Record a value as a member.

        Args:
            value: The value to insert.
        """

    @abc.abstractmethod
    def contains(self, value: T) -> bool:
        """
        Test whether a value may have been inserted.

        Args:
            value: The value to test.

        Returns:
            True if the value is possibly a member, False if it definitely is not.
        """

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]

    def update(self, value: T) -> None:
        """Stream-style alias for ``insert``."""
        self.insert(value)

    def query(self, value: T) -> bool:
        """Alias for ``contains``."""
        return self.contains(value)

    def _start_timer(self) -> Optional[float]:
        """Start timing an insert if performance tracking is enabled."""
        if self._track_recent_updates:
            return time.perf_counter()
        return None

    def _record_update(self, started: Optional[float]) -> None:
        """
        Count one processed insertion and, when timing, its elapsed time.

        Args:
            started: Value returned by ``_start_timer`` for this insertion.
        """
        self._items_processed += 1
        if started is None:
            return

        self._last_update_time = time.perf_counter() - started
        self._total_update_time += self._last_update_time
        self._update_count += 1
        if self._recent_update_times is not None:
            self._recent_update_times.append(self._last_update_time)

    def _check_same_type(self, other: "MembershipSummary[T]") -> None:
        """
        Check that another summary is of exactly the same type.

        Raises:
            TypeError: If other is not of the same type.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot merge {self.__class__.__name__} with {other.__class__.__name__}"
            )

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this summary in bytes.

        Accounts for the object and its instance dictionary. Subclasses add the
        size of their storage.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        if self._recent_update_times is not None:
            size += sys.getsizeof(self._recent_update_times)
            size += len(self._recent_update_times) * sys.getsizeof(0.0)
        return size

    def check_memory_limit(self) -> bool:
        """
        Check that the current memory usage is within the configured limit.

        Returns:
            True if there is no limit or usage is within it, False otherwise.
        """
        if self._memory_limit_bytes is None:
            return True
        return self.estimate_size() <= self._memory_limit_bytes

    def enable_performance_tracking(
        self, track_recent_updates: bool = True, max_history: int = 100
    ) -> None:
        """
        Enable per-insert timing for benchmarking.

        Timing adds overhead to every insert, so only enable it when measuring.

        Args:
            track_recent_updates: Whether to keep the timings of recent inserts.
            max_history: Maximum number of recent timings to keep.
        """
        self._track_recent_updates = track_recent_updates
        self._max_update_history = max(1, max_history)
        if track_recent_updates:
            self._recent_update_times = deque(maxlen=self._max_update_history)

    def disable_performance_tracking(self) -> None:
        """Disable performance tracking to reduce overhead."""
        self._track_recent_updates = False
        self._recent_update_times = None

    def get_performance_stats(self) -> Dict[str, Any]:
        """
        Get timing and memory statistics.

        Returns:
            A dictionary with items processed, memory usage and, when tracking
            is enabled, average/last/min/max insert times in nanoseconds.
        """
        stats: Dict[str, Any] = {
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        if self._update_count > 0:
            stats["avg_update_time_ns"] = (
                self._total_update_time / self._update_count
            ) * 1e9
            stats["last_update_time_ns"] = self._last_update_time * 1e9

        if self._recent_update_times:
            recent_times_ns = [t * 1e9 for t in self._recent_update_times]
            stats["recent_update_times_ns"] = recent_times_ns
            stats["min_update_time_ns"] = min(recent_times_ns)
            stats["max_update_time_ns"] = max(recent_times_ns)

        return stats

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the summary.

        Subclasses extend this with their own figures and call
        ``super().get_stats()`` to keep the base metrics.

        Returns:
            A dictionary of statistics.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        if self._memory_limit_bytes is not None:
            stats["memory_limit_bytes"] = self._memory_limit_bytes
            stats["memory_usage_pct"] = (
                self.estimate_size() / self._memory_limit_bytes
            ) * 100

        if self._update_count > 0:
            stats["avg_update_time_ns"] = (
                self._total_update_time / self._update_count
            ) * 1e9

        return stats

    def error_bounds(self) -> Dict[str, Any]:
        """
        Get the theoretical error bounds for this summary.

        The base implementation returns an empty dictionary.
        """
        return {}

    @property
    def items_processed(self) -> int:
        """Total number of insertions processed."""
        return self._items_processed
