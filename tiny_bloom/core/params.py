"""
Sizing mathematics shared by every filter in tiny-bloom.

For a capacity ``n`` and target false positive rate ``p`` the optimal number of
slots ``m`` and number of hash functions ``k`` are::

    m = ceil(-(n * ln(p)) / (ln(2) ** 2))
    k = ceil((m / n) * ln(2))

which works out to roughly 4.8 slots per item at p = 0.1, 9.6 at p = 0.01,
14.4 at p = 0.001 and 19.2 at p = 0.0001.
"""

import math
import numbers
from dataclasses import dataclass

from tiny_bloom.core.exceptions import InvalidParameter


def _validate(capacity: int, false_positive_rate: float) -> None:
    if isinstance(capacity, bool) or not isinstance(capacity, numbers.Integral):
        raise InvalidParameter(
            f"Capacity must be an integer, got {type(capacity).__name__}"
        )
    if capacity < 1:
        raise InvalidParameter(f"Capacity must be at least 1, got {capacity}")
    if isinstance(false_positive_rate, bool) or not isinstance(
        false_positive_rate, numbers.Real
    ):
        raise InvalidParameter(
            f"False positive rate must be a real number, "
            f"got {type(false_positive_rate).__name__}"
        )
    # NaN fails both comparisons
    if not (0 < false_positive_rate < 1):
        raise InvalidParameter(
            f"False positive rate must be between 0 and 1 (exclusive), "
            f"got {false_positive_rate}"
        )


def optimal_address_space_size(capacity: int, false_positive_rate: float) -> int:
    """
    Number of slots needed to hold ``capacity`` items at ``false_positive_rate``.

    The result is not capped: tiny rates with large capacities give very large
    sizes, and whether that fits in memory is for the storage layer to find out.
    """
    ln2 = math.log(2)
    return math.ceil(-(capacity * math.log(false_positive_rate)) / (ln2 * ln2))


def optimal_hash_count(address_space_size: int, capacity: int) -> int:
    """Number of hash functions minimising the false positive rate."""
    return math.ceil((address_space_size / capacity) * math.log(2))


def capacity_for_size(address_space_size: int, false_positive_rate: float) -> int:
    """
    Largest capacity whose optimal size fits in ``address_space_size`` slots.

    This is the inverse of ``optimal_address_space_size``, used when a filter
    is sized from a memory budget. Always returns at least 1.

    Raises:
        InvalidParameter: If the size is not positive or the rate is invalid.
    """
    if address_space_size < 1:
        raise InvalidParameter(
            f"Address space size must be at least 1, got {address_space_size}"
        )
    _validate(1, false_positive_rate)
    ln2 = math.log(2)
    capacity = int(-(address_space_size * ln2 * ln2) / math.log(false_positive_rate))
    return max(1, capacity)


@dataclass(frozen=True)
class FilterParameters:
    """
    Immutable sizing parameters of a filter.

    Attributes:
        capacity: Expected number of distinct items (n).
        false_positive_rate: Target false positive rate at capacity (p).
        address_space_size: Number of addressable slots (m).
        hash_count: Number of indices derived per value (k).
    """

    capacity: int
    false_positive_rate: float
    address_space_size: int
    hash_count: int

    @classmethod
    def compute(cls, capacity: int, false_positive_rate: float) -> "FilterParameters":
        """Alternate constructor, equivalent to ``compute_parameters``."""
        return compute_parameters(capacity, false_positive_rate)

    @property
    def bits_per_item(self) -> float:
        """Slots allotted per expected item (m / n)."""
        return self.address_space_size / self.capacity

    def expected_false_positive_rate(self, items: int) -> float:
        """
        Theoretical false positive rate after ``items`` distinct insertions.

        Uses the standard approximation ``(1 - e^(-k * items / m)) ** k``.
        """
        if items <= 0:
            return 0.0
        fill = 1.0 - math.exp(-(self.hash_count * items) / self.address_space_size)
        return min(1.0, fill**self.hash_count)


def compute_parameters(capacity: int, false_positive_rate: float) -> FilterParameters:
    """
    Derive the structure size and hash count for a filter.

    Identical inputs always produce identical parameters.

    Args:
        capacity: Expected number of distinct items, at least 1.
        false_positive_rate: Target false positive rate, strictly between 0 and 1.

    Returns:
        The computed FilterParameters.

    Raises:
        InvalidParameter: If either argument is out of range.
    """
    _validate(capacity, false_positive_rate)
    capacity = int(capacity)
    false_positive_rate = float(false_positive_rate)
    address_space_size = optimal_address_space_size(capacity, false_positive_rate)
    hash_count = optimal_hash_count(address_space_size, capacity)
    return FilterParameters(
        capacity=capacity,
        false_positive_rate=false_positive_rate,
        address_space_size=address_space_size,
        hash_count=hash_count,
    )
