"""
Packed slot storage for tiny-bloom filters.

Both stores keep their slots in an ``array.array('Q')`` of 64-bit words:

- BitArray packs 64 one-bit slots per word. Bits are set, never cleared.
- CounterArray packs eight 8-bit saturating counters per word.

Storage is allocated once, at construction, and never resized. Indices are
produced in range by the index generator; an out-of-range index is a
programming error and raises IndexError.
"""

import array
import sys
from typing import Iterator, Tuple

WORD_BITS = 64
WORD_BYTES = WORD_BITS // 8
COUNTER_BITS = 8
COUNTERS_PER_WORD = WORD_BITS // COUNTER_BITS


def _allocate_words(count: int) -> array.array:
    # exactly count words, with no spare capacity
    return array.array("Q", [0]) * count


class BitArray:
    """
    Fixed-size array of single-bit slots.

    Args:
        size: Number of slots, at least 1.
    """

    __slots__ = ("_size", "_words")

    def __init__(self, size: int):
        if size < 1:
            raise ValueError("BitArray size must be at least 1")
        self._size = size
        self._words = _allocate_words((size + WORD_BITS - 1) // WORD_BITS)

    def _check_index(self, index: int) -> None:
        if not (0 <= index < self._size):
            raise IndexError(f"Slot {index} out of range (0 to {self._size - 1})")

    def set(self, index: int) -> None:
        """Mark the slot at ``index``. Setting an already set slot is a no-op."""
        self._check_index(index)
        self._words[index >> 6] |= 1 << (index & 63)

    def test(self, index: int) -> bool:
        """Return whether the slot at ``index`` is set."""
        self._check_index(index)
        return bool((self._words[index >> 6] >> (index & 63)) & 1)

    def count(self) -> int:
        """Number of set slots."""
        return sum(bin(word).count("1") for word in self._words)

    def union_update(self, other: "BitArray") -> None:
        """
        OR another array of the same size into this one.

        Raises:
            ValueError: If the sizes differ.
        """
        if other._size != self._size:
            raise ValueError(
                f"Cannot combine bit arrays of size {self._size} and {other._size}"
            )
        for i, word in enumerate(other._words):
            self._words[i] |= word

    @property
    def word_count(self) -> int:
        return len(self._words)

    def estimate_size(self) -> int:
        """Memory used by the array object and its buffer, in bytes."""
        return sys.getsizeof(self) + sys.getsizeof(self._words)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"BitArray(size={self._size}, set={self.count()})"


class SaturatingCounter:
    """
    Immutable integer clamped to ``[MIN, MAX]``.

    Incrementing at MAX leaves the value at MAX and decrementing at MIN leaves
    it at MIN: overflow and underflow are absorbed rather than wrapped.
    """

    __slots__ = ("_value",)

    MIN = 0
    MAX = (1 << COUNTER_BITS) - 1

    def __init__(self, value: int = 0):
        if not (self.MIN <= value <= self.MAX):
            raise ValueError(
                f"Counter value {value} out of range ({self.MIN} to {self.MAX})"
            )
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    @property
    def saturated(self) -> bool:
        return self._value == self.MAX

    def incremented(self) -> "SaturatingCounter":
        if self._value == self.MAX:
            return self
        return SaturatingCounter(self._value + 1)

    def decremented(self) -> "SaturatingCounter":
        if self._value == self.MIN:
            return self
        return SaturatingCounter(self._value - 1)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value > self.MIN

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SaturatingCounter):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"SaturatingCounter({self._value})"


class CounterArray:
    """
    Fixed-size array of 8-bit saturating counters.

    Counter ``i`` lives in word ``i // 8`` at bit offset ``(i % 8) * 8``.

    Args:
        size: Number of counters, at least 1.
    """

    __slots__ = ("_size", "_words")

    def __init__(self, size: int):
        if size < 1:
            raise ValueError("CounterArray size must be at least 1")
        self._size = size
        self._words = _allocate_words((size + COUNTERS_PER_WORD - 1) // COUNTERS_PER_WORD)

    def _locate(self, index: int) -> Tuple[int, int]:
        if not (0 <= index < self._size):
            raise IndexError(f"Counter {index} out of range (0 to {self._size - 1})")
        return index // COUNTERS_PER_WORD, (index % COUNTERS_PER_WORD) * COUNTER_BITS

    def _read(self, word: int, offset: int) -> SaturatingCounter:
        return SaturatingCounter((self._words[word] >> offset) & SaturatingCounter.MAX)

    def _write(self, word: int, offset: int, counter: SaturatingCounter) -> None:
        cleared = self._words[word] & ~(SaturatingCounter.MAX << offset)
        self._words[word] = cleared | (counter.value << offset)

    def get(self, index: int) -> int:
        """Current value of the counter at ``index``."""
        return self._read(*self._locate(index)).value

    def increment(self, index: int) -> None:
        """Add one to the counter at ``index`` unless it is already saturated."""
        word, offset = self._locate(index)
        counter = self._read(word, offset)
        if not counter.saturated:
            self._write(word, offset, counter.incremented())

    def decrement(self, index: int) -> None:
        """Subtract one from the counter at ``index`` unless it is already zero."""
        word, offset = self._locate(index)
        counter = self._read(word, offset)
        if counter:
            self._write(word, offset, counter.decremented())

    def is_nonzero(self, index: int) -> bool:
        """Return whether the counter at ``index`` is greater than zero."""
        word, offset = self._locate(index)
        return bool((self._words[word] >> offset) & SaturatingCounter.MAX)

    def values(self) -> Iterator[int]:
        """Iterate over every counter value in slot order."""
        remaining = self._size
        for word in self._words:
            for slot in range(min(COUNTERS_PER_WORD, remaining)):
                yield (word >> (slot * COUNTER_BITS)) & SaturatingCounter.MAX
            remaining -= COUNTERS_PER_WORD

    def nonzero_count(self) -> int:
        """Number of counters greater than zero."""
        return sum(1 for value in self.values() if value)

    def saturated_count(self) -> int:
        """Number of counters stuck at the maximum value."""
        return sum(1 for value in self.values() if value == SaturatingCounter.MAX)

    def merge_update(self, other: "CounterArray") -> None:
        """
        Add another array's counters into this one, saturating at the maximum.

        Raises:
            ValueError: If the sizes differ.
        """
        if other._size != self._size:
            raise ValueError(
                f"Cannot combine counter arrays of size {self._size} and {other._size}"
            )
        for i, (mine, theirs) in enumerate(zip(self.values(), other.values())):
            total = min(mine + theirs, SaturatingCounter.MAX)
            if total != mine:
                self._write(*self._locate(i), SaturatingCounter(total))

    @property
    def word_count(self) -> int:
        return len(self._words)

    def estimate_size(self) -> int:
        """Memory used by the array object and its buffer, in bytes."""
        return sys.getsizeof(self) + sys.getsizeof(self._words)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"CounterArray(size={self._size}, nonzero={self.nonzero_count()})"
