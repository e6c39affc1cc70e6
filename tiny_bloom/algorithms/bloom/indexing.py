"""
Double-hashing index generation for tiny-bloom filters.

A value is turned into ``hash_count`` slot indices using two independent hashes
``h1`` and ``h2``::

    index_i = (h1 + i * h2) mod address_space_size,   i = 0 .. hash_count - 1

``h2`` is the same hash function applied to the value's bytes behind a fixed
salt prefix. This avoids computing ``hash_count`` independent hash functions
(Kirsch & Mitzenmacher, "Less Hashing, Same Performance", 2006).
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from tiny_bloom.core.exceptions import InvalidParameter
from tiny_bloom.core.hash import blake2b_64, fnv1a_32, murmurhash3_32, to_bytes

HASH_FUNCTIONS: Dict[str, Callable[[bytes, int], int]] = {
    "blake2b": blake2b_64,
    "murmur3": murmurhash3_32,
    "fnv1a": fnv1a_32,
}

SECOND_HASH_SALT = b"salt"


class HashIndexGenerator:
    """
    Deterministically maps values to slot indices.

    The index sequence depends only on the value, the address space size, the
    hash count, the seed, the hash function and the key encoder. Two generators
    built with the same settings always agree.

    If ``h2`` is congruent to 0 modulo the address space size, every index
    would collapse onto ``h1`` and the filter would degrade to a single-slot
    check. In that case ``h2`` is replaced with 1.

    Args:
        address_space_size: Number of addressable slots (m), at least 1.
        hash_count: Number of indices per value (k), at least 1.
        seed: Seed passed to both hashes.
        hash_function: One of ``"blake2b"`` (64-bit, default), ``"murmur3"``
                       or ``"fnv1a"`` (both 32-bit).
        key_encoder: Callable turning a value into bytes. Defaults to
                     ``tiny_bloom.core.hash.to_bytes``; supply one to give a
                     custom type a stable encoding.

    Raises:
        InvalidParameter: If a size is below 1 or the hash function is unknown.
    """

    def __init__(
        self,
        address_space_size: int,
        hash_count: int,
        seed: int = 0,
        hash_function: str = "blake2b",
        key_encoder: Optional[Callable[[Any], bytes]] = None,
    ):
        if address_space_size < 1:
            raise InvalidParameter("Address space size must be at least 1")
        if hash_count < 1:
            raise InvalidParameter("Hash count must be at least 1")
        if hash_function not in HASH_FUNCTIONS:
            raise InvalidParameter(
                f"Unknown hash function {hash_function!r}; "
                f"expected one of {sorted(HASH_FUNCTIONS)}"
            )

        self.address_space_size = address_space_size
        self.hash_count = hash_count
        self.seed = seed
        self.hash_function = hash_function
        self._hash = HASH_FUNCTIONS[hash_function]
        self._encode = key_encoder if key_encoder is not None else to_bytes

    def base_hashes(self, value: Any) -> Tuple[int, int]:
        """
        Compute the two base hashes for a value.

        Returns:
            ``(h1, h2)`` with ``h2`` already reduced modulo the address space
            size and never zero.
        """
        data = self._encode(value)
        h1 = self._hash(data, self.seed)
        h2 = self._hash(SECOND_HASH_SALT + data, self.seed) % self.address_space_size
        if h2 == 0:
            h2 = 1
        return h1, h2

    def indices_for(self, value: Any) -> List[int]:
        """
        Generate the slot indices for a value.

        Args:
            value: The value to index.

        Returns:
            A list of ``hash_count`` integers in ``[0, address_space_size)``.
        """
        m = self.address_space_size
        h1, h2 = self.base_hashes(value)
        h1 %= m
        return [(h1 + i * h2) % m for i in range(self.hash_count)]

    def is_compatible(self, other: "HashIndexGenerator") -> bool:
        """
        Check whether another generator produces the same indices.

        Custom key encoders are compared by identity.
        """
        return (
            self.address_space_size == other.address_space_size
            and self.hash_count == other.hash_count
            and self.seed == other.seed
            and self.hash_function == other.hash_function
            and self._encode is other._encode
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(address_space_size={self.address_space_size}, "
            f"hash_count={self.hash_count}, seed={self.seed}, "
            f"hash_function={self.hash_function!r})"
        )
