"""
Hashing functions for tiny-bloom.

Every function here is a pure function of its input bytes and seed, so the same
value maps to the same hash in every process. Python's built-in ``hash()`` is
salted per interpreter for ``str`` and ``bytes`` and is therefore never used.
These functions target distribution quality and speed, not cryptographic security.
"""

import hashlib
from typing import Any

MASK_32 = 0xFFFFFFFF
INT_TAG = b"\xfe"
REPR_TAG = b"\xff"


def to_bytes(key: Any) -> bytes:
    """
    Encode a value into the canonical byte string that gets hashed.

    Text and raw bytes share one domain: ``"a"`` and ``b"a"`` encode alike.
    Integers and every other value carry a one-byte tag that never occurs in
    UTF-8, so no ``str`` can encode like a non-string value (``97`` and
    ``"a"``, or ``True`` and ``"True"``, stay apart).

    Args:
        key: The value to encode.

    Returns:
        ``str`` as UTF-8, ``bytes``/``bytearray``/``memoryview`` unchanged,
        ``int`` as ``INT_TAG`` plus little-endian two's complement, anything
        else as ``REPR_TAG`` plus its UTF-8 ``repr``.
    """
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, int) and not isinstance(key, bool):
        length = (key.bit_length() + 8) // 8
        return INT_TAG + key.to_bytes(length, "little", signed=True)
    return REPR_TAG + repr(key).encode("utf-8")


def _rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & MASK_32


def murmurhash3_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of MurmurHash3 (x86, 32-bit variant).

    Args:
        key: The key to hash (encoded with ``to_bytes`` unless already bytes).
        seed: Optional seed for the hash.

    Returns:
        32-bit unsigned hash value.
    """
    data = key if isinstance(key, bytes) else to_bytes(key)
    length = len(data)
    c1 = 0xCC9E2D51
    c2 = 0x1B873593

    h = seed & MASK_32
    tail_start = length - (length & 3)

    for offset in range(0, tail_start, 4):
        k = int.from_bytes(data[offset : offset + 4], "little")
        k = _rotl32((k * c1) & MASK_32, 15)
        h ^= (k * c2) & MASK_32
        h = (_rotl32(h, 13) * 5 + 0xE6546B64) & MASK_32

    tail = data[tail_start:]
    if tail:
        k = int.from_bytes(tail, "little")
        k = _rotl32((k * c1) & MASK_32, 15)
        h ^= (k * c2) & MASK_32

    # fmix32
    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & MASK_32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & MASK_32
    h ^= h >> 16
    return h


def fnv1a_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a (32-bit variant).

    Simpler and slightly weaker than MurmurHash3.

    Args:
        key: The key to hash (encoded with ``to_bytes`` unless already bytes).
        seed: Optional seed, XORed into the offset basis.

    Returns:
        32-bit unsigned hash value.
    """
    data = key if isinstance(key, bytes) else to_bytes(key)
    prime = 16777619
    h = (2166136261 ^ seed) & MASK_32
    for byte in data:
        h = ((h ^ byte) * prime) & MASK_32
    return h


def blake2b_64(key: Any, seed: int = 0) -> int:
    """
    64-bit hash built on BLAKE2b with an 8-byte digest.

    The seed is passed as the BLAKE2b salt, so differently seeded hashes are
    independent. This is the default hash for filters: it runs in C and its
    64-bit output keeps indices uniform even for very large address spaces.

    Args:
        key: The key to hash (encoded with ``to_bytes`` unless already bytes).
        seed: Optional non-negative seed (only its low 128 bits are used).

    Returns:
        64-bit unsigned hash value.
    """
    data = key if isinstance(key, bytes) else to_bytes(key)
    salt = (seed & ((1 << 128) - 1)).to_bytes(16, "little")
    digest = hashlib.blake2b(data, digest_size=8, salt=salt).digest()
    return int.from_bytes(digest, "little")
