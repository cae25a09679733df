"""
Cache keys for classification responses.

Two builders are available:

* ``ExactKeyBuilder`` keeps the whole normalized text in the key. Equal
  keys mean equal inputs, so a hit is always correct; memory grows with
  text length times the number of cached texts. This is the default.

* ``DigestKeyBuilder`` stores a fixed-size FNV-1a hash plus the text length.
  Keys stay small regardless of input size, but two different texts of the
  same length and the same hash share a key and therefore get each other's
  cached classification. With the 64-bit hash that is unlikely enough for
  most deployments; ``digest32`` makes it noticeably more likely and is
  only worth it when memory is very tight.

``top_n`` is always part of the key: the same text produces a single object
for ``top_n == 1`` and a ranked list otherwise.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_32(data: bytes) -> int:
    """32-bit FNV-1a over raw bytes."""
    h = _FNV32_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV32_PRIME) & _MASK32
    return h


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a over raw bytes."""
    h = _FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV64_PRIME) & _MASK64
    return h


def _check_top_n(top_n: int) -> None:
    if not isinstance(top_n, int) or isinstance(top_n, bool) or top_n < 1:
        raise ValueError(f"top_n must be an integer >= 1, got {top_n!r}")


class CacheKeyBuilder(ABC):
    """Maps ``(top_n, text)`` to a cache key. Equal inputs give equal keys."""

    @property
    @abstractmethod
    def mode(self) -> str:
        ...

    @abstractmethod
    def build_key(self, top_n: int, text: str) -> str:
        ...


class ExactKeyBuilder(CacheKeyBuilder):
    SEPARATOR = "\x00"

    @property
    def mode(self) -> str:
        return "exact"

    def build_key(self, top_n: int, text: str) -> str:
        _check_top_n(top_n)
        return f"{top_n}{self.SEPARATOR}{text}"


class DigestKeyBuilder(CacheKeyBuilder):
    """Hash-plus-length keys. See the module docstring for the collision trade-off."""

    def __init__(self, hash_func: Callable[[bytes], int] = fnv1a_64, *, mode: str = "digest") -> None:
        self._hash = hash_func
        self._mode = mode

    @property
    def mode(self) -> str:
        return self._mode

    def build_key(self, top_n: int, text: str) -> str:
        _check_top_n(top_n)
        digest = self._hash(text.encode("utf-8"))
        return f"{top_n}:{digest:x}:{len(text)}"


def build_key_builder(mode: str = "exact") -> CacheKeyBuilder:
    """Return the builder for a CACHE_KEY_MODE value: exact, digest or digest32."""
    mode = (mode or "exact").strip().lower()
    if mode == "exact":
        return ExactKeyBuilder()
    if mode == "digest":
        return DigestKeyBuilder(fnv1a_64, mode="digest")
    if mode == "digest32":
        return DigestKeyBuilder(fnv1a_32, mode="digest32")
    raise ValueError(f"Unknown cache key mode: {mode!r}. Expected exact, digest or digest32.")
