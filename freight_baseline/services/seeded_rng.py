from __future__ import annotations

import json
from collections.abc import Callable, MutableSequence
from typing import Any, TypeVar

"""Deterministic pseudo-random numbers for reproducible synthetic data.

``make_rng`` is a Park-Miller minimal standard generator (multiplier 16807,
modulus 2**31 - 1). ``seed_from`` hashes the canonical JSON form of any
value, so equal inputs always produce the same sequence.
"""

__all__ = ["MODULUS", "seed_from", "make_rng", "shuffled"]

MODULUS = 2147483647
MULTIPLIER = 16807

T = TypeVar("T")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def seed_from(obj: Any) -> int:
    """Non-negative 32-bit seed derived from the sorted-key JSON form of ``obj``.

    The string hash runs over UTF-16 code units, so non-ASCII text and
    characters outside the BMP hash the same as in a browser.
    """
    text = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    data = text.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32((h << 5) - h + unit)
    return abs(h)


def make_rng(seed: int) -> Callable[[], float]:
    """Generator returning floats in [0, 1); identical seeds give identical streams."""
    state = abs(int(seed)) % MODULUS
    if seed < 0:
        state = -state
    if state <= 0:
        state += MODULUS - 1

    def next_value() -> float:
        nonlocal state
        state = state * MULTIPLIER % MODULUS
        return (state - 1) / (MODULUS - 1)

    return next_value


def shuffled(items: MutableSequence[T] | list[T], rng: Callable[[], float]) -> list[T]:
    """Fisher-Yates shuffle into a new list using ``rng``."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out
