from __future__ import annotations

import hashlib

SPAWN_LUCK_SUFFIX = "spawn"
COINS_LUCK_SUFFIX = "coins"
_MANTISSA_BITS = 53


def luck(key: str) -> float:
    """Deterministic value in [0, 1) for ``key``, stable across processes."""
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    bits = int.from_bytes(digest[:8], byteorder="big", signed=False) >> (64 - _MANTISSA_BITS)
    return bits / float(1 << _MANTISSA_BITS)


def cell_luck_key(i: int, j: int, suffix: str) -> str:
    return f"{i},{j},{suffix}"


def cell_luck(i: int, j: int, suffix: str) -> float:
    return luck(cell_luck_key(i, j, suffix))
