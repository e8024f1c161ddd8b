"""Deterministic pseudo-randomness derived from string seeds."""

from __future__ import annotations

import hashlib


def seeded_unit(seed: str) -> float:
    """Map ``seed`` to a reproducible float in ``[0, 1)``."""

    digest = hashlib.sha256(seed.encode("utf8")).digest()
    return int.from_bytes(digest[:8], "little") / 2**64
