"""Pseudo-random predicate values."""

from __future__ import annotations

import random
import string

CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def random_string(length: int, rng: random.Random | None = None) -> str:
    """Random alphanumerics with a space at every 8th position (0, 8, 16, ...)."""
    rng = rng or random
    return "".join(" " if i % 8 == 0 else rng.choice(CHARSET) for i in range(length))


def less_random_string(length: int, rng: random.Random | None = None) -> str:
    """One random alphanumeric character repeated ``length`` times."""
    rng = rng or random
    return rng.choice(CHARSET) * length
