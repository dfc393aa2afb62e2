"""Seed coercion shared by the CLI and the HTTP API."""
import hashlib
import random

MAX_SEED = 9223372036854775807


def coerce_seed(seed=None) -> int:
    """Convert a provided seed (int or str) into a bounded non-negative int.

    Digit strings are used as-is, other strings are hashed, and a missing or
    blank seed draws a fresh random one.
    """
    if seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(seed, bool):
        raise ValueError("seed must be an int or a string")
    if isinstance(seed, int):
        return seed % MAX_SEED
    if isinstance(seed, str):
        s = seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % MAX_SEED
    raise ValueError("seed must be an int or a string")
