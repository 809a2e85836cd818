"""Helpers for choosing how many worker threads to use."""

import os


def how_many_threads(n: int) -> int:
    """Return ``n``, or the number of CPUs (at least one) when ``n`` is zero."""
    if n < 0:
        raise ValueError(f"thread count must not be negative, got {n}")
    if n == 0:
        n = os.cpu_count() or 0
    if n == 0:
        n = 1
    return n