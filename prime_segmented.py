#!/usr/bin/env python3
"""
Segmented Sieve of Eratosthenes in O(sqrt(N)) memory.

The first segment [0, S) with S = ceil(sqrt(N)) is sieved classically and
gives the base primes. Every later window [start, start + S) is sieved with
those base primes only, each prime carrying the offset of its next multiple
from one window into the next.

Usage:
  python prime_segmented.py --limit 1000000
"""

import argparse
import math
import operator
from typing import Iterator, Optional, Protocol, Tuple

import numpy as np

MAX_BOUND = 2**64 - 1


class SieveError(Exception):
    """Base class for errors raised by the sieve."""


class BoundOutOfRangeError(SieveError, ValueError):
    pass


class SieveAllocationError(SieveError, MemoryError):
    pass


class PrimeSink(Protocol):
    def add(self, prime: int) -> None: ...

    def finish(self, count: int) -> None: ...


def check_bound(bound) -> int:
    """Return `bound` as an int in [0, MAX_BOUND] or raise."""
    if isinstance(bound, bool):
        raise TypeError("bound must be an integer, not bool")
    n = operator.index(bound)
    if n < 0 or n > MAX_BOUND:
        raise BoundOutOfRangeError(f"bound {n} is outside [0, {MAX_BOUND}]")
    return n


def segment_size_for(bound: int) -> int:
    """ceil(sqrt(bound)), exact for any 64-bit bound."""
    n = check_bound(bound)
    if n == 0:
        return 0
    return math.isqrt(n - 1) + 1


def _allocate(shape: int, fill, dtype) -> np.ndarray:
    try:
        return np.full(shape, fill, dtype=dtype)
    except MemoryError as exc:
        raise SieveAllocationError(
            f"cannot allocate {shape:,} x {np.dtype(dtype).name} for the sieve"
        ) from exc


def _rebase(offsets: np.ndarray, primes: np.ndarray, width: int) -> None:
    """
    Step every offset past a window of `width` positions, in place.

    offsets[k] is where the next multiple of primes[k] falls relative to the
    current window start; afterwards it is relative to the next window start.
    Everything stays in uint64 and never goes negative.
    """
    w = np.uint64(width)
    short = offsets < w
    p = primes[short]
    offsets[short] = (p - (w - offsets[short]) % p) % p
    offsets[~short] -= w


def base_sieve(segment_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Classic sieve of [0, segment_size).

    Returns (primes, carry) as parallel uint64 arrays: the primes below
    segment_size in increasing order, and for each one the offset of its
    first multiple at or past segment_size, counted from segment_size.
    """
    if segment_size < 2:
        raise ValueError(f"segment size must be at least 2, got {segment_size}")
    is_prime = _allocate(segment_size, True, bool)
    is_prime[:2] = False
    for p in range(2, math.isqrt(segment_size - 1) + 1):
        if is_prime[p]:
            is_prime[p * p :: p] = False

    primes = np.flatnonzero(is_prime).astype(np.uint64)
    # p < 2**32, so p*p fits in uint64
    carry = primes * primes
    _rebase(carry, primes, segment_size)
    return primes, carry


def sieve_segment(
    width: int,
    primes: np.ndarray,
    carry: np.ndarray,
    start: int,
    buffer: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Sieve the window [start, start + width) with the base primes.

    `carry` is read for the first multiple of each prime inside the window
    and updated in place for the next one. Returns the primes of the window.
    """
    if width < 1:
        raise ValueError(f"window width must be positive, got {width}")
    if start + width > MAX_BOUND + 1:
        raise BoundOutOfRangeError(f"window [{start}, {start + width}) exceeds 2**64")
    if buffer is None:
        buffer = _allocate(width, True, bool)
    elif len(buffer) < width:
        raise ValueError(f"buffer holds {len(buffer)} flags, window needs {width}")
    mask = buffer[:width]
    mask.fill(True)

    active = np.flatnonzero(carry < np.uint64(width))
    for p, c in zip(primes[active].tolist(), carry[active].tolist()):
        mask[c::p] = False
    _rebase(carry, primes, width)

    return np.flatnonzero(mask).astype(np.uint64) + np.uint64(start)


def iter_segments(bound: int) -> Iterator[np.ndarray]:
    """Yield the primes below `bound`, one array per sieve pass."""
    n = check_bound(bound)
    if n < 5:
        yield np.array([p for p in (2, 3) if p < n], dtype=np.uint64)
        return

    size = segment_size_for(n)
    primes, carry = base_sieve(size)
    yield primes

    buffer = _allocate(size, True, bool)
    start = size
    while start < n:
        width = min(size, n - start)
        yield sieve_segment(width, primes, carry, start, buffer)
        start += width


def iter_primes(bound: int) -> Iterator[int]:
    """Lazily yield every prime below `bound` in increasing order."""
    for segment in iter_segments(bound):
        yield from segment.tolist()


def count_primes(bound: int) -> int:
    return sum(int(segment.size) for segment in iter_segments(bound))


def sieve(bound: int, sink: PrimeSink) -> int:
    """Stream the primes below `bound` into `sink` and return their count."""
    total = 0
    for segment in iter_segments(bound):
        for p in segment.tolist():
            sink.add(p)
        total += int(segment.size)
    sink.finish(total)
    return total


def main():
    ap = argparse.ArgumentParser(description="Segmented sieve in O(sqrt(N)) memory (NumPy).")
    ap.add_argument("--limit", type=int, required=True, help="Count all primes < LIMIT.")
    args = ap.parse_args()

    try:
        total = count_primes(args.limit)
    except SieveError as exc:
        ap.error(str(exc))
    print(f"Mode: primes < {args.limit:,} | Segment size: {segment_size_for(args.limit):,}")
    print(f"Count: {total:,}")


if __name__ == "__main__":
    main()
