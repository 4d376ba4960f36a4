"""Sinks that consume the prime stream produced by prime_segmented.sieve()."""

from collections import deque
from typing import List, TextIO

RULE = "=" * 36
SUMMARY_SIZE = 100


class PrimeFileWriter:
    """
    Text report of the primes below a bound, one prime per line, framed by
    a header and a "Primes found" footer. The header is written right away.
    """

    def __init__(self, stream: TextIO, bound: int):
        self.stream = stream
        stream.write(f"Prime numbers less than {bound}\n")
        stream.write(f"{RULE}\n\n")

    def add(self, prime: int) -> None:
        self.stream.write(f"{prime}\n")

    def finish(self, count: int) -> None:
        self.stream.write(f"\n{RULE}\n")
        self.stream.write(f"Primes found: {count}")
        self.stream.flush()


class PrimeSummary:
    """Keeps the count and the first/last `keep` primes of a stream."""

    def __init__(self, keep: int = SUMMARY_SIZE):
        self.keep = keep
        self.first: List[int] = []
        self.last = deque(maxlen=keep)
        self.seen = 0
        self.count = 0

    def add(self, prime: int) -> None:
        if self.seen < self.keep:
            self.first.append(prime)
        self.last.append(prime)
        self.seen += 1

    def finish(self, count: int) -> None:
        self.count = count

    def format(self) -> str:
        lines = [
            f"Total count: {self.count:,}",
            "",
            f"First {len(self.first)} primes:",
            ", ".join(map(str, self.first)),
            "",
            f"Last {len(self.last)} primes:",
            ", ".join(map(str, self.last)),
        ]
        return "\n".join(lines)


class TeeSink:
    def __init__(self, *sinks):
        self.sinks = sinks

    def add(self, prime: int) -> None:
        for sink in self.sinks:
            sink.add(prime)

    def finish(self, count: int) -> None:
        for sink in self.sinks:
            sink.finish(count)
