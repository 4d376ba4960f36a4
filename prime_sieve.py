#!/usr/bin/env python3
"""
Write all primes below a bound to a text file.

Examples:
  # primes below one million into primes.txt, asking before overwriting
  python prime_sieve.py primes.txt 1000000

  # to stdout, with the first/last 100 primes echoed at the end
  python prime_sieve.py --summary - 10000000
"""

import argparse
import os
import sys
import tempfile

import prime
from prime_output import PrimeFileWriter, PrimeSummary, TeeSink
from prime_segmented import MAX_BOUND, BoundOutOfRangeError, SieveError, sieve

EXIT_DECLINED = 1
EXIT_BAD_INPUT = 2
EXIT_MISMATCH = 3
EXIT_FAILED = 4


class BoundParseError(SieveError, ValueError):
    pass


def parse_bound(text: str) -> int:
    """Parse a string of decimal digits into a bound in [0, MAX_BOUND]."""
    if not text:
        raise BoundParseError("empty number")
    for ch in text:
        if ch not in "0123456789":
            raise BoundParseError(f"invalid digit {ch!r} in {text!r}")
    n = int(text)
    if n > MAX_BOUND:
        raise BoundOutOfRangeError(f"{text} is larger than {MAX_BOUND}")
    return n


def confirm_overwrite(path: str) -> bool:
    print(f"Warning! The file, {path}, already exists.")
    try:
        answer = input("Overwrite [y/N]? ")
    except EOFError:
        return False
    return answer[:1] in ("y", "Y")


def run(outfile: str, bound: int, summary: bool) -> int:
    """Sieve into `outfile` ("-" for stdout) and return the prime count."""
    sinks = []
    report = PrimeSummary() if summary else None
    if report is not None:
        sinks.append(report)

    if outfile == "-":
        total = sieve(bound, TeeSink(PrimeFileWriter(sys.stdout, bound), *sinks))
        # the report footer has no trailing newline
        print()
    else:
        # an existing file is only replaced once the report is complete
        directory = os.path.dirname(os.path.abspath(outfile))
        with tempfile.NamedTemporaryFile(
            "w", dir=directory, prefix=".primes-", suffix=".tmp", delete=False
        ) as fh:
            try:
                total = sieve(bound, TeeSink(PrimeFileWriter(fh, bound), *sinks))
            except BaseException:
                fh.close()
                os.unlink(fh.name)
                raise
        os.chmod(fh.name, 0o644)
        os.replace(fh.name, outfile)
    if report is not None:
        print(report.format())
    return total


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Segmented Sieve of Eratosthenes, primes written to a file.")
    ap.add_argument("outfile", help="Output file, or - for stdout.")
    ap.add_argument("number", help="Find all primes < NUMBER (decimal digits only).")
    ap.add_argument("-y", "--yes", action="store_true", help="Overwrite OUTFILE without asking.")
    ap.add_argument("-q", "--quiet", action="store_true", help="No status lines.")
    ap.add_argument("--summary", action="store_true",
                    help="Print the count and the first/last 100 primes when done.")
    ap.add_argument("--verify", action="store_true",
                    help="Cross-check the count with a non-segmented sieve (O(N) memory).")
    args = ap.parse_args(argv)
    prog = ap.prog

    try:
        bound = parse_bound(args.number)
    except SieveError as exc:
        print(f"{prog}: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
    if bound < 1:
        print("You must enter a positive integer.", file=sys.stderr)
        return EXIT_BAD_INPUT

    to_stdout = args.outfile == "-"
    if not to_stdout and os.path.isdir(args.outfile):
        print(f"{prog}: {args.outfile} is a directory", file=sys.stderr)
        return EXIT_FAILED
    if not to_stdout and not args.yes and os.path.exists(args.outfile):
        if not confirm_overwrite(args.outfile):
            return EXIT_DECLINED

    # status lines would interleave with the report on stdout
    verbose = not (args.quiet or to_stdout)
    if verbose:
        print("Please wait...")
    try:
        total = run(args.outfile, bound, args.summary)
    except (SieveError, OSError) as exc:
        print(f"{prog}: {exc}", file=sys.stderr)
        return EXIT_FAILED
    if verbose:
        print("Done")

    if args.verify:
        expected = len(prime.sieve_of_eratosthenes(bound))
        if expected != total:
            print(f"{prog}: mismatch, segmented sieve found {total:,} primes, "
                  f"reference found {expected:,}", file=sys.stderr)
            return EXIT_MISMATCH
        if verbose:
            print(f"Verified: {total:,} primes below {bound:,}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
