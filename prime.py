#!/usr/bin/env python3
import argparse


def sieve_of_eratosthenes(limit):
    """Use the Sieve of Eratosthenes algorithm to find all prime numbers below 'limit'."""
    if limit < 3:
        return []
    # One flag per number in [0, limit)
    is_prime = bytearray(b"\x01") * limit
    is_prime[0:2] = b"\x00\x00"
    p = 2

    while p * p < limit:
        if is_prime[p]:
            is_prime[p * p :: p] = bytes(len(range(p * p, limit, p)))
        p += 1

    return [n for n, flag in enumerate(is_prime) if flag]


def main():
    ap = argparse.ArgumentParser(description="Non-segmented Sieve of Eratosthenes, O(N) memory.")
    ap.add_argument("limit", type=int, help="Find all primes < LIMIT.")
    args = ap.parse_args()

    print(f"Calculating all prime numbers below {args.limit:,}...")
    primes = sieve_of_eratosthenes(args.limit)

    print(f"Found {len(primes):,} prime numbers.")
    print(f"The first 100 primes are: {primes[:100]}")
    print(f"The last 100 primes are: {primes[-100:]}")


if __name__ == "__main__":
    main()
