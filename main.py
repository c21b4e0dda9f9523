from __future__ import annotations
import argparse
import json
import logging
import sys
from getpass import getpass

from passhash import HashConfig, PassHashError, PasswordHasher, SUPPORTED_DIGESTS


def build_config(args: argparse.Namespace) -> HashConfig:
    overrides = {
        "default_iterations": args.iterations,
        "salt_size": args.salt_size,
        "key_length": args.key_length,
        "max_secret_length": args.max_secret_length,
    }
    return HashConfig(digest=args.digest, **{k: v for k, v in overrides.items() if v is not None})


def parse_weak_value(text: str):
    try:
        return json.loads(text)
    except ValueError:
        return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passhash",
        description="passhash - salted PBKDF2 password hashing with self-describing salts.",
    )
    parser.add_argument("--iterations", type=int, help="Default (minimum) iteration count")
    parser.add_argument("--digest", default=HashConfig.digest, choices=sorted(SUPPORTED_DIGESTS), help="PBKDF2 digest")
    parser.add_argument("--salt-size", type=int, help="Random salt bytes")
    parser.add_argument("--key-length", type=int, help="Derived key bytes")
    parser.add_argument("--max-secret-length", type=int, help="Reject secrets longer than this (UTF-8 bytes)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    salt = sub.add_parser("salt", help="Generate a new opaque salt")
    salt.add_argument("--explicit-iterations", type=int, help="Iterations to embed (>= default)")

    hsh = sub.add_parser("hash", help="Hash a secret read from the terminal")
    hsh.add_argument("--salt", help="Existing salt (default: generate one)")

    ver = sub.add_parser("verify", help="Check a secret against a stored hash")
    ver.add_argument("salt", help="Salt stored with the hash")
    ver.add_argument("hash", help="Stored hash")

    weak = sub.add_parser("weak", help="Fast non-secret fingerprint of a JSON value")
    weak.add_argument("value", help="JSON value (plain text if it does not parse)")

    cal = sub.add_parser("calibrate", help="Find the iteration count for a target hashing time")
    cal.add_argument("--target-ms", type=float, default=1000.0, help="Target duration in milliseconds")
    cal.add_argument("--tolerance", type=float, default=0.1, help="Accepted relative deviation")
    cal.add_argument("--max-attempts", type=int, default=32, help="Give up after this many probes")
    cal.add_argument("--timeout", type=float, help="Give up after this many seconds")
    return parser


def run(args: argparse.Namespace, hasher: PasswordHasher) -> int:
    if args.cmd == "salt":
        print(hasher.generate_salt(args.explicit_iterations))
        return 0

    if args.cmd == "weak":
        print(hasher.weak_hash(parse_weak_value(args.value)))
        return 0

    if args.cmd == "calibrate":
        iterations = hasher.find_optimal_iterations(
            args.target_ms, args.tolerance, max_attempts=args.max_attempts, timeout=args.timeout
        )
        print(iterations)
        return 0

    secret = getpass("Secret: ")
    if args.cmd == "hash":
        if args.salt is None and getpass("Confirm secret: ") != secret:
            print("Error: secrets do not match.", file=sys.stderr)
            return 2
        hashed, salt = hasher.hash(secret, args.salt)
        print(f"hash: {hashed}")
        print(f"salt: {salt}")
        return 0

    if hasher.verify(args.salt, args.hash, secret):
        print("OK")
        return 0
    print("Mismatch")
    return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING - 10 * min(args.verbose, 2),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        hasher = PasswordHasher(build_config(args))
        return run(args, hasher)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except PassHashError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
