"""
app.py - CLI entrypoint

Commands list:
- calibrate: pick a cost for a time/memory budget
- hash: hash a secret into a new record
- verify: check a secret against a stored record
- memory-use: bytes scrypt needs for a cost string
- bench: run timing experiments (hash per cost + verify)
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from . import bench
from . import engine
from .errors import ScryptError
from .password import Password


def configure_logging(level_name: str) -> None:
    """Configure root logger according to settings."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def _prompt_secret(prompt: str = "Secret: ") -> str:
    return getpass.getpass(prompt)


def cmd_calibrate(args: argparse.Namespace) -> int:
    cost = engine.calibrate(
        max_mem=args.max_mem,
        max_memfrac=args.max_memfrac,
        max_time=args.max_time,
    )
    print(f"cost={cost} memory_bytes={engine.memory_use(cost)}")
    return 0


def cmd_hash(args: argparse.Namespace) -> int:
    secret = _prompt_secret()
    password = Password.create(
        secret,
        key_len=args.key_len,
        salt_size=args.salt_size,
        max_mem=args.max_mem,
        max_memfrac=args.max_memfrac,
        max_time=args.max_time,
        cost=args.cost,
    )
    print(password)
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    password = Password.from_stored(args.hash)
    secret = _prompt_secret()

    if password.equals(secret):
        print("OK: secret matches")
        return 0
    print("FAIL: secret does not match")
    return 1


def cmd_memory_use(args: argparse.Namespace) -> int:
    print(engine.memory_use(args.cost))
    return 0


def cmd_bench(args: argparse.Namespace) -> int:
    secret = args.secret if args.secret else "1234"
    hash_results = bench.bench_hash_costs(secret, args.costs, rounds=args.rounds)
    password = Password.create(secret, cost=args.costs[0])
    verify_result = bench.bench_verify(password, secret, rounds=args.rounds)

    print("== HASH BENCH ==")
    for r in hash_results:
        print(r)
    print("\n== VERIFY BENCH ==")
    print(verify_result)
    return 0


def _cost_list(text: str) -> List[str]:
    costs = [c.strip() for c in text.split(",") if c.strip()]
    if not costs:
        raise argparse.ArgumentTypeError("at least one cost string is required")
    return costs


def _add_budget_args(s: argparse.ArgumentParser) -> None:
    s.add_argument("--max-mem", type=int, default=engine.DEFAULT_MAX_MEM, help="Memory ceiling in bytes (0 = none)")
    s.add_argument("--max-memfrac", type=float, default=engine.DEFAULT_MAX_MEMFRAC, help="Share of physical memory")
    s.add_argument("--max-time", type=float, default=engine.DEFAULT_MAX_TIME, help="Seconds per derivation")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="scryptpass")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("calibrate", help="Pick a cost for a time/memory budget")
    _add_budget_args(s)
    s.set_defaults(func=cmd_calibrate)

    s = sub.add_parser("hash", help="Hash a secret read from the terminal")
    _add_budget_args(s)
    s.add_argument("--key-len", type=int, default=engine.DEFAULT_KEY_LEN, help="Digest size in bytes (16-512)")
    s.add_argument("--salt-size", type=int, default=engine.DEFAULT_SALT_SIZE, help="Salt size in bytes (8-32)")
    s.add_argument("--cost", default=None, help="Use this cost string instead of calibrating")
    s.set_defaults(func=cmd_hash)

    s = sub.add_parser("verify", help="Check a secret against a stored hash")
    s.add_argument("hash")
    s.set_defaults(func=cmd_verify)

    s = sub.add_parser("memory-use", help="Bytes needed for a cost string")
    s.add_argument("cost")
    s.set_defaults(func=cmd_memory_use)

    s = sub.add_parser("bench", help="Run benchmarks")
    s.add_argument("--rounds", type=int, default=5)
    s.add_argument(
        "--costs",
        type=_cost_list,
        default="4000$8$1$,8000$8$1$,10000$8$1$",
        help="Comma-separated cost strings",
    )
    s.add_argument("--secret", default="", help="Optional fixed secret for bench (default uses '1234')")
    s.set_defaults(func=cmd_bench)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except ScryptError as exc:
        print(f"FAIL: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
