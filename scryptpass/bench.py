"""
bench.py - Measure hashing and verification cost.

Responsibilities:
- Time hash_secret for a list of cost strings
- Time Password.equals against one stored record
- Return results in structured dicts for printing/reporting
"""

from __future__ import annotations

import statistics
import time
from typing import Any, Dict, List, Optional

from . import engine as _engine
from .engine import Engine
from .password import Password


def _time_ms(fn, rounds: int) -> float:
    timings = []
    for _ in range(rounds):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        timings.append((t1 - t0) * 1000.0)
    return float(statistics.median(timings))


def bench_hash_costs(
    secret: str,
    costs: List[str],
    rounds: int = 5,
    engine: Optional[Engine] = None,
) -> List[Dict[str, Any]]:
    """Median hash_secret time for each cost string, with its memory use."""
    engine = engine or _engine.default_engine
    results: List[Dict[str, Any]] = []
    for cost in costs:
        salt = engine.generate_salt(cost=cost)
        ms = _time_ms(lambda: engine.hash_secret(secret, salt), rounds)
        results.append(
            {
                "metric": "hash_median_ms",
                "cost": cost,
                "memory_bytes": engine.memory_use(cost),
                "rounds": rounds,
                "value": ms,
            }
        )
    return results


def bench_verify(
    password: Password,
    secret: str,
    rounds: int = 5,
    engine: Optional[Engine] = None,
) -> Dict[str, Any]:
    """Median Password.equals time for one stored record."""
    ms = _time_ms(lambda: password.equals(secret, engine=engine), rounds)
    return {"metric": "verify_median_ms", "cost": password.cost, "rounds": rounds, "value": ms}
