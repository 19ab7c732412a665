"""
cost.py - The scrypt cost parameters and their text form.

A cost string is three lowercase hex fields each followed by "$", for example
"4000$8$1$" for N=16384, r=8, p=1. It is the first part of every salt string
and hash record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidCost


COST_PATTERN = r"[0-9a-f]+\$[0-9a-f]+\$[0-9a-f]+\$"
_COST_RE = re.compile(r"([0-9a-f]+)\$([0-9a-f]+)\$([0-9a-f]+)\$")
_COST_PREFIX_RE = re.compile(COST_PATTERN)

MAX_N = 2 ** 64 - 1
MAX_RP = 2 ** 32 - 1


@dataclass(frozen=True)
class CostParameters:
    """scrypt work factors: n (CPU cost), r (block size), p (parallelization)."""

    n: int
    r: int
    p: int


def encode_cost(cost: CostParameters) -> str:
    """Format cost as "n$r$p$" in lowercase hex."""
    return f"{cost.n:x}${cost.r:x}${cost.p:x}$"


def decode_cost(text: str) -> CostParameters:
    """
    Parse a cost string.

    Raises InvalidCost if malformed, if any field is zero, or if N does not
    fit in 64 bits or r, p in 32 bits.
    """
    m = _COST_RE.fullmatch(text) if isinstance(text, str) else None
    if not m:
        raise InvalidCost("invalid cost")
    n, r, p = (int(field, 16) for field in m.groups())
    if n == 0 or r == 0 or p == 0:
        raise InvalidCost("invalid cost")
    if n > MAX_N or r > MAX_RP or p > MAX_RP:
        raise InvalidCost("invalid cost")
    return CostParameters(n=n, r=r, p=p)


def valid_cost(text: str) -> bool:
    try:
        decode_cost(text)
    except InvalidCost:
        return False
    return True


def autodetect_cost(text: str) -> Optional[str]:
    """Return the leading cost string of a salt string or hash record, if any."""
    m = _COST_PREFIX_RE.match(text)
    return m.group(0) if m else None


def memory_use(cost: Union[CostParameters, str]) -> int:
    """
    Bytes scrypt allocates for cost.

    Same accounting as the reference scrypt: B (128*r*p), XY (256*r) and
    V (128*r*N).
    """
    if isinstance(cost, str):
        cost = decode_cost(cost)
    return (128 * cost.r * cost.p) + (256 * cost.r) + (128 * cost.r * cost.n)
