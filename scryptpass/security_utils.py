"""
security_utils.py - Constant-time comparison.
"""

from __future__ import annotations

from typing import Union

BytesOrText = Union[bytes, bytearray, str]


def _as_bytes(value: BytesOrText) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def secure_compare(a: BytesOrText, b: BytesOrText) -> bool:
    """
    Compare two byte strings without leaking where they differ.

    The length check returns early; that only reveals the length, which for
    stored hash records is public anyway. Content is compared by OR-ing the XOR
    of every byte pair, so every byte is visited whatever the position of the
    first mismatch.
    """
    left = _as_bytes(a)
    right = _as_bytes(b)
    if len(left) != len(right):
        return False

    mismatch = 0
    for x, y in zip(left, right):
        mismatch |= x ^ y
    return mismatch == 0
