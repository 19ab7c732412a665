"""
kdf.py - Boundary to the scrypt KDF and the other primitives we do not own.

Responsibilities:
- Run scrypt through the cryptography package (memory-hard KDF)
- Draw salt bytes from the OS random source
- Compute the SHA-1 digest used by legacy records

Design notes:
- All numeric checks happen here before cryptography is called, so a bad
  parameter is an ArgumentError and only a real KDF failure (N not a power of
  two, out of memory) becomes a DerivationError.
"""

from __future__ import annotations

import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .errors import ArgumentError, DerivationError


def derive(secret: bytes, salt: bytes, n: int, r: int, p: int, key_len: int) -> bytes:
    """Derive key_len bytes from secret and salt with scrypt(N, r, p)."""
    if secret is None:
        raise ArgumentError("secret cannot be None")
    if salt is None:
        raise ArgumentError("salt cannot be None")
    if key_len <= 0:
        raise ArgumentError("key_len must be positive")
    if n <= 0:
        raise ArgumentError("cpu_cost must be positive")
    if r <= 0:
        raise ArgumentError("memory_cost must be positive")
    if p <= 0:
        raise ArgumentError("parallelization must be positive")

    try:
        kdf = Scrypt(
            salt=bytes(salt),
            length=key_len,
            n=n,
            r=r,
            p=p,
        )
        return kdf.derive(bytes(secret))
    except (ValueError, OverflowError, MemoryError, UnsupportedAlgorithm) as exc:
        raise DerivationError(f"scrypt error: {exc}") from exc


def random_bytes(size: int) -> bytes:
    """Return size bytes from the OS CSPRNG."""
    return os.urandom(size)


def legacy_digest(data: bytes) -> bytes:
    """SHA-1 over data; only legacy records use this."""
    h = hashes.Hash(hashes.SHA1())
    h.update(data)
    return h.finalize()
