"""
errors.py - Exception types raised by scryptpass.

Every failure means "cannot produce or verify this hash". Callers should treat
any of these as a hard failure of the operation (reject the signup, fail the
login) instead of trying to recover partially.
"""

from __future__ import annotations


class ScryptError(Exception):
    """Base class for all scryptpass errors."""


class InvalidSecret(ScryptError, ValueError):
    """The secret has no byte-string conversion."""


class InvalidSalt(ScryptError, ValueError):
    """The salt string is malformed."""


class InvalidHash(ScryptError, ValueError):
    """The stored hash record is malformed."""


class InvalidCost(ScryptError, ValueError):
    """The cost string is malformed."""


class ArgumentError(ScryptError, ValueError):
    """A numeric input is out of its domain."""


class CalibrationError(ScryptError, RuntimeError):
    """Cost parameters could not be picked for the requested limits."""


class DerivationError(ScryptError, RuntimeError):
    """The scrypt KDF failed (bad parameters or out of memory)."""
