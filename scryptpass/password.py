"""
password.py - Stored password hashes as values.

Example:

    # hash a user's password
    password = Password.create("my grand secret")
    str(password)  # "4000$8$4$3c5b...$a1f0..."

    # store str(password), read it back later
    password = Password.from_stored(user.password_hash)

    password.equals("my grand secret")  # True
    password.equals("a paltry guess")   # False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from . import engine as _engine
from .engine import CostLike, Engine
from .hash_codec import HashRecord, parse_record
from .security_utils import secure_compare


MIN_KEY_LEN = 16
MAX_KEY_LEN = 512
MIN_SALT_SIZE = 8
MAX_SALT_SIZE = 32


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Password:
    """An immutable, validated hash record."""

    raw: str
    record: HashRecord

    @classmethod
    def create(
        cls,
        secret: Any,
        key_len: int = _engine.DEFAULT_KEY_LEN,
        salt_size: int = _engine.DEFAULT_SALT_SIZE,
        max_mem: int = _engine.DEFAULT_MAX_MEM,
        max_memfrac: float = _engine.DEFAULT_MAX_MEMFRAC,
        max_time: float = _engine.DEFAULT_MAX_TIME,
        cost: Optional[CostLike] = None,
        engine: Optional[Engine] = None,
    ) -> "Password":
        """
        Hash secret into a new Password.

        key_len is clamped to 16..512 bytes and salt_size to 8..32 bytes;
        values outside those ranges are adjusted, never rejected. The cost
        comes from cost, the engine's cached cost, or a calibration against
        max_mem / max_memfrac / max_time, in that order.
        """
        engine = engine or _engine.default_engine
        key_len = _clamp(key_len, MIN_KEY_LEN, MAX_KEY_LEN)
        salt_size = _clamp(salt_size, MIN_SALT_SIZE, MAX_SALT_SIZE)

        salt = engine.generate_salt(
            salt_size=salt_size,
            max_mem=max_mem,
            max_memfrac=max_memfrac,
            max_time=max_time,
            cost=cost,
        )
        return cls.from_stored(engine.hash_secret(secret, salt, key_len))

    @classmethod
    def from_stored(cls, raw: str) -> "Password":
        """Load a stored hash. Raises InvalidHash if raw is not a hash record."""
        return cls(raw=raw, record=parse_record(raw))

    @property
    def cost(self) -> str:
        return self.record.salt.cost_string

    @property
    def salt(self) -> str:
        return self.record.salt.salt

    @property
    def digest(self) -> str:
        return self.record.digest

    @property
    def legacy(self) -> bool:
        return self.record.legacy

    def equals(self, secret: Any, engine: Optional[Engine] = None) -> bool:
        """Return True if secret is the secret this hash was made from."""
        engine = engine or _engine.default_engine
        candidate = engine.hash_secret(secret, self.cost + self.salt, len(self.digest) // 2)
        return secure_compare(self.raw, candidate)

    is_password = equals

    def __str__(self) -> str:
        return self.raw
