"""
engine.py - Salt generation, hashing and calibration.

Responsibilities:
- Turn secrets into bytes (str, bytes, bool, numbers, enum members, __bytes__)
- Resolve the cost for a new salt: explicit cost, then the cached cost, then a
  fresh calibration
- Hash a secret under a salt string
- Hold the remembered cost in a CostCache

Design notes:
- The default engine shares one process-wide CostCache. Build an Engine with
  its own CostCache (or CostCalibrator) to keep state separate, e.g. in tests.
- Calls here are CPU and memory bound and hold the calling thread for about
  max_time seconds. Async callers should run them in a worker thread.
"""

from __future__ import annotations

import enum
import logging
import numbers
import threading
from typing import Any, Optional, Union

from . import kdf
from .calibrate import CostCalibrator
from .cost import CostParameters, decode_cost, encode_cost, valid_cost
from .cost import memory_use as _memory_use
from .errors import ArgumentError, InvalidCost, InvalidSalt, InvalidSecret
from .hash_codec import (
    LegacySalt,
    build_record,
    compute_digest,
    generate_salt_string,
    parse_salt_string,
)

logger = logging.getLogger(__name__)


DEFAULT_KEY_LEN = 32
DEFAULT_SALT_SIZE = 32
DEFAULT_MAX_MEM = 16 * 1024 * 1024
DEFAULT_MAX_MEMFRAC = 0.5
DEFAULT_MAX_TIME = 0.2

CostLike = Union[CostParameters, str]


def secret_to_bytes(secret: Any) -> bytes:
    """
    Convert a secret to the bytes that get hashed.

    None hashes as the empty string and booleans as "true"/"false", so records
    made from those values keep verifying. Raises InvalidSecret for anything
    without a defined conversion.
    """
    if secret is None:
        return b""
    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    if isinstance(secret, bool):
        return b"true" if secret else b"false"
    if isinstance(secret, enum.Enum):
        return secret.name.encode("utf-8")
    if isinstance(secret, numbers.Number):
        return str(secret).encode("utf-8")
    if hasattr(type(secret), "__bytes__"):
        return bytes(secret)
    raise InvalidSecret("invalid secret")


def valid_secret(secret: Any) -> bool:
    try:
        secret_to_bytes(secret)
    except InvalidSecret:
        return False
    return True


def valid_salt(salt: str) -> bool:
    try:
        parse_salt_string(salt)
    except InvalidSalt:
        return False
    return True


def memory_use(cost: CostLike) -> int:
    return _memory_use(cost)


class CostCache:
    """
    Holds the cost string remembered by calibrate_and_remember.

    Reads and writes take a lock; the last writer wins.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cost: Optional[str] = None

    def get(self) -> Optional[str]:
        with self._lock:
            return self._cost

    def set(self, cost: str) -> None:
        with self._lock:
            self._cost = cost

    def reset(self) -> None:
        with self._lock:
            self._cost = None


class Engine:
    def __init__(
        self,
        cost_cache: Optional[CostCache] = None,
        calibrator: Optional[CostCalibrator] = None,
    ) -> None:
        self.cost_cache = cost_cache if cost_cache is not None else CostCache()
        self.calibrator = calibrator if calibrator is not None else CostCalibrator()

    valid_cost = staticmethod(valid_cost)
    valid_salt = staticmethod(valid_salt)
    valid_secret = staticmethod(valid_secret)
    memory_use = staticmethod(memory_use)

    @property
    def cached_cost(self) -> Optional[str]:
        return self.cost_cache.get()

    def hash_secret(self, secret: Any, salt: str, key_len: int = DEFAULT_KEY_LEN) -> str:
        """
        Hash secret under salt (see generate_salt) and return the record.

        key_len is the digest size in bytes for modern salts; legacy salts
        always produce a 20-byte digest.
        """
        data = secret_to_bytes(secret)
        parsed = parse_salt_string(salt)
        if key_len <= 0:
            raise ArgumentError("key_len must be positive")

        if isinstance(parsed, LegacySalt):
            logger.debug("hashing with legacy salt shape")
        return build_record(parsed, compute_digest(data, parsed, key_len))

    def generate_salt(
        self,
        salt_size: int = DEFAULT_SALT_SIZE,
        max_mem: int = DEFAULT_MAX_MEM,
        max_memfrac: float = DEFAULT_MAX_MEMFRAC,
        max_time: float = DEFAULT_MAX_TIME,
        cost: Optional[CostLike] = None,
    ) -> str:
        """Return a new random salt string. Uses the cached cost if one is set."""
        if cost is not None:
            cost_string = self._cost_string(cost)
        else:
            cost_string = self.cost_cache.get() or self.calibrate(max_mem, max_memfrac, max_time)
        return generate_salt_string(salt_size, decode_cost(cost_string))

    def calibrate(
        self,
        max_mem: int = DEFAULT_MAX_MEM,
        max_memfrac: float = DEFAULT_MAX_MEMFRAC,
        max_time: float = DEFAULT_MAX_TIME,
    ) -> str:
        """
        Return the cost string for derivations within the given limits.

        Example:

            # should take less than 200ms
            engine.calibrate(max_time=0.2)
        """
        return encode_cost(self.calibrator.calibrate(max_mem, max_memfrac, max_time))

    def calibrate_and_remember(
        self,
        max_mem: int = DEFAULT_MAX_MEM,
        max_memfrac: float = DEFAULT_MAX_MEMFRAC,
        max_time: float = DEFAULT_MAX_TIME,
    ) -> str:
        """Calibrate and keep the cost for later generate_salt calls."""
        cost = self.calibrate(max_mem, max_memfrac, max_time)
        self.cost_cache.set(cost)
        logger.debug("remembered cost %s", cost)
        return cost

    def reset_cached_cost(self) -> None:
        self.cost_cache.reset()

    def scrypt(self, secret: Any, salt: Any, n: int, r: int, p: int, key_len: int) -> bytes:
        """Raw scrypt over secret and salt (both converted like secrets)."""
        data = None if secret is None else secret_to_bytes(secret)
        salt_bytes = None if salt is None else secret_to_bytes(salt)
        return kdf.derive(data, salt_bytes, n, r, p, key_len)

    @staticmethod
    def _cost_string(cost: CostLike) -> str:
        if isinstance(cost, CostParameters):
            return encode_cost(cost)
        if not valid_cost(cost):
            raise InvalidCost("invalid cost")
        return cost


default_cost_cache = CostCache()
default_engine = Engine(default_cost_cache)

hash_secret = default_engine.hash_secret
generate_salt = default_engine.generate_salt
calibrate = default_engine.calibrate
calibrate_and_remember = default_engine.calibrate_and_remember
reset_cached_cost = default_engine.reset_cached_cost
