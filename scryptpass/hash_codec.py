"""
hash_codec.py - Salt strings, hash records and the digest computation.

Formats:
- salt string: "<cost><salt hex>", e.g. "4000$8$1$9f0c...".
- hash record: "<cost><salt hex>$<digest hex>".

Two record shapes are in circulation:
- Legacy records have a salt field of exactly 40 characters. Their digest is
  SHA-1 over a 256-byte scrypt output, and the whole salt string (cost prefix
  included) was fed to scrypt as the salt.
- Modern records use any other salt length (16-64). The salt field is
  decoded to raw bytes and the digest is the scrypt output itself, so its
  length is chosen by the caller.

Parsing decides the shape once and returns LegacySalt or ModernSalt; nothing
after that looks at string lengths again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from . import kdf
from .cost import COST_PATTERN, CostParameters, decode_cost, encode_cost
from .errors import ArgumentError, InvalidCost, InvalidHash, InvalidSalt


LEGACY_SALT_LENGTH = 40
LEGACY_KEY_LEN = 256
SALT_MIN_LENGTH = 16
MIN_SALT_SIZE = 8
MAX_SALT_SIZE = 32

_SALT_RE = re.compile(r"(" + COST_PATTERN + r")([A-Za-z0-9]{16,64})")
_HASH_RE = re.compile(r"(" + COST_PATTERN + r")([A-Za-z0-9]{16,64})\$([A-Za-z0-9]{32,1024})")
_LEADING_ZERO_PAIRS_RE = re.compile(r"^(00)+")


@dataclass(frozen=True)
class SaltString:
    cost_string: str
    cost: CostParameters
    salt: str

    @property
    def text(self) -> str:
        return self.cost_string + self.salt


class LegacySalt(SaltString):
    """Salt of a legacy record (40-character salt field)."""


class ModernSalt(SaltString):
    """Salt of a modern record."""


AnySalt = Union[LegacySalt, ModernSalt]


@dataclass(frozen=True)
class HashRecord:
    salt: AnySalt
    digest: str

    @property
    def legacy(self) -> bool:
        return isinstance(self.salt, LegacySalt)

    @property
    def text(self) -> str:
        return build_record(self.salt, self.digest)


def _make_salt(cost_string: str, salt_hex: str) -> AnySalt:
    cost = decode_cost(cost_string)
    if len(salt_hex) == LEGACY_SALT_LENGTH:
        return LegacySalt(cost_string=cost_string, cost=cost, salt=salt_hex)
    return ModernSalt(cost_string=cost_string, cost=cost, salt=salt_hex)


def generate_salt_string(salt_size: int, cost: CostParameters) -> str:
    """Draw salt_size random bytes and prefix them with the encoded cost."""
    if not MIN_SALT_SIZE <= salt_size <= MAX_SALT_SIZE:
        raise ArgumentError(f"salt_size must be between {MIN_SALT_SIZE} and {MAX_SALT_SIZE}")

    salt_hex = kdf.random_bytes(salt_size).hex().rjust(SALT_MIN_LENGTH, "0")
    if len(salt_hex) == LEGACY_SALT_LENGTH:
        # A 40-character field would be read back as a legacy record.
        salt_hex = "0" + salt_hex
    return encode_cost(cost) + salt_hex


def parse_salt_string(text: str) -> AnySalt:
    m = _SALT_RE.fullmatch(text) if isinstance(text, str) else None
    if not m:
        raise InvalidSalt("invalid salt")
    try:
        return _make_salt(m.group(1), m.group(2))
    except InvalidCost as exc:
        raise InvalidSalt("invalid salt") from exc


def parse_record(text: str) -> HashRecord:
    m = _HASH_RE.fullmatch(text) if isinstance(text, str) else None
    if not m:
        raise InvalidHash("invalid hash")
    try:
        salt = _make_salt(m.group(1), m.group(2))
    except InvalidCost as exc:
        raise InvalidHash("invalid hash") from exc
    return HashRecord(salt=salt, digest=m.group(3))


def build_record(salt: SaltString, digest: str) -> str:
    return f"{salt.text}${digest}"


def _nibble(ch: str) -> int:
    # Letters beyond f fold onto a nibble the way older records were packed.
    code = ord(ch)
    if ch.isalpha():
        return ((code & 0x0F) + 9) & 0x0F
    return code & 0x0F


def pack_salt(salt_hex: str) -> bytes:
    """
    Turn the salt field into the raw bytes given to scrypt.

    Leading "00" pairs are dropped and an odd trailing nibble is padded with
    a zero nibble.
    """
    stripped = _LEADING_ZERO_PAIRS_RE.sub("", salt_hex)
    nibbles = [_nibble(ch) for ch in stripped]
    if len(nibbles) % 2:
        nibbles.append(0)
    return bytes((hi << 4) | lo for hi, lo in zip(nibbles[0::2], nibbles[1::2]))


def compute_digest(secret: bytes, salt: AnySalt, key_len: int) -> str:
    """Return the digest hex for secret under salt."""
    cost = salt.cost
    if isinstance(salt, LegacySalt):
        derived = kdf.derive(secret, salt.text.encode("ascii"), cost.n, cost.r, cost.p, LEGACY_KEY_LEN)
        return kdf.legacy_digest(derived).hex()

    derived = kdf.derive(secret, pack_salt(salt.salt), cost.n, cost.r, cost.p, key_len)
    return derived.hex().rjust(key_len * 2, "0")
