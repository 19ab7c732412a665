"""
scryptpass - scrypt password hashes stored as self-describing strings.
"""

from .cost import CostParameters
from .engine import CostCache, Engine, default_engine
from .errors import (
    ArgumentError,
    CalibrationError,
    DerivationError,
    InvalidCost,
    InvalidHash,
    InvalidSalt,
    InvalidSecret,
    ScryptError,
)
from .password import Password
from .security_utils import secure_compare


__all__ = [
    "ArgumentError",
    "CalibrationError",
    "CostCache",
    "CostParameters",
    "DerivationError",
    "Engine",
    "InvalidCost",
    "InvalidHash",
    "InvalidSalt",
    "InvalidSecret",
    "Password",
    "ScryptError",
    "default_engine",
    "secure_compare",
]
