"""
calibrate.py - Pick scrypt cost parameters for a time and memory budget.

Responsibilities:
- Work out how much memory one derivation may use
- Measure how fast this machine runs scrypt
- Choose N, r, p so one derivation stays inside both limits

The arithmetic follows the reference scrypt utility's parameter picker. Work
is counted in salsa20/8 cores: one derivation costs 4*N*r*p of them and needs
128*N*r bytes for its V array.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

import psutil

from . import kdf
from .cost import CostParameters
from .errors import ArgumentError, CalibrationError, DerivationError

logger = logging.getLogger(__name__)


MIN_MEMORY = 1024 * 1024  # never plan for less than 1 MiB
DEFAULT_MEMFRAC = 0.5
MIN_OPS = 32768  # allow at least 2^15 salsa20/8 cores
MAX_RP = 0x3FFFFFFF
BLOCK_SIZE = 8  # r is fixed

# Probe derivation used to time the CPU.
PROBE_N = 1 << 10
PROBE_SECONDS = 0.05


def _total_memory() -> int:
    return int(psutil.virtual_memory().total)


def _cpu_perf(probe_seconds: float = PROBE_SECONDS) -> float:
    """Return salsa20/8 cores per second measured with small derivations."""
    calls = 0
    start = time.perf_counter()
    elapsed = 0.0
    while elapsed < probe_seconds:
        kdf.derive(b"", b"", PROBE_N, 1, 1, 16)
        calls += 1
        elapsed = time.perf_counter() - start
    return calls * 4 * PROBE_N / elapsed


def _first_log_n(max_n: float) -> int:
    log_n = 1
    while log_n < 63:
        if (1 << log_n) > max_n / 2:
            break
        log_n += 1
    return log_n


class CostCalibrator:
    """
    Chooses cost parameters from a (max_mem, max_memfrac, max_time) budget.

    total_memory and cpu_perf can be swapped out, which keeps tests
    independent of the machine they run on.
    """

    def __init__(
        self,
        total_memory: Optional[Callable[[], int]] = None,
        cpu_perf: Optional[Callable[[], float]] = None,
    ) -> None:
        self._total_memory = total_memory or _total_memory
        self._cpu_perf = cpu_perf or _cpu_perf

    def memory_to_use(self, max_mem: int, max_memfrac: float) -> int:
        if max_memfrac <= 0 or max_memfrac > DEFAULT_MEMFRAC:
            max_memfrac = DEFAULT_MEMFRAC

        try:
            total = self._total_memory()
        except (OSError, psutil.Error) as exc:
            raise CalibrationError(f"calibration error: cannot read system memory ({exc})") from exc

        memavail = int(max_memfrac * total)
        if max_mem > 0 and memavail > max_mem:
            memavail = max_mem
        if memavail < MIN_MEMORY:
            memavail = MIN_MEMORY
        return memavail

    def calibrate(self, max_mem: int, max_memfrac: float, max_time: float) -> CostParameters:
        """
        Return the cost whose derivation fits the limits.

        max_mem is a byte ceiling (0 means none, 1 MiB is always allowed).
        max_memfrac is the share of physical memory to use; 0 or anything
        above 0.5 means 0.5. max_time is the wall-clock budget in seconds.
        """
        if not max_mem >= 0:
            raise ArgumentError("max_mem must be non-negative")
        if not 0 <= max_memfrac <= 1:
            raise ArgumentError("max_memfrac must be between 0 and 1")
        if not 0 < max_time < math.inf:
            raise ArgumentError("max_time must be positive and finite")

        memlimit = self.memory_to_use(max_mem, max_memfrac)

        try:
            opps = self._cpu_perf()
        except DerivationError as exc:
            raise CalibrationError(f"calibration error: {exc}") from exc

        opslimit = max(opps * max_time, MIN_OPS)
        r = BLOCK_SIZE

        if opslimit < memlimit / 32:
            # CPU bound: one lane, N as large as the time allows.
            p = 1
            log_n = _first_log_n(opslimit / (r * 4))
        else:
            # Memory bound: N as large as memory allows, spend the rest of the
            # time on parallel lanes.
            log_n = _first_log_n(memlimit / (r * 128))
            maxrp = (opslimit / 4) / (1 << log_n)
            if maxrp > MAX_RP:
                maxrp = MAX_RP
            p = int(maxrp) // r

        if p < 1:
            raise CalibrationError("calibration error: no parameters fit the limits")

        cost = CostParameters(n=1 << log_n, r=r, p=p)
        logger.debug(
            "calibrated memlimit=%d opslimit=%.0f -> N=%d r=%d p=%d",
            memlimit, opslimit, cost.n, cost.r, cost.p,
        )
        return cost
