#!/usr/bin/env python3
"""
Token bucket rate limiter for Google APIs.

Each limiter holds one or more named buckets (for example "read" and "write"
for the Sheets API). A limiter with a single bucket serves every operation
from it, whatever name the caller passes.
"""

from __future__ import annotations
import logging
import threading
import time
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class TokenBucket:
    """
    Thread-safe token bucket rate limiter.

    Rates are expressed in tokens per minute. Buckets start full and refill
    continuously up to their capacity, which defaults to the rate.
    """

    def __init__(
        self,
        rates: Mapping[str, float],
        capacities: Optional[Mapping[str, float]] = None,
    ):
        if not rates:
            raise ValueError("At least one bucket rate is required")
        capacities = capacities or {}
        self.rates: Dict[str, float] = dict(rates)
        self.capacities: Dict[str, float] = {
            name: capacities.get(name, rate) for name, rate in self.rates.items()
        }
        self.tokens: Dict[str, float] = dict(self.capacities)
        now = time.monotonic()
        self.last_refill: Dict[str, float] = {name: now for name in self.rates}
        self.lock = threading.Lock()

    @property
    def single_bucket_mode(self) -> bool:
        return len(self.rates) == 1

    def _bucket_name(self, operation_type: str) -> str:
        if self.single_bucket_mode:
            return next(iter(self.rates))
        if operation_type not in self.rates:
            raise ValueError(
                f"operation_type must be one of {sorted(self.rates)}, got '{operation_type}'"
            )
        return operation_type

    def acquire(self, operation_type: str = "read") -> None:
        """
        Take one token from the bucket serving ``operation_type``.

        Blocks until a token is available.
        """
        with self.lock:
            name = self._bucket_name(operation_type)
            self._refill(name)

            if self.tokens[name] < 1:
                wait_time = (1.0 - self.tokens[name]) / (self.rates[name] / 60.0)
                logger.debug(
                    f"[TokenBucket] Rate limit - waiting {wait_time:.2f}s for {name} token"
                )
                time.sleep(wait_time)
                self._refill(name)
                logger.debug(f"[TokenBucket] Rate limit - {name} token acquired, proceeding")

            self.tokens[name] -= 1

    def _refill(self, name: str) -> None:
        """Refill one bucket based on elapsed time. Called with the lock held."""
        now = time.monotonic()
        elapsed_minutes = (now - self.last_refill[name]) / 60.0
        self.tokens[name] = min(
            self.capacities[name], self.tokens[name] + elapsed_minutes * self.rates[name]
        )
        self.last_refill[name] = now
