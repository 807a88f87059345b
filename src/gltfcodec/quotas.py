"""Allocation quotas for untrusted input.

Every size taken from the input (chunk length, buffer byteLength, buffer
count) is checked here before anything is allocated for it. A bound of ``0``
authorizes nothing; ``UNLIMITED`` (``None``) is the explicit way to lift a
bound.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_MAX_BUFFER_COUNT, DEFAULT_MAX_SINGLE_ALLOCATION
from .errors import E_QUOTA_ALLOCATION, E_QUOTA_BUFFER_COUNT, QuotaExceeded

__all__ = ["UNLIMITED", "ReadQuotas", "QuotaEnforcer"]

UNLIMITED = None


def _check_bound(name: str, value: Optional[int]) -> None:
    if value is UNLIMITED:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(
            f"{name} must be a non-negative integer or UNLIMITED, got {value!r}"
        )


@dataclass(frozen=True, slots=True)
class ReadQuotas:
    max_single_allocation: Optional[int] = DEFAULT_MAX_SINGLE_ALLOCATION
    max_buffer_count: Optional[int] = DEFAULT_MAX_BUFFER_COUNT

    def __post_init__(self) -> None:
        _check_bound("max_single_allocation", self.max_single_allocation)
        _check_bound("max_buffer_count", self.max_buffer_count)

    @classmethod
    def unlimited(cls) -> "ReadQuotas":
        return cls(max_single_allocation=UNLIMITED, max_buffer_count=UNLIMITED)


@dataclass(frozen=True, slots=True)
class QuotaEnforcer:
    quotas: ReadQuotas = ReadQuotas()

    def check_allocation(self, size: int, what: str) -> int:
        """Fail unless ``size`` bytes may be allocated for ``what``."""
        limit = self.quotas.max_single_allocation
        if size < 0 or (limit is not UNLIMITED and size > limit):
            raise QuotaExceeded(
                code=E_QUOTA_ALLOCATION,
                message=f"{what}: allocation of {size} bytes exceeds quota {limit}",
                context={"what": what, "requested": size, "limit": limit},
            )
        return size

    def check_buffer_count(self, count: int) -> int:
        limit = self.quotas.max_buffer_count
        if limit is not UNLIMITED and count > limit:
            raise QuotaExceeded(
                code=E_QUOTA_BUFFER_COUNT,
                message=f"document declares {count} buffers, quota is {limit}",
                context={"requested": count, "limit": limit},
            )
        return count
