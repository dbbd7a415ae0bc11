"""Configuration model for Wigner d-function tables."""

from __future__ import annotations

import math
import os
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type, TypeVar, Union

import numpy as np

_E = TypeVar("_E", bound=Enum)

DEFAULT_ANGLE_CHUNK_SIZE = 64


class OrderRange(str, Enum):
    """Which orders m are stored at each degree."""

    FULL = "full"
    NON_NEGATIVE = "non_negative"


class UpperIndexRange(str, Enum):
    """Which upper indices n a table holds, relative to ``n_max``."""

    FULL = "full"
    NON_NEGATIVE = "non_negative"
    SINGLE = "single"


class Normalization(str, Enum):
    """Scaling convention applied to the computed values."""

    RAW = "raw"
    ORTHONORMAL = "orthonormal"


def coerce_enum(value: Union[str, Enum], enum_type: Type[_E]) -> _E:
    """Normalise an enum member or its string value to ``enum_type``."""

    if isinstance(value, enum_type):
        return value
    if hasattr(value, "value"):
        normalized = str(getattr(value, "value")).strip().lower()
    else:
        normalized = str(value).strip().lower()
    prefix = enum_type.__name__.lower() + "."
    if normalized.startswith(prefix):
        normalized = normalized.split(".", 1)[1]
    try:
        return enum_type(normalized)
    except ValueError:
        known = ", ".join(member.value for member in enum_type)
        raise ValueError(
            f"Unknown {enum_type.__name__} '{value}'. Known values: {known}"
        ) from None


@dataclass(frozen=True)
class WignerConfig:
    """Shape and conventions of a Wigner d-function table."""

    l_max: int
    m_max: int
    n_max: int
    orders: OrderRange = OrderRange.FULL
    upper_indices: UpperIndexRange = UpperIndexRange.FULL
    normalization: Normalization = Normalization.ORTHONORMAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "orders", coerce_enum(self.orders, OrderRange))
        object.__setattr__(
            self, "upper_indices", coerce_enum(self.upper_indices, UpperIndexRange)
        )
        object.__setattr__(
            self, "normalization", coerce_enum(self.normalization, Normalization)
        )
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` if the degree/order/upper-index bounds are invalid."""

        for name in ("l_max", "m_max", "n_max"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int, got {value!r}")
        if self.l_max < 0:
            raise ValueError("l_max must be >= 0")
        if self.m_max < 0 or self.m_max > self.l_max:
            raise ValueError("m_max must satisfy 0 <= m_max <= l_max")
        if self.n_max < 0:
            raise ValueError("n_max must be >= 0")
        if self.n_max > self.l_max:
            warnings.warn(
                f"n_max={self.n_max} exceeds l_max={self.l_max}; upper indices "
                "with |n| > l_max hold no values",
                UserWarning,
                stacklevel=3,
            )

    @property
    def nonnegative_orders(self) -> bool:
        return self.orders is OrderRange.NON_NEGATIVE

    @property
    def orthonormal(self) -> bool:
        return self.normalization is Normalization.ORTHONORMAL

    def upper_index_values(self) -> tuple[int, ...]:
        """Upper indices held by the table, in storage order."""

        if self.upper_indices is UpperIndexRange.FULL:
            return tuple(range(-self.n_max, self.n_max + 1))
        if self.upper_indices is UpperIndexRange.NON_NEGATIVE:
            return tuple(range(0, self.n_max + 1))
        return (self.n_max,)

    def sqrt_table_size(self) -> int:
        """Entries needed in the square-root table, covering 0..l_max+max(m_max, n_max)."""

        return self.l_max + max(self.m_max, self.n_max) + 1


def _int_env(key: str, default: int) -> int:
    raw = os.environ.get(key, "").strip()
    if raw == "":
        return int(default)
    try:
        out = int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got: {raw!r}") from e
    if out < 1:
        raise ValueError(f"{key} must be >= 1, got: {out}")
    return out


@dataclass(frozen=True)
class ExecutionConfig:
    """How table computation is split into units and dispatched."""

    max_workers: Optional[int] = None
    angle_chunk_size: int = DEFAULT_ANGLE_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.angle_chunk_size < 1:
            raise ValueError("angle_chunk_size must be >= 1")

    def resolved_workers(self) -> int:
        """Worker count, reading ``GSHTRANS_MAX_WORKERS`` when unset."""

        if self.max_workers is not None:
            return int(self.max_workers)
        return _int_env("GSHTRANS_MAX_WORKERS", 1)


def validate_angles(angles: object) -> tuple[float, ...]:
    """Return ``angles`` as a tuple of floats, rejecting non-colatitudes."""

    if np.ndim(angles) > 1:
        raise ValueError(
            f"angles must be a scalar or 1-D sequence, got shape {np.shape(angles)}"
        )
    try:
        values = tuple(float(theta) for theta in angles)  # type: ignore[attr-defined]
    except TypeError:
        values = (float(angles),)  # type: ignore[arg-type]
    if not values:
        raise ValueError("need at least one angle")
    for theta in values:
        if not math.isfinite(theta):
            raise ValueError(f"angles must be finite, got {theta!r}")
        if theta < 0.0 or theta > math.pi:
            raise ValueError(f"angles must lie in [0, pi], got {theta!r}")
    return values


__all__ = [
    "DEFAULT_ANGLE_CHUNK_SIZE",
    "ExecutionConfig",
    "Normalization",
    "OrderRange",
    "UpperIndexRange",
    "WignerConfig",
    "coerce_enum",
    "validate_angles",
]
