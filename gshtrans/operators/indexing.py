"""Triangular (l, m) storage layout for one upper index.

Degrees run from ``|n|`` to ``l_max`` and each degree stores the orders
``-min(l, m_max)..min(l, m_max)`` (or ``0..min(l, m_max)``), contiguous and
ascending. Degree offsets come from closed-form prefix counts: the number of
stored orders grows quadratically in ``l`` while ``l <= m_max`` and linearly
once the order window is clipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from ..config import OrderRange, coerce_enum


def _cumulative_count(l: int, m_max: int, nonnegative: bool) -> int:
    """Stored pairs for degrees 0..l with no lower degree cut (0 for l < 0)."""

    if l < 0:
        return 0
    if nonnegative:
        if l <= m_max:
            return ((l + 1) * (l + 2)) // 2
        return ((m_max + 1) * (m_max + 2)) // 2 + (l - m_max) * (m_max + 1)
    if l <= m_max:
        return (l + 1) * (l + 1)
    return (m_max + 1) * (m_max + 1) + (l - m_max) * (2 * m_max + 1)


def triangular_size(
    l_max: int,
    m_max: int,
    n: int,
    *,
    orders: OrderRange | str = OrderRange.FULL,
) -> int:
    """Number of stored (l, m) pairs for degrees ``|n|..l_max``."""

    return TriangularIndex(l_max, m_max, n, coerce_enum(orders, OrderRange)).size


@dataclass(frozen=True)
class TriangularIndex:
    """Bidirectional map between (l, m) and a flat offset for upper index ``n``."""

    l_max: int
    m_max: int
    n: int
    orders: OrderRange = OrderRange.FULL

    def __post_init__(self) -> None:
        object.__setattr__(self, "orders", coerce_enum(self.orders, OrderRange))
        if self.l_max < 0:
            raise ValueError("l_max must be >= 0")
        if self.m_max < 0 or self.m_max > self.l_max:
            raise ValueError("m_max must satisfy 0 <= m_max <= l_max")

    @property
    def nonnegative_orders(self) -> bool:
        return self.orders is OrderRange.NON_NEGATIVE

    @property
    def min_degree(self) -> int:
        return abs(self.n)

    @property
    def size(self) -> int:
        """Total stored pairs; zero when ``|n| > l_max``."""
        if self.min_degree > self.l_max:
            return 0
        return self._prefix(self.l_max + 1)

    def _prefix(self, l: int) -> int:
        nonneg = self.nonnegative_orders
        return _cumulative_count(l - 1, self.m_max, nonneg) - _cumulative_count(
            self.min_degree - 1, self.m_max, nonneg
        )

    def degrees(self) -> range:
        return range(self.min_degree, self.l_max + 1)

    def check_degree(self, l: int) -> None:
        """Raise ``ValueError`` unless ``|n| <= l <= l_max``."""
        if l < self.min_degree or l > self.l_max:
            raise ValueError(
                f"degree l={l} outside [{self.min_degree}, {self.l_max}] "
                f"for upper index n={self.n}"
            )

    def min_order(self, l: int) -> int:
        self.check_degree(l)
        return 0 if self.nonnegative_orders else -min(l, self.m_max)

    def max_order(self, l: int) -> int:
        self.check_degree(l)
        return min(l, self.m_max)

    def orders_at(self, l: int) -> range:
        return range(self.min_order(l), self.max_order(l) + 1)

    def order_count(self, l: int) -> int:
        return self.max_order(l) - self.min_order(l) + 1

    def offset(self, l: int) -> int:
        """Flat offset of the first order stored at degree ``l``."""
        self.check_degree(l)
        return self._prefix(l)

    def index(self, l: int, m: int) -> int:
        """Flat offset of (l, m); raises ``ValueError`` outside the stored window."""
        lo = self.min_order(l)
        hi = self.max_order(l)
        if m < lo or m > hi:
            raise ValueError(f"order m={m} outside [{lo}, {hi}] at degree l={l}")
        return self.offset(l) + (m - lo)

    def degree_slice(self, l: int) -> slice:
        start = self.offset(l)
        return slice(start, start + self.order_count(l))

    def degree_slices(self) -> tuple[slice, ...]:
        """Slices (one per stored degree) that tile ``[0, size)``."""
        return tuple(self.degree_slice(l) for l in self.degrees())

    def gather_indices(self) -> tuple[np.ndarray, np.ndarray]:
        """Row/column indices that pack dense ``(l_max+1, n_orders)`` rows.

        ``rows[..., l_idx, col_idx]`` lists the stored values in flat order,
        where column ``c`` of a dense row holds order ``c + lowest order``.
        """
        return _gather_indices(self.l_max, self.m_max, self.n, self.orders)


@lru_cache(maxsize=None)
def _gather_indices(
    l_max: int, m_max: int, n: int, orders: OrderRange
) -> tuple[np.ndarray, np.ndarray]:
    scheme = TriangularIndex(l_max, m_max, n, orders)
    m_lo = 0 if scheme.nonnegative_orders else -m_max
    l_idx = np.empty(scheme.size, dtype=np.intp)
    col_idx = np.empty(scheme.size, dtype=np.intp)
    for l in scheme.degrees():
        sl = scheme.degree_slice(l)
        l_idx[sl] = l
        col_idx[sl] = np.arange(scheme.min_order(l), scheme.max_order(l) + 1) - m_lo
    l_idx.setflags(write=False)
    col_idx.setflags(write=False)
    return l_idx, col_idx


__all__ = ["TriangularIndex", "triangular_size"]
