"""Wigner d-function tables over many upper indices and angles.

A :class:`WignerTable` owns one flat host buffer laid out upper-index major,
then angle, then degree, then order. Each (upper index, angle chunk) pair is
an independent unit of work: it reads the shared square-root table, runs the
compiled degree recursion for its angles and writes a disjoint slice of the
buffer, so units can run on a thread pool without locking.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import jax.numpy as jnp
import numpy as np
from jaxtyping import ArrayLike, DTypeLike

from ..config import (
    ExecutionConfig,
    Normalization,
    OrderRange,
    UpperIndexRange,
    WignerConfig,
    coerce_enum,
    validate_angles,
)
from ..operators.dtypes import resolve_real_dtype
from ..operators.indexing import TriangularIndex
from ..operators.recursion import wigner_rows
from ..operators.sqrt_table import SqrtTable, build_sqrt_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _WorkUnit:
    n: int
    start: int
    stop: int


class WignerTable:
    """Wigner values d^l_{m,n}(theta_i) for every configured n, l, m and angle.

    Parameters
    ----------
    l_max, m_max, n_max:
        Maximum degree, order and upper index.
    angles:
        Colatitudes in radians, each in ``[0, pi]``.
    orders:
        Store all orders or only non-negative ones.
    upper_indices:
        Upper indices ``-n_max..n_max``, ``0..n_max`` or only ``n_max``.
    normalization:
        Raw values or orthonormal scaling sqrt(2l+1)/(2 sqrt(pi)).
    execution:
        Worker count and angle chunk size.
    dtype:
        Working dtype; defaults to the JAX default float dtype.
    """

    def __init__(
        self,
        l_max: int,
        m_max: int,
        n_max: int,
        angles: Union[ArrayLike, Sequence[float]],
        *,
        orders: Union[OrderRange, str] = OrderRange.FULL,
        upper_indices: Union[UpperIndexRange, str] = UpperIndexRange.FULL,
        normalization: Union[Normalization, str] = Normalization.ORTHONORMAL,
        execution: Optional[ExecutionConfig] = None,
        dtype: Optional[DTypeLike] = None,
    ):
        config = WignerConfig(
            l_max=l_max,
            m_max=m_max,
            n_max=n_max,
            orders=coerce_enum(orders, OrderRange),
            upper_indices=coerce_enum(upper_indices, UpperIndexRange),
            normalization=coerce_enum(normalization, Normalization),
        )
        self._init_from_config(config, angles, execution=execution, dtype=dtype)

    @classmethod
    def from_config(
        cls,
        config: WignerConfig,
        angles: Union[ArrayLike, Sequence[float]],
        *,
        execution: Optional[ExecutionConfig] = None,
        dtype: Optional[DTypeLike] = None,
    ) -> "WignerTable":
        """Build a table from an already validated :class:`WignerConfig`."""

        table = cls.__new__(cls)
        table._init_from_config(config, angles, execution=execution, dtype=dtype)
        return table

    def _init_from_config(
        self,
        config: WignerConfig,
        angles: Union[ArrayLike, Sequence[float]],
        *,
        execution: Optional[ExecutionConfig],
        dtype: Optional[DTypeLike],
    ) -> None:
        self._config = config
        self._execution = ExecutionConfig() if execution is None else execution
        self._dtype = resolve_real_dtype(dtype)
        thetas = validate_angles(angles)
        self._n_angles = len(thetas)

        self._upper = config.upper_index_values()
        self._schemes = {
            n: TriangularIndex(config.l_max, config.m_max, n, config.orders)
            for n in self._upper
        }
        self._block_offsets: dict[int, int] = {}
        total = 0
        for n in self._upper:
            self._block_offsets[n] = total
            total += self._schemes[n].size * self._n_angles
        self._data = np.zeros(total, dtype=self._dtype)
        self._angles = np.empty(self._n_angles, dtype=self._dtype)
        logger.debug(
            "allocated Wigner table l_max=%d m_max=%d n=%s angles=%d values=%d dtype=%s",
            config.l_max,
            config.m_max,
            self._upper,
            self._n_angles,
            total,
            self._dtype,
        )
        self._compute(thetas)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def config(self) -> WignerConfig:
        return self._config

    @property
    def l_max(self) -> int:
        return self._config.l_max

    @property
    def m_max(self) -> int:
        return self._config.m_max

    @property
    def n_max(self) -> int:
        return self._config.n_max

    @property
    def upper_index_values(self) -> tuple[int, ...]:
        return self._upper

    @property
    def n_angles(self) -> int:
        return self._n_angles

    @property
    def angles(self) -> np.ndarray:
        out = self._angles.view()
        out.setflags(write=False)
        return out

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def indices(self, n: int) -> TriangularIndex:
        """Triangular (l, m) layout of each angle column at upper index ``n``."""
        return self._scheme(n)

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def recompute(self, angles: Union[ArrayLike, Sequence[float]]) -> None:
        """Overwrite all values for a new angle sequence of the same length."""

        thetas = validate_angles(angles)
        if len(thetas) != self._n_angles:
            raise ValueError(
                f"recompute needs {self._n_angles} angles, got {len(thetas)}"
            )
        self._compute(thetas)

    def _compute(self, thetas: tuple[float, ...]) -> None:
        self._angles[:] = thetas
        config = self._config
        table = build_sqrt_table(config.sqrt_table_size(), dtype=self._dtype)
        units = list(self._work_units())
        workers = min(self._execution.resolved_workers(), max(len(units), 1))
        logger.debug(
            "computing %d work units on %d worker(s), chunk=%d",
            len(units),
            workers,
            self._execution.angle_chunk_size,
        )
        if workers <= 1:
            for unit in units:
                self._run_unit(unit, table)
            return
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises the first failure from any unit.
            list(pool.map(lambda unit: self._run_unit(unit, table), units))

    def _work_units(self) -> Iterable[_WorkUnit]:
        chunk = self._execution.angle_chunk_size
        for n in self._upper:
            if self._schemes[n].size == 0:
                continue
            for start in range(0, self._n_angles, chunk):
                yield _WorkUnit(n=n, start=start, stop=min(start + chunk, self._n_angles))

    def _run_unit(self, unit: _WorkUnit, table: SqrtTable) -> None:
        config = self._config
        scheme = self._schemes[unit.n]
        rows = wigner_rows(
            jnp.asarray(self._angles[unit.start : unit.stop]),
            unit.n,
            table,
            l_max=config.l_max,
            m_max=config.m_max,
            nonnegative_orders=config.nonnegative_orders,
            orthonormal=config.orthonormal,
        )
        l_idx, col_idx = scheme.gather_indices()
        packed = np.asarray(rows)[:, l_idx, col_idx]
        self._block(unit.n)[unit.start : unit.stop] = packed

    def _block(self, n: int) -> np.ndarray:
        """Writable (angles, size) view of the upper-index block for ``n``."""
        size = self._schemes[n].size
        start = self._block_offsets[n]
        return self._data[start : start + size * self._n_angles].reshape(
            self._n_angles, size
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _scheme(self, n: int) -> TriangularIndex:
        try:
            return self._schemes[n]
        except KeyError:
            raise ValueError(
                f"upper index n={n} not held by this table ({self._upper[0]}..{self._upper[-1]})"
            ) from None

    def _check_angle(self, angle: int) -> None:
        if angle < 0 or angle >= self._n_angles:
            raise ValueError(f"angle index {angle} outside [0, {self._n_angles})")

    def value(self, n: int, l: int, m: int, angle: int = 0) -> float:
        """Return d^l_{m,n}(theta_angle)."""

        scheme = self._scheme(n)
        self._check_angle(angle)
        i = scheme.index(l, m)
        return float(self._data[self._block_offsets[n] + angle * scheme.size + i])

    def column(self, n: int, angle: int = 0) -> np.ndarray:
        """Read-only flat (l, m) column for one upper index and angle."""

        self._scheme(n)
        self._check_angle(angle)
        out = self._block(n)[angle]
        out.setflags(write=False)
        return out

    def degree_view(self, n: int, l: int, angle: int = 0) -> np.ndarray:
        """Read-only view over orders ``min_order(l)..max_order(l)`` at (n, l, angle)."""

        scheme = self._scheme(n)
        self._check_angle(angle)
        out = self._block(n)[angle, scheme.degree_slice(l)]
        out.setflags(write=False)
        return out

    def degree_values(self, n: int, l: int) -> np.ndarray:
        """Read-only ``(n_angles, n_orders)`` view at fixed (n, l)."""

        scheme = self._scheme(n)
        out = self._block(n)[:, scheme.degree_slice(l)]
        out.setflags(write=False)
        return out

    def __repr__(self) -> str:
        c = self._config
        return (
            f"WignerTable(l_max={c.l_max}, m_max={c.m_max}, n_max={c.n_max}, "
            f"orders={c.orders.value}, upper_indices={c.upper_indices.value}, "
            f"normalization={c.normalization.value}, n_angles={self._n_angles})"
        )


__all__ = ["WignerTable"]
