r"""Degree recursion for Wigner d-functions at fixed upper index.

For a fixed upper index ``n`` and colatitude ``theta`` the values
d^l_{m,n}(theta) are generated one degree at a time. Each order ``m`` is an
independent sequence in ``l`` starting at ``l0 = max(|m|, |n|)`` with a
closed-form seed (:mod:`gshtrans.operators.boundary`) and continuing with

.. math::

    d^l_{m,n} = \frac{\alpha - \beta m}{\sqrt{(l-m)(l+m)}} d^{l-1}_{m,n}
              - \gamma \frac{\sqrt{(l-1-m)(l-1+m)}}{\sqrt{(l-m)(l+m)}} d^{l-2}_{m,n}

where

.. math::

    \alpha = \frac{(2l-1) l \cos\theta}{\sqrt{(l-n)(l+n)}}, \quad
    \beta  = \frac{(2l-1) n}{(l-1)\sqrt{(l-n)(l+n)}}, \quad
    \gamma = \frac{l \sqrt{(l-1-n)(l-1+n)}}{(l-1)\sqrt{(l-n)(l+n)}}.

The second term vanishes on the row ``l = |n| + 1`` and on growing order
edges ``|m| = l - 1``, so the same expression doubles as the one-term
recursion there. The degree loop is a ``lax.scan`` carrying the two previous
rows; within a row all orders are evaluated together.

Rows are dense over the order window ``[-m_max, m_max]`` (or ``[0, m_max]``
for non-negative orders). Entries with ``l < l0`` are zero placeholders and
are dropped when the rows are packed into triangular storage.
"""

from __future__ import annotations

import math
import operator
from functools import partial

import jax
import jax.numpy as jnp
from jaxtyping import Array, ArrayLike, DTypeLike

from .angles import AngleArgument, angle_argument
from .boundary import seed_values
from .dtypes import INDEX_DTYPE, as_index
from .sqrt_table import SqrtTable, _lookup


def order_window(m_max: int, *, nonnegative_orders: bool) -> tuple[int, int]:
    """Return the (lowest, highest) order of the dense row layout."""

    if m_max < 0:
        raise ValueError("m_max must be >= 0")
    return (0 if nonnegative_orders else -m_max), m_max


def _recurrence_row(
    l: Array,
    m: Array,
    n: Array,
    arg: AngleArgument,
    prev: Array,
    prev2: Array,
    table: SqrtTable,
) -> Array:
    dtype = arg.cos_theta.dtype
    fl = l.astype(dtype)
    fn = n.astype(dtype)
    fm = m.astype(dtype)
    sq = partial(_lookup, table.sqrt)
    inv = partial(_lookup, table.inv_sqrt)

    # 1/(l-1) only multiplies vanishing numerators at l == 1 (n == 0 there).
    inv_lm1 = jnp.where(l > 1, 1.0 / jnp.maximum(fl - 1.0, 1.0), 0.0).astype(dtype)
    norm_n = inv(l - n) * inv(l + n)
    two_l_m1 = 2.0 * fl - 1.0

    alpha = two_l_m1 * fl * arg.cos_theta * norm_n
    beta = two_l_m1 * fn * norm_n * inv_lm1
    gamma = fl * sq(l - 1 - n) * sq(l - 1 + n) * norm_n * inv_lm1

    denom = inv(l - m) * inv(l + m)
    f1 = (alpha - beta * fm) * denom
    f2 = gamma * sq(l - 1 - m) * sq(l - 1 + m) * denom
    return f1 * prev - f2 * prev2


def _column_rows(
    arg: AngleArgument,
    n: Array,
    table: SqrtTable,
    *,
    l_max: int,
    m_max: int,
    nonnegative_orders: bool,
) -> Array:
    m_lo, m_hi = order_window(m_max, nonnegative_orders=nonnegative_orders)
    m = jnp.arange(m_lo, m_hi + 1, dtype=INDEX_DTYPE)
    l_start = jnp.maximum(jnp.abs(m), jnp.abs(n))
    zero = jnp.zeros(m.shape, dtype=arg.cos_theta.dtype)

    def step(carry: tuple[Array, Array], l: Array) -> tuple[tuple[Array, Array], Array]:
        prev, prev2 = carry
        seed = seed_values(l, m, n, arg)
        recur = _recurrence_row(l, m, n, arg, prev, prev2, table)
        row = jnp.where(l == l_start, seed, jnp.where(l > l_start, recur, zero))
        return (row, prev), row

    degrees = jnp.arange(l_max + 1, dtype=INDEX_DTYPE)
    _, rows = jax.lax.scan(step, (zero, zero), degrees)
    return rows


def orthonormal_factors(l_max: int, *, dtype: DTypeLike) -> Array:
    """Per-degree factors sqrt(2l+1) / (2 sqrt(pi)) for l = 0..l_max."""

    ell = jnp.arange(l_max + 1, dtype=dtype)
    return jnp.sqrt(2.0 * ell + 1.0) * (0.5 / math.sqrt(math.pi))


def normalize_rows(rows: Array, *, l_max: int) -> Array:
    """Apply the orthonormal scaling to rows laid out as ``(..., l_max+1, orders)``."""

    factors = orthonormal_factors(l_max, dtype=rows.dtype)
    return rows * factors[:, None]


def required_sqrt_size(l_max: int, m_max: int, n: int) -> int:
    """Smallest square-root table that covers the recursion at upper index ``n``.

    Upper indices with |n| > l_max produce no values, so they only need the
    order part of the table.
    """

    reach = m_max if abs(n) > l_max else max(m_max, abs(n))
    return l_max + reach + 1


@partial(
    jax.jit,
    static_argnames=("l_max", "m_max", "nonnegative_orders", "orthonormal"),
)
def _wigner_rows(
    theta: ArrayLike,
    n: ArrayLike,
    table: SqrtTable,
    *,
    l_max: int,
    m_max: int,
    nonnegative_orders: bool,
    orthonormal: bool,
) -> Array:
    theta = jnp.atleast_1d(jnp.asarray(theta, dtype=table.sqrt.dtype))
    n = as_index(n)
    args = jax.vmap(angle_argument)(theta)

    def column(arg: AngleArgument) -> Array:
        return _column_rows(
            arg,
            n,
            table,
            l_max=l_max,
            m_max=m_max,
            nonnegative_orders=nonnegative_orders,
        )

    rows = jax.vmap(column)(args)
    if orthonormal:
        rows = normalize_rows(rows, l_max=l_max)
    return rows


def wigner_rows(
    theta: ArrayLike,
    n: int,
    table: SqrtTable,
    *,
    l_max: int,
    m_max: int,
    nonnegative_orders: bool = False,
    orthonormal: bool = True,
) -> Array:
    """Dense Wigner rows for a batch of angles at one upper index.

    Parameters
    ----------
    theta:
        (A,) colatitudes in radians.
    n:
        Upper index. It is passed to the compiled kernel as a traced value,
        so one compilation serves every ``n``.
    table:
        Square roots for 0..l_max + max(m_max, |n|); see
        :func:`required_sqrt_size`. A smaller table raises ``ValueError``.
    l_max, m_max:
        Maximum degree and order.
    nonnegative_orders:
        Lay rows out over ``[0, m_max]`` instead of ``[-m_max, m_max]``.
    orthonormal:
        Scale degree ``l`` by sqrt(2l+1)/(2 sqrt(pi)).

    Returns
    -------
    Array
        Shape ``(A, l_max+1, n_orders)``; entry ``[a, l, m - m_lo]`` holds
        d^l_{m,n}(theta[a]) wherever ``l >= max(|m|, |n|)`` and zero
        elsewhere.
    """

    n = operator.index(n)
    need = required_sqrt_size(l_max, m_max, n)
    if table.size < need:
        raise ValueError(
            f"square-root table of size {table.size} too small for "
            f"l_max={l_max}, m_max={m_max}, n={n}; need at least {need}"
        )
    return _wigner_rows(
        theta,
        n,
        table,
        l_max=l_max,
        m_max=m_max,
        nonnegative_orders=nonnegative_orders,
        orthonormal=orthonormal,
    )


__all__ = [
    "normalize_rows",
    "order_window",
    "orthonormal_factors",
    "required_sqrt_size",
    "wigner_rows",
]
