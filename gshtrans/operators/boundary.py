"""Closed-form Wigner values at extremal order or extremal upper index.

Every degree recursion is seeded from these values, so they are evaluated in
the log domain:

    d^l_{-l,k}(theta) = sqrt((2l)! / ((l-k)! (l+k)!))
                        * sin(theta/2)^(l+k) * cos(theta/2)^(l-k)

with the factorial ratio formed from ``gammaln`` and the powers from the
precomputed half-angle logs. A direct factorial ratio overflows long before
the degrees of interest.

The remaining extremal values follow from the symmetries

    d^l_{l,k}  = (-1)^(l+k) d^l_{-l,-k}
    d^l_{m,l}  = d^l_{-l,-m}
    d^l_{m,-l} = d^l_{l,-m}

At the poles the powers are resolved explicitly, so the results are exact
zeros and ones rather than underflowed logs.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax.scipy.special import gammaln
from jaxtyping import Array, ArrayLike

from .angles import AngleArgument


def _parity_sign(k: Array) -> Array:
    """(-1)^k for integer-valued ``k``."""
    return 1 - 2 * (jnp.abs(k) % 2)


def min_order_value(l: ArrayLike, k: ArrayLike, arg: AngleArgument) -> Array:
    """Return d^l_{-l,k}(theta) for |k| <= l; broadcasts over ``l`` and ``k``."""

    dtype = arg.cos_theta.dtype
    l_int = jnp.asarray(l)
    k_int = jnp.asarray(k)
    fl = l_int.astype(dtype)
    fk = k_int.astype(dtype)

    log_norm = 0.5 * (
        gammaln(2.0 * fl + 1.0) - gammaln(fl - fk + 1.0) - gammaln(fl + fk + 1.0)
    )
    general = jnp.exp(
        log_norm + (fl + fk) * arg.log_sin_half + (fl - fk) * arg.log_cos_half
    )

    one = jnp.ones_like(general)
    zero = jnp.zeros_like(general)
    left = jnp.where(k_int == -l_int, one, zero)
    right = jnp.where(k_int == l_int, one, zero)
    value = jnp.where(arg.at_left_pole, left, jnp.where(arg.at_right_pole, right, general))
    return jnp.where(l_int == 0, one, value)


def max_order_value(l: ArrayLike, k: ArrayLike, arg: AngleArgument) -> Array:
    """Return d^l_{l,k}(theta) for |k| <= l."""

    l_int = jnp.asarray(l)
    k_int = jnp.asarray(k)
    sign = _parity_sign(l_int + k_int).astype(arg.cos_theta.dtype)
    return sign * min_order_value(l_int, -k_int, arg)


def max_upper_index_value(l: ArrayLike, m: ArrayLike, arg: AngleArgument) -> Array:
    """Return d^l_{m,l}(theta) for |m| <= l."""

    return min_order_value(l, -jnp.asarray(m), arg)


def min_upper_index_value(l: ArrayLike, m: ArrayLike, arg: AngleArgument) -> Array:
    """Return d^l_{m,-l}(theta) for |m| <= l."""

    return max_order_value(l, -jnp.asarray(m), arg)


def seed_values(l: ArrayLike, m: ArrayLike, n: ArrayLike, arg: AngleArgument) -> Array:
    """First stored value of each order at degree ``l = max(|m|, |n|)``.

    Orders with |m| >= |n| start on the extremal-order edge (m = -l or
    m = +l); orders with |m| < |n| start on the row l = |n|, which is the
    extremal upper index edge for the sign of ``n``.
    """

    l_int = jnp.asarray(l)
    m_int = jnp.asarray(m)
    n_int = jnp.asarray(n)

    order_edge = jnp.where(
        m_int < 0,
        min_order_value(l_int, n_int, arg),
        max_order_value(l_int, n_int, arg),
    )
    index_edge = jnp.where(
        n_int >= 0,
        max_upper_index_value(l_int, m_int, arg),
        min_upper_index_value(l_int, m_int, arg),
    )
    return jnp.where(jnp.abs(m_int) >= jnp.abs(n_int), order_edge, index_edge)


__all__ = [
    "max_order_value",
    "max_upper_index_value",
    "min_order_value",
    "min_upper_index_value",
    "seed_values",
]
