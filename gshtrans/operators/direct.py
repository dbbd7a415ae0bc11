"""Single Wigner d-function values by recursion in the order.

For one (l, m, n, theta) it is cheaper to walk the order ``m`` at fixed
degree than to build a full degree table. With ``x = cot(theta)`` and
``c = cosec(theta)`` the three-term relation

    sqrt((l-k)(l+k+1)) d_{k+1} = 2 (n c - k x) d_k - sqrt((l+k)(l-k+1)) d_{k-1}

is run upward from ``k = -l`` or downward from ``k = +l``, whichever end is
closer to ``m`` relative to ``trunc(n cos(theta))``. The seeds are the
closed-form extremal values, evaluated in the log domain.
"""

from __future__ import annotations

import math
import sys

from ..config import Normalization, coerce_enum


def _min_order_seed(l: int, n: int, log_sin_half: float, log_cos_half: float) -> float:
    return math.exp(
        0.5 * (math.lgamma(2 * l + 1) - math.lgamma(l - n + 1) - math.lgamma(l + n + 1))
        + (l + n) * log_sin_half
        + (l - n) * log_cos_half
    )


def _scale(l: int, value: float, normalization: Normalization) -> float:
    if normalization is Normalization.ORTHONORMAL:
        return 0.5 * math.sqrt(2 * l + 1) / math.sqrt(math.pi) * value
    return value


def wigner_d(
    l: int,
    m: int,
    n: int,
    theta: float,
    *,
    normalization: Normalization | str = Normalization.ORTHONORMAL,
) -> float:
    """Return d^l_{m,n}(theta) for |m|, |n| <= l and theta in [0, pi]."""

    norm = coerce_enum(normalization, Normalization)
    if l < 0:
        raise ValueError("l must be >= 0")
    if abs(m) > l or abs(n) > l:
        raise ValueError(f"need |m| <= l and |n| <= l, got l={l}, m={m}, n={n}")
    theta = float(theta)
    if not math.isfinite(theta) or theta < 0.0 or theta > math.pi:
        raise ValueError(f"theta must lie in [0, pi], got {theta!r}")

    if l == 0:
        return _scale(l, 1.0, norm)

    sin_half = math.sin(0.5 * theta)
    cos_half = math.sin(0.5 * (math.pi - theta))
    tiny = sys.float_info.min
    if sin_half < tiny:
        return _scale(l, 1.0 if m == n else 0.0, norm)
    if cos_half < tiny:
        value = (-1.0) ** ((l + m) % 2) if m == -n else 0.0
        return _scale(l, value, norm)

    log_sin_half = math.log(sin_half)
    log_cos_half = math.log(cos_half)
    cosec = 1.0 / math.sin(theta)
    cot = math.cos(theta) * cosec

    m_opt = int(n * math.cos(theta))
    if m <= m_opt:
        # Upward from d_{-l,n}.
        previous = 0.0
        current = _min_order_seed(l, n, log_sin_half, log_cos_half)
        for k in range(-l, m):
            nxt = (
                2.0 * (n * cosec - k * cot) * current
                - math.sqrt((l + k) * (l - k + 1)) * previous
            ) / math.sqrt((l - k) * (l + k + 1))
            previous, current = current, nxt
        return _scale(l, current, norm)

    # Downward from d_{l,n} = (-1)^(l+n) d_{-l,-n}.
    following = 0.0
    sign = -1.0 if (l + n) % 2 else 1.0
    current = sign * _min_order_seed(l, -n, log_sin_half, log_cos_half)
    for k in range(l, m, -1):
        nxt = (
            2.0 * (n * cosec - k * cot) * current
            - math.sqrt((l - k) * (l + k + 1)) * following
        ) / math.sqrt((l + k) * (l - k + 1))
        following, current = current, nxt
    return _scale(l, current, norm)


__all__ = ["wigner_d"]
