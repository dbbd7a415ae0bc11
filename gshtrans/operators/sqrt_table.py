"""Square roots of small integers used by the degree recursion."""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jaxtyping import Array, DTypeLike


class SqrtTable(NamedTuple):
    """``sqrt[k]`` and ``inv_sqrt[k]`` for k = 0..size-1, with ``inv_sqrt[0] = 0``."""

    sqrt: Array
    inv_sqrt: Array

    @property
    def size(self) -> int:
        return int(self.sqrt.shape[0])


def build_sqrt_table(size: int, *, dtype: DTypeLike) -> SqrtTable:
    """Tabulate sqrt(k) and 1/sqrt(k) for k in [0, size)."""

    if size < 1:
        raise ValueError("size must be >= 1")
    k = jnp.arange(size, dtype=dtype)
    root = jnp.sqrt(k)
    inv = jnp.where(root > 0, 1.0 / jnp.where(root > 0, root, 1.0), 0.0)
    return SqrtTable(sqrt=root, inv_sqrt=inv.astype(dtype))


def _lookup(values: Array, k: Array) -> Array:
    """Gather ``values[k]`` with ``k`` clamped into range.

    Lanes whose index falls outside the table are masked out by the callers,
    the clamp only keeps the gather well defined.
    """
    return values[jnp.clip(k, 0, values.shape[0] - 1)]


__all__ = ["SqrtTable", "build_sqrt_table"]
