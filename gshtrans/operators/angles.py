"""Per-angle trigonometric arguments shared by the boundary and recursion kernels."""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, ArrayLike, jaxtyped


class AngleArgument(NamedTuple):
    """Precomputed terms for one colatitude.

    ``log_sin_half``/``log_cos_half`` hold log(sin(theta/2)) and
    log(cos(theta/2)), except at a pole where the vanishing factor is flagged
    and its log is stored as zero.
    """

    cos_theta: Array
    log_sin_half: Array
    log_cos_half: Array
    at_left_pole: Array
    at_right_pole: Array


@jaxtyped(typechecker=beartype)
def angle_argument(theta: ArrayLike) -> AngleArgument:
    """Build the :class:`AngleArgument` for a scalar colatitude ``theta``.

    Works under ``jax.vmap`` to produce a batched argument for many angles.
    """

    theta = jnp.asarray(theta)
    if not jnp.issubdtype(theta.dtype, jnp.floating):
        theta = theta.astype(jnp.asarray(0.0).dtype)
    tiny = jnp.finfo(theta.dtype).tiny
    sin_half = jnp.sin(0.5 * theta)
    # cos(pi/2) rounds to ~6e-17, so take the complement to hit zero at theta=pi.
    cos_half = jnp.sin(0.5 * (jnp.asarray(jnp.pi, dtype=theta.dtype) - theta))
    at_left = sin_half < tiny
    at_right = cos_half < tiny
    one = jnp.ones_like(theta)
    log_sin_half = jnp.where(at_left, 0.0, jnp.log(jnp.where(at_left, one, sin_half)))
    log_cos_half = jnp.where(
        at_right, 0.0, jnp.log(jnp.where(at_right, one, cos_half))
    )
    return AngleArgument(
        cos_theta=jnp.cos(theta),
        log_sin_half=log_sin_half,
        log_cos_half=log_cos_half,
        at_left_pole=at_left,
        at_right_pole=at_right,
    )


__all__ = ["AngleArgument", "angle_argument"]
