"""Centralized dtypes for indices and working precision.

Keep a single source of truth for the integer dtype used by the degree and
order arithmetic so the kernels stay consistent whether or not JAX runs in
64-bit mode.
"""

import jax
import jax.numpy as jnp
import numpy as np
from jaxtyping import DTypeLike

# Degrees and orders stay far below 2**31, and int32 is available without
# enabling x64.
INDEX_DTYPE = jnp.int32


def as_index(x: object) -> jnp.ndarray:
    """Convert a Python or JAX scalar/array to INDEX_DTYPE."""
    return jnp.asarray(x, dtype=INDEX_DTYPE)


def default_real_dtype() -> np.dtype:
    """Return the default floating dtype of the current JAX configuration.

    This is float64 when ``jax_enable_x64`` is set and float32 otherwise.
    """
    return np.dtype(jnp.asarray(0.0).dtype)


def resolve_real_dtype(dtype: DTypeLike | None) -> np.dtype:
    """Validate a requested working dtype, falling back to the JAX default.

    The request must survive JAX canonicalisation unchanged: without
    ``jax_enable_x64`` a float64 request would silently compute in float32.
    """
    if dtype is None:
        return default_real_dtype()
    resolved = np.dtype(dtype)
    if not np.issubdtype(resolved, np.floating):
        raise ValueError(f"dtype must be a real floating dtype, got {resolved}")
    canonical = np.dtype(jax.dtypes.canonicalize_dtype(resolved))
    if canonical != resolved:
        raise ValueError(
            f"dtype {resolved} is not available in the current JAX configuration "
            f"(it would run as {canonical}); {resolved} needs jax_enable_x64"
        )
    return resolved


__all__ = ["INDEX_DTYPE", "as_index", "default_real_dtype", "resolve_real_dtype"]
