"""Operator namespace for the Wigner recursion kernels and index layout."""

from . import (
    angles,
    boundary,
    direct,
    indexing,
    recursion,
    sqrt_table,
)

__all__ = [
    "angles",
    "boundary",
    "direct",
    "indexing",
    "recursion",
    "sqrt_table",
]
