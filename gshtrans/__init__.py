"""gshtrans: Wigner d-functions for generalised spherical-harmonic transforms."""

from ._typecheck import enable_runtime_typecheck

enable_runtime_typecheck()

from .config import (
    ExecutionConfig,
    Normalization,
    OrderRange,
    UpperIndexRange,
    WignerConfig,
)
from .operators.direct import wigner_d
from .operators.indexing import TriangularIndex, triangular_size
from .runtime.table import WignerTable

__all__ = [
    "ExecutionConfig",
    "Normalization",
    "OrderRange",
    "TriangularIndex",
    "UpperIndexRange",
    "WignerConfig",
    "WignerTable",
    "triangular_size",
    "wigner_d",
]
