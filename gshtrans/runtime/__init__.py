"""Runtime table driver for gshtrans."""

from .table import WignerTable

__all__ = ["WignerTable"]
