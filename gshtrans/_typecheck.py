"""Opt-in runtime type checking for gshtrans.

Setting ``GSHTRANS_RUNTIME_TYPECHECK`` to a truthy value installs a jaxtyping
import hook before the package submodules load, so beartype checks every
annotated callable, array shapes and dtypes included.
"""

from __future__ import annotations

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

ENV_VAR = "GSHTRANS_RUNTIME_TYPECHECK"
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})

_TYPECHECK_HOOK: Any = None


def runtime_typecheck_requested() -> bool:
    """Read ``GSHTRANS_RUNTIME_TYPECHECK``; unknown values raise ``ValueError``."""

    raw = os.getenv(ENV_VAR, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    known = ", ".join(sorted((_TRUTHY | _FALSY) - {""}))
    raise ValueError(f"{ENV_VAR} must be one of {known}, got {raw!r}")


def runtime_typecheck_active() -> bool:
    return _TYPECHECK_HOOK is not None


def enable_runtime_typecheck(package: str = "gshtrans") -> bool:
    """Install the beartype import hook for ``package`` once, if requested."""
    global _TYPECHECK_HOOK

    if _TYPECHECK_HOOK is not None:
        return True
    if not runtime_typecheck_requested():
        return False

    from jaxtyping import install_import_hook

    _TYPECHECK_HOOK = install_import_hook(package, typechecker="beartype.beartype")
    logger.debug("runtime type checking enabled for %s", package)
    return True


__all__ = [
    "enable_runtime_typecheck",
    "runtime_typecheck_active",
    "runtime_typecheck_requested",
]
