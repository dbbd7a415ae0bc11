"""Opt-in runtime type-check switch."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest

# A package that is never imported, so enabling the hook here leaves the
# already loaded gshtrans modules untouched.
HOOK_TARGET = "gshtrans_hook_target"


def _fresh_typecheck_module():
    path = Path(__file__).resolve().parents[2] / "gshtrans" / "_typecheck.py"
    spec = importlib.util.spec_from_file_location("gshtrans_typecheck_fresh", path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_disabled_by_default(monkeypatch):
    monkeypatch.delenv("GSHTRANS_RUNTIME_TYPECHECK", raising=False)
    module = _fresh_typecheck_module()

    assert module.runtime_typecheck_requested() is False
    assert module.enable_runtime_typecheck(HOOK_TARGET) is False
    assert module.runtime_typecheck_active() is False


@pytest.mark.parametrize("raw", ["0", "off", " No ", "false"])
def test_falsy_values_keep_it_off(monkeypatch, raw):
    monkeypatch.setenv("GSHTRANS_RUNTIME_TYPECHECK", raw)
    module = _fresh_typecheck_module()

    assert module.enable_runtime_typecheck(HOOK_TARGET) is False


def test_enabled_hook_is_installed_once(monkeypatch):
    monkeypatch.setenv("GSHTRANS_RUNTIME_TYPECHECK", "on")
    module = _fresh_typecheck_module()

    assert module.enable_runtime_typecheck(HOOK_TARGET) is True
    hook = module._TYPECHECK_HOOK
    assert module.runtime_typecheck_active() is True
    assert module.enable_runtime_typecheck(HOOK_TARGET) is True
    assert module._TYPECHECK_HOOK is hook


def test_unknown_value_is_rejected(monkeypatch):
    monkeypatch.setenv("GSHTRANS_RUNTIME_TYPECHECK", "sometimes")
    module = _fresh_typecheck_module()

    with pytest.raises(ValueError, match="GSHTRANS_RUNTIME_TYPECHECK"):
        module.enable_runtime_typecheck(HOOK_TARGET)
