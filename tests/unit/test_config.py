import math
import warnings

import numpy as np
import pytest

from gshtrans.config import (
    ExecutionConfig,
    Normalization,
    OrderRange,
    UpperIndexRange,
    WignerConfig,
    coerce_enum,
    validate_angles,
)


def test_coerce_enum_accepts_members_values_and_qualified_names() -> None:
    assert coerce_enum(OrderRange.FULL, OrderRange) is OrderRange.FULL
    assert coerce_enum("non_negative", OrderRange) is OrderRange.NON_NEGATIVE
    assert coerce_enum(" RAW ", Normalization) is Normalization.RAW
    assert coerce_enum("UpperIndexRange.single", UpperIndexRange) is UpperIndexRange.SINGLE
    with pytest.raises(ValueError, match="Known values"):
        coerce_enum("negative", OrderRange)


def test_wigner_config_defaults() -> None:
    config = WignerConfig(l_max=4, m_max=2, n_max=1)
    assert config.orders is OrderRange.FULL
    assert config.upper_indices is UpperIndexRange.FULL
    assert config.normalization is Normalization.ORTHONORMAL
    assert config.orthonormal
    assert not config.nonnegative_orders
    assert config.upper_index_values() == (-1, 0, 1)
    assert config.sqrt_table_size() == 4 + 2 + 1


def test_wigner_config_upper_index_modes() -> None:
    nonneg = WignerConfig(5, 5, 3, upper_indices="non_negative")
    assert nonneg.upper_index_values() == (0, 1, 2, 3)
    single = WignerConfig(5, 5, 3, upper_indices=UpperIndexRange.SINGLE)
    assert single.upper_index_values() == (3,)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(l_max=-1, m_max=0, n_max=0),
        dict(l_max=3, m_max=4, n_max=0),
        dict(l_max=3, m_max=-1, n_max=0),
        dict(l_max=3, m_max=1, n_max=-2),
        dict(l_max=3.0, m_max=1, n_max=0),
        dict(l_max=True, m_max=0, n_max=0),
        dict(l_max=3, m_max=1, n_max=0, orders="odd"),
    ],
)
def test_wigner_config_rejects_invalid_bounds(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        WignerConfig(**kwargs)


def test_upper_index_above_degree_warns() -> None:
    with pytest.warns(UserWarning, match="exceeds l_max"):
        WignerConfig(l_max=2, m_max=2, n_max=3)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        WignerConfig(l_max=3, m_max=2, n_max=3)


def test_execution_config_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GSHTRANS_MAX_WORKERS", raising=False)
    assert ExecutionConfig().resolved_workers() == 1
    monkeypatch.setenv("GSHTRANS_MAX_WORKERS", "3")
    assert ExecutionConfig().resolved_workers() == 3
    assert ExecutionConfig(max_workers=2).resolved_workers() == 2
    monkeypatch.setenv("GSHTRANS_MAX_WORKERS", "0")
    with pytest.raises(ValueError):
        ExecutionConfig().resolved_workers()
    monkeypatch.setenv("GSHTRANS_MAX_WORKERS", "many")
    with pytest.raises(ValueError):
        ExecutionConfig().resolved_workers()


def test_execution_config_validation() -> None:
    with pytest.raises(ValueError):
        ExecutionConfig(max_workers=0)
    with pytest.raises(ValueError):
        ExecutionConfig(angle_chunk_size=0)


def test_validate_angles() -> None:
    assert validate_angles([0.0, 1.0, math.pi]) == (0.0, 1.0, math.pi)
    assert validate_angles(0.5) == (0.5,)
    assert validate_angles(np.array([0.25, 0.75])) == (0.25, 0.75)
    assert validate_angles(np.float64(2.0)) == (2.0,)
    for bad in ([], [float("nan")], [float("inf")], [-1e-3], [math.pi + 1e-9]):
        with pytest.raises(ValueError):
            validate_angles(bad)


def test_validate_angles_rejects_multidimensional_input() -> None:
    with pytest.raises(ValueError, match="1-D"):
        validate_angles(np.full((2, 3), 0.5))
    with pytest.raises(ValueError, match="1-D"):
        validate_angles([[0.1, 0.2], [0.3, 0.4]])
