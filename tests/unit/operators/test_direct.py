import math

import pytest

from gshtrans.config import Normalization
from gshtrans.operators.direct import wigner_d


def test_degree_zero() -> None:
    assert wigner_d(0, 0, 0, 1.3, normalization="raw") == 1.0
    assert wigner_d(0, 0, 0, 1.3) == pytest.approx(0.5 / math.sqrt(math.pi))


@pytest.mark.parametrize("theta", [0.2, 1.1, 2.0, 3.0])
def test_low_degree_closed_forms(theta: float) -> None:
    c = math.cos(theta)
    s = math.sin(theta)
    cases = {
        (1, 0, 0): c,
        (1, 1, 0): -s / math.sqrt(2.0),
        (1, -1, 0): s / math.sqrt(2.0),
        (1, 0, 1): s / math.sqrt(2.0),
        (1, 1, 1): 0.5 * (1.0 + c),
        (1, -1, 1): 0.5 * (1.0 - c),
        (2, 0, 0): 0.5 * (3.0 * c * c - 1.0),
        (2, 2, 1): -0.5 * (1.0 + c) * s,
        (2, 1, 1): 0.5 * (1.0 + c) * (2.0 * c - 1.0),
        (2, 1, -1): 0.5 * (1.0 - c) * (2.0 * c + 1.0),
        (2, -2, 2): 0.25 * (1.0 - c) ** 2,
    }
    for (l, m, n), expected in cases.items():
        got = wigner_d(l, m, n, theta, normalization=Normalization.RAW)
        assert got == pytest.approx(expected, abs=1e-13)


def test_orthonormal_scaling() -> None:
    raw = wigner_d(5, 2, -1, 0.8, normalization="raw")
    scaled = wigner_d(5, 2, -1, 0.8)
    assert scaled == pytest.approx(raw * 0.5 * math.sqrt(11.0 / math.pi))


def test_both_recursion_directions_agree_with_symmetry() -> None:
    # For a fixed n the order walk switches direction around trunc(n cos theta);
    # the symmetry d^l_{-m,-n} = (-1)^(m-n) d^l_{m,n} pairs values from both walks.
    l = 9
    theta = 1.25
    for n in (-4, 0, 3):
        for m in range(-l, l + 1):
            lhs = wigner_d(l, -m, -n, theta, normalization="raw")
            rhs = (-1) ** ((m - n) % 2) * wigner_d(l, m, n, theta, normalization="raw")
            assert lhs == pytest.approx(rhs, abs=1e-12)


def test_orders_are_unit_norm_at_fixed_upper_index() -> None:
    l = 12
    for n in (0, 5, -12):
        total = sum(wigner_d(l, m, n, 0.9, normalization="raw") ** 2 for m in range(-l, l + 1))
        assert total == pytest.approx(1.0, abs=1e-12)


def test_pole_values() -> None:
    for l in range(1, 6):
        for m in range(-l, l + 1):
            for n in range(-l, l + 1):
                assert wigner_d(l, m, n, 0.0, normalization="raw") == (1.0 if m == n else 0.0)
                south = (-1.0) ** ((l + m) % 2) if m == -n else 0.0
                assert wigner_d(l, m, n, math.pi, normalization="raw") == south


@pytest.mark.parametrize(
    "args",
    [
        (-1, 0, 0, 0.5),
        (2, 3, 0, 0.5),
        (2, 0, -3, 0.5),
        (2, 0, 0, -0.1),
        (2, 0, 0, 3.5),
        (2, 0, 0, float("nan")),
    ],
)
def test_invalid_arguments(args: tuple) -> None:
    with pytest.raises(ValueError):
        wigner_d(*args)


def test_unknown_normalization() -> None:
    with pytest.raises(ValueError):
        wigner_d(1, 0, 0, 0.5, normalization="schmidt")


@pytest.mark.parametrize("eps", [1e-8, 1e-12])
def test_near_pole_angles_approach_pole_values(eps: float) -> None:
    for m, n in ((2, 2), (1, -1), (0, 3)):
        north = wigner_d(3, m, n, eps, normalization="raw")
        south = wigner_d(3, m, n, math.pi - eps, normalization="raw")
        assert north == pytest.approx(1.0 if m == n else 0.0, abs=1e-10)
        expected_south = (-1.0) ** ((3 + m) % 2) if m == -n else 0.0
        assert south == pytest.approx(expected_south, abs=1e-10)
