# test_lattice.py - part of skewlattice

import numpy as np
import pytest

from skewlattice import angle, angles, Peak, DegenerateGeometry


def test_square():
    assert angles((1, 0), (0, 1), (-1, 0), (0, -1)) == pytest.approx((90, 90))


def test_unit_square_corners():
    a1, a2 = angles((0, 0), (1, 0), (1, 1), (0, 1))
    assert abs(a1 - 90) < 1e-6
    assert abs(a2 - 90) < 1e-6


def test_hexagon():
    pts = [(np.cos(a), np.sin(a)) for a in np.radians([0, 60, 120, 180])]
    assert angles(*pts) == pytest.approx((120, 120))


def test_parallelogram():
    a1, a2 = angles((0, 0), (1, 0), (2, 1), (1, 1))
    assert a1 == pytest.approx(135)
    assert a2 == pytest.approx(45)


def test_collinear():
    assert angle((0, 0), (1, 1), (2, 2)) == pytest.approx(180)
    assert angle((2, 2), (1, 1), (2, 2)) == pytest.approx(0, abs=1e-5)


def test_degenerate():
    with pytest.raises(DegenerateGeometry):
        angle((1, 1), (1, 1), (0, 0))
    with pytest.raises(DegenerateGeometry):
        angles((0, 0), (1, 0), (1, 0), (2, 2))
    with pytest.raises(ValueError):
        angle((0, 0), (0, 0), (0, 0))


def test_peaks_as_points():
    # the z-coordinate of a peak plays no role
    p = [Peak(0.1, 0, 7.), Peak(0, 0.1, 100.), Peak(-0.1, 0, 1.)]
    assert angle(*p) == pytest.approx(90)


def test_scale_invariance():
    pts = np.array([(1, 0.2), (0.1, 1), (-1, -0.1), (0, -1)])
    np.testing.assert_allclose(angles(*pts), angles(*(pts * 1e-9)))
