# test_resample.py - part of skewlattice

import numpy as np
import pytest

from skewlattice import Affine, Interpolation, Raster, resample, affineimage
from skewlattice.resample import BLOCKROWS


@pytest.fixture
def src():
    return np.random.default_rng(5).random((7, 9))


@pytest.mark.parametrize("interp", [Interpolation.ROUND,
                                    Interpolation.LINEAR])
def test_identity_exact(src, interp):
    out = affineimage(src, Affine(), (9, 7), interp, fill=-1)
    np.testing.assert_array_equal(out, src)


@pytest.mark.parametrize("interp", list(Interpolation))
def test_identity(src, interp):
    out = affineimage(src, Affine(), (9, 7), interp, fill=-1)
    np.testing.assert_allclose(out, src, atol=1e-12)


def test_identity_many_rows():
    data = np.random.default_rng(6).random((BLOCKROWS*2 + 5, 3))
    out = affineimage(data, Affine(), (3, len(data)), Interpolation.LINEAR)
    np.testing.assert_array_equal(out, data)


def test_integer_shift(src):
    out = affineimage(src, Affine.translator([2, 0]), (9, 7),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_array_equal(out[:, :7], src[:, 2:])
    # x = 9 lies on the right edge, x = 10 beyond it
    np.testing.assert_array_equal(out[:, 7], src[:, 8])
    assert np.all(out[:, 8] == -1)


def test_fill_outside(src):
    out = affineimage(src, Affine.translator([-3, -2]), (9, 7),
                      Interpolation.KEYS, fill=-7.25)
    assert np.all(out[:, :3] == -7.25)
    assert np.all(out[:2, :] == -7.25)
    np.testing.assert_allclose(out[2:, 3:], src[:5, :6], atol=1e-12)


def test_half_pixel_linear():
    ramp = np.tile(np.arange(10.), (4, 1))
    out = affineimage(ramp, Affine.translator([0.5, 0]), (10, 4),
                      Interpolation.LINEAR)
    np.testing.assert_allclose(out[:, :9], ramp[:, :9] + 0.5)


def test_pixel_centers():
    # Doubling the size maps each source pixel onto two output pixels
    # on either side of its center. The first output row and column
    # land at −1/4, just before the source.
    data = np.array([[0., 10., 20., 30.]])
    half = Affine.fromcoefficients(0.5, 0, 0, 0.5)
    out = affineimage(data, half, (8, 2), Interpolation.LINEAR, fill=-1)
    assert np.all(out[0] == -1)
    np.testing.assert_allclose(out[1], [-1, 2.5, 7.5, 12.5, 17.5, 22.5,
                                        27.5, 30])
    out = affineimage(data, half, (8, 2), Interpolation.ROUND, fill=-1)
    assert np.all(out[0] == -1)
    np.testing.assert_allclose(out[1], [-1, 0, 10, 10, 20, 20, 30, 30])


def test_mirrored_boundary():
    data = np.array([[1., 2., 3., 4.]])
    # the source spans [0, W]; beyond the last sample the missing
    # neighbor is found by mirroring
    out = affineimage(data, Affine.translator([-0.25, 0]), (4, 1),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_allclose(out[0], [-1, 1.75, 2.75, 3.75])
    out = affineimage(data, Affine.translator([-0.5, 0]), (4, 1),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_allclose(out[0], [-1, 1.5, 2.5, 3.5])
    out = affineimage(data, Affine.translator([0.5, 0]), (4, 1),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_allclose(out[0], [1.5, 2.5, 3.5, 4])
    out = affineimage(data, Affine.translator([0.75, 0]), (4, 1),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_allclose(out[0], [1.75, 2.75, 3.75, 4])
    out = affineimage(data, Affine.translator([1.25, 0]), (4, 1),
                      Interpolation.LINEAR, fill=-1)
    np.testing.assert_allclose(out[0], [2.25, 3.25, 4, -1])


def test_edges_inclusive():
    data = np.array([[1., 2., 3., 4.]])
    out = affineimage(data, Affine.translator([1, 0]), (4, 1),
                      Interpolation.ROUND, fill=-1)
    np.testing.assert_array_equal(out[0], [2, 3, 4, 4])
    out = affineimage(data, Affine.translator([2, 0]), (4, 1),
                      Interpolation.ROUND, fill=-1)
    np.testing.assert_array_equal(out[0], [3, 4, 4, -1])


def test_dest_in_place(src):
    dest = np.zeros((3, 4))
    res = resample(src, dest, Affine(), Interpolation.LINEAR, 0)
    assert res is dest
    np.testing.assert_array_equal(dest, src[:3, :4])


def test_deterministic(src):
    afm = Affine.shearer(12, -7).shifted([1.3, 2.1])
    out1 = affineimage(src, afm, (11, 8), Interpolation.BSPLINE, 0)
    out2 = affineimage(src, afm, (11, 8), Interpolation.BSPLINE, 0)
    np.testing.assert_array_equal(out1, out2)


def test_physical_dimensions():
    ras = Raster(np.zeros((4, 5)), xreal=10, yreal=2, xyunit="m",
                 zunit="V")
    out = affineimage(ras, Affine(), (7, 3))
    assert out.shape == (3, 7)
    assert out.xreal == 14
    assert out.yreal == 1.5
    assert out.xyunit == "m"
    assert out.zunit == "V"


def test_invalid_size(src):
    with pytest.raises(ValueError):
        affineimage(src, Affine(), (0, 3))
