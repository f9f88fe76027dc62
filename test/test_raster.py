# test_raster.py - part of skewlattice

import numpy as np
import pytest

from skewlattice import Raster
from skewlattice.raster import unitpower


def test_defaults():
    ras = Raster(np.zeros((4, 6)))
    assert ras.dtype == np.float64
    assert (ras.width, ras.height) == (6, 4)
    assert (ras.xreal, ras.yreal) == (6, 4)
    assert (ras.xoffset, ras.yoffset) == (0, 0)
    assert ras.xmeasure == 1


def test_integer_scaling():
    ras = Raster(np.array([[0, 255]], np.uint8))
    np.testing.assert_allclose(ras, [[0, 1]])
    ras = Raster(np.array([[0, 65535]], np.uint16))
    np.testing.assert_allclose(ras, [[0, 1]])


def test_color_averaged():
    img = np.zeros((2, 3, 3))
    img[..., 0] = 3
    ras = Raster(img)
    assert ras.shape == (2, 3)
    np.testing.assert_allclose(ras, 1)


def test_invalid():
    with pytest.raises(ValueError):
        Raster(np.zeros(5))
    with pytest.raises(ValueError):
        Raster(np.zeros((0, 5)))
    with pytest.raises(ValueError):
        Raster(np.zeros((3, 3)), xreal=-1)
    with pytest.raises(ValueError):
        Raster(np.zeros((3, 3)), yreal=0)


def test_attributes_survive():
    ras = Raster(np.ones((4, 4)), xreal=2e-9, yreal=3e-9,
                 xoffset=1e-9, xyunit="m", zunit="V")
    for other in [ras * 2, ras.copy(), Raster(ras)]:
        assert other.xreal == 2e-9
        assert other.yreal == 3e-9
        assert other.xoffset == 1e-9
        assert other.xyunit == "m"
        assert other.zunit == "V"


def test_constructor_overrides():
    ras = Raster(np.ones((4, 4)), xreal=2.0)
    other = Raster(ras, xreal=8.0)
    assert other.xreal == 8.0
    assert ras.xreal == 2.0


def test_pixel_and_position():
    ras = Raster(np.zeros((10, 10)), xreal=20, yreal=10,
                 xoffset=-10, yoffset=-5)
    assert ras.position(7, 6) == (4.0, 1.0)
    assert ras.pixel((4.0, 1.0)) == (7, 6)
    assert ras.pixel((4.9, 1.4)) == (7, 6)
    # ties go up
    assert ras.pixel((5.0, 1.5)) == (8, 7)


def test_minmax():
    ras = Raster(np.array([[1., -2.], [3., 0.]]))
    assert ras.minmax() == (-2.0, 3.0)


def test_like():
    ras = Raster(np.zeros((2, 3)), xreal=6, xyunit="m")
    other = ras.like(np.ones((2, 3)))
    assert other.xreal == 6
    assert other.xyunit == "m"
    with pytest.raises(ValueError):
        ras.like(np.ones((3, 2)))


def test_area():
    data = np.arange(20.).reshape(4, 5)
    ras = Raster(data, xreal=10, yreal=8, xoffset=1)
    win = ras.area([1, 2, 3, 2])
    np.testing.assert_array_equal(win, data[2:4, 1:4])
    assert win.xreal == 6
    assert win.yreal == 4
    assert win.xoffset == 3
    assert win.yoffset == 4
    with pytest.raises(ValueError):
        ras.area([3, 0, 3, 2])


def test_zoomed():
    ras = Raster(np.random.default_rng(0).random((16, 20)),
                 xreal=2.0, yreal=4.0, xoffset=-1.0, yoffset=-2.0)
    zm = ras.zoomed(2)
    assert zm.shape == ras.shape
    assert zm.xreal == 1.0
    assert zm.yreal == 2.0
    assert zm.xoffset == -0.5
    assert zm.yoffset == -1.0
    same = ras.zoomed(1)
    np.testing.assert_array_equal(same, ras)
    assert same is not ras
    with pytest.raises(ValueError):
        ras.zoomed(0)


def test_zoom_of_constant():
    ras = Raster(np.full((9, 12), 3.0))
    np.testing.assert_allclose(ras.zoomed(2), 3.0)


def test_stretched():
    ras = Raster(np.array([[2., 4.], [6., 10.]]))
    st = ras.stretched(0)
    np.testing.assert_allclose(st, [[0, 0.25], [0.5, 1]])
    np.testing.assert_allclose(ras, [[2, 4], [6, 10]])


def test_save_load_npy(tmp_path):
    data = np.random.default_rng(2).normal(size=(5, 7))
    fn = str(tmp_path / "ras.npy")
    Raster(data).save(fn)
    np.testing.assert_array_equal(Raster.load(fn), data)


def test_save_load_png(tmp_path):
    data = np.linspace(-1, 1, 24).reshape(4, 6)
    fn = str(tmp_path / "ras.png")
    Raster(data).save(fn)
    back = Raster.load(fn)
    assert back.shape == (4, 6)
    assert back.min() == 0
    assert back.max() == pytest.approx(1)
    np.testing.assert_allclose(back, (data + 1) / 2, atol=1e-4)


def test_load_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        Raster.load(str(tmp_path / "nothing.png"))


def test_quality_only_for_jpeg(tmp_path):
    with pytest.raises(ValueError):
        Raster(np.zeros((2, 2))).save(str(tmp_path / "x.png"), qual=90)


def test_unitpower():
    assert unitpower("m", -1) == "m^-1"
    assert unitpower("m^-1", -1) == "m"
    assert unitpower("m", 2) == "m^2"
    assert unitpower("", -1) == ""
