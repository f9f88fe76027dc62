# spectrum.py - part of skewlattice

## Copyright (C) 2025  Daniel A. Wagenaar
## 
## This program is free software: you can redistribute it and/or
## modify it under the terms of the GNU General Public License as
## published by the Free Software Foundation, either version 3 of the
## License, or (at your option) any later version.
## 
## This program is distributed in the hope that it will be useful, but
## WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
## General Public License for more details.
## 
## You should have received a copy of the GNU General Public License
## along with this program.  If not, see <https://www.gnu.org/licenses/>.


import logging
import numpy as np
import scipy.signal
from typing import Optional, Tuple, Protocol
import numpy.typing
ArrayLike = numpy.typing.ArrayLike
from .raster import Raster, unitpower

log = logging.getLogger(__name__)


class FFTProvider(Protocol):
    """Anything that can calculate a windowed forward 2D FFT

    `forward(img, window)` must return a (real, imaginary) pair of
    arrays with the same shape as `img`.
    """
    def forward(self, img: np.ndarray,
                window: str = "hann") -> Tuple[np.ndarray, np.ndarray]:
        ...


class NumpyFFT:
    """Forward 2D FFT using numpy

    Arguments:
        level: subtract the mean before windowing (default: True)

    The data are leveled and then multiplied by a separable window (any
    window known to scipy.signal.get_window; "hann" by default, None for
    no window) before transformation. Without leveling, the zero
    frequency peak and its windowed neighbors swamp the center of the
    spectrum. The transform is scaled to preserve the RMS value.
    """
    def __init__(self, level: bool = True):
        self.level = level

    def forward(self, img: np.ndarray,
                window: Optional[str] = "hann") -> Tuple[np.ndarray, np.ndarray]:
        img = np.asarray(img, float)
        if self.level:
            img = img - img.mean()
        if window:
            H, W = img.shape
            wy = scipy.signal.get_window(window, H, fftbins=False)
            wx = scipy.signal.get_window(window, W, fftbins=False)
            img = img * wy.reshape(-1, 1) * wx.reshape(1, -1)
        ft = np.fft.fft2(img, norm="ortho")
        return ft.real, ft.imag


def modulus(re: ArrayLike, im: ArrayLike) -> np.ndarray:
    """Elementwise magnitude of a complex spectrum given in two parts"""
    re = np.asarray(re, float)
    im = np.asarray(im, float)
    if re.shape != im.shape:
        raise ValueError("Real and imaginary parts must have the same shape")
    return np.hypot(re, im)


def humanize(data: ArrayLike) -> np.ndarray:
    """Swap quadrants so that zero frequency is at index (H//2, W//2)"""
    return np.fft.fftshift(np.asarray(data), axes=(0, 1))


def postprocess(spec: Raster) -> Raster:
    """Prepare a raw magnitude spectrum for display and peak finding

    Arguments:
        spec: magnitude spectrum with zero frequency at index (0, 0),
              carrying the physical dimensions of the image it came from

    Returns:
        the processed spectrum

    The quadrants are swapped to put zero frequency in the center. The
    physical dimensions become reciprocal: the extent is one over the
    size of an original pixel and the lateral unit is raised to the
    power −1. The offsets are set such that the center pixel sits at
    coordinate (0, 0). Finally, the minimum is subtracted so that all
    values are non-negative.
    """
    spec = Raster(spec)
    H, W = spec.shape
    xreal = 1 / spec.xmeasure
    yreal = 1 / spec.ymeasure
    out = Raster(humanize(spec.view(np.ndarray)), xreal, yreal,
                 xyunit=unitpower(spec.xyunit, -1), zunit=spec.zunit)
    out.xoffset = -out.jtor(W / 2)
    out.yoffset = -out.itor(H / 2)
    out -= out.view(np.ndarray).min()
    return out


def spectrum(img: ArrayLike, fft: Optional[FFTProvider] = None,
             window: Optional[str] = "hann") -> Raster:
    """Magnitude spectrum of a raster

    Arguments:
        img: the raster
        fft: optional FFTProvider (default: NumpyFFT)
        window: windowing function passed to the provider

    Returns:
        the centered, non-negative magnitude spectrum in reciprocal units
    """
    img = Raster(img)
    if fft is None:
        fft = NumpyFFT()
    re, im = fft.forward(img.view(np.ndarray), window)
    if np.shape(re) != img.shape or np.shape(im) != img.shape:
        raise ValueError("FFT provider returned data of the wrong shape")
    log.debug("Spectrum of %dx%d raster", img.width, img.height)
    spec = img.like(modulus(re, im))
    return postprocess(spec)
