# resample.py - part of skewlattice

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
from typing import Optional, Tuple
import numpy.typing
ArrayLike = numpy.typing.ArrayLike
from . import funcs
from .raster import Raster
from .interpolation import Interpolation, resolvecoeffs

log = logging.getLogger(__name__)

# Number of output rows processed at once
BLOCKROWS = 64


def _sample(coeff, x, y, interp):
    H, W = coeff.shape
    offs = interp.offsets
    oj, fx = interp.split(x)
    oi, fy = interp.split(y)
    rows = funcs.mirrorindex(oi.reshape(-1, 1) + offs.reshape(1, -1), H)
    cols = funcs.mirrorindex(oj.reshape(-1, 1) + offs.reshape(1, -1), W)
    nbh = coeff[rows[:, :, None], cols[:, None, :]]
    wy = interp.weights(fy)
    wx = interp.weights(fx)
    return np.einsum("nk,nkl,nl->n", wy, nbh, wx)


def resample(source: ArrayLike, dest: np.ndarray, invtfm: ArrayLike,
             interp: Optional[Interpolation] = None,
             fill: float = 0.0) -> np.ndarray:
    """Fill a raster by looking up pixels through an affine transformation

    Arguments:
        source: the H×W source raster
        dest: the pre-sized destination raster, overwritten in place
        invtfm: 2×3 transformation from destination pixel indices
                to source pixel indices
        interp: interpolation kernel (default: linear)
        fill: value for destination pixels that map outside of the source

    Returns:
        dest

    For each destination pixel (column j, row i) we compute the source
    coordinate (x, y) = invtfm · (j, i), corrected so that pixel centers
    rather than pixel corners correspond. Pixels whose corrected source
    coordinate falls outside of [0, W] × [0, H] get the fill value. All
    other points are interpolated from a K×K neighborhood of source
    samples, where K is the support size of the kernel. Neighbors beyond
    the edge of the source are found by mirroring at the edge.

    For kernels with a non-interpolating basis, the source is first
    converted to basis coefficients. That requires one temporary array
    the size of the source.

    The destination is only written once all values have been
    calculated.
    """
    if interp is None:
        interp = Interpolation.LINEAR
    src = np.asarray(source, float)
    if src.ndim != 2 or src.size == 0:
        raise ValueError("Source must be a non-empty 2D array")
    if np.ndim(dest) != 2:
        raise ValueError("Destination must be two-dimensional")
    H, W = src.shape
    newH, newW = dest.shape
    (a, c, bx), (b, d, by) = np.asarray(invtfm, float)
    bx += 0.5*(a + c - 1.0)
    by += 0.5*(b + d - 1.0)
    log.debug("Resampling %dx%d into %dx%d with %s kernel",
              W, H, newW, newH, interp.label)

    coeff = resolvecoeffs(src, interp)
    out = np.empty((newH, newW))
    jj = np.arange(newW, dtype=float).reshape(1, -1)
    for i0 in range(0, newH, BLOCKROWS):
        ii = np.arange(i0, min(i0 + BLOCKROWS, newH),
                       dtype=float).reshape(-1, 1)
        x = a*jj + c*ii + bx
        y = b*jj + d*ii + by
        inside = (x >= 0) & (x <= W) & (y >= 0) & (y <= H)
        block = np.full(x.shape, float(fill))
        if np.any(inside):
            block[inside] = _sample(coeff, x[inside], y[inside], interp)
        out[i0:i0 + len(ii)] = block
    dest[:] = out
    return dest


def affineimage(source: ArrayLike, invtfm: ArrayLike,
                size: Tuple[int, int],
                interp: Optional[Interpolation] = None,
                fill: float = 0.0) -> Raster:
    """Resample a raster into a newly allocated one

    Arguments:
        source: the source raster
        invtfm: transformation from new pixel indices to source pixel indices
        size: (width, height) of the new raster
        interp: interpolation kernel (default: linear)
        fill: value for pixels that map outside of the source

    Returns:
        the new raster

    The physical size of a pixel is retained, so the physical
    dimensions of the result scale with its pixel dimensions. Units
    carry over from the source.
    """
    src = Raster(source)
    w, h = [int(v) for v in size]
    if w <= 0 or h <= 0:
        raise ValueError("Size must be positive")
    out = Raster(np.empty((h, w)), w * src.xmeasure, h * src.ymeasure,
                 0.0, 0.0, src.xyunit, src.zunit)
    resample(src, out, invtfm, interp, fill)
    return out
