# skew.py - part of skewlattice

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
from .affine import Affine
from .raster import Raster
from .interpolation import Interpolation
from .resample import affineimage
from .errors import InvalidSkewAngle

log = logging.getLogger(__name__)


def checkangle(deg: float, name: str = "skew") -> float:
    """Validate a skew angle

    Returns the angle as a float. Raises InvalidSkewAngle if the angle
    is not finite or its magnitude is 90° or more.
    """
    deg = float(deg)
    if not np.isfinite(deg) or abs(deg) >= 90:
        raise InvalidSkewAngle(f"{name.capitalize()} angle must lie strictly"
                               f" between −90° and 90°, not {deg}")
    return deg


def fillvalue(img: ArrayLike) -> float:
    """Background value for corrected rasters

    This lies 5% of the data range below the minimum, so that the
    canvas outside of the original image is distinguishable from
    real data.
    """
    arr = np.asarray(img, float)
    vmin = float(arr.min())
    vmax = float(arr.max())
    return vmin - 0.05 * (vmax - vmin)


class Skew:
    """Geometry of a skew correction

    Arguments:
        size: (width, height) of the original raster in pixels
        hskew: horizontal skew angle in degrees
        vskew: vertical skew angle in degrees

    Horizontal skew shifts each row sideways in proportion to its
    y-coordinate, vertical skew shifts each column up or down in
    proportion to its x-coordinate. That is, the shear maps (x, y) to
    (x + tan(hskew) y, tan(vskew) x + y).

    After construction, the following are available:

        size - (width, height) of the corrected raster
        affine - transformation from original to corrected pixel indices
        inverse - transformation from corrected to original pixel indices
        corners - 2×4 array of the original corners in corrected space

    The new size is the bounding box of the sheared corners, rounded to
    the nearest integer, with ties rounded up. The affine transformation
    includes the translation that places the top-left of the bounding
    box at the origin.

    Use `apply` to produce the corrected raster.

    Raises InvalidSkewAngle if either angle is not strictly between −90°
    and 90°.
    """
    def __init__(self, size: Tuple[int, int],
                 hskew: float = 0, vskew: float = 0):
        W, H = [int(v) for v in size]
        if W <= 0 or H <= 0:
            raise ValueError("Size must be positive")
        self.hskew = checkangle(hskew, "horizontal skew")
        self.vskew = checkangle(vskew, "vertical skew")
        self.origsize = (W, H)
        shear = Affine.shearer(self.hskew, self.vskew)
        corners = shear * np.array([[0, W, W, 0],
                                    [0, 0, H, H]], float)
        pmin = corners.min(1)
        pmax = corners.max(1)
        self.size = (max(funcs.roundhalfup(pmax[0] - pmin[0]), 1),
                     max(funcs.roundhalfup(pmax[1] - pmin[1]), 1))
        self.affine = shear.shifted(-pmin)
        self.inverse = self.affine.inverse()
        self.corners = corners - pmin.reshape(2, 1)
        log.debug("Skew %.3f°, %.3f° maps %dx%d onto %dx%d",
                  self.hskew, self.vskew, W, H, *self.size)

    def __repr__(self):
        W, H = self.origsize
        w, h = self.size
        return (f"Skew[({self.hskew:.2f}°, {self.vskew:.2f}°)"
                f" {W}x{H} → {w}x{h}]")

    def apply(self, img: ArrayLike,
              interp: Optional[Interpolation] = None,
              fill: Optional[float] = None) -> Raster:
        """Produce the corrected raster

        Arguments:
            img: the original raster; must have the size given at
                 construction
            interp: interpolation kernel (default: linear)
            fill: background value (default: see `fillvalue`)

        Returns:
            the corrected raster

        The physical dimensions of the result scale with the pixel
        dimensions and the units are retained. Offsets are zero.
        """
        img = Raster(img)
        if (img.width, img.height) != self.origsize:
            raise ValueError("Raster does not match size of skew geometry")
        if fill is None:
            fill = fillvalue(img)
        return affineimage(img, self.inverse, self.size, interp, fill)
