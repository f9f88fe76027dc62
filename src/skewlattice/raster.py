# raster.py - part of skewlattice

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


from . import funcs
import numpy as np
import cv2
from typing import Optional, Tuple, List
import numpy.typing
ArrayLike = numpy.typing.ArrayLike


def unitpower(unit: str, power: int) -> str:
    """Raise a unit string like "m" or "m^-1" to an integer power

    An empty unit stays empty.
    """
    if not unit:
        return unit
    base, sep, exp = unit.partition("^")
    p = (int(exp) if sep else 1) * power
    if p == 1:
        return base
    if p == 0:
        return ""
    return f"{base}^{p}"


class Raster(np.ndarray):
    """A two-dimensional grid of samples with physical dimensions

    Rasters can be constructed in several ways:

    * from numpy arrays using

          ras = Raster(array)

      optionally with physical dimensions:

          ras = Raster(array, xreal=5e-9, yreal=5e-9, xyunit="m")

    * loaded from an image file using

          ras = Raster.load(filename)

    Our native data format is np.float64. For convenience, np.uint8,
    np.uint16, or np.uint32 is also accepted. The intensity of such
    images is scaled to the range [0, 1].

    We do not keep color information. If YxXxC images are provided, the
    color channel is averaged away with equal weights for each channel.

    A Raster is just a numpy array with the following additional
    attributes:

        xreal, yreal - physical width and height
        xoffset, yoffset - physical coordinates of the top-left corner
        xyunit - unit of the lateral dimensions (e.g., "m")
        zunit - unit of the values
        meta - free-form dictionary of strings

    Pixel (j, i), that is, column j of row i, sits at physical
    coordinates (xoffset + j xmeasure, yoffset + i ymeasure).

    If the physical dimensions are not specified, one pixel measures
    one unit in both directions.
    """

    xreal = None
    yreal = None
    xoffset = 0.0
    yoffset = 0.0
    xyunit = ""
    zunit = ""
    meta = None

    @staticmethod
    def load(path: str) -> "Raster":
        if path.lower().endswith(".npy"):
            return Raster(np.load(path))
        data = cv2.imread(path, cv2.IMREAD_ANYDEPTH + cv2.IMREAD_GRAYSCALE)
        if data is None:
            raise FileNotFoundError(path)
        return Raster(data)

    def __new__(cls, data: ArrayLike,
                xreal: Optional[float] = None,
                yreal: Optional[float] = None,
                xoffset: Optional[float] = None,
                yoffset: Optional[float] = None,
                xyunit: Optional[str] = None,
                zunit: Optional[str] = None):
        if type(data)==str:
            return Raster.load(data)
        obj = np.asanyarray(data)
        if obj.dtype == np.uint8:
            scl = 255
        elif obj.dtype == np.uint16:
            scl = 65535
        elif obj.dtype == np.uint32:
            scl = 2**32 - 1
        else:
            scl = 1
        if len(obj.shape) == 3:
            obj = obj.mean(-1)
        if len(obj.shape) != 2:
            raise ValueError("Data must be two-dimensional")
        if obj.shape[0] == 0 or obj.shape[1] == 0:
            raise ValueError("Raster must have at least one pixel")
        if obj.dtype != np.float64:
            obj = obj.astype(np.float64)
        if scl != 1:
            obj /= scl
        obj = obj.view(cls)
        if xreal is not None:
            obj.xreal = float(xreal)
        if yreal is not None:
            obj.yreal = float(yreal)
        if xoffset is not None:
            obj.xoffset = float(xoffset)
        if yoffset is not None:
            obj.yoffset = float(yoffset)
        if xyunit is not None:
            obj.xyunit = xyunit
        if zunit is not None:
            obj.zunit = zunit
        if obj.xreal is None:
            obj.xreal = float(obj.shape[1])
        if obj.yreal is None:
            obj.yreal = float(obj.shape[0])
        for real in [obj.xreal, obj.yreal]:
            if not np.isfinite(real) or real <= 0:
                raise ValueError("Physical dimensions must be positive")
        return obj

    def __array_finalize__(self, obj):
        if obj is None:
            return
        self.xreal = getattr(obj, "xreal", None)
        self.yreal = getattr(obj, "yreal", None)
        self.xoffset = getattr(obj, "xoffset", 0.0)
        self.yoffset = getattr(obj, "yoffset", 0.0)
        self.xyunit = getattr(obj, "xyunit", "")
        self.zunit = getattr(obj, "zunit", "")
        meta = getattr(obj, "meta", None)
        self.meta = dict(meta) if meta else {}

    @property
    def width(self) -> int:
        return self.shape[1]

    @property
    def height(self) -> int:
        return self.shape[0]

    @property
    def xmeasure(self) -> float:
        """Physical width of one pixel"""
        return self.xreal / self.shape[1]

    @property
    def ymeasure(self) -> float:
        """Physical height of one pixel"""
        return self.yreal / self.shape[0]

    def jtor(self, j: float) -> float:
        """Column index to physical distance from the left edge"""
        return j * self.xmeasure

    def itor(self, i: float) -> float:
        """Row index to physical distance from the top edge"""
        return i * self.ymeasure

    def rtoj(self, x: float) -> float:
        """Physical distance from the left edge to (fractional) column"""
        return x / self.xmeasure

    def rtoi(self, y: float) -> float:
        """Physical distance from the top edge to (fractional) row"""
        return y / self.ymeasure

    def pixel(self, xy: ArrayLike) -> Tuple[int, int]:
        """Nearest pixel to a physical point

        Arguments:
            xy: (x, y)-pair in physical coordinates, offsets included

        Returns:
            (column, row) pair; may lie outside of the raster
        """
        col = funcs.roundhalfup(self.rtoj(xy[0] - self.xoffset))
        row = funcs.roundhalfup(self.rtoi(xy[1] - self.yoffset))
        return col, row

    def position(self, col: int, row: int) -> Tuple[float, float]:
        """Physical coordinates of a pixel, offsets included"""
        return (self.xoffset + self.jtor(col),
                self.yoffset + self.itor(row))

    def minmax(self) -> Tuple[float, float]:
        """Minimum and maximum value as python floats"""
        arr = self.view(np.ndarray)
        return float(arr.min()), float(arr.max())

    def like(self, data: ArrayLike) -> "Raster":
        """A new raster with the given data and our physical dimensions

        The data must have our shape.
        """
        data = np.asarray(data, np.float64)
        if data.shape != self.shape:
            raise ValueError("Data must match shape of raster")
        ras = Raster(data, self.xreal, self.yreal,
                     self.xoffset, self.yoffset, self.xyunit, self.zunit)
        ras.meta = dict(self.meta)
        return ras

    def area(self, rect: ArrayLike) -> "Raster":
        '''AREA - Extract rectangular window from a raster
        win = ras.AREA((x0,y0,w,h)) extracts a rectangular window
        from a raster, in pixel units.
        X0, Y0, W, and H must be integers. Areas must fit inside the raster.
        Physical dimensions and offsets are adjusted accordingly.'''
        x0, y0, w, h = [int(v) for v in rect]
        if x0 < 0 or y0 < 0 or w <= 0 or h <= 0 \
           or x0 + w > self.width or y0 + h > self.height:
            raise ValueError("Area must fit inside the raster")
        ras = Raster(self.view(np.ndarray)[y0:y0+h, x0:x0+w].copy(),
                     w * self.xmeasure, h * self.ymeasure,
                     self.xoffset + self.jtor(x0),
                     self.yoffset + self.itor(y0),
                     self.xyunit, self.zunit)
        ras.meta = dict(self.meta)
        return ras

    def resampled(self, width: int, height: int) -> "Raster":
        """Bilinearly resampled copy with the given pixel dimensions

        Physical dimensions and offsets are retained.
        """
        data = cv2.resize(np.ascontiguousarray(self.view(np.ndarray)),
                          (int(width), int(height)),
                          interpolation=cv2.INTER_LINEAR)
        ras = Raster(data, self.xreal, self.yreal,
                     self.xoffset, self.yoffset, self.xyunit, self.zunit)
        ras.meta = dict(self.meta)
        return ras

    def zoomed(self, zoom: int) -> "Raster":
        """Magnified view of the center of a raster

        For zoom > 1, the central area of (W // zoom) | 1 by (H // zoom) | 1
        pixels is resampled back to the full W × H. The physical
        dimensions and offsets are divided by the zoom factor, so that a
        spectrum centered on zero stays centered on zero.
        """
        zoom = int(zoom)
        if zoom < 1:
            raise ValueError("Zoom must be a positive integer")
        if zoom == 1:
            return self.copy()
        W, H = self.width, self.height
        w = min((W // zoom) | 1, W)
        h = min((H // zoom) | 1, H)
        ras = self.area([(W - w) // 2, (H - h) // 2, w, h]).resampled(W, H)
        ras.xreal = self.xreal / zoom
        ras.yreal = self.yreal / zoom
        ras.xoffset = self.xoffset / zoom
        ras.yoffset = self.yoffset / zoom
        return ras

    def stretch(self, percent: float = 0.1) -> "Raster":
        """STRETCH - Stretch contrast of a raster in place
        STRETCH(perc) stretches the contrast of a raster in-place.
        PERC specifies what percentage of pixels become white or black.
        """
        N = self.size
        ilo = int(.01*percent*N)
        ihi = min(int((1-.01*percent)*N), N - 1)
        flat = self.view(np.ndarray).flatten()
        vlo = np.partition(flat, ilo)[ilo]
        vhi = np.partition(flat, ihi)[ihi]
        if vhi > vlo:
            self -= vlo
            self *= 1 / (vhi - vlo)
        else:
            self[:] = 0
        self[self < 0] = 0
        self[self > 1] = 1
        return self
        
    def stretched(self, percent: float = 0.1) -> "Raster":
        """STRETCHED - Contrast-stretched copy of a raster
        ras.STRETCHED(perc) returns a contrast-stretched copy of a raster.
        PERC specifies what percentage of pixels become white or black.
        """
        ras = self.copy()
        ras.stretch(percent)
        return ras

    def summary(self) -> List[str]:
        lines = [f"Width:  {self.width} px  ({self.xreal:.4g} {self.xyunit})",
                 f"Height: {self.height} px  ({self.yreal:.4g} {self.xyunit})"]
        if self.xoffset or self.yoffset:
            lines.append(f"Offset: ({self.xoffset:.4g}, {self.yoffset:.4g})")
        arr = self.view(np.ndarray)
        lines += [f"Min:  {arr.min():.4g} {self.zunit}",
                  f"Max:  {arr.max():.4g} {self.zunit}",
                  f"Mean: {arr.mean():.4g}",
                  f"SD:   {arr.std():.4g}"]
        return lines

    def __repr__(self):
        if len(self.shape)==2:
            return "\n".join(self.summary())
        elif len(self.shape)==0:
            return self.view(np.ndarray).flatten()[0].__repr__()
        else:
            return self.view(np.ndarray).__repr__()

    def __str__(self):
        return self.__repr__()
    
    def save(self, path: str, qual: Optional[int] = None) -> None:
        '''SAVE - Save a raster to a file
        ras.SAVE(path) saves the raster RAS to the file named PATH.

        If PATH ends in ".npy", the raw values are saved with numpy.
        Otherwise, the contrast is stretched to the full range and the
        result is written through OpenCV, as 16-bit data for ".png" and
        ".tif" files, and as 8-bit data for other formats.
        Optional argument QUAL specifies jpeg quality as a number between
        0 and 100, and must only be given if PATH ends in ".jpg".'''
        low = path.lower()
        if low.endswith(".npy"):
            np.save(path, self.view(np.ndarray))
            return
        img = self.stretched(0).view(np.ndarray)
        if low.endswith((".png", ".tif", ".tiff")):
            img = (img * 65535.99).astype(np.uint16)
        else:
            img = (img * 255.99).astype(np.uint8)
        params = []
        if qual is not None:
            if not low.endswith((".jpg", ".jpeg")):
                raise ValueError("Quality only applies to jpeg files")
            params = [cv2.IMWRITE_JPEG_QUALITY, int(qual)]
        if not cv2.imwrite(path, img, params):
            raise OSError(f"Could not write {path}")
