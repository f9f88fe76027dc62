# peaks.py - part of skewlattice

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
from typing import Callable, List, NamedTuple, Optional, Tuple
import numpy.typing
ArrayLike = numpy.typing.ArrayLike
from .raster import Raster
from .errors import DegenerateGeometry, OutOfBounds
from . import lattice

log = logging.getLogger(__name__)

MAXRADIUS = 10


class Peak(NamedTuple):
    """A located peak: physical position and intensity"""
    x: float
    y: float
    z: float


def checkradius(radius: int) -> int:
    if int(radius) != radius or not 0 <= radius <= MAXRADIUS:
        raise ValueError(f"Search radius must be an integer between 0"
                         f" and {MAXRADIUS}")
    return int(radius)


def findpeak(img: Raster, xy: ArrayLike, radius: int = 3) -> Peak:
    """Find the brightest pixel near a point

    Arguments:
        img: raster to search, typically a spectrum
        xy: approximate (x, y) position in physical coordinates
        radius: half-width of the search window in pixels (0 to 10)

    Returns:
        the peak, at the physical coordinates of the brightest pixel

    The point is first rounded to the nearest pixel. Then we scan the
    window of columns [col − radius, col + radius) and rows [row − radius,
    row + radius), clipped to the raster. A pixel only replaces the
    starting pixel if it is strictly brighter, so the starting pixel wins
    ties. Among other equally bright pixels, the first in row-major order
    wins. With radius zero, the starting pixel is returned unchanged.

    The starting pixel may lie just outside of the raster. It then does
    not take part, and the brightest pixel of the clipped window is
    returned. Raises OutOfBounds if nothing of the window remains, which
    with radius zero means whenever the starting pixel is outside.

    The result depends only on the raster and the point, so a peak may
    be refound after the raster changes by passing in its previous
    position.
    """
    img = Raster(img)
    radius = checkradius(radius)
    col, row = img.pixel(xy)
    H, W = img.shape
    data = img.view(np.ndarray)
    i0, i1 = max(row - radius, 0), min(row + radius, H)
    j0, j1 = max(col - radius, 0), min(col + radius, W)
    inside = 0 <= col < W and 0 <= row < H
    if i0 >= i1 or j0 >= j1:
        if not inside:
            raise OutOfBounds(f"Point ({xy[0]:g}, {xy[1]:g}) lies too far"
                              " outside of the raster")
        win = data[:0, :0]
    else:
        win = data[i0:i1, j0:j1]
    if inside:
        bestj, besti = col, row
        bestz = data[row, col]
    if win.size and (not inside or win.max() > bestz):
        k = int(np.argmax(win))
        besti = i0 + k // win.shape[1]
        bestj = j0 + k % win.shape[1]
        bestz = win.flat[k]
    x, y = img.position(bestj, besti)
    return Peak(x, y, float(bestz))


class PeakSet:
    """Four ordered lattice peaks

    The order matters: the peaks should be placed in sequence around
    the first ring of the lattice, so that peaks 1-2-3 and 2-3-4 form
    the two measured angles.

    Each slot is either None or a Peak. Interested parties may
    `subscribe` to be called with the PeakSet whenever any slot
    changes.
    """
    N = 4

    def __init__(self):
        self.peaks: List[Optional[Peak]] = [None] * self.N
        self.listeners: List[Callable[["PeakSet"], None]] = []

    def __repr__(self):
        def fmt(p):
            return "-" if p is None else f"({p.x:.4g}, {p.y:.4g})"
        return "PeakSet[" + " ".join(fmt(p) for p in self.peaks) + "]"

    def __getitem__(self, idx: int) -> Optional[Peak]:
        return self.peaks[idx]

    def __iter__(self):
        return iter(self.peaks)

    def __len__(self):
        return self.N

    def subscribe(self, callback: Callable[["PeakSet"], None]) -> None:
        """Register a function to be called when the peaks change"""
        self.listeners.append(callback)

    def unsubscribe(self, callback: Callable[["PeakSet"], None]) -> None:
        self.listeners.remove(callback)

    def _changed(self):
        for cb in self.listeners:
            cb(self)

    def isfull(self) -> bool:
        return all(p is not None for p in self.peaks)

    def set(self, idx: int, peak: Optional[Peak]) -> None:
        """Store a peak in a slot (0 to 3), or clear it by passing None"""
        if not 0 <= idx < self.N:
            raise IndexError(f"Peak index must be between 0 and {self.N-1}")
        if peak is not None:
            peak = Peak(*[float(v) for v in peak])
        if peak != self.peaks[idx]:
            self.peaks[idx] = peak
            self._changed()

    def clear(self) -> None:
        if any(p is not None for p in self.peaks):
            self.peaks = [None] * self.N
            self._changed()

    def refind(self, img: Raster, radius: int = 3) -> None:
        """Relocate all placed peaks in a (new) raster

        Each peak is searched for starting from its current position.
        Listeners are notified once if anything moved. Raises OutOfBounds
        if a peak lies too far outside of the new raster; in that case,
        nothing is changed.
        """
        newpeaks = [None if p is None else findpeak(img, (p.x, p.y), radius)
                    for p in self.peaks]
        if newpeaks != self.peaks:
            log.debug("Peaks moved: %s", newpeaks)
            self.peaks = newpeaks
            self._changed()

    def angles(self) -> Optional[Tuple[float, float]]:
        """The angles 1-2-3 and 2-3-4 in degrees

        Returns None if not all four peaks have been placed. An angle
        that is undefined because two consecutive peaks coincide is
        returned as NaN.
        """
        if not self.isfull():
            return None
        p = self.peaks
        result = []
        for a, b, c in [(p[0], p[1], p[2]), (p[1], p[2], p[3])]:
            try:
                result.append(lattice.angle(a, b, c))
            except DegenerateGeometry:
                log.warning("Coinciding peaks; angle not available")
                result.append(np.nan)
        return tuple(result)
