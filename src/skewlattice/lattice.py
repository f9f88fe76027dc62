# lattice.py - part of skewlattice

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


import numpy as np
from typing import Tuple
import numpy.typing
ArrayLike = numpy.typing.ArrayLike
from .errors import DegenerateGeometry


def angle(p1: ArrayLike, p2: ArrayLike, p3: ArrayLike) -> float:
    """Angle at p2 between the lines to p1 and p3

    Arguments:
        p1, p2, p3: (x, y)-pairs; any further elements are ignored

    Returns:
        the angle in degrees, between 0 and 180

    Raises DegenerateGeometry if p1 or p3 coincides with p2.
    """
    p1 = np.asarray(p1, float)[:2]
    p2 = np.asarray(p2, float)[:2]
    p3 = np.asarray(p3, float)[:2]
    a = p1 - p2
    b = p3 - p2
    la = np.hypot(*a)
    lb = np.hypot(*b)
    if la == 0 or lb == 0:
        raise DegenerateGeometry("Angle undefined for coinciding points")
    cosab = np.dot(a, b) / (la * lb)
    return float(np.degrees(np.arccos(np.clip(cosab, -1, 1))))


def angles(p1: ArrayLike, p2: ArrayLike,
           p3: ArrayLike, p4: ArrayLike) -> Tuple[float, float]:
    """The two included angles along a path of four lattice peaks

    Returns:
        the angles p1-p2-p3 and p2-p3-p4 in degrees

    For a perfect square lattice with the peaks given in order around
    the first ring, both angles are 90°.
    """
    return angle(p1, p2, p3), angle(p2, p3, p4)
