# errors.py - part of skewlattice

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


"""Exceptions raised by skewlattice

All of these signal local, recoverable conditions. None of them is
retried internally; it is up to the caller to, e.g., clamp a skew
angle back into range and try again.
"""


class SkewLatticeError(Exception):
    """Base class for all skewlattice errors"""
    pass


class InvalidSkewAngle(SkewLatticeError, ValueError):
    """A skew angle is not finite or not strictly inside (−90°, 90°)"""
    pass


class DegenerateTransform(SkewLatticeError, ValueError):
    """An affine transformation has (near) zero determinant"""
    pass


class DegenerateGeometry(SkewLatticeError, ValueError):
    """An angle was requested between points that coincide"""
    pass


class OutOfBounds(SkewLatticeError, IndexError):
    """A peak search started outside of the raster"""
    pass
