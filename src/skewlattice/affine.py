# affine.py - part of skewlattice

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
from typing import Optional, Tuple
import numpy.typing
ArrayLike = numpy.typing.ArrayLike


class Affine(np.ndarray):
    """Affine transformation

    The constructor builds a unity transformation if given no arguments,
    or uses the optional array for source data.

    The layout is [[a, c, tx], [b, d, ty]], so that a point (x, y) maps to
    (a x + c y + tx, b x + d y + ty).
    """
    def __new__(cls, arr: Optional[ArrayLike] = None):
        if arr is None:
            obj = np.asarray([[1., 0., 0.], [0., 1., 0.]]).view(cls)
        else:
            obj = np.array(arr, float).view(cls)
            if obj.shape != (2, 3):
                raise ValueError("Affine transformations must be 2x3")
        return obj
            
    def __array_finalize__(self, obj):
        return

    def __repr__(self):
        if len(self.shape)==2:
            lst = []
            for row in self:
                lst.append(f"[{row[0]:8.4f} {row[1]:8.4f} | {row[2]:8.4f}]")
            return "\n".join(lst)
        elif len(self.shape)==0:
            return self.view(type=np.ndarray).flatten()[0].__repr__()
        else:
            return self.view(type=np.ndarray).__repr__()

    def __str__(self):
        return self.__repr__()

    @staticmethod
    def fromcoefficients(a: float, b: float, c: float, d: float,
                         tx: float = 0, ty: float = 0) -> "Affine":
        """Build a transformation from its six scalars

        The point (x, y) maps to (a x + c y + tx, b x + d y + ty).
        """
        return Affine([[a, c, tx], [b, d, ty]])

    def coefficients(self) -> Tuple[float, ...]:
        """The six scalars (a, b, c, d, tx, ty)"""
        return (float(self[0,0]), float(self[1,0]),
                float(self[0,1]), float(self[1,1]),
                float(self[0,2]), float(self[1,2]))
    
    def __imatmul__(self, afm: "Affine") -> "Affine":
        """Compose in place

        After `afm1 @= afm2`, applying `afm1` to a point is the same as
        first applying the old `afm2` and then the old `afm1`.
        """
        self[:] = funcs.composeAffine(self, afm)[:]
        return self

    def __matmul__(self, afm: "Affine") -> "Affine":
        """Composition: `afm1 @ afm2` applies `afm2` first, then `afm1`"""
        return Affine(funcs.composeAffine(self, afm))

    def __mul__(self, xy: ArrayLike) -> np.ndarray:
        """Map points

        `afm * xy` maps a single (x, y) point, or a 2×N array with
        one point per column. The result is a plain array.
        """
        return funcs.applyAffine(self.view(np.ndarray), xy)

    def shift(self, dxy: ArrayLike) -> "Affine":
        """Translate the output of the transformation, in place

        Arguments:
            dxy: (dx, dy) added to every mapped point

        Returns:
            self
        """
        self[0,2] += dxy[0]
        self[1,2] += dxy[1]
        return self

    def shifted(self, dxy: ArrayLike) -> "Affine":
        """Like `shift`, but on a copy"""
        out = self.copy()
        return out.shift(dxy)

    def determinant(self) -> float:
        """Determinant of the linear part, *a* *d* − *b* *c*"""
        return float(funcs.determinant(self))

    def invert(self) -> "Affine":
        """Replace the transformation by its inverse

        Raises DegenerateTransform if the determinant is (nearly) zero.
        """
        self[:] = funcs.invertAffine(self.view(np.ndarray))[:]
        return self

    def inverse(self) -> "Affine":
        """A new transformation that undoes this one

        Raises DegenerateTransform if the determinant is (nearly) zero.
        """
        out = Affine(self.copy())
        out.invert()
        return out

    @staticmethod
    def translator(dxy: ArrayLike) -> "Affine":
        """Pure translation by a (dx, dy) pair"""
        dx, dy = dxy
        return Affine.fromcoefficients(1., 0., 0., 1., dx, dy)

    @staticmethod
    def shearer(hskew: float, vskew: float) -> "Affine":
        """An affine transformation that represents a pure shear

        Arguments:
            hskew: horizontal skew in degrees
            vskew: vertical skew in degrees

        Returns:
            the constructed affine transformation

        Horizontal skew moves each row sideways in proportion to its
        y-coordinate: *x*′ = *x* + tan(hskew) *y*. Vertical skew moves
        each column up or down in proportion to its x-coordinate:
        *y*′ = tan(vskew) *x* + *y*.

        Angles are not validated here; see `Skew` for that.
        """
        return Affine.fromcoefficients(1., np.tan(np.radians(vskew)),
                                       np.tan(np.radians(hskew)), 1.)
