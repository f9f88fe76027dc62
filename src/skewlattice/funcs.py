# funcs.py - part of skewlattice

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
from .errors import DegenerateTransform

# Relative tolerance for the determinant of the linear part
DETEPS = 1e-12


def roundhalfup(x):
    """Round to nearest integer, with ties going up

    Unlike Python's round(), ties never go to the even neighbor.
    """
    return int(np.floor(x + 0.5))


def determinant(afm):
    return afm[0,0]*afm[1,1] - afm[1,0]*afm[0,1]


def invertAffine(afm):
    """Inverse of a 2x3 affine matrix [[a, c, tx], [b, d, ty]]

    Raises DegenerateTransform if the determinant vanishes relative to
    the scale of the linear part.
    """
    a, c, tx = afm[0]
    b, d, ty = afm[1]
    D = a*d - b*c
    scl = max(abs(a), abs(b), abs(c), abs(d))
    if not np.isfinite(D) or scl == 0 or abs(D) < DETEPS * scl * scl:
        raise DegenerateTransform(f"Determinant {D:g} too small to invert")
    return np.array([[d/D, -c/D, (c*ty - d*tx)/D],
                     [-b/D, a/D, (b*tx - a*ty)/D]])


def composeAffine(afm1, afm2):
    """Transformation that applies afm2 first, then afm1"""
    afm1 = np.asarray(afm1, float)
    afm2 = np.asarray(afm2, float)
    lin = afm1[:,:2] @ afm2[:,:2]
    tr = afm1[:,:2] @ afm2[:,2] + afm1[:,2]
    return np.hstack([lin, tr.reshape(2,1)])


def applyAffine(afm, xy):
    """Apply to a 2-vector or to a 2xN array of points"""
    xy = np.asarray(xy, float)
    if xy.ndim == 1:
        return afm[:,:2] @ xy + afm[:,2]
    return afm[:,:2] @ xy + afm[:,2].reshape(2,1)


def mirrorindex(k, n):
    """Reflect integer indices into [0, n) with period 2n

    Index −1 maps to 0, index n maps to n − 1, and so on, so that edge
    samples are repeated once, as in a mirror placed at the pixel
    boundary.
    """
    k = np.asarray(k) % (2*n)
    return np.where(k >= n, 2*n - 1 - k, k)
