# interpolation.py - part of skewlattice

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


"""Separable interpolation kernels

Each kernel is a symmetric piecewise polynomial of the distance |s|
between the sampling point and a neighboring sample. The weights for
a fractional position t are the kernel evaluated at t − o for each of
the neighbor offsets o.

B-spline and O-MOMS kernels do not pass through the samples. For
those, the samples must first be converted to coefficients with
`resolvecoeffs`.
"""

import enum
import numpy as np
import scipy.linalg


def _round(s):
    return np.ones_like(s)


def _linear(s):
    return np.clip(1 - s, 0, None)


def _keys(s):
    # Keys cubic convolution with a = −1/2
    return np.where(s < 1,
                    1.5*s**3 - 2.5*s**2 + 1,
                    np.where(s < 2,
                             -0.5*s**3 + 2.5*s**2 - 4*s + 2,
                             0.))


def _schaum(s):
    # Four-point Lagrange interpolation
    return np.where(s < 1,
                    (s*s - 1) * (s - 2) / 2,
                    np.where(s < 2,
                             -(s - 1) * (s - 2) * (s - 3) / 6,
                             0.))


def _bspline(s):
    return np.where(s < 1,
                    (3*s**3 - 6*s**2 + 4) / 6,
                    np.where(s < 2,
                             (2 - s)**3 / 6,
                             0.))


def _omoms(s):
    return np.where(s < 1,
                    s**3/2 - s**2 + s/14 + 13/21,
                    np.where(s < 2,
                             -s**3/6 + s**2 - 85/42*s + 29/21,
                             0.))


class Interpolation(enum.Enum):
    """Interpolation kernels for affine resampling

    Each member knows its support size (the number of neighbors
    consulted per axis) and whether its basis is interpolating.
    """
    ROUND = ("round", 1, True, _round)
    LINEAR = ("linear", 2, True, _linear)
    KEYS = ("keys", 4, True, _keys)
    SCHAUM = ("schaum", 4, True, _schaum)
    BSPLINE = ("bspline", 4, False, _bspline)
    OMOMS = ("omoms", 4, False, _omoms)

    def __init__(self, label, support, interpolating, kernel):
        self.label = label
        self.support = support
        self.interpolating = interpolating
        self.kernel = kernel

    def __repr__(self):
        return f"Interpolation.{self.name}"

    @staticmethod
    def byname(name: str) -> "Interpolation":
        """Look up a kernel by its (case-insensitive) name"""
        for interp in Interpolation:
            if interp.label == name.lower():
                return interp
        raise ValueError(f"Unknown interpolation: {name}")

    @property
    def offsets(self) -> np.ndarray:
        """Neighbor offsets relative to the base sample

        For support K these run from −(K − 1)//2 to K//2, e.g.,
        −1, 0, 1, 2 for the cubic kernels.
        """
        K = self.support
        return np.arange(-((K - 1) // 2), K // 2 + 1)

    def split(self, x: np.ndarray):
        """Split coordinates into base index and fractional part

        Even kernels use the sample to the left as base; odd kernels
        use the nearest sample.

        Returns:
            (base, frac) arrays
        """
        if self.support % 2:
            base = np.floor(x + 0.5)
        else:
            base = np.floor(x)
        return base.astype(int), x - base

    def weights(self, t: np.ndarray) -> np.ndarray:
        """Kernel weights for fractional positions

        Arguments:
            t: N-vector of fractional positions

        Returns:
            N×K array of weights, one column per neighbor offset
        """
        t = np.asarray(t, float)
        s = np.abs(t.reshape(-1, 1) - self.offsets.reshape(1, -1))
        return self.kernel(s)


def resolvecoeffs(data: np.ndarray, interp: Interpolation) -> np.ndarray:
    """Convert samples to basis coefficients

    Arguments:
        data: H×W array of samples
        interp: interpolation kernel

    Returns:
        H×W array of coefficients

    For interpolating kernels, this is just a copy of the data. For the
    others, we solve, along each axis in turn, the tridiagonal system
    that expresses each sample as the kernel-weighted sum of its
    neighboring coefficients. The boundary condition is the same
    half-sample mirror used when gathering neighbors during resampling.
    """
    coeff = np.array(data, float)
    if interp.interpolating:
        return coeff
    b0, b1 = interp.kernel(np.array([0., 1.]))
    for axis in [0, 1]:
        n = coeff.shape[axis]
        if n == 1:
            # mirror boundary makes both neighbors equal to the sample itself
            continue
        ab = np.zeros((3, n))
        ab[0, 1:] = b1
        ab[1, :] = b0
        ab[2, :-1] = b1
        ab[1, 0] += b1
        ab[1, -1] += b1
        if axis == 0:
            coeff = scipy.linalg.solve_banded((1, 1), ab, coeff)
        else:
            coeff = scipy.linalg.solve_banded((1, 1), ab, coeff.T).T
    return np.ascontiguousarray(coeff)
