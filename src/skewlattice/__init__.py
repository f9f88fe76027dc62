# __init__.py - part of skewlattice

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

"""skewlattice - Drift correction of lattice images by controlled skew

Scanning-probe images of crystal lattices are often distorted by
lateral drift during acquisition. Because each row (or column) is
acquired a little later than the previous one, drift manifests itself
as a shear. This package undoes that shear: the user chooses a
horizontal and a vertical skew angle, and the image is resampled onto
a new canvas that exactly contains the sheared original.

To judge the correction, peaks in the Fourier spectrum of the
corrected image are located near user-supplied points, and the angles
between four consecutive peaks of the first diffraction ring are
reported. For a square lattice, both angles should be 90°.

Main entry points:

    Raster - a 2D array with physical dimensions
    Affine - an affine transformation
    Skew - geometry of a skew correction
    Corrector - interactive correction session
    spectrum - centered magnitude spectrum of a raster
    findpeak - locate the brightest pixel near a point
    angles - included angles along four lattice peaks

"""

__version__ = "1.0.0"

from .errors import (SkewLatticeError, InvalidSkewAngle,
                     DegenerateTransform, DegenerateGeometry, OutOfBounds)
from .raster import Raster
from .affine import Affine
from .interpolation import Interpolation
from .resample import resample, affineimage
from .skew import Skew, fillvalue
from .spectrum import NumpyFFT, spectrum, postprocess, modulus, humanize
from .peaks import Peak, PeakSet, findpeak
from .lattice import angle, angles
from .session import Corrector, Mode
