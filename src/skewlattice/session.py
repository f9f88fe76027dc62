# session.py - part of skewlattice

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


import enum
import logging
from typing import Any, Mapping, Optional, Tuple
import numpy.typing
ArrayLike = numpy.typing.ArrayLike
from .raster import Raster
from .interpolation import Interpolation
from .skew import Skew
from .spectrum import FFTProvider, spectrum
from .peaks import Peak, PeakSet, findpeak, checkradius
from .errors import OutOfBounds

log = logging.getLogger(__name__)


class Mode(enum.Enum):
    """Which raster a Corrector shows"""
    DATA = 0
    FFT = 1
    CORRECTED = 2
    FFT_CORRECTED = 3


class Corrector:
    """Interactive skew correction of a lattice image

    Arguments:
        img: the original raster
        radius: peak search radius in pixels (0 to 10)
        interp: interpolation kernel for the correction
        zoom: magnification (1 or 2) of the views
        fft: optional FFTProvider (default: NumpyFFT)

    The corrector keeps the original raster and its spectrum, and
    maintains a corrected raster and its spectrum for the current skew
    angles. Each change of skew recalculates the correction from the
    original, never from an earlier correction, and then relocates all
    placed peaks in the new spectrum.

    Peaks are placed on the (zoomed) spectrum of the corrected raster
    with `placepeak`. Once all four are placed, `angles` reports the
    angles 1-2-3 and 2-3-4.

    Typical use:

        cor = Corrector(img)
        for k, xy in enumerate(approxpeaks):
            cor.placepeak(k, xy)
        cor.setskew(3.5, -1.2)
        print(cor.angles())
        result = cor.output("my image")
    """
    def __init__(self, img: ArrayLike,
                 radius: int = 3,
                 interp: Interpolation = Interpolation.LINEAR,
                 zoom: int = 1,
                 fft: Optional[FFTProvider] = None):
        self.image = Raster(img)
        self.fft = fft
        self.radius = checkradius(radius)
        self.interp = interp
        self.zoom = self._checkzoom(zoom)
        self.peaks = PeakSet()
        self.imagefft = spectrum(self.image, self.fft)
        self.skew = Skew((self.image.width, self.image.height))
        self.corrected = None
        self.correctedfft = None
        self._process()

    @staticmethod
    def fromsettings(img: ArrayLike,
                     settings: Mapping[str, Any]) -> "Corrector":
        """Construct from a dictionary of stored settings

        Recognized keys are "radius", "interpolation" (kernel name),
        "zoom", "hskew", and "vskew". Other keys are ignored.
        """
        kw = {}
        if "radius" in settings:
            kw["radius"] = int(settings["radius"])
        if "interpolation" in settings:
            kw["interp"] = Interpolation.byname(settings["interpolation"])
        if "zoom" in settings:
            kw["zoom"] = int(settings["zoom"])
        cor = Corrector(img, **kw)
        hskew = settings.get("hskew", 0)
        vskew = settings.get("vskew", 0)
        if hskew or vskew:
            cor.setskew(hskew, vskew)
        return cor

    def __repr__(self):
        return f"Corrector[{self.skew} {self.peaks}]"

    @staticmethod
    def _checkzoom(zoom):
        if zoom not in (1, 2):
            raise ValueError("Zoom must be 1 or 2")
        return int(zoom)

    def _process(self):
        self.corrected = self.skew.apply(self.image, self.interp)
        self.correctedfft = spectrum(self.corrected, self.fft)

    @property
    def hskew(self) -> float:
        return self.skew.hskew

    @property
    def vskew(self) -> float:
        return self.skew.vskew

    def setskew(self, hskew: float, vskew: float) -> None:
        """Change both skew angles (in degrees)

        Raises InvalidSkewAngle, leaving the current state intact, if
        either angle is out of range.
        """
        self.skew = Skew((self.image.width, self.image.height), hskew, vskew)
        self._process()
        log.info("Applied skew %.2f°, %.2f°: %dx%d",
                 self.hskew, self.vskew, *self.skew.size)
        self.refindpeaks()

    def sethskew(self, hskew: float) -> None:
        self.setskew(hskew, self.vskew)

    def setvskew(self, vskew: float) -> None:
        self.setskew(self.hskew, vskew)

    def resethskew(self) -> None:
        self.sethskew(0.0)

    def resetvskew(self) -> None:
        self.setvskew(0.0)

    def setinterpolation(self, interp: Interpolation) -> None:
        self.interp = interp
        self._process()
        self.refindpeaks()

    def setradius(self, radius: int) -> None:
        """Set the peak search radius and relocate the peaks"""
        self.radius = checkradius(radius)
        self.refindpeaks()

    def setzoom(self, zoom: int) -> None:
        """Set the zoom of the views and relocate the peaks

        Zooming leaves the physical coordinates of peaks alone, but the
        pixels they are searched on change. Raises OutOfBounds, leaving
        the zoom unchanged, if a placed peak falls too far outside of
        the new view.
        """
        old = self.zoom
        self.zoom = self._checkzoom(zoom)
        try:
            self.refindpeaks()
        except OutOfBounds:
            self.zoom = old
            raise

    def view(self, mode: Mode = Mode.FFT_CORRECTED) -> Raster:
        """The raster shown in a given mode, at the current zoom"""
        ras = {Mode.DATA: self.image,
               Mode.FFT: self.imagefft,
               Mode.CORRECTED: self.corrected,
               Mode.FFT_CORRECTED: self.correctedfft}[mode]
        return ras.zoomed(self.zoom)

    def placepeak(self, idx: int, xy: ArrayLike) -> Peak:
        """Place peak number IDX (0 to 3) near a point

        The point is in physical (reciprocal) coordinates of the
        corrected spectrum. The peak is refined within the search radius
        before being stored. Raises OutOfBounds if the point lies too far
        outside of the view (see `findpeak`).
        """
        peak = findpeak(self.view(), xy, self.radius)
        self.peaks.set(idx, peak)
        return peak

    def clearpeaks(self) -> None:
        self.peaks.clear()

    def refindpeaks(self) -> None:
        """Relocate all placed peaks in the current view"""
        self.peaks.refind(self.view(), self.radius)

    def angles(self) -> Optional[Tuple[float, float]]:
        """Angles 1-2-3 and 2-3-4, see PeakSet.angles"""
        return self.peaks.angles()

    def output(self, title: Optional[str] = None) -> Raster:
        """The corrected raster, annotated for storage

        The result is a copy of the corrected raster with metadata
        recording the source title and the skew angles.
        """
        out = self.corrected.copy()
        out.meta = dict(self.image.meta)
        if title is not None:
            out.meta["Source Title"] = title
        out.meta["X Skew (°)"] = f"{self.hskew:.5f}"
        out.meta["Y Skew (°)"] = f"{self.vskew:.5f}"
        log.info("Created corrected output %dx%d", out.width, out.height)
        return out
