# cli.py - part of skewlattice

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

"""Command-line interface for skew correction of lattice images."""

import logging
import sys
from typing import Optional, Tuple

import click

from . import __version__
from .raster import Raster
from .interpolation import Interpolation
from .session import Corrector
from .errors import SkewLatticeError

logger = logging.getLogger(__name__)


def _setuplogging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def _parsepoint(text: str) -> Tuple[float, float]:
    try:
        x, y = [float(v) for v in text.split(",")]
    except ValueError:
        raise click.BadParameter(f"Expected X,Y but got '{text}'")
    return x, y


_interpchoice = click.Choice([i.label for i in Interpolation],
                             case_sensitive=False)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def main(verbose: bool) -> None:
    """skewlattice - Correct drift in lattice images by controlled skew."""
    _setuplogging(verbose)


@main.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--hskew', type=float, default=0.0, show_default=True,
              help='Horizontal skew angle in degrees')
@click.option('--vskew', type=float, default=0.0, show_default=True,
              help='Vertical skew angle in degrees')
@click.option('--interp', 'interp_name', type=_interpchoice,
              default='linear', show_default=True,
              help='Interpolation kernel')
@click.option('--title', type=str, default=None,
              help='Source title recorded in the metadata')
def correct(input_path: str, output_path: str, hskew: float, vskew: float,
            interp_name: str, title: Optional[str]) -> None:
    """Skew-correct INPUT_PATH and save the result to OUTPUT_PATH."""
    try:
        img = Raster.load(input_path)
        cor = Corrector(img, interp=Interpolation.byname(interp_name))
        cor.setskew(hskew, vskew)
        out = cor.output(title or input_path)
        out.save(output_path)
    except (SkewLatticeError, OSError) as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"Saved {out.width}x{out.height} result to {output_path}")
    for key, value in out.meta.items():
        click.echo(f"{key}: {value}")


@main.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--hskew', type=float, default=0.0, show_default=True,
              help='Horizontal skew angle in degrees')
@click.option('--vskew', type=float, default=0.0, show_default=True,
              help='Vertical skew angle in degrees')
@click.option('--peak', 'peak_texts', multiple=True, required=True,
              help='Approximate peak position X,Y in the corrected'
              ' spectrum; give exactly four, in order around the ring')
@click.option('--radius', type=click.IntRange(0, 10), default=3,
              show_default=True, help='Peak search radius in pixels')
@click.option('--zoom', type=click.Choice(['1', '2']), default='1',
              show_default=True, help='Spectrum magnification')
@click.option('--interp', 'interp_name', type=_interpchoice,
              default='linear', show_default=True,
              help='Interpolation kernel')
def angles(input_path: str, hskew: float, vskew: float,
           peak_texts: Tuple[str, ...], radius: int, zoom: str,
           interp_name: str) -> None:
    """Measure lattice angles in the spectrum of a corrected image."""
    if len(peak_texts) != 4:
        raise click.BadParameter("Exactly four peaks are required",
                                 param_hint='--peak')
    points = [_parsepoint(t) for t in peak_texts]
    try:
        img = Raster.load(input_path)
        cor = Corrector(img, radius=radius, zoom=int(zoom),
                        interp=Interpolation.byname(interp_name))
        cor.setskew(hskew, vskew)
        for k, xy in enumerate(points):
            cor.placepeak(k, xy)
    except (SkewLatticeError, OSError) as e:
        logger.error(str(e))
        sys.exit(1)
    for k, peak in enumerate(cor.peaks):
        click.echo(f"Peak {k+1}: x={peak.x:.6g} y={peak.y:.6g}"
                   f" z={peak.z:.6g}")
    a1, a2 = cor.angles()
    click.echo(f"Angle 123: {a1:.1f}°")
    click.echo(f"Angle 234: {a2:.1f}°")


if __name__ == '__main__':
    main()
