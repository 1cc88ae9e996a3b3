# This file is part of lsst-fitsparser.
#
# Developed for the LSST Data Management System.
# This product includes software developed by the LSST Project
# (https://www.lsst.org).
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Command-line tools for inspecting and copying FITS files."""

from __future__ import annotations

__all__ = ("main",)

import logging

import click

from ._common import FitsReadOptions
from ._io import load_fits, save_fits
from ._keywords import DATAMAX, DATAMIN
from ._parsed import ParsedFile
from ._writer import format_card


def _load_or_fail(location: str, strict: bool = False) -> ParsedFile:
    parsed = load_fits(location, options=FitsReadOptions(strict_geometry=strict))
    if parsed is None:
        raise click.ClickException(f"Could not load a FITS file from {location!r}.")
    return parsed


@click.group("fitsparser")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging threshold.",
)
def main(log_level: str) -> None:
    """Inspect and rewrite single-HDU FITS images."""
    logging.basicConfig(level=log_level.upper())


@main.command("header")
@click.argument("location")
@click.option("--json", "as_json", is_flag=True, help="Print the header as JSON instead of cards.")
def header(location: str, as_json: bool) -> None:
    """Print the header of the FITS file at LOCATION."""
    parsed = _load_or_fail(location)
    if as_json:
        click.echo(parsed.header.serialize().model_dump_json(indent=2))
    else:
        for card in parsed.header:
            click.echo(format_card(card).rstrip())


@main.command("stats")
@click.argument("location")
@click.option("--strict", is_flag=True, help="Fail if the data is shorter than the header declares.")
def stats(location: str, strict: bool) -> None:
    """Print the geometry and physical value range of the FITS file at
    LOCATION.
    """
    parsed = _load_or_fail(location, strict=strict)
    geometry = parsed.geometry
    click.echo(f"BITPIX: {int(geometry.bitpix)}")
    click.echo(f"shape: {geometry.naxis2} x {geometry.naxis1}")
    click.echo(f"{DATAMIN}: {parsed.header.get(DATAMIN)}")
    click.echo(f"{DATAMAX}: {parsed.header.get(DATAMAX)}")


@main.command("copy")
@click.argument("source")
@click.argument("destination")
def copy(source: str, destination: str) -> None:
    """Load SOURCE and write it back out to DESTINATION."""
    save_fits(_load_or_fail(source), destination)


if __name__ == "__main__":
    main()
