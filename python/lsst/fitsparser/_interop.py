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

"""Conversions to and from Astropy HDU objects."""

from __future__ import annotations

__all__ = ("from_astropy", "to_astropy")

import io

import astropy.io.fits

from ._common import FitsReadOptions
from ._io import parse_fits
from ._parsed import ParsedFile
from ._writer import to_bytes


def to_astropy(parsed: ParsedFile) -> astropy.io.fits.PrimaryHDU:
    """Convert a parsed file into an Astropy primary HDU.

    The HDU is read back from the bytes `to_bytes` produces, so Astropy sees
    exactly what would be written to disk.
    """
    hdu_list = astropy.io.fits.HDUList.fromstring(to_bytes(parsed))
    return hdu_list[0]


def from_astropy(
    hdu: astropy.io.fits.PrimaryHDU, options: FitsReadOptions = FitsReadOptions.DEFAULT
) -> ParsedFile | None:
    """Convert an Astropy primary HDU into a parsed file.

    Parameters
    ----------
    hdu
        HDU to convert.  Its header must fit in a single block.
    options, optional
        Read options.

    Returns
    -------
    parsed
        The parsed file, or `None` if the serialized HDU cannot be parsed.
    """
    buffer = io.BytesIO()
    hdu.writeto(buffer)
    return parse_fits(buffer.getvalue(), options)
