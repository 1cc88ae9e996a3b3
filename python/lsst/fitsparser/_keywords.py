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

"""Constants for the FITS header keywords this package interprets."""

from __future__ import annotations

__all__ = (
    "BITPIX",
    "BLANK",
    "BSCALE",
    "BZERO",
    "COMMENT",
    "COMMENTARY_KEYWORDS",
    "DATAMAX",
    "DATAMIN",
    "END",
    "HISTORY",
    "NAXIS",
    "NAXIS1",
    "NAXIS2",
    "SIMPLE",
)

SIMPLE = "SIMPLE"
BITPIX = "BITPIX"
NAXIS = "NAXIS"
NAXIS1 = "NAXIS1"
NAXIS2 = "NAXIS2"
BZERO = "BZERO"
BSCALE = "BSCALE"
BLANK = "BLANK"
DATAMIN = "DATAMIN"
DATAMAX = "DATAMAX"
END = "END"
COMMENT = "COMMENT"
HISTORY = "HISTORY"

COMMENTARY_KEYWORDS = frozenset({COMMENT, HISTORY, ""})
"""Keywords whose cards never carry a value indicator."""
