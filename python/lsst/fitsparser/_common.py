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

from __future__ import annotations

__all__ = (
    "BLOCK_SIZE",
    "CARD_SIZE",
    "DATA_OFFSET",
    "FitsReadOptions",
    "InvalidFitsHeaderError",
    "MissingKeywordError",
    "pad_to_block",
)

import dataclasses
from typing import ClassVar

BLOCK_SIZE = 2880
"""Size in bytes of the FITS alignment unit for headers and data."""

CARD_SIZE = 80
"""Size in bytes of a single header card."""

DATA_OFFSET = BLOCK_SIZE
"""Offset of the data section.

Only single-block primary headers are supported, so the data always starts
right after the first block.
"""


class InvalidFitsHeaderError(RuntimeError):
    """The error type raised when a FITS header cannot be parsed or does not
    satisfy the layout this package supports.
    """


class MissingKeywordError(InvalidFitsHeaderError):
    """The error type raised when a keyword needed to interpret the data is
    absent or does not have the expected type.
    """


@dataclasses.dataclass(frozen=True)
class FitsReadOptions:
    """Configuration options for reading FITS files."""

    strict_geometry: bool = False
    """Whether to reject files whose declared geometry needs more bytes than
    are present after the header block.

    By default missing bytes are treated as zero padding.
    """

    DEFAULT: ClassVar[FitsReadOptions]
    """Default read options (lenient geometry)."""


FitsReadOptions.DEFAULT = FitsReadOptions()


def pad_to_block(buffer: bytes, minimum: int = 0) -> bytes:
    """Zero-pad a buffer to a whole number of FITS blocks.

    Parameters
    ----------
    buffer
        Bytes to pad.  Never truncated.
    minimum, optional
        Minimum size of the result before rounding up to the block size.

    Returns
    -------
    padded
        The padded bytes; ``buffer`` itself if no padding was needed.
    """
    target = max(len(buffer), minimum)
    remainder = target % BLOCK_SIZE
    if remainder:
        target += BLOCK_SIZE - remainder
    if target == len(buffer):
        return buffer
    return bytes(buffer) + bytes(target - len(buffer))
