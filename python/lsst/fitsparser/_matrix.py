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

__all__ = ("build_matrix",)

from ._bitpix import FitsGeometry
from ._common import pad_to_block
from ._header import FitsHeader


def build_matrix(payload: bytes, header: FitsHeader) -> list[bytes]:
    """Split the data section into one byte string per row.

    Parameters
    ----------
    payload
        Data-section bytes, usually already padded to a whole number of
        blocks.
    header
        Header declaring the geometry.

    Returns
    -------
    rows
        ``NAXIS2`` rows of ``NAXIS1 * |BITPIX| / 8`` bytes each, still in
        their on-disk encoding.

    Raises
    ------
    MissingKeywordError
        Raised if ``BITPIX``, ``NAXIS1`` or ``NAXIS2`` is absent or malformed.

    Notes
    -----
    No check is made that the payload actually holds the declared geometry:
    rows past its end are filled with zeros.
    """
    geometry = FitsGeometry.from_header(header)
    payload = pad_to_block(payload, minimum=geometry.data_bytes)
    row_bytes = geometry.row_bytes
    return [bytes(payload[i * row_bytes : (i + 1) * row_bytes]) for i in range(geometry.naxis2)]
