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
    "compute_physical_range",
    "decode_elements",
    "get_scaling",
    "to_physical",
)

from logging import getLogger

import numpy as np

from ._bitpix import FitsGeometry
from ._common import DATA_OFFSET, MissingKeywordError
from ._header import FitsHeader
from ._keywords import BLANK, BSCALE, BZERO, DATAMAX, DATAMIN

_LOG = getLogger(__name__)


def get_scaling(header: FitsHeader) -> tuple[float, float]:
    """Return the affine transform from stored to physical values.

    Parameters
    ----------
    header
        Header to read ``BSCALE`` and ``BZERO`` from.

    Returns
    -------
    bscale
        Multiplicative factor; 1 if ``BSCALE`` is absent.
    bzero
        Additive offset; 0 if ``BZERO`` is absent.

    Raises
    ------
    MissingKeywordError
        Raised if either keyword is present but not a number.
    """
    scaling: list[float] = []
    for keyword, default in ((BSCALE, 1.0), (BZERO, 0.0)):
        if keyword not in header:
            scaling.append(default)
        elif (value := header.get_float(keyword)) is not None:
            scaling.append(value)
        else:
            raise MissingKeywordError(f"{keyword} is not a number: {header.get(keyword)!r}.")
    bscale, bzero = scaling
    return bscale, bzero


def decode_elements(data: bytes, geometry: FitsGeometry) -> np.ndarray:
    """Interpret raw data bytes as a flat array of stored values.

    Parameters
    ----------
    data
        Data-section bytes.
    geometry
        Declared layout of the data.

    Returns
    -------
    stored
        Read-only 1-d array with the big-endian dtype of the encoding.  It
        is shorter than ``geometry.size`` if ``data`` ends early; trailing
        partial elements are dropped.
    """
    dtype = geometry.bitpix.to_numpy()
    count = min(geometry.size, len(data) // dtype.itemsize)
    if not count:
        return np.empty(0, dtype=dtype)
    return np.frombuffer(data, dtype=dtype, count=count)


def to_physical(stored: np.ndarray, header: FitsHeader) -> np.ndarray:
    """Apply ``BSCALE`` and ``BZERO`` to stored values.

    Returns
    -------
    physical
        New native-endian `numpy.float64` array with the same shape.
    """
    bscale, bzero = get_scaling(header)
    physical = stored.astype(np.float64)
    if bscale != 1.0:
        physical *= bscale
    if bzero != 0.0:
        physical += bzero
    return physical


def compute_physical_range(header: FitsHeader, raw: bytes) -> FitsHeader | None:
    """Compute the range of physical values in a FITS file's data.

    Parameters
    ----------
    header
        Header parsed from ``raw``.
    raw
        Full raw FITS bytes, header block included.

    Returns
    -------
    header
        A new header with ``DATAMIN`` and ``DATAMAX`` set, or `None` if the
        keywords needed to decode the data are missing or malformed.

    Notes
    -----
    Integer values equal to ``BLANK`` and non-finite floating-point values are
    ignored.  If no element remains, the header is returned unchanged.  Bytes
    missing from the end of the data are treated as zeros.
    """
    try:
        geometry = FitsGeometry.from_header(header)
        stored = decode_elements(raw[DATA_OFFSET:], geometry)
        physical = to_physical(stored, header)
    except MissingKeywordError as err:
        _LOG.warning("Cannot compute the physical range of the data: %s", err)
        return None
    blank = None if geometry.bitpix.is_float else header.get_int(BLANK)
    valid = np.isfinite(physical)
    if blank is not None:
        valid &= stored != blank
    values = physical[valid]
    if stored.size < geometry.size and blank != 0:
        # Elements missing from the end of the data read as zero.
        values = np.append(values, to_physical(np.zeros(1, dtype=stored.dtype), header))
    if not values.size:
        _LOG.debug("No valid elements; leaving %s and %s unset.", DATAMIN, DATAMAX)
        return header
    return header.with_value(DATAMIN, float(values.min())).with_value(DATAMAX, float(values.max()))
