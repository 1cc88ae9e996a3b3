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
    "BitPix",
    "FitsGeometry",
)

import dataclasses
import enum
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from ._common import MissingKeywordError
from ._keywords import BITPIX, NAXIS1, NAXIS2

if TYPE_CHECKING:
    from ._header import FitsHeader


class BitPix(enum.IntEnum):
    """Enumeration of the element encodings a ``BITPIX`` value may declare.

    Positive values are integers (8-bit unsigned, wider ones signed two's
    complement) and negative values are IEEE floating point.  All multi-byte
    encodings are big-endian.
    """

    UINT8 = 8
    INT16 = 16
    INT32 = 32
    INT64 = 64
    FLOAT32 = -32
    FLOAT64 = -64

    @property
    def bytes_per_element(self) -> int:
        """Number of bytes used to store a single element."""
        return abs(self.value) // 8

    @property
    def is_float(self) -> bool:
        """Whether elements are IEEE floating point values."""
        return self.value < 0

    def to_numpy(self) -> np.dtype:
        """Convert an enumeration member to the corresponding big-endian
        numpy dtype.

        Returns
        -------
        dtype
            Numpy dtype with the on-disk byte order, e.g. ``>i2``.
        """
        kind = "f" if self.is_float else ("u" if self is BitPix.UINT8 else "i")
        return np.dtype(f">{kind}{self.bytes_per_element}")

    @classmethod
    def from_numpy(cls, dtype: npt.DTypeLike) -> BitPix:
        """Construct an enumeration member from anything that can be coerced
        to `numpy.dtype`.

        Parameters
        ----------
        dtype
            Object convertible to `numpy.dtype`.  Byte order is ignored.

        Returns
        -------
        member
            Enumeration member.

        Raises
        ------
        TypeError
            Raised if FITS has no native encoding for the type.
        """
        dtype = np.dtype(dtype)
        match dtype.kind, dtype.itemsize:
            case "u", 1:
                return cls.UINT8
            case "i", 2 | 4 | 8:
                return cls(dtype.itemsize * 8)
            case "f", 4 | 8:
                return cls(-dtype.itemsize * 8)
        raise TypeError(f"{dtype} cannot be stored directly in a FITS image.")


@dataclasses.dataclass(frozen=True)
class FitsGeometry:
    """The data layout declared by a header."""

    bitpix: BitPix
    """Encoding of each element."""

    naxis1: int
    """Number of elements in each row."""

    naxis2: int
    """Number of rows."""

    @property
    def row_bytes(self) -> int:
        """Number of bytes in a single row."""
        return self.naxis1 * self.bitpix.bytes_per_element

    @property
    def size(self) -> int:
        """Total number of elements."""
        return self.naxis1 * self.naxis2

    @property
    def data_bytes(self) -> int:
        """Number of bytes of data before padding."""
        return self.row_bytes * self.naxis2

    @classmethod
    def from_header(cls, header: FitsHeader) -> FitsGeometry:
        """Extract the geometry from a header.

        Raises
        ------
        MissingKeywordError
            Raised if ``BITPIX``, ``NAXIS1`` or ``NAXIS2`` is absent, is not
            an integer, or has an unsupported value.
        """
        raw_bitpix = header.get_int(BITPIX)
        if raw_bitpix is None:
            raise MissingKeywordError(f"{BITPIX} not defined.")
        try:
            bitpix = BitPix(raw_bitpix)
        except ValueError:
            raise MissingKeywordError(f"Unsupported {BITPIX} value {raw_bitpix}.") from None
        axes: list[int] = []
        for keyword in (NAXIS1, NAXIS2):
            value = header.get_int(keyword)
            if value is None:
                raise MissingKeywordError(f"{keyword} not defined.")
            if value < 0:
                raise MissingKeywordError(f"{keyword} must not be negative; got {value}.")
            axes.append(value)
        return cls(bitpix, *axes)
