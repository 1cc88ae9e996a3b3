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

__all__ = ("ParsedFile",)

import dataclasses
from collections.abc import Iterable, Sequence

import numpy as np
import numpy.typing as npt

from ._bitpix import BitPix, FitsGeometry
from ._header import FitsHeader, HeaderCard
from ._keywords import BITPIX, NAXIS, NAXIS1, NAXIS2, SIMPLE
from ._statistics import decode_elements, to_physical


@dataclasses.dataclass(frozen=True)
class ParsedFile:
    """A FITS header together with its data, split into rows.

    Notes
    -----
    Rows hold the raw, still-encoded bytes; use `to_array` to decode them.
    Any sequence of byte-like rows may be passed at construction, but it is
    always stored as a `tuple` of `bytes`.
    """

    header: FitsHeader
    """Header cards, in on-disk order."""

    data: Sequence[bytes]
    """``NAXIS2`` rows of ``NAXIS1 * |BITPIX| / 8`` bytes each."""

    def __post_init__(self) -> None:
        if isinstance(self.data, bytes | bytearray | memoryview):
            raise TypeError("Data must be a sequence of rows, not a single byte string.")
        object.__setattr__(self, "data", tuple(bytes(row) for row in self.data))

    @property
    def geometry(self) -> FitsGeometry:
        """The data layout declared by the header."""
        return FitsGeometry.from_header(self.header)

    def to_array(self, physical: bool = True) -> np.ndarray:
        """Decode the rows into a 2-d array.

        Parameters
        ----------
        physical, optional
            If `True` (default), apply ``BSCALE`` and ``BZERO`` and return
            `numpy.float64` values.  Otherwise return the stored values in
            native byte order.

        Returns
        -------
        array
            Array with shape ``(NAXIS2, NAXIS1)``.
        """
        geometry = self.geometry
        stored = decode_elements(b"".join(self.data), geometry).reshape(geometry.naxis2, geometry.naxis1)
        if physical:
            return to_physical(stored, self.header)
        return stored.astype(stored.dtype.newbyteorder("="))

    @classmethod
    def from_array(cls, array: npt.ArrayLike, cards: Iterable[HeaderCard] = ()) -> ParsedFile:
        """Construct from a 2-d array of stored values.

        Parameters
        ----------
        array
            Array with shape ``(NAXIS2, NAXIS1)`` and a dtype FITS can store
            directly.
        cards, optional
            Cards to append after the mandatory ones.

        Returns
        -------
        parsed
            New parsed file.
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Only 2-d arrays are supported; got shape {array.shape}.")
        bitpix = BitPix.from_numpy(array.dtype)
        naxis2, naxis1 = array.shape
        header = FitsHeader(
            [
                HeaderCard(SIMPLE, True, "conforms to FITS standard"),
                HeaderCard(BITPIX, int(bitpix), "array data type"),
                HeaderCard(NAXIS, 2, "number of array dimensions"),
                HeaderCard(NAXIS1, naxis1),
                HeaderCard(NAXIS2, naxis2),
                *cards,
            ]
        )
        encoded = np.ascontiguousarray(array, dtype=bitpix.to_numpy())
        return cls(header, [row.tobytes() for row in encoded])
