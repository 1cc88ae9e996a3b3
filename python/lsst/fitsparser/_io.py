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

"""Entry points that read and write whole FITS files.

Reading and writing bytes is delegated to `ByteSource` and `ByteSink`
objects, which default to `lsst.resources.ResourcePath` and therefore accept
local paths as well as ``file``, ``http`` and ``https`` URLs.  Everything past
obtaining the bytes is synchronous and operates in memory.
"""

from __future__ import annotations

__all__ = (
    "ByteSink",
    "ByteSource",
    "ResourceByteSink",
    "ResourceByteSource",
    "load_fits",
    "load_fits_async",
    "parse_fits",
    "save_fits",
    "save_fits_async",
)

import asyncio
from logging import getLogger
from typing import Protocol

from lsst.resources import ResourcePath, ResourcePathExpression

from ._bitpix import FitsGeometry
from ._common import DATA_OFFSET, FitsReadOptions, InvalidFitsHeaderError, pad_to_block
from ._matrix import build_matrix
from ._parsed import ParsedFile
from ._parser import parse_header
from ._statistics import compute_physical_range
from ._writer import to_bytes

_LOG = getLogger(__name__)


class ByteSource(Protocol):
    """Interface for objects that fetch raw bytes from a location."""

    def read(self, location: ResourcePathExpression) -> bytes:
        """Return the full contents at ``location``.

        Implementations may raise on any failure; callers treat exceptions
        and empty results alike.
        """
        ...


class ByteSink(Protocol):
    """Interface for objects that persist raw bytes to a location."""

    def write(self, location: ResourcePathExpression, data: bytes) -> None:
        """Write ``data`` to ``location``."""
        ...


class ResourceByteSource:
    """A `ByteSource` backed by `lsst.resources.ResourcePath`."""

    def read(self, location: ResourcePathExpression) -> bytes:
        return ResourcePath(location).read()


class ResourceByteSink:
    """A `ByteSink` backed by `lsst.resources.ResourcePath`.

    Parameters
    ----------
    overwrite, optional
        Whether to replace an existing file.
    """

    def __init__(self, overwrite: bool = True):
        self._overwrite = overwrite

    def write(self, location: ResourcePathExpression, data: bytes) -> None:
        ResourcePath(location).write(data, overwrite=self._overwrite)


def parse_fits(raw: bytes, options: FitsReadOptions = FitsReadOptions.DEFAULT) -> ParsedFile | None:
    """Decode an in-memory FITS file.

    Parameters
    ----------
    raw
        Raw FITS bytes.
    options, optional
        Read options.

    Returns
    -------
    parsed
        The parsed file, with ``DATAMIN`` and ``DATAMAX`` computed, or `None`
        if the header is malformed, lacks the keywords needed to decode the
        data, or declares a geometry too large to hold in memory.
    """
    try:
        header = parse_header(raw)
    except InvalidFitsHeaderError as err:
        _LOG.warning("Could not parse FITS header: %s", err)
        return None
    finalized = compute_physical_range(header, raw)
    if finalized is None:
        return None
    payload = raw[DATA_OFFSET:]
    if options.strict_geometry:
        geometry = FitsGeometry.from_header(finalized)
        if len(payload) < geometry.data_bytes:
            _LOG.warning(
                "Header declares %d data bytes but only %d are present.", geometry.data_bytes, len(payload)
            )
            return None
    try:
        rows = build_matrix(pad_to_block(payload), finalized)
    except (OverflowError, MemoryError) as err:
        _LOG.warning("Cannot hold the declared data geometry in memory: %r", err)
        return None
    return ParsedFile(finalized, rows)


def _retrieve(source: ByteSource, location: ResourcePathExpression) -> bytes:
    try:
        return source.read(location)
    except Exception as err:
        _LOG.warning("Failed to read FITS data from %s: %s", location, err)
        return b""


def _process(raw: bytes, location: ResourcePathExpression, options: FitsReadOptions) -> ParsedFile | None:
    if not raw:
        _LOG.warning("No FITS data read from %s.", location)
        return None
    return parse_fits(raw, options)


def load_fits(
    location: ResourcePathExpression,
    *,
    source: ByteSource | None = None,
    options: FitsReadOptions = FitsReadOptions.DEFAULT,
) -> ParsedFile | None:
    """Read and decode a FITS file.

    Parameters
    ----------
    location
        Path or URL of the file.
    source, optional
        Object used to fetch the bytes.  Defaults to `ResourceByteSource`.
    options, optional
        Read options.

    Returns
    -------
    parsed
        The parsed file, or `None` if the bytes could not be read or do not
        form a supported FITS file.  Failures are logged, never raised.
    """
    raw = _retrieve(source if source is not None else ResourceByteSource(), location)
    return _process(raw, location, options)


async def load_fits_async(
    location: ResourcePathExpression,
    *,
    source: ByteSource | None = None,
    options: FitsReadOptions = FitsReadOptions.DEFAULT,
) -> ParsedFile | None:
    """Asynchronous variant of `load_fits`.

    Only fetching the bytes happens in a worker thread; decoding runs in the
    calling task.
    """
    raw = await asyncio.to_thread(
        _retrieve, source if source is not None else ResourceByteSource(), location
    )
    return _process(raw, location, options)


def save_fits(parsed: ParsedFile, location: ResourcePathExpression, *, sink: ByteSink | None = None) -> None:
    """Serialize a parsed file and persist it.

    Parameters
    ----------
    parsed
        File to write.
    location
        Path or URL to write to.
    sink, optional
        Object used to persist the bytes.  Defaults to `ResourceByteSink`.

    Notes
    -----
    The full byte stream is assembled before anything is written, so errors
    in the header or data never leave a partial file behind.
    """
    data = to_bytes(parsed)
    (sink if sink is not None else ResourceByteSink()).write(location, data)


async def save_fits_async(
    parsed: ParsedFile, location: ResourcePathExpression, *, sink: ByteSink | None = None
) -> None:
    """Asynchronous variant of `save_fits`."""
    data = to_bytes(parsed)
    await asyncio.to_thread((sink if sink is not None else ResourceByteSink()).write, location, data)
