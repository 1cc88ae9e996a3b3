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
    "format_card",
    "render_data",
    "render_header",
    "to_bytes",
)

import math
from collections.abc import Iterable
from logging import getLogger

from ._bitpix import FitsGeometry
from ._common import BLOCK_SIZE, CARD_SIZE, pad_to_block
from ._header import CardValue, FitsHeader, HeaderCard
from ._keywords import END
from ._parsed import ParsedFile

_LOG = getLogger(__name__)

# Width of the fixed-format value field (columns 11-30).
_VALUE_WIDTH = 20

# Room left for a value after the keyword and value indicator.
_MAX_VALUE_LENGTH = CARD_SIZE - 10


def _format_real(value: float) -> str:
    if not math.isfinite(value):
        raise ValueError(f"{value} cannot be stored in a FITS header.")
    # repr is the shortest string that reads back as the same float.
    text = repr(value).upper()
    if "." not in text and "E" not in text:
        text += ".0"
    return text


def _format_value(value: CardValue) -> str:
    match value:
        case None:
            text = " " * _VALUE_WIDTH
        case bool():
            text = f"{'T' if value else 'F':>{_VALUE_WIDTH}}"
        case int():
            text = f"{value:>{_VALUE_WIDTH}}"
        case float():
            text = f"{_format_real(value):>{_VALUE_WIDTH}}"
        case str():
            quoted = "'{}'".format(value.replace("'", "''").ljust(8))
            text = f"{quoted:<{_VALUE_WIDTH}}"
    if len(text) > _MAX_VALUE_LENGTH:
        raise ValueError(f"Value {value!r} is too long for a single header card.")
    return text


def format_card(card: HeaderCard) -> str:
    """Render a card in the fixed FITS format.

    Parameters
    ----------
    card
        Card to render.

    Returns
    -------
    text
        Exactly 80 characters.  Comments that do not fit are truncated.

    Raises
    ------
    ValueError
        Raised if the value itself does not fit in a card or is a non-finite
        float.
    """
    if card.commentary:
        text = f"{card.keyword:<8}{card.comment or ''}"
    else:
        text = f"{card.keyword:<8}= {_format_value(card.value)}"
        if card.comment:
            text = f"{text} / {card.comment}"
    return f"{text[:CARD_SIZE]:<{CARD_SIZE}}"


def render_header(header: FitsHeader) -> bytes:
    """Render a header, terminated by an ``END`` card and padded with spaces
    to a whole number of blocks.
    """
    cards = [format_card(card) for card in header]
    cards.append(f"{END:<{CARD_SIZE}}")
    encoded = "".join(cards).encode("ascii")
    n_blocks = -(-len(encoded) // BLOCK_SIZE)
    if n_blocks > 1:
        _LOG.warning(
            "Header with %d cards needs %d blocks; it cannot be read back by this package.",
            len(header),
            n_blocks,
        )
    return encoded.ljust(n_blocks * BLOCK_SIZE, b" ")


def render_data(rows: Iterable[bytes]) -> bytes:
    """Concatenate rows and zero-pad them to a whole number of blocks."""
    return pad_to_block(b"".join(rows))


def to_bytes(parsed: ParsedFile) -> bytes:
    """Serialize a parsed file into a complete FITS byte stream.

    Raises
    ------
    MissingKeywordError
        Raised if the header does not declare a usable geometry.
    ValueError
        Raised if the rows do not match the declared geometry, or a card
        cannot be rendered.
    """
    geometry = FitsGeometry.from_header(parsed.header)
    if len(parsed.data) != geometry.naxis2:
        raise ValueError(f"Header declares {geometry.naxis2} rows; got {len(parsed.data)}.")
    for index, row in enumerate(parsed.data):
        if len(row) != geometry.row_bytes:
            raise ValueError(f"Row {index} has {len(row)} bytes; expected {geometry.row_bytes}.")
    return render_header(parsed.header) + render_data(parsed.data)
