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

__all__ = ("parse_card", "parse_header")

import re
from logging import getLogger

from ._common import BLOCK_SIZE, CARD_SIZE, InvalidFitsHeaderError
from ._header import CardValue, FitsHeader, HeaderCard
from ._keywords import COMMENTARY_KEYWORDS, END

_LOG = getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?\d+")

# FITS reals may use a 'D' exponent for double precision.
_REAL_RE = re.compile(r"[+-]?(\.\d+|\d+(\.\d*)?)([DE][+-]?\d+)?", re.IGNORECASE)

# A quoted string, with embedded quotes doubled, followed by anything.
_STRING_RE = re.compile(r" *'(?P<strg>(?:[^']|'')*)'(?P<rest>.*)")


def parse_card(card: str) -> HeaderCard:
    """Parse a single 80-character header card.

    Parameters
    ----------
    card
        The card text.

    Returns
    -------
    card
        The parsed card, with its `~HeaderCard.raw` attribute set.  Lower-case
        keywords are upper-cased, with a warning.

    Raises
    ------
    InvalidFitsHeaderError
        Raised if the card has the wrong length, an invalid keyword, or an
        unterminated string value.
    """
    if len(card) != CARD_SIZE:
        raise InvalidFitsHeaderError(f"Header cards must have {CARD_SIZE} characters; got {len(card)}.")
    keyword = card[:8].strip()
    if keyword != keyword.upper():
        _LOG.warning("Non-standard lower-case keyword %r read as %r.", keyword, keyword.upper())
        keyword = keyword.upper()
    try:
        if keyword in COMMENTARY_KEYWORDS or card[8:10] != "= ":
            return HeaderCard(keyword, comment=card[8:].rstrip() or None, commentary=True, raw=card)
        value, comment = _parse_value_field(card[10:])
        return HeaderCard(keyword, value, comment, raw=card)
    except ValueError as err:
        raise InvalidFitsHeaderError(f"Invalid header card {card!r}: {err}") from err


def _parse_value_field(field: str) -> tuple[CardValue, str | None]:
    """Split the part of a card after the value indicator into a typed value
    and a comment.
    """
    if field.lstrip().startswith("'"):
        if (match := _STRING_RE.match(field)) is None:
            raise ValueError("unterminated string value")
        # Trailing spaces in FITS strings are not significant; leading ones are.
        value: CardValue = match["strg"].replace("''", "'").rstrip()
        _, sep, comment = match["rest"].partition("/")
    else:
        text, sep, comment = field.partition("/")
        text = text.strip()
        match text:
            case "":
                value = None
            case "T":
                value = True
            case "F":
                value = False
            case _ if _INTEGER_RE.fullmatch(text):
                value = int(text)
            case _ if _REAL_RE.fullmatch(text):
                value = float(text.upper().replace("D", "E"))
            case _:
                # Complex and other free-format values are kept verbatim.
                value = text
    return value, (comment.strip() or None) if sep else None


def parse_header(raw: bytes) -> FitsHeader:
    """Parse the first header block of a FITS file.

    Parameters
    ----------
    raw
        Raw FITS bytes; must hold at least one full block.

    Returns
    -------
    header
        The cards before the ``END`` card, in order.

    Raises
    ------
    InvalidFitsHeaderError
        Raised if the buffer is shorter than a block, a card is not ASCII or
        cannot be parsed, or no ``END`` card appears in the first block.
        Headers spanning more than one block are not supported.
    """
    if len(raw) < BLOCK_SIZE:
        raise InvalidFitsHeaderError(f"FITS data must hold at least {BLOCK_SIZE} bytes; got {len(raw)}.")
    cards: list[HeaderCard] = []
    for offset in range(0, BLOCK_SIZE, CARD_SIZE):
        try:
            card = bytes(raw[offset : offset + CARD_SIZE]).decode("ascii")
        except UnicodeDecodeError as err:
            raise InvalidFitsHeaderError(f"Header card at byte {offset} is not ASCII.") from err
        if card[:8].rstrip() == END:
            return FitsHeader(cards)
        cards.append(parse_card(card))
    raise InvalidFitsHeaderError(
        f"No {END} card in the first {BLOCK_SIZE}-byte block; multi-block headers are not supported."
    )
