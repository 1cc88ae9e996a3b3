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
    "CardValue",
    "FitsHeader",
    "FitsHeaderModel",
    "HeaderCard",
    "HeaderCardModel",
)

import dataclasses
import re
from collections.abc import Iterable, Iterator
from typing import Any, final, overload

import pydantic

from ._keywords import COMMENTARY_KEYWORDS, END

type CardValue = str | int | float | bool | None

_KEYWORD_RE = re.compile(r"[A-Z0-9_-]{0,8}")


@dataclasses.dataclass(frozen=True)
class HeaderCard:
    """A single keyword/value/comment record of a FITS header.

    Notes
    -----
    Commentary cards (``COMMENT``, ``HISTORY``, blank keywords, and any card
    read without a ``"= "`` value indicator) keep their text in `comment` and
    never have a value.  The `raw` attribute is not considered in comparisons.
    """

    keyword: str
    """Keyword, at most 8 upper-case characters."""

    value: CardValue = None
    """Typed value; `None` for undefined values and commentary cards."""

    comment: str | None = None
    """Comment (or text, for commentary cards)."""

    commentary: bool = False
    """Whether this card has no value indicator."""

    raw: str | None = dataclasses.field(default=None, compare=False, repr=False)
    """The exact 80-character record this card was parsed from, if any."""

    def __post_init__(self) -> None:
        if not _KEYWORD_RE.fullmatch(self.keyword):
            raise ValueError(f"Invalid FITS keyword {self.keyword!r}.")
        if self.keyword == END:
            raise ValueError("The END card is implied and cannot be stored in a header.")
        match self.value:
            case None | str() | bool() | int() | float():
                pass
            case other:
                raise TypeError(f"Unsupported value {other!r} of type {type(other).__name__}.")
        if self.keyword in COMMENTARY_KEYWORDS:
            object.__setattr__(self, "commentary", True)
        if self.commentary and self.value is not None:
            raise ValueError(f"Commentary card {self.keyword!r} cannot have a value.")

    @classmethod
    def commentary_card(cls, keyword: str, text: str = "") -> HeaderCard:
        """Construct a card that holds only free text."""
        return cls(keyword, comment=text or None, commentary=True)


@final
class FitsHeader:
    """An ordered, immutable sequence of header cards.

    Parameters
    ----------
    cards, optional
        Cards in on-disk order.

    Notes
    -----
    Keywords may repeat; all lookups return the first match.
    """

    def __init__(self, cards: Iterable[HeaderCard] = ()):
        self._cards = tuple(cards)

    @property
    def cards(self) -> tuple[HeaderCard, ...]:
        """All cards, in order."""
        return self._cards

    @property
    def keywords(self) -> list[str]:
        """The keywords of all cards, in order (including repeats)."""
        return [card.keyword for card in self._cards]

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[HeaderCard]:
        return iter(self._cards)

    def __contains__(self, keyword: object) -> bool:
        return any(card.keyword == keyword for card in self._cards)

    @overload
    def __getitem__(self, index: int) -> HeaderCard: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[HeaderCard, ...]: ...

    def __getitem__(self, index: int | slice) -> HeaderCard | tuple[HeaderCard, ...]:
        return self._cards[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FitsHeader):
            return NotImplemented
        return self._cards == other._cards

    def __hash__(self) -> int:
        return hash(self._cards)

    def __repr__(self) -> str:
        return f"FitsHeader({list(self._cards)!r})"

    def get_card(self, keyword: str) -> HeaderCard | None:
        """Return the first card with the given keyword, or `None`."""
        for card in self._cards:
            if card.keyword == keyword:
                return card
        return None

    def get(self, keyword: str, default: Any = None) -> Any:
        """Return the value of the first card with the given keyword.

        Parameters
        ----------
        keyword
            Keyword to look up.
        default, optional
            Value to return if no card has this keyword.  Note that cards
            with undefined values return `None` regardless.
        """
        if (card := self.get_card(keyword)) is None:
            return default
        return card.value

    def get_int(self, keyword: str) -> int | None:
        """Return an integer value, or `None` if the keyword is absent or its
        value is not an integer.
        """
        match self.get(keyword):
            case bool():
                return None
            case int() as value:
                return value
        return None

    def get_float(self, keyword: str) -> float | None:
        """Return a numeric value as a `float`, or `None` if the keyword is
        absent or its value is not a number.
        """
        match self.get(keyword):
            case bool():
                return None
            case int() | float() as value:
                return float(value)
        return None

    def with_value(self, keyword: str, value: CardValue, comment: str | None = None) -> FitsHeader:
        """Return a new header with a keyword set.

        Parameters
        ----------
        keyword
            Keyword to set.
        value
            New value.
        comment, optional
            New comment.  If `None`, the comment of an existing card is kept.

        Returns
        -------
        header
            New header.  The first card with this keyword is replaced in
            place; if there is none, a new card is appended.
        """
        for index, card in enumerate(self._cards):
            if card.keyword == keyword:
                replacement = HeaderCard(keyword, value, comment if comment is not None else card.comment)
                return FitsHeader(self._cards[:index] + (replacement,) + self._cards[index + 1 :])
        return FitsHeader(self._cards + (HeaderCard(keyword, value, comment),))

    def serialize(self) -> FitsHeaderModel:
        """Convert to a Pydantic model."""
        return FitsHeaderModel(
            cards=[
                HeaderCardModel(
                    keyword=card.keyword,
                    value=card.value,
                    comment=card.comment,
                    commentary=card.commentary,
                )
                for card in self._cards
            ]
        )

    @classmethod
    def deserialize(cls, model: FitsHeaderModel) -> FitsHeader:
        """Construct from a Pydantic model."""
        return cls(
            HeaderCard(c.keyword, c.value, c.comment, commentary=c.commentary) for c in model.cards
        )


class HeaderCardModel(pydantic.BaseModel):
    """Pydantic model used to represent the serialized form of a
    `HeaderCard`.
    """

    keyword: str = pydantic.Field(description="FITS keyword.")
    value: bool | int | float | str | None = pydantic.Field(default=None, description="Typed value.")
    comment: str | None = pydantic.Field(default=None, description="Comment or commentary text.")
    commentary: bool = pydantic.Field(default=False, description="Whether the card has no value.")


class FitsHeaderModel(pydantic.BaseModel):
    """Pydantic model used to represent the serialized form of a
    `FitsHeader`.
    """

    cards: list[HeaderCardModel] = pydantic.Field(description="Header cards, in on-disk order.")
