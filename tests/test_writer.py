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

import unittest

import astropy.io.fits
import numpy as np

from lsst.fitsparser import (
    BITPIX,
    BLOCK_SIZE,
    NAXIS2,
    SIMPLE,
    FitsHeader,
    HeaderCard,
    MissingKeywordError,
    ParsedFile,
    format_card,
    parse_card,
    parse_header,
    render_data,
    render_header,
    to_bytes,
)
from lsst.fitsparser.tests import make_survey_image


def valued(keyword: str, value: str, rest: str = "") -> str:
    """Return the expected text of a fixed-format card with a right-justified
    value.
    """
    return (f"{keyword:<8}=" + " " * (21 - len(value)) + value + rest).ljust(80)


class FormatCardTestCase(unittest.TestCase):
    """Tests for format_card."""

    def test_fixed_format(self) -> None:
        """Test the column layout of each value type."""
        card = format_card(HeaderCard(SIMPLE, True, "conforms to FITS standard"))
        self.assertEqual(card, ("SIMPLE  =" + " " * 20 + "T / conforms to FITS standard").ljust(80))
        self.assertEqual(card[29], "T")
        self.assertEqual(format_card(HeaderCard("EXTEND", False)), valued("EXTEND", "F"))
        self.assertEqual(format_card(HeaderCard(BITPIX, -32)), valued(BITPIX, "-32"))
        self.assertEqual(format_card(HeaderCard("ZERO", 0)), valued("ZERO", "0"))
        self.assertEqual(format_card(HeaderCard("GAIN", 1.5, "e/ADU")), valued("GAIN", "1.5", " / e/ADU"))
        self.assertEqual(format_card(HeaderCard("TINY", 1e-20)), valued("TINY", "1E-20"))
        self.assertEqual(format_card(HeaderCard("HUGE", 1e16)), valued("HUGE", "1E+16"))
        self.assertEqual(format_card(HeaderCard("WHOLE", 3.0)), valued("WHOLE", "3.0"))
        self.assertEqual(
            format_card(HeaderCard("UNDEF", None, "c")), ("UNDEF   =" + " " * 22 + "/ c").ljust(80)
        )

    def test_strings(self) -> None:
        """Test quoting of string values."""
        self.assertEqual(format_card(HeaderCard("OBJECT", "O'Brien")), "OBJECT  = 'O''Brien'".ljust(80))
        self.assertEqual(format_card(HeaderCard("FILTER", "G")), "FILTER  = 'G       '".ljust(80))
        self.assertEqual(format_card(HeaderCard("EMPTY", "")), "EMPTY   = '        '".ljust(80))
        self.assertEqual(
            format_card(HeaderCard("OBJECT", "M31", "target")),
            ("OBJECT  = 'M31     '" + " " * 11 + "/ target").ljust(80),
        )
        self.assertEqual(len(format_card(HeaderCard("LONG", "x" * 68))), 80)
        with self.assertRaises(ValueError):
            format_card(HeaderCard("LONG", "x" * 69))

    def test_commentary(self) -> None:
        """Test commentary cards."""
        self.assertEqual(
            format_card(HeaderCard.commentary_card("COMMENT", "hello")), "COMMENT hello".ljust(80)
        )
        self.assertEqual(format_card(HeaderCard("")), " " * 80)
        text = "x" * 100
        self.assertEqual(format_card(HeaderCard.commentary_card("HISTORY", text)), "HISTORY " + "x" * 72)

    def test_truncation_and_errors(self) -> None:
        """Test that long comments are truncated and non-finite reals are
        rejected.
        """
        card = format_card(HeaderCard("NAXIS", 2, "c" * 100))
        self.assertEqual(len(card), 80)
        self.assertTrue(card.startswith(valued("NAXIS", "2", " / c").rstrip()))
        with self.assertRaises(ValueError):
            format_card(HeaderCard("BAD", float("nan")))
        with self.assertRaises(ValueError):
            format_card(HeaderCard("BAD", float("inf")))

    def test_reparse(self) -> None:
        """Test that rendered cards parse back to the same card."""
        cards = [
            HeaderCard(SIMPLE, True, "conforms"),
            HeaderCard("RATIO", 0.1 + 0.2),
            HeaderCard("SMALL", -2.5e-300),
            HeaderCard("BIG", 2**62),
            HeaderCard("QUOTE", "it's", "has / slash"),
            HeaderCard("UNDEF", None, "nothing"),
            HeaderCard.commentary_card("HISTORY", "  indented history"),
        ]
        for card in cards:
            with self.subTest(card=card):
                self.assertEqual(parse_card(format_card(card)), card)


class RenderTestCase(unittest.TestCase):
    """Tests for rendering whole headers and files."""

    def setUp(self) -> None:
        self.rng = np.random.default_rng(2880)

    def test_render_header(self) -> None:
        """Test END placement and block padding."""
        header = FitsHeader([HeaderCard(SIMPLE, True), HeaderCard(BITPIX, 8), HeaderCard("NAXIS", 0)])
        rendered = render_header(header)
        self.assertEqual(len(rendered), BLOCK_SIZE)
        self.assertEqual(rendered[240:320], b"END" + b" " * 77)
        self.assertEqual(rendered[320:], b" " * (BLOCK_SIZE - 320))
        self.assertEqual(len(render_header(FitsHeader())), BLOCK_SIZE)

    def test_multi_block_header(self) -> None:
        """Test that oversized headers are rendered but flagged."""
        header = FitsHeader(HeaderCard(f"KEY{i}", i) for i in range(40))
        with self.assertLogs("lsst.fitsparser", level="WARNING"):
            rendered = render_header(header)
        self.assertEqual(len(rendered), 2 * BLOCK_SIZE)
        self.assertEqual(rendered[3200:3280], b"END" + b" " * 77)

    def test_render_data(self) -> None:
        """Test zero padding of the data section."""
        rendered = render_data([b"ab", b"cd"])
        self.assertEqual(len(rendered), BLOCK_SIZE)
        self.assertEqual(rendered[:4], b"abcd")
        self.assertEqual(rendered[4:], bytes(BLOCK_SIZE - 4))
        self.assertEqual(render_data([]), b"")
        self.assertEqual(len(render_data([bytes(BLOCK_SIZE)])), BLOCK_SIZE)

    def test_idempotence(self) -> None:
        """Test that parsing a rendered header gives back the same cards."""
        _, raw = make_survey_image(self.rng)
        header = parse_header(raw)
        self.assertEqual(parse_header(render_header(header)), header)

    def test_to_bytes(self) -> None:
        """Test that Astropy reads back what we write."""
        array = self.rng.normal(size=(37, 53)).astype(np.float32)
        parsed = ParsedFile.from_array(
            array, [HeaderCard("OBJECT", "NGC 1300", "target"), HeaderCard.commentary_card("HISTORY", "made")]
        )
        raw = to_bytes(parsed)
        self.assertEqual(len(raw) % BLOCK_SIZE, 0)
        self.assertEqual(len(raw), BLOCK_SIZE + 3 * BLOCK_SIZE)
        with astropy.io.fits.HDUList.fromstring(raw) as hdu_list:
            self.assertEqual(len(hdu_list), 1)
            hdu = hdu_list[0]
            self.assertEqual(hdu.header["BITPIX"], -32)
            self.assertEqual(hdu.header["OBJECT"], "NGC 1300")
            self.assertEqual(hdu.header.comments["OBJECT"], "target")
            self.assertEqual(list(hdu.header["HISTORY"]), ["made"])
            np.testing.assert_array_equal(hdu.data, array)

    def test_to_bytes_errors(self) -> None:
        """Test that inconsistent files are rejected before any output."""
        parsed = ParsedFile.from_array(np.zeros((3, 4), dtype=np.int16))
        without_bitpix = ParsedFile(FitsHeader(c for c in parsed.header if c.keyword != BITPIX), parsed.data)
        with self.assertRaises(MissingKeywordError):
            to_bytes(without_bitpix)
        with self.assertRaises(ValueError):
            to_bytes(ParsedFile(parsed.header, parsed.data[:2]))
        with self.assertRaises(ValueError):
            to_bytes(ParsedFile(parsed.header, [row[:-1] for row in parsed.data]))
        with self.assertRaises(ValueError):
            to_bytes(ParsedFile(parsed.header.with_value(NAXIS2, 4), parsed.data))


class ParsedFileTestCase(unittest.TestCase):
    """Tests for building ParsedFile objects from arrays."""

    def test_from_array(self) -> None:
        """Test the generated header and rows."""
        array = np.array([[1, -2, 3], [4, 5, -6]], dtype=np.int64)
        parsed = ParsedFile.from_array(array)
        self.assertEqual(parsed.header.keywords, [SIMPLE, BITPIX, "NAXIS", "NAXIS1", NAXIS2])
        self.assertEqual(parsed.header.get(BITPIX), 64)
        self.assertEqual(parsed.data[0], array[0].astype(">i8").tobytes())
        self.assertEqual(parsed.geometry.row_bytes, 24)
        np.testing.assert_array_equal(parsed.to_array(physical=False), array)
        np.testing.assert_array_equal(parsed.to_array(), array.astype(np.float64))

    def test_from_array_errors(self) -> None:
        """Test that unsupported arrays are rejected."""
        with self.assertRaises(ValueError):
            ParsedFile.from_array(np.zeros(5, dtype=np.int16))
        with self.assertRaises(TypeError):
            ParsedFile.from_array(np.zeros((2, 2), dtype=np.complex64))
        with self.assertRaises(TypeError):
            ParsedFile.from_array(np.zeros((2, 2), dtype=np.uint16))

    def test_rows_required(self) -> None:
        """Test that a single byte string is not mistaken for rows."""
        header = ParsedFile.from_array(np.zeros((1, 2), dtype=np.uint8)).header
        for data in (b"\x01\x02", bytearray(b"\x01\x02"), memoryview(b"\x01\x02")):
            with self.subTest(data=type(data)):
                with self.assertRaises(TypeError):
                    ParsedFile(header, data)
        self.assertEqual(ParsedFile(header, [bytearray(b"\x01\x02")]).data, (b"\x01\x02",))


if __name__ == "__main__":
    unittest.main()
