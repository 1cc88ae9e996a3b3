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

from lsst.fitsparser import DATAMAX, DATAMIN, HeaderCard, ParsedFile, from_astropy, parse_fits, to_astropy
from lsst.fitsparser.tests import make_survey_image


class AstropyInteropTestCase(unittest.TestCase):
    """Tests for conversions to and from Astropy HDUs."""

    def setUp(self) -> None:
        self.rng = np.random.default_rng(1300)

    def test_to_astropy(self) -> None:
        """Test that Astropy sees the same header and physical values."""
        _, raw = make_survey_image(self.rng)
        parsed = parse_fits(raw)
        hdu = to_astropy(parsed)
        self.assertEqual(list(hdu.header.keys()), parsed.header.keywords)
        self.assertEqual(hdu.header["DATAMIN"], parsed.header.get(DATAMIN))
        self.assertEqual(hdu.header["OBJECT"], "Mercator's field")
        np.testing.assert_array_equal(hdu.data, parsed.to_array())

    def test_from_astropy(self) -> None:
        """Test conversion of an Astropy HDU holding floating-point data."""
        array = self.rng.normal(size=(20, 30)).astype(np.float32)
        hdu = astropy.io.fits.PrimaryHDU(array)
        hdu.header["OBSERVER"] = ("Hubble", "observer name")
        parsed = from_astropy(hdu)
        self.assertIsNotNone(parsed)
        self.assertEqual(parsed.header.get("OBSERVER"), "Hubble")
        self.assertEqual(parsed.header.get_card("OBSERVER").comment, "observer name")
        self.assertEqual(parsed.header.get(DATAMIN), float(array.min()))
        np.testing.assert_array_equal(parsed.to_array(physical=False), array)

    def test_unsigned_convention(self) -> None:
        """Test that Astropy's unsigned 16-bit convention is decoded through
        BZERO.
        """
        array = self.rng.integers(0, 65535, size=(10, 12), dtype=np.uint16)
        parsed = from_astropy(astropy.io.fits.PrimaryHDU(array))
        self.assertEqual(parsed.header.get_int("BITPIX"), 16)
        self.assertEqual(parsed.header.get_float("BZERO"), 32768.0)
        self.assertEqual(parsed.header.get(DATAMIN), float(array.min()))
        self.assertEqual(parsed.header.get(DATAMAX), float(array.max()))
        np.testing.assert_array_equal(parsed.to_array(), array)

    def test_roundtrip(self) -> None:
        """Test a round trip through Astropy."""
        parsed = ParsedFile.from_array(
            np.arange(24, dtype=np.int32).reshape(4, 6), [HeaderCard("EXPTIME", 15.0, "[s]")]
        )
        restored = from_astropy(to_astropy(parsed))
        np.testing.assert_array_equal(restored.to_array(physical=False), parsed.to_array(physical=False))
        self.assertEqual(restored.header.get("EXPTIME"), 15.0)
        self.assertEqual(restored.header.get(DATAMAX), 23.0)


if __name__ == "__main__":
    unittest.main()
