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

"""Reading and writing single-HDU FITS images.

A FITS file read by this package has the following layout:

- A header of 80-character ASCII cards, terminated by an ``END`` card and
  padded with spaces to 2880 bytes.  Headers spanning more than one 2880-byte
  block are not supported.

- A data section of ``NAXIS2`` rows of ``NAXIS1`` big-endian elements whose
  encoding is given by ``BITPIX``, zero-padded to a multiple of 2880 bytes.

Loading a file parses the header into a `FitsHeader`, computes the physical
(``BSCALE``/``BZERO``-scaled) range of the data into ``DATAMIN`` and
``DATAMAX``, and splits the data into raw byte rows held by a `ParsedFile`.
Saving re-renders the header cards and writes the rows back out.
"""

from ._bitpix import *
from ._common import *
from ._header import *
from ._interop import *
from ._io import *
from ._keywords import *
from ._matrix import *
from ._parsed import *
from ._parser import *
from ._statistics import *
from ._writer import *
