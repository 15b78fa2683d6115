"""Reader for the ICGEM gravity field format."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Local Imports
from ...common.exceptions import FormatError
from ..coefficients import getUnnormalizationFactors
from .reader_base import PotentialCoefficientsReader, iterLines, parseInteger, parseReal, parseYyyymmdd

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from typing import BinaryIO

PRODUCT_TYPE: str = "product_type"
GRAVITY_FIELD: str = "gravity_field"
GRAVITY_CONSTANT: str = "earth_gravity_constant"
REFERENCE_RADIUS: str = "radius"
MAX_DEGREE: str = "max_degree"
NORMALIZATION: str = "norm"
END_OF_HEADER: str = "end_of_head"

GFC: str = "gfc"
"""``str``: constant coefficient record."""

GFCT: str = "gfct"
"""``str``: coefficient record with a reference date."""

DOT: str = "dot"
"""``str``: drift per year record."""


class ICGEMFormatReader(PotentialCoefficientsReader):
    """Reader for the ICGEM gravity field format.

    This format is used to describe the gravity field of EIGEN models published by the GFZ
    Potsdam since 2004. It is described in Franz Barthelmes and Christoph Förste paper:
    "the ICGEM-format".

    A free text prelude is followed by a keyword header closed by ``end_of_head``, then by one
    record per line::

        gfc     2    0 -0.484165143790815e-03  0.000000000000000e+00  ...
        gfct    2    0 -0.484165143790815e-03  0.000000000000000e+00  ... 20050101
        dot     2    0  0.116275500000000e-10  0.000000000000000e+00  ...
    """

    def loadData(self, stream: BinaryIO, name: str):
        """Parse an ICGEM gravity field source.

        Sources without an ``end_of_head`` keyword are left to other readers.

        Args:
            stream (``BinaryIO``): byte stream of the source.
            name (``str``): name of the source, for diagnostics.

        Raises:
            FormatError: if the header or a record is malformed.
            SeveralReferenceDatesError: if ``gfct`` records reference different dates.
        """
        builder = self.newBuilder(name)
        in_header = True
        normalized = True
        product_found = False
        factors = None

        for line_number, line in enumerate(iterLines(stream), start=1):
            tab = line.split()
            if not tab:
                continue

            if in_header:
                key = tab[0].lower()
                if key == END_OF_HEADER:
                    in_header = False
                    if not product_found or builder.mu is None or builder.ae is None:
                        raise FormatError("Incomplete ICGEM header", name, line_number)
                elif len(tab) < 2:
                    continue
                elif key == PRODUCT_TYPE:
                    if tab[1] != GRAVITY_FIELD:
                        raise FormatError(f"Unsupported product type {tab[1]!r}", name, line_number)
                    product_found = True
                elif key == GRAVITY_CONSTANT:
                    builder.mu = parseReal(tab[1], name, line_number)
                elif key == REFERENCE_RADIUS:
                    builder.ae = parseReal(tab[1], name, line_number)
                elif key == MAX_DEGREE:
                    builder.declareLimits(parseInteger(tab[1], name, line_number), None, line_number)
                elif key == NORMALIZATION:
                    if tab[1] not in ("fully_normalized", "unnormalized"):
                        raise FormatError(f"Unsupported normalization {tab[1]!r}", name, line_number)
                    normalized = tab[1] == "fully_normalized"
                continue

            if tab[0] not in (GFC, GFCT, DOT):
                raise FormatError(f"Unknown record {tab[0]!r}", name, line_number)
            if len(tab) < (6 if tab[0] == GFCT else 5):
                raise FormatError(f"Too few fields in {tab[0]} record", name, line_number)

            n = parseInteger(tab[1], name, line_number)
            m = parseInteger(tab[2], name, line_number)
            cnm = parseReal(tab[3], name, line_number)
            snm = parseReal(tab[4], name, line_number)
            if not normalized and 0 <= m <= n:
                # store everything fully normalized
                if factors is None or factors.maxDegree < n:
                    factors = getUnnormalizationFactors(n, n)
                cnm /= factors.get(n, m)
                snm /= factors.get(n, m)

            if tab[0] == DOT:
                builder.addTrend(n, m, cnm, snm, line_number)
            else:
                if tab[0] == GFCT:
                    builder.setReferenceDate(parseYyyymmdd(tab[-1], name, line_number), line_number)
                builder.addCoefficients(n, m, cnm, snm, line_number)

        if in_header:
            # not an ICGEM file
            return

        self.commit(builder)
