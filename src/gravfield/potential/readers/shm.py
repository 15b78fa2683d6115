"""Reader for the SHM gravity field format."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Local Imports
from ...common.exceptions import FormatError
from .reader_base import PotentialCoefficientsReader, iterLines, parseInteger, parseReal, parseYyyymmdd

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from typing import BinaryIO

GRCOEF: str = "GRCOEF"
"""``str``: label of first field coefficient records."""

GRCOF2: str = "GRCOF2"
"""``str``: label of second field coefficient records."""

GRDOTA: str = "GRDOTA"
"""``str``: label of drift coefficient records."""


class SHMFormatReader(PotentialCoefficientsReader):
    """Reader for the SHM gravity field format.

    This format was used to describe the gravity field of EIGEN models published by the GFZ
    Potsdam up to 2003, before it was replaced by the ICGEM format. The first line carries the
    ``SHM`` signature in columns 49 to 56, an ``EARTH`` record gives the central body constants,
    a ``SHM`` record declares the maximal degree, and labeled records give the coefficients::

        GRCOEF  2  0 -0.484165143790815D-03  0.000000000000000D+00 ...
        GRDOTA  2  0  0.116275500000000D-10  0.000000000000000D+00 ... 19880101

    All ``GRDOTA`` drift records must share the same reference date.
    """

    def loadData(self, stream: BinaryIO, name: str):
        """Parse a SHM gravity field source.

        Sources without the ``FIRST`` / ``SHM`` signature line are left to other readers.

        Args:
            stream (``BinaryIO``): byte stream of the source.
            name (``str``): name of the source, for diagnostics.

        Raises:
            FormatError: if a record is malformed or a mandatory record is missing.
            SeveralReferenceDatesError: if drift records reference different dates.
        """
        builder = self.newBuilder(name)
        lines = iterLines(stream)
        first = next(lines, None)
        if first is None or first[:6] != "FIRST " or first[49:56] != "SHM    ":
            # not a SHM file
            return

        ok_earth, ok_shm, ok_coeffs = False, False, False
        for line_number, line in enumerate(lines, start=2):
            tab = line.split()
            if len(line) < 6 or not tab:
                continue

            if tab[0] == "EARTH":
                self._checkFields(tab, 3, name, line_number)
                builder.mu = parseReal(tab[1], name, line_number)
                builder.ae = parseReal(tab[2], name, line_number)
                ok_earth = True

            elif tab[0] == "SHM":
                self._checkFields(tab, 2, name, line_number)
                builder.declareLimits(parseInteger(tab[1], name, line_number), None, line_number)
                ok_shm = True

            elif line[:6] == GRCOEF or tab[0] in (GRCOF2, GRDOTA):
                if not ok_shm:
                    raise FormatError("Coefficient record before the SHM record", name, line_number)
                is_drift = tab[0] == GRDOTA
                self._checkFields(tab, 8 if is_drift else 5, name, line_number)
                n = parseInteger(tab[1], name, line_number)
                m = parseInteger(tab[2], name, line_number)
                cnm = parseReal(tab[3], name, line_number)
                snm = parseReal(tab[4], name, line_number)
                if is_drift:
                    builder.setReferenceDate(parseYyyymmdd(tab[7], name, line_number), line_number)
                    builder.addTrend(n, m, cnm, snm, line_number)
                else:
                    builder.addCoefficients(n, m, cnm, snm, line_number)
                    ok_coeffs = True

        if not (ok_earth and ok_shm and ok_coeffs):
            raise FormatError(f"Unexpected file format for loader {type(self).__name__}", name)

        self.commit(builder)

    @staticmethod
    def _checkFields(tab: list[str], count: int, name: str, line_number: int):
        if len(tab) < count:
            raise FormatError(f"Expected {count} fields in {tab[0]} record, got {len(tab)}", name, line_number)
