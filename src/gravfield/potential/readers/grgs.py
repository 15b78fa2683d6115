"""Reader for the GRGS gravity field format."""

from __future__ import annotations

# Standard Library Imports
import re
from datetime import datetime
from typing import TYPE_CHECKING

# Local Imports
from ...common.exceptions import FormatError
from ...physics.constants import REFERENCE_HOUR
from .reader_base import PotentialCoefficientsReader, iterLines, parseInteger, parseReal

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from typing import BinaryIO

_REAL: str = r"[-+]?\d?\.\d+[eEdD][-+]\d\d"
_SEP: str = r")\s*("

HEADER_LINES: tuple[re.Pattern, ...] = (
    re.compile(r"^\s*FIELD - .*$"),
    re.compile(r"^\s+AE\s+1/F\s+GM\s+OMEGA\s*$"),
    re.compile(r"^\s*(" + _REAL + _SEP + _REAL + _SEP + _REAL + _SEP + _REAL + r")\s*$"),
    re.compile(r"^\s*REFERENCE\s+DATE\s+:\s+(\d+)\.0+\s*$"),
    re.compile(r"^\s*MAXIMAL\s+DEGREE\s+:\s+(\d+)(\s.*)?$"),
    re.compile(r"^\s*L\s+M\s+DOT\s+CBAR\s+SBAR\s+SIGMA C\s+SIGMA S(\s+LIB)?\s*$"),
)
"""``tuple``: patterns of the six header lines, in file order."""

DATA_LINE: re.Pattern = re.compile(
    r"^([ 0-9]{3})([ 0-9]{3})(   |DOT)\s*("
    + _REAL + _SEP + _REAL + _SEP + _REAL + _SEP + _REAL
    + r")(\s+[0-9]+)?\s*$",
)
"""``re.Pattern``: fixed-column coefficient line, ``DOT`` lines hold drifts per year."""


class GRGSFormatReader(PotentialCoefficientsReader):
    """Reader for the GRGS gravity field format.

    This format was used to describe various gravity fields at GRGS (Toulouse), such as the
    GRIM models. Six header lines give the field name, the central body constants, the
    reference date of the drift terms and the maximal degree; then each line holds one
    normalized (degree, order) term, with a ``DOT`` flag for drift per year terms::

        FIELD - GRIM5-C1
            AE                  1/F                 GM                 OMEGA
        0.63781364600000E+070.29825765000000E+030.39860044150000E+150.72921150000000E-04
        REFERENCE DATE :   1997.00
        MAXIMAL DEGREE :   5     Sigmas calibration factor : .5000E+01 (applied)
         L  M DOT         CBAR                SBAR             SIGMA C     SIGMA S
          2  0DOT 0.13252828916200E-10 0.00000000000000E+00  0.0000E+00  0.0000E+00
          2  0    -.48416511550920E-03 0.00000000000000E+00  0.3561E-10  0.0000E+00
    """

    def loadData(self, stream: BinaryIO, name: str):
        """Parse a GRGS gravity field source.

        Sources whose first line is not a ``FIELD -`` line are left to other readers.

        Args:
            stream (``BinaryIO``): byte stream of the source.
            name (``str``): name of the source, for diagnostics.

        Raises:
            FormatError: if a line does not match the expected header or data layout.
        """
        builder = self.newBuilder(name)
        line_number = 0
        for line in iterLines(stream):
            line_number += 1
            if line_number <= len(HEADER_LINES):
                matcher = HEADER_LINES[line_number - 1].match(line)
                if matcher is None:
                    if line_number == 1:
                        # not a GRGS file
                        return
                    raise FormatError(f"Unable to parse header line {line!r}", name, line_number)

                if line_number == 3:
                    builder.ae = parseReal(matcher.group(1), name, line_number)
                    builder.mu = parseReal(matcher.group(3), name, line_number)
                elif line_number == 4:
                    year = parseInteger(matcher.group(1), name, line_number)
                    try:
                        reference_date = datetime(year, 1, 1, REFERENCE_HOUR)
                    except ValueError as err:
                        raise FormatError(f"Invalid reference year {year}", name, line_number) from err
                    builder.setReferenceDate(reference_date, line_number)
                elif line_number == 5:
                    builder.declareLimits(parseInteger(matcher.group(1), name, line_number), None, line_number)
                continue

            if not line.strip():
                continue
            matcher = DATA_LINE.match(line)
            if matcher is None:
                raise FormatError(f"Unable to parse coefficient line {line!r}", name, line_number)

            n = parseInteger(matcher.group(1).strip(), name, line_number)
            m = parseInteger(matcher.group(2).strip(), name, line_number)
            cnm = parseReal(matcher.group(4), name, line_number)
            snm = parseReal(matcher.group(5), name, line_number)
            if matcher.group(3) == "DOT":
                builder.addTrend(n, m, cnm, snm, line_number)
            else:
                builder.addCoefficients(n, m, cnm, snm, line_number)

        if line_number == 0:
            return
        if line_number < len(HEADER_LINES):
            raise FormatError("Truncated header", name, line_number)

        self.commit(builder)
