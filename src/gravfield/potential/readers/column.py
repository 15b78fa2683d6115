"""Readers for gravity fields stored as plain whitespace separated columns."""

from __future__ import annotations

# Standard Library Imports
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

# Local Imports
from ...common.exceptions import FormatError
from ...physics.bodies.earth import Earth
from .reader_base import PotentialCoefficientsReader, iterLines, parseInteger, parseReal

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from datetime import datetime
    from typing import BinaryIO

INTEGER_FIELD: str = r"[-+]?\d+"
"""``str``: pattern of degree & order columns."""

REAL_FIELD: str = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eEdD][-+]?\d+)?"
"""``str``: pattern of coefficient columns, Fortran ``D`` exponents included."""

FREE_FIELD: str = r"\S+"
"""``str``: pattern of columns whose content is not used."""


@dataclass(frozen=True)
class ColumnLayout:
    """Immutable description of the role of each column of a coefficients file.

    Columns are numbered from 1. Each ``with...`` method returns a new layout, so partially
    configured layouts can be shared as templates:

    .. code-block:: python

        EGM_LAYOUT = ColumnLayout(6).withDegreeOrder(1, 2).withSinCos(0, 4, 3)
        WITH_DRIFT = EGM_LAYOUT.withSinCos(1, 8, 7)
    """

    total_columns: int
    """``int``: number of columns of a data line, optional columns included."""

    marker: tuple[int, str] | None = None
    """``tuple``: column & keyword a data line must carry, if any."""

    degree_column: int | None = None
    """``int``: column of the degree :math:`n`."""

    order_column: int | None = None
    """``int``: column of the order :math:`m`."""

    sin_cos: tuple[tuple[int, int, int], ...] = ()
    """``tuple``: (power, sine column, cosine column) triplets, power 0 for the constant part and
    power 1 for the drift per Julian year."""

    factor: float = 1.0
    """``float``: multiplier applied to every coefficient read."""

    optional_columns: frozenset[int] = frozenset()
    """``frozenset``: columns which may be absent from a data line."""

    def __post_init__(self):
        """Reject layouts without any column."""
        if self.total_columns < 1:
            raise ValueError(f"Invalid number of columns: {self.total_columns}")

    def _checkColumn(self, column: int):
        if not 1 <= column <= self.total_columns:
            raise ValueError(f"Column {column} outside of 1..{self.total_columns}")

    def withMarker(self, column: int, keyword: str) -> ColumnLayout:
        """Require data lines to carry `keyword` in `column`."""
        self._checkColumn(column)
        return replace(self, marker=(column, keyword))

    def withDegreeOrder(self, degree_column: int, order_column: int) -> ColumnLayout:
        """Set the columns of the degree and the order."""
        self._checkColumn(degree_column)
        self._checkColumn(order_column)
        return replace(self, degree_column=degree_column, order_column=order_column)

    def withSinCos(self, power: int, sin_column: int, cos_column: int) -> ColumnLayout:
        """Set the sine & cosine columns of the terms of `power` in the time argument.

        Raises:
            ValueError: for a power other than 0 (constant) or 1 (linear drift), or if it was
                already configured.
        """
        if power not in (0, 1):
            raise ValueError(f"Unsupported time power {power}, only constant & linear terms are")
        if any(existing == power for existing, _, _ in self.sin_cos):
            raise ValueError(f"Columns of time power {power} already configured")
        self._checkColumn(sin_column)
        self._checkColumn(cos_column)
        return replace(self, sin_cos=(*self.sin_cos, (power, sin_column, cos_column)))

    def withFactor(self, factor: float) -> ColumnLayout:
        """Multiply every coefficient read by `factor`."""
        return replace(self, factor=factor)

    def withOptionalColumn(self, column: int) -> ColumnLayout:
        """Allow `column` to be absent, only trailing columns may be optional."""
        self._checkColumn(column)
        return replace(self, optional_columns=self.optional_columns | {column})

    def columnPatterns(self) -> list[str]:
        """Return the pattern matching each column, in column order."""
        patterns = [FREE_FIELD] * self.total_columns
        if self.marker is not None:
            patterns[self.marker[0] - 1] = re.escape(self.marker[1])
        for column in (self.degree_column, self.order_column):
            if column is not None:
                patterns[column - 1] = INTEGER_FIELD
        for _, sin_column, cos_column in self.sin_cos:
            patterns[sin_column - 1] = REAL_FIELD
            patterns[cos_column - 1] = REAL_FIELD
        return patterns

    def compile(self) -> re.Pattern:
        """Assemble the data line pattern, with one capture group per column.

        Raises:
            ValueError: if the degree/order or the constant columns were not configured, or if
                an optional column is followed by a mandatory one.
        """
        if self.degree_column is None or self.order_column is None:
            raise ValueError("Degree and order columns are not configured")
        if not any(power == 0 for power, _, _ in self.sin_cos):
            raise ValueError("Constant coefficients columns are not configured")

        pattern = r"^\s*"
        for index, field in enumerate(self.columnPatterns(), start=1):
            separator = "" if index == 1 else r"\s+"
            if index in self.optional_columns:
                pattern += rf"(?:{separator}({field}))?"
            elif any(optional < index for optional in self.optional_columns):
                raise ValueError(f"Mandatory column {index} follows an optional column")
            else:
                pattern += rf"{separator}({field})"
        return re.compile(pattern + r"\s*$")


class ColumnFormatReader(PotentialCoefficientsReader):
    """Reader for normalized coefficients laid out in columns described by a :class:`.ColumnLayout`.

    Such files carry no header, so the central body constants (and the reference date of the
    drift columns) are given to the reader. Lines which do not match the layout, such as comments
    or titles, are ignored.
    """

    def __init__(
        self,
        supported_names: str,
        missing_coefficients_allowed: bool,
        layout: ColumnLayout,
        mu: float,
        ae: float,
        reference_date: datetime | None = None,
    ):
        """Initialize the reader.

        Args:
            supported_names (``str``): regular expression for supported files names.
            missing_coefficients_allowed (``bool``): if ``True``, allows missing coefficients in
                the input data.
            layout (:class:`.ColumnLayout`): role of each column.
            mu (``float``): central body gravitational parameter, (m^3/sec^2).
            ae (``float``): reference equatorial radius of the potential, (m).
            reference_date (``datetime``, optional): epoch of the drift columns.

        Raises:
            ValueError: if `layout` is incomplete, or has drift columns without `reference_date`.
        """
        super().__init__(supported_names, missing_coefficients_allowed)
        self._layout = layout
        self._pattern = layout.compile()
        self._mu = mu
        self._ae = ae
        self._reference_date = reference_date
        if reference_date is None and any(power == 1 for power, _, _ in layout.sin_cos):
            raise ValueError("Drift columns require a reference date")

    @property
    def layout(self) -> ColumnLayout:
        """:class:`.ColumnLayout`: role of each column."""
        return self._layout

    def loadData(self, stream: BinaryIO, name: str):
        """Parse a column gravity field source.

        Args:
            stream (``BinaryIO``): byte stream of the source.
            name (``str``): name of the source, for diagnostics.

        Raises:
            FormatError: if no line matched the layout or a coefficient is invalid.
        """
        builder = self.newBuilder(name)
        builder.mu = self._mu
        builder.ae = self._ae
        if self._reference_date is not None:
            builder.setReferenceDate(self._reference_date)

        layout = self._layout
        found = False
        for line_number, line in enumerate(iterLines(stream), start=1):
            matcher = self._pattern.match(line)
            if matcher is None:
                continue
            found = True

            n = parseInteger(matcher.group(layout.degree_column), name, line_number)
            m = parseInteger(matcher.group(layout.order_column), name, line_number)
            for power, sin_column, cos_column in layout.sin_cos:
                snm = layout.factor * parseReal(matcher.group(sin_column), name, line_number)
                cnm = layout.factor * parseReal(matcher.group(cos_column), name, line_number)
                if power == 0:
                    builder.addCoefficients(n, m, cnm, snm, line_number)
                else:
                    builder.addTrend(n, m, cnm, snm, line_number)

        if not found:
            raise FormatError(f"No line matching the layout of {type(self).__name__}", name)

        self.completeField(builder)
        self.commit(builder)

    def completeField(self, builder):
        """Hook letting dialects stage the terms their files conventionally omit."""


EGM_LAYOUT: ColumnLayout = (
    ColumnLayout(6).withDegreeOrder(1, 2).withSinCos(0, 4, 3).withOptionalColumn(5).withOptionalColumn(6)
)
"""``ColumnLayout``: ``n m C S sigmaC sigmaS`` lines of the EGM files."""


class EGMFormatReader(ColumnFormatReader):
    """Reader for the EGM gravity field format.

    This format is used by the National Geospatial-Intelligence Agency for the EGM96 and EGM2008
    models. Each line holds ``n m C S sigmaC sigmaS`` fully normalized terms, the EGM96 constants
    of :class:`.Earth` apply and the degree 0 & 1 terms are implied when absent.
    """

    def __init__(self, supported_names: str, missing_coefficients_allowed: bool):
        """Initialize the reader.

        Args:
            supported_names (``str``): regular expression for supported files names.
            missing_coefficients_allowed (``bool``): if ``True``, allows missing coefficients in
                the input data.
        """
        super().__init__(supported_names, missing_coefficients_allowed, EGM_LAYOUT, Earth.mu, Earth.radius)

    def completeField(self, builder):
        """Stage the central term and the null degree 1 terms if the file omits them."""
        builder.setDefaultCoefficients(0, 0, 1.0, 0.0)
        builder.setDefaultCoefficients(1, 0, 0.0, 0.0)
        builder.setDefaultCoefficients(1, 1, 0.0, 0.0)
