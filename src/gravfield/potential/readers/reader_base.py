"""Defines the common infrastructure shared by every gravity field file reader."""

from __future__ import annotations

# Standard Library Imports
import re
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from math import isnan
from typing import TYPE_CHECKING

# Local Imports
from ...common.exceptions import (
    DegreeOrderRangeError,
    FormatError,
    MissingCoefficientError,
    NoGravityFieldDataError,
    SeveralReferenceDatesError,
)
from ...common.logger import gravfieldLogDebug, gravfieldLogError, gravfieldLogInfo, gravfieldLogWarning
from ...physics.constants import REFERENCE_HOUR
from ..coefficients import TriangularArray, buildTriangularArray, unnormalize
from ..providers import ConstantSphericalHarmonics, SecularTrendSphericalHarmonics

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterable, Iterator
    from typing import BinaryIO

    # Local Imports
    from ..providers import SphericalHarmonicsProvider


@dataclass(frozen=True)
class GravityFieldData:
    """Immutable result of a successful parse, stored with fully normalized coefficients."""

    mu: float
    """``float``: central body gravitational parameter, (m^3/sec^2)."""

    ae: float
    """``float``: reference equatorial radius, (m)."""

    c: TriangularArray
    """:class:`.TriangularArray`: normalized cosine coefficients."""

    s: TriangularArray
    """:class:`.TriangularArray`: normalized sine coefficients."""

    reference_date: datetime | None = None
    """``datetime``: epoch of the drift records, if any."""

    c_trend: TriangularArray | None = None
    """:class:`.TriangularArray`: normalized cosine drift per Julian year, if any."""

    s_trend: TriangularArray | None = None
    """:class:`.TriangularArray`: normalized sine drift per Julian year, if any."""


def iterLines(stream: BinaryIO | Iterable[bytes | str]) -> Iterator[str]:
    """Decode the lines of a gravity field stream, without their line terminators.

    Sources are ASCII, decoding them as UTF-8 also copes with stray non ASCII characters.
    """
    for raw in stream:
        line = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        # Copy-pasted tables sometimes carry unicode minus signs
        yield line.rstrip("\r\n").replace("\u2212", "-")


def parseReal(field: str, name: str, line_number: int | None = None) -> float:
    """Parse a real number, accepting Fortran ``D`` exponents.

    Raises:
        FormatError: if `field` is not a number.
    """
    try:
        return float(field.replace("D", "E").replace("d", "e"))
    except ValueError as err:
        raise FormatError(f"Unable to parse real number {field!r}", name, line_number) from err


def parseInteger(field: str, name: str, line_number: int | None = None) -> int:
    """Parse an integer.

    Raises:
        FormatError: if `field` is not an integer.
    """
    try:
        return int(field)
    except ValueError as err:
        raise FormatError(f"Unable to parse integer {field!r}", name, line_number) from err


def parseYyyymmdd(field: str, name: str, line_number: int | None = None) -> datetime:
    """Parse a ``yyyymmdd`` reference date, optionally followed by a fraction, to its noon epoch.

    Raises:
        FormatError: if `field` is not a valid date.
    """
    digits = field.split(".")[0]
    if len(digits) != 8 or not digits.isdigit():
        raise FormatError(f"Unable to parse reference date {field!r}", name, line_number)
    try:
        return datetime(int(digits[:4]), int(digits[4:6]), int(digits[6:8]), REFERENCE_HOUR)
    except ValueError as err:
        raise FormatError(f"Invalid reference date {field!r}", name, line_number) from err


class FieldBuilder:
    """Mutable staging area of one parse.

    Nothing staged here is visible to the reader until :meth:`.build` succeeded, so a failing
    parse never leaves a partially populated field behind.
    """

    def __init__(self, name: str, max_parse_degree: int, max_parse_order: int):
        """Start staging the content of `name`.

        Args:
            name (``str``): name of the parsed source, for diagnostics.
            max_parse_degree (``int``): records of higher degree are silently skipped.
            max_parse_order (``int``): records of higher order are silently skipped.
        """
        self.name = name
        self.mu: float | None = None
        self.ae: float | None = None
        self.reference_date: datetime | None = None
        self._max_parse_degree = max_parse_degree
        self._max_parse_order = max_parse_order
        self._declared_degree: int | None = None
        self._declared_order: int | None = None
        self._coefficients: dict[tuple[int, int], tuple[float, float]] = {}
        self._trends: dict[tuple[int, int], tuple[float, float]] = {}
        self._skipped = 0

    def declareLimits(self, degree: int, order: int | None = None, line_number: int | None = None):
        """Record the maximal degree (and order) the source claims to hold.

        Raises:
            FormatError: if the declared values are negative or inconsistent.
        """
        order = degree if order is None else order
        if degree < 0 or order < 0 or order > degree:
            raise FormatError(f"Invalid declared degree/order {degree}/{order}", self.name, line_number)
        self._declared_degree = degree
        self._declared_order = order

    def _accepts(self, n: int, m: int, line_number: int | None) -> bool:
        if n < 0 or m < 0 or m > n:
            raise FormatError(f"Invalid degree/order pair ({n}, {m})", self.name, line_number)
        if self._declared_degree is not None and (n > self._declared_degree or m > self._declared_order):
            raise FormatError(
                f"Coefficient ({n}, {m}) exceeds declared degree/order "
                f"{self._declared_degree}/{self._declared_order}",
                self.name,
                line_number,
            )
        if n > self._max_parse_degree or m > self._max_parse_order:
            self._skipped += 1
            return False
        return True

    def addCoefficients(self, n: int, m: int, cnm: float, snm: float, line_number: int | None = None):
        """Stage the normalized constant coefficients of (`n`, `m`).

        Raises:
            FormatError: if (`n`, `m`) is invalid, duplicated or beyond the declared limits.
        """
        if not self._accepts(n, m, line_number):
            return
        if (n, m) in self._coefficients:
            raise FormatError(f"Duplicated coefficient ({n}, {m})", self.name, line_number)
        self._coefficients[(n, m)] = (cnm, snm)

    def setDefaultCoefficients(self, n: int, m: int, cnm: float, snm: float):
        """Stage (`n`, `m`) only if the source did not provide it."""
        if n <= self._max_parse_degree and m <= self._max_parse_order:
            self._coefficients.setdefault((n, m), (cnm, snm))

    def addTrend(self, n: int, m: int, cdot: float, sdot: float, line_number: int | None = None):
        """Stage the normalized drift per Julian year of (`n`, `m`).

        Raises:
            FormatError: if (`n`, `m`) is invalid, duplicated or beyond the declared limits.
        """
        if not self._accepts(n, m, line_number):
            return
        if (n, m) in self._trends:
            raise FormatError(f"Duplicated drift coefficient ({n}, {m})", self.name, line_number)
        self._trends[(n, m)] = (cdot, sdot)

    def setReferenceDate(self, date: datetime, line_number: int | None = None):
        """Record the reference date, which must be the same across the whole source.

        Raises:
            SeveralReferenceDatesError: if a different reference date was already recorded.
        """
        if self.reference_date is None:
            self.reference_date = date
        elif self.reference_date != date:
            raise SeveralReferenceDatesError(
                f"Several reference dates in gravity field: {self.reference_date} and {date}",
                self.name,
                line_number,
            )

    def build(self, missing_coefficients_allowed: bool) -> GravityFieldData:
        """Validate the staged content and freeze it.

        Args:
            missing_coefficients_allowed (``bool``): whether absent coefficients default to zero.

        Returns:
            :class:`.GravityFieldData`: the parsed field, with normalized coefficients.

        Raises:
            FormatError: if constants, coefficients or the reference date of drift records are absent.
            MissingCoefficientError: if a coefficient is absent and that is not allowed.
        """
        if self.mu is None or self.ae is None:
            raise FormatError("Missing central body constants", self.name)
        if not self._coefficients:
            raise FormatError("No gravity field coefficient found", self.name)

        if self._declared_degree is None:
            keys = [*self._coefficients, *self._trends]
            degree = max(n for n, _ in keys)
            order = max(m for _, m in keys)
        else:
            degree, order = self._declared_degree, self._declared_order
        degree = min(degree, self._max_parse_degree)
        order = min(order, self._max_parse_order, degree)

        initial = 0.0 if missing_coefficients_allowed else float("nan")
        c = buildTriangularArray(degree, order, initial)
        s = buildTriangularArray(degree, order, initial)
        for (n, m), (cnm, snm) in self._coefficients.items():
            c.set(n, m, cnm)
            s.set(n, m, snm)

        if missing_coefficients_allowed:
            if (missing_count := sum(len(row) for row in c) - len(self._coefficients)) > 0:
                gravfieldLogWarning(f"{missing_count} missing coefficients of {self.name} default to zero")
            # ensure at least the (0, 0) element is properly set
            if c.get(0, 0) == 0.0:
                c.set(0, 0, 1.0)
        elif (missing := c.findMissing()) is not None:
            raise MissingCoefficientError(f"Missing coefficient ({missing[0]}, {missing[1]})", self.name)

        # the sine coefficients of zonal terms are meaningless and may be absent
        for n in range(degree + 1):
            if isnan(s.get(n, 0)):
                s.set(n, 0, 0.0)
        if not missing_coefficients_allowed and (missing := s.findMissing()) is not None:
            raise MissingCoefficientError(f"Missing coefficient ({missing[0]}, {missing[1]})", self.name)

        if self._skipped:
            gravfieldLogDebug(
                f"{self._skipped} records beyond degree/order {degree}/{order} skipped in {self.name}",
            )

        if not self._trends:
            return GravityFieldData(mu=self.mu, ae=self.ae, c=c, s=s, reference_date=self.reference_date)

        if self.reference_date is None:
            raise FormatError("Drift coefficients without reference date", self.name)
        c_trend = buildTriangularArray(degree, order, 0.0)
        s_trend = buildTriangularArray(degree, order, 0.0)
        for (n, m), (cdot, sdot) in self._trends.items():
            c_trend.set(n, m, cdot)
            s_trend.set(n, m, sdot)

        return GravityFieldData(
            mu=self.mu,
            ae=self.ae,
            c=c,
            s=s,
            reference_date=self.reference_date,
            c_trend=c_trend,
            s_trend=s_trend,
        )


class PotentialCoefficientsReader(ABC):
    """Abstract reader for one gravity field file dialect.

    A reader recognizes its dialect from the content of the streams it is fed, and either
    completes or raises a :class:`.FormatError`. Once complete, it builds the providers used by
    the attraction models.
    """

    def __init__(self, supported_names: str, missing_coefficients_allowed: bool):
        """Initialize the reader.

        Args:
            supported_names (``str``): regular expression for supported files names.
            missing_coefficients_allowed (``bool``): if ``True``, allows missing coefficients in
                the input data.
        """
        self._supported_names = supported_names
        self._names_pattern = re.compile(supported_names)
        self._missing_coefficients_allowed = missing_coefficients_allowed
        self._max_parse_degree = sys.maxsize
        self._max_parse_order = sys.maxsize
        self._field: GravityFieldData | None = None

    def __repr__(self) -> str:
        """Readable representation for log records."""
        return f"{type(self).__name__}({self._supported_names!r})"

    def getSupportedNames(self) -> str:
        """Return the regular expression of supported file names."""
        return self._supported_names

    def supportsName(self, name: str) -> bool:
        """Whether a file called `name` should be offered to this reader."""
        return self._names_pattern.match(name) is not None

    def missingCoefficientsAllowed(self) -> bool:
        """Whether missing coefficients default to zero instead of failing the parse."""
        return self._missing_coefficients_allowed

    def setMaxParseDegree(self, degree: int):
        """Set the maximal degree to parse, higher degree rows are skipped."""
        self._max_parse_degree = degree

    def getMaxParseDegree(self) -> int:
        """Return the maximal degree to parse."""
        return self._max_parse_degree

    def setMaxParseOrder(self, order: int):
        """Set the maximal order to parse, higher order terms are skipped."""
        self._max_parse_order = order

    def getMaxParseOrder(self) -> int:
        """Return the maximal order to parse."""
        return self._max_parse_order

    def stillAcceptsData(self) -> bool:
        """Whether the reader still waits for a source it can complete with."""
        return self._field is None

    def newBuilder(self, name: str) -> FieldBuilder:
        """Start staging a new parse of `name`, forgetting any previously loaded field."""
        self._field = None
        return FieldBuilder(name, self._max_parse_degree, self._max_parse_order)

    def commit(self, builder: FieldBuilder):
        """Validate the staged content of `builder` and mark this reader complete."""
        self._field = builder.build(self._missing_coefficients_allowed)
        gravfieldLogInfo(
            f"{self!r} read {builder.name!r} up to degree/order "
            f"{self._field.c.maxDegree}/{self._field.c.maxOrder}",
        )

    @abstractmethod
    def loadData(self, stream: BinaryIO, name: str):
        """Parse a gravity field source.

        Args:
            stream (``BinaryIO``): byte stream of the source.
            name (``str``): name of the source, for diagnostics.

        Raises:
            FormatError: if the content does not match the dialect.
        """
        raise NotImplementedError

    def getField(self) -> GravityFieldData:
        """Return the parsed field.

        Raises:
            NoGravityFieldDataError: if no source was successfully parsed.
        """
        if self._field is None:
            raise NoGravityFieldDataError(f"No gravity field data loaded by {self!r}")
        return self._field

    def getMaxAvailableDegree(self) -> int:
        """Return the maximal degree available in the parsed field."""
        return self.getField().c.maxDegree

    def getMaxAvailableOrder(self) -> int:
        """Return the maximal order available in the parsed field."""
        return self.getField().c.maxOrder

    def getConstantProvider(self, degree: int, order: int) -> ConstantSphericalHarmonics:
        """Get a provider of the constant part of the parsed field.

        Args:
            degree (``int``): maximal degree.
            order (``int``): maximal order.

        Returns:
            :class:`.ConstantSphericalHarmonics`: provider of un-normalized coefficients.

        Raises:
            DegreeOrderRangeError: if the request exceeds the available degree or order.
            NoGravityFieldDataError: if no field has been read yet.
        """
        field = self.getField()
        self._checkRequest(degree, order)
        return ConstantSphericalHarmonics(
            field.ae,
            field.mu,
            unnormalize(field.c.truncate(degree, order)),
            unnormalize(field.s.truncate(degree, order)),
        )

    def getProvider(self, degree: int, order: int) -> SphericalHarmonicsProvider:
        """Get a provider of the parsed field, including its drift when the source had one.

        Args:
            degree (``int``): maximal degree.
            order (``int``): maximal order.

        Returns:
            :class:`.SphericalHarmonicsProvider`: constant or secular trend provider.
        """
        constant = self.getConstantProvider(degree, order)
        field = self.getField()
        if field.c_trend is None:
            return constant

        return SecularTrendSphericalHarmonics(
            constant,
            field.reference_date,
            unnormalize(field.c_trend.truncate(degree, order)),
            unnormalize(field.s_trend.truncate(degree, order)),
        )

    def _checkRequest(self, degree: int, order: int):
        msg = None
        if degree < 0 or order < 0:
            msg = f"Invalid degree/order {degree}/{order}"
        elif degree > self.getMaxAvailableDegree():
            msg = f"Too large degree {degree}, maximum available is {self.getMaxAvailableDegree()}"
        elif order > self.getMaxAvailableOrder():
            msg = f"Too large order {order}, maximum available is {self.getMaxAvailableOrder()}"
        if msg is not None:
            gravfieldLogError(msg)
            raise DegreeOrderRangeError(msg)
