"""Contains all the custom-defined exceptions used in gravfield."""

from __future__ import annotations


class GravityFieldError(Exception):
    """Base class of every error raised while loading or evaluating a gravity field."""


class FormatError(GravityFieldError):
    """A gravity field source claims a dialect but its content contradicts it."""

    def __init__(self, message: str, name: str, line_number: int | None = None):
        """Build the error message with the offending source and line.

        Args:
            message (``str``): description of the problem.
            name (``str``): name of the source being parsed.
            line_number (``int``, optional): 1-based line where the problem was found.
        """
        self.name = name
        self.line_number = line_number
        where = name if line_number is None else f"{name}, line {line_number}"
        super().__init__(f"{message} ({where})")


class MissingCoefficientError(FormatError):
    """A required coefficient was not present in the parsed source."""


class SeveralReferenceDatesError(FormatError):
    """Time-dependent records of one source reference different epochs."""


class NoGravityFieldDataError(GravityFieldError):
    """No registered reader could complete against the available sources."""


class DegreeOrderRangeError(GravityFieldError, IndexError):
    """A (degree, order) pair outside of what was loaded or what a provider supports."""


class NumericalDomainError(GravityFieldError):
    """Position for which the harmonic expansion cannot be evaluated."""


class PolarTrajectoryError(NumericalDomainError):
    """Position too close to the polar axis for the Droziner recursion."""


class InsideBrillouinSphereError(NumericalDomainError):
    """Position inside the reference sphere where the expansion diverges."""
