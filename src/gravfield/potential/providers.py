"""Providers serving un-normalized spherical harmonics coefficients to the attraction models."""

from __future__ import annotations

# Standard Library Imports
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import zeros

# Local Imports
from ..common.exceptions import DegreeOrderRangeError
from ..physics.constants import JULIAN_YEAR

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from .coefficients import TriangularArray


class SphericalHarmonicsProvider(ABC):
    """Interface the attraction models use to query a gravity field."""

    @abstractmethod
    def getMu(self) -> float:
        """Return the central body gravitational parameter, (m^3/sec^2)."""
        raise NotImplementedError

    @abstractmethod
    def getAe(self) -> float:
        """Return the reference equatorial radius of the potential, (m)."""
        raise NotImplementedError

    @abstractmethod
    def getMaxDegree(self) -> int:
        """Return the maximal degree available."""
        raise NotImplementedError

    @abstractmethod
    def getMaxOrder(self) -> int:
        """Return the maximal order available."""
        raise NotImplementedError

    @abstractmethod
    def getReferenceDate(self) -> datetime | None:
        """Return the reference date of time-dependent terms, ``None`` for a constant field."""
        raise NotImplementedError

    @abstractmethod
    def getOffset(self, date: datetime) -> float:
        """Return the seconds elapsed between the reference date and `date`, 0 if constant."""
        raise NotImplementedError

    @abstractmethod
    def getUnnormalizedCnm(self, offset: float, n: int, m: int) -> float:
        """Return the un-normalized cosine coefficient :math:`C_{n,m}` at `offset` seconds."""
        raise NotImplementedError

    @abstractmethod
    def getUnnormalizedSnm(self, offset: float, n: int, m: int) -> float:
        """Return the un-normalized sine coefficient :math:`S_{n,m}` at `offset` seconds."""
        raise NotImplementedError

    def checkLimits(self, n: int, m: int):
        """Ensure (`n`, `m`) is within what this provider supports.

        Raises:
            DegreeOrderRangeError: if the pair exceeds the maximal degree or order.
        """
        if n < 0 or n > self.getMaxDegree():
            raise DegreeOrderRangeError(f"Too large degree {n}, maximum is {self.getMaxDegree()}")
        if m < 0 or m > min(n, self.getMaxOrder()):
            raise DegreeOrderRangeError(
                f"Too large order {m} for degree {n}, maximum order is {self.getMaxOrder()}",
            )

    def getUnnormalizedArrays(self, offset: float) -> tuple[ndarray, ndarray]:
        """Return dense (n+1 x m+1) cosine & sine arrays evaluated at `offset` seconds."""
        c_nm = zeros((self.getMaxDegree() + 1, self.getMaxOrder() + 1))
        s_nm = zeros((self.getMaxDegree() + 1, self.getMaxOrder() + 1))
        for n in range(self.getMaxDegree() + 1):
            for m in range(min(n, self.getMaxOrder()) + 1):
                c_nm[n, m] = self.getUnnormalizedCnm(offset, n, m)
                s_nm[n, m] = self.getUnnormalizedSnm(offset, n, m)
        return c_nm, s_nm


class ConstantSphericalHarmonics(SphericalHarmonicsProvider):
    """Time independent gravity field."""

    def __init__(self, ae: float, mu: float, c: TriangularArray, s: TriangularArray):
        """Wrap un-normalized coefficient tables.

        Args:
            ae (``float``): reference equatorial radius of the potential, (m).
            mu (``float``): central body gravitational parameter, (m^3/sec^2).
            c (:class:`.TriangularArray`): un-normalized cosine coefficients.
            s (:class:`.TriangularArray`): un-normalized sine coefficients.
        """
        self._ae = ae
        self._mu = mu
        self._c = c.copy()
        self._s = s.copy()
        self._dense = (self._c.toDense(), self._s.toDense())
        self._dense[0].flags.writeable = False
        self._dense[1].flags.writeable = False

    def getMu(self) -> float:
        """Return the central body gravitational parameter, (m^3/sec^2)."""
        return self._mu

    def getAe(self) -> float:
        """Return the reference equatorial radius of the potential, (m)."""
        return self._ae

    def getMaxDegree(self) -> int:
        """Return the maximal degree available."""
        return self._c.maxDegree

    def getMaxOrder(self) -> int:
        """Return the maximal order available."""
        return self._c.maxOrder

    def getReferenceDate(self) -> datetime | None:
        """A constant field has no reference date."""
        return None

    def getOffset(self, date: datetime) -> float:
        """A constant field does not depend on time."""
        return 0.0

    def getUnnormalizedCnm(self, offset: float, n: int, m: int) -> float:
        """Return :math:`C_{n,m}`, `offset` is ignored."""
        self.checkLimits(n, m)
        return self._c.get(n, m)

    def getUnnormalizedSnm(self, offset: float, n: int, m: int) -> float:
        """Return :math:`S_{n,m}`, `offset` is ignored."""
        self.checkLimits(n, m)
        return self._s.get(n, m)

    def getUnnormalizedArrays(self, offset: float) -> tuple[ndarray, ndarray]:
        """Return the read-only dense cosine & sine arrays."""
        return self._dense


class SecularTrendSphericalHarmonics(SphericalHarmonicsProvider):
    r"""Gravity field with a linear drift of its coefficients.

    :math:`C_{n,m}(t) = C_{n,m}(t_0) + \dot{C}_{n,m} \frac{t - t_0}{J}` where :math:`J` is the
    Julian year in seconds and :math:`\dot{C}_{n,m}` the drift per Julian year.
    """

    def __init__(
        self,
        constant: ConstantSphericalHarmonics,
        reference_date: datetime,
        c_trend: TriangularArray,
        s_trend: TriangularArray,
    ):
        """Wrap a constant field with un-normalized drift tables.

        Args:
            constant (:class:`.ConstantSphericalHarmonics`): field at `reference_date`.
            reference_date (``datetime``): epoch of the constant part.
            c_trend (:class:`.TriangularArray`): un-normalized cosine drift, per Julian year.
            s_trend (:class:`.TriangularArray`): un-normalized sine drift, per Julian year.
        """
        self._constant = constant
        self._reference_date = reference_date
        self._c_trend = c_trend.copy()
        self._s_trend = s_trend.copy()

    def getMu(self) -> float:
        """Return the central body gravitational parameter, (m^3/sec^2)."""
        return self._constant.getMu()

    def getAe(self) -> float:
        """Return the reference equatorial radius of the potential, (m)."""
        return self._constant.getAe()

    def getMaxDegree(self) -> int:
        """Return the maximal degree available."""
        return self._constant.getMaxDegree()

    def getMaxOrder(self) -> int:
        """Return the maximal order available."""
        return self._constant.getMaxOrder()

    def getReferenceDate(self) -> datetime:
        """Return the epoch of the constant part."""
        return self._reference_date

    def getOffset(self, date: datetime) -> float:
        """Return the seconds elapsed since the reference date."""
        return (date - self._reference_date).total_seconds()

    def getUnnormalizedCnm(self, offset: float, n: int, m: int) -> float:
        """Return :math:`C_{n,m}` drifted to `offset` seconds."""
        constant = self._constant.getUnnormalizedCnm(offset, n, m)
        if not self._c_trend.contains(n, m):
            return constant
        return constant + self._c_trend.get(n, m) * offset / JULIAN_YEAR

    def getUnnormalizedSnm(self, offset: float, n: int, m: int) -> float:
        """Return :math:`S_{n,m}` drifted to `offset` seconds."""
        constant = self._constant.getUnnormalizedSnm(offset, n, m)
        if not self._s_trend.contains(n, m):
            return constant
        return constant + self._s_trend.get(n, m) * offset / JULIAN_YEAR
