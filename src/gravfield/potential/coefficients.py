"""Triangular coefficient tables and the normalization factors applied to them."""

from __future__ import annotations

# Standard Library Imports
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import float64, full, isnan, sqrt, zeros

# Local Imports
from ..common.exceptions import DegreeOrderRangeError

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterator

    # Third Party Imports
    from numpy import ndarray


class TriangularArray:
    """Jagged array of real coefficients indexed by degree :math:`n` and order :math:`m`.

    Row :math:`n` owns :math:`\\min(n, M) + 1` values where :math:`M` is the maximum order of the
    table, so every stored slot satisfies :math:`m \\le n`.
    """

    def __init__(self, rows: list[ndarray]):
        """Wrap pre-built rows.

        Args:
            rows (``list``): one ``ndarray`` per degree, starting at degree 0.

        Raises:
            ValueError: if a row is longer than its degree allows.
        """
        for degree, row in enumerate(rows):
            if len(row) > degree + 1:
                raise ValueError(f"Row {degree} holds {len(row)} orders, more than {degree + 1}")
        self._rows = [row.astype(float64) for row in rows]

    @property
    def maxDegree(self) -> int:
        """``int``: highest degree stored, -1 for an empty table."""
        return len(self._rows) - 1

    @property
    def maxOrder(self) -> int:
        """``int``: highest order stored."""
        return max((len(row) - 1 for row in self._rows), default=-1)

    def __len__(self) -> int:
        """Number of degrees stored."""
        return len(self._rows)

    def __iter__(self) -> Iterator[ndarray]:
        """Iterate over the rows, by increasing degree."""
        return iter(self._rows)

    def _check(self, degree: int, order: int):
        if degree < 0 or order < 0 or degree > self.maxDegree:
            raise DegreeOrderRangeError(
                f"Degree {degree} outside of table (max degree {self.maxDegree})",
            )
        if order >= len(self._rows[degree]):
            raise DegreeOrderRangeError(
                f"Order {order} outside of table row {degree} "
                f"(max order {len(self._rows[degree]) - 1})",
            )

    def get(self, degree: int, order: int) -> float:
        """Return the value stored at (`degree`, `order`)."""
        self._check(degree, order)
        return float(self._rows[degree][order])

    def set(self, degree: int, order: int, value: float):
        """Store `value` at (`degree`, `order`)."""
        self._check(degree, order)
        self._rows[degree][order] = value

    def contains(self, degree: int, order: int) -> bool:
        """Whether (`degree`, `order`) is a slot of this table."""
        return 0 <= degree <= self.maxDegree and 0 <= order < len(self._rows[degree])

    def row(self, degree: int) -> ndarray:
        """Return a copy of the row of `degree`."""
        self._check(degree, 0)
        return self._rows[degree].copy()

    def truncate(self, degree: int, order: int) -> TriangularArray:
        """Return the (`degree`, `order`) prefix of this table.

        Raises:
            DegreeOrderRangeError: if the table is smaller than the requested prefix.
        """
        if degree > self.maxDegree:
            raise DegreeOrderRangeError(f"Degree {degree} exceeds table max degree {self.maxDegree}")
        if min(degree, order) > self.maxOrder:
            raise DegreeOrderRangeError(f"Order {order} exceeds table max order {self.maxOrder}")
        return TriangularArray([row[: min(n, order) + 1].copy() for n, row in enumerate(self._rows[: degree + 1])])

    def copy(self) -> TriangularArray:
        """Deep copy of this table."""
        return TriangularArray([row.copy() for row in self._rows])

    def findMissing(self) -> tuple[int, int] | None:
        """Return the first (degree, order) slot holding ``nan``, if any."""
        for degree, row in enumerate(self._rows):
            missing = isnan(row).nonzero()[0]
            if missing.size:
                return degree, int(missing[0])
        return None

    def toDense(self) -> ndarray:
        """Return a (n+1 x m+1) ``ndarray``, zero above the diagonal."""
        dense = zeros((len(self._rows), self.maxOrder + 1), dtype=float64)
        for degree, row in enumerate(self._rows):
            dense[degree, : len(row)] = row
        return dense

    def scaled(self, factors: TriangularArray) -> TriangularArray:
        """Return the element-wise product with `factors`, which must cover this table."""
        return TriangularArray(
            [row * factors._rows[n][: len(row)] for n, row in enumerate(self._rows)],  # noqa: SLF001
        )


def buildTriangularArray(degree: int, order: int, value: float) -> TriangularArray:
    """Create a triangular table of (`degree`, `order`) with every slot set to `value`.

    Args:
        degree (``int``): maximum degree of the table.
        order (``int``): maximum order of the table.
        value (``float``): initial value of every slot.

    Returns:
        :class:`.TriangularArray`: new table.
    """
    return TriangularArray([full(min(n, order) + 1, value, dtype=float64) for n in range(degree + 1)])


def getUnnormalizationFactors(degree: int, order: int) -> TriangularArray:
    r"""Get the factors converting fully normalized coefficients to un-normalized ones.

    :math:`\Pi_{n,m} = \sqrt{\frac{k(2n + 1)(n - m)!}{(n + m)!}}` where
    :math:`k=1` if :math:`m=0`
    :math:`k=2` if :math:`m \neq 0`

    The factorial ratio is never formed: each order is derived from the previous one with
    :math:`\Pi_{n,m} = \Pi_{n,m-1} / \sqrt{(n + m)(n - m + 1)}`, which keeps every factor
    finite for high degree fields (factors of very high order may underflow towards zero).

    References:
        :cite:t:`vallado_2013_astro`, Eqn 8-22, Pg 546

    Args:
        degree (``int``): maximal degree.
        order (``int``): maximal order.

    Returns:
        :class:`.TriangularArray`: un-normalized :math:`C_{n,m} = \Pi_{n,m} \bar{C}_{n,m}`.
    """
    rows = [full(1, 1.0, dtype=float64)]
    for n in range(1, degree + 1):
        row = zeros(min(n, order) + 1, dtype=float64)
        row[0] = sqrt(2 * n + 1)
        if len(row) > 1:
            row[1] = row[0] * sqrt(2.0 / (n * (n + 1)))
        for m in range(2, len(row)):
            row[m] = row[m - 1] / sqrt(float((n + m) * (n - m + 1)))
        rows.append(row)

    return TriangularArray(rows)


def unnormalize(normalized: TriangularArray) -> TriangularArray:
    """Convert a fully normalized table into un-normalized coefficients.

    Args:
        normalized (:class:`.TriangularArray`): fully normalized coefficients.

    Returns:
        :class:`.TriangularArray`: un-normalized coefficients, same shape.
    """
    return normalized.scaled(getUnnormalizationFactors(normalized.maxDegree, normalized.maxOrder))


def normalize(unnormalized: TriangularArray) -> TriangularArray:
    """Convert an un-normalized table into fully normalized coefficients.

    Args:
        unnormalized (:class:`.TriangularArray`): un-normalized coefficients.

    Returns:
        :class:`.TriangularArray`: fully normalized coefficients, same shape.
    """
    factors = getUnnormalizationFactors(unnormalized.maxDegree, unnormalized.maxOrder)
    return TriangularArray([row / factors.row(n)[: len(row)] for n, row in enumerate(unnormalized)])
