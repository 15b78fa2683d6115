"""Configure importable things that aren't pytest fixtures."""

from __future__ import annotations

# Standard Library Imports
from pathlib import Path

# Third Party Imports
from numpy import array

# gravfield Imports
from gravfield.potential.coefficients import TriangularArray, getUnnormalizationFactors
from gravfield.potential.providers import ConstantSphericalHarmonics

# Common file paths
FIXTURE_DATA_DIR = Path(__file__).parent / "datafiles"
GRAVITY_DATA_DIR = FIXTURE_DATA_DIR / "gravity"
CORRUPTED_DATA_DIR = FIXTURE_DATA_DIR / "corrupted"
COMPRESSED_DATA_DIR = FIXTURE_DATA_DIR / "compressed"
COLUMN_DATA_DIR = FIXTURE_DATA_DIR / "column"

# Constants of the EGM96 & GRIM5 test fields, (m^3/sec^2) & (m)
EGM96_MU = 3.986004415e14
EGM96_AE = 6378136.3
GRIM5_AE = 6378136.46

# Normalized EGM96 coefficients up to degree & order 4, degree 1 terms are null
EGM96_C: list[list[float]] = [
    [1.0],
    [0.0, 0.0],
    [-4.84165371736e-04, -1.86987635955e-10, 2.43914352398e-06],
    [9.57254173792e-07, 2.03046201047e-06, 9.04787894809e-07, 7.21321757121e-07],
    [5.39873863789e-07, -5.36321616971e-07, 3.50694105785e-07, 9.90771803829e-07, -1.88560802735e-07],
]
EGM96_S: list[list[float]] = [
    [0.0],
    [0.0, 0.0],
    [0.0, 1.19528012031e-09, -1.40016683654e-06],
    [0.0, 2.48200415856e-07, -6.19005475177e-07, 1.41434926192e-06],
    [0.0, -4.73440265853e-07, 6.62671572540e-07, -2.00928369177e-07, 3.08853169333e-07],
]


def buildEGM96Provider(degree: int, order: int) -> ConstantSphericalHarmonics:
    """Build a constant provider of the EGM96 field truncated to (`degree`, `order`).

    Args:
        degree (``int``): maximal degree, at most 4.
        order (``int``): maximal order, at most `degree`.

    Returns:
        :class:`.ConstantSphericalHarmonics`: un-normalized EGM96 provider.
    """
    normalized_c = TriangularArray([array(row[: order + 1]) for row in EGM96_C[: degree + 1]])
    normalized_s = TriangularArray([array(row[: order + 1]) for row in EGM96_S[: degree + 1]])
    factors = getUnnormalizationFactors(degree, order)
    return ConstantSphericalHarmonics(
        EGM96_AE,
        EGM96_MU,
        normalized_c.scaled(factors),
        normalized_s.scaled(factors),
    )
