"""Format readers turning gravity field files into coefficient providers."""

from __future__ import annotations

# Local Imports
from .column import EGM_LAYOUT, ColumnFormatReader, ColumnLayout, EGMFormatReader
from .grgs import GRGSFormatReader
from .icgem import ICGEMFormatReader
from .reader_base import GravityFieldData, PotentialCoefficientsReader
from .shm import SHMFormatReader

ICGEM_FILENAME: str = r"^(.*\.gfc)|(g(\d)+_eigen[-_](\w)+_coef)$"
"""``str``: default names of ICGEM files."""

SHM_FILENAME: str = r"^eigen[-_](\w)+_coef$"
"""``str``: default names of SHM files."""

EGM_FILENAME: str = r"^egm\d\d_to\d.*$"
"""``str``: default names of EGM files."""

GRGS_FILENAME: str = r"^grim\d_.*$"
"""``str``: default names of GRGS files."""

__all__ = [
    "EGM_FILENAME",
    "EGM_LAYOUT",
    "GRGS_FILENAME",
    "ICGEM_FILENAME",
    "SHM_FILENAME",
    "ColumnFormatReader",
    "ColumnLayout",
    "EGMFormatReader",
    "GRGSFormatReader",
    "GravityFieldData",
    "ICGEMFormatReader",
    "PotentialCoefficientsReader",
    "SHMFormatReader",
]
