"""Hold common label types for easier importing."""

from __future__ import annotations

# Standard Library Imports
from enum import Enum


class AttractionModelLabel(str, Enum):
    """Defines valid labels for the non-spherical attraction algorithms."""

    CUNNINGHAM: str = "cunningham"
    """``str``: rectangular coordinates recursion, well behaved close to the poles."""

    DROZINER: str = "droziner"
    """``str``: zonal/tesseral recursion, undefined on the polar axis."""


class GravityFormatLabel(str, Enum):
    """Defines valid labels for gravity field file dialects."""

    ICGEM: str = "icgem"
    """``str``: International Centre for Global Earth Models keyword format."""

    SHM: str = "shm"
    """``str``: GFZ Potsdam labeled-line format used by the early EIGEN models."""

    EGM: str = "egm"
    """``str``: plain column format of the Earth Gravitational Models."""

    GRGS: str = "grgs"
    """``str``: GRGS/GFZ fixed-column format used by the GRIM models."""
