"""Validated configuration models of the gravity field consumers."""

from __future__ import annotations

# Local Imports
from .geopotential_config import GeopotentialConfig

__all__ = ["GeopotentialConfig"]
