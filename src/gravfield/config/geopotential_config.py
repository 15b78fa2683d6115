"""Submodule defining the 'geopotential' configuration section."""

# ruff: noqa: UP007

from __future__ import annotations

# Standard Library Imports
from typing import Optional

# Third Party Imports
from pydantic import BaseModel, Field, model_validator
from typing_extensions import Self

# Local Imports
from ..common.labels import AttractionModelLabel


class GeopotentialConfig(BaseModel):
    """Configuration section defining several geopotential-based options."""

    model: Optional[str] = None
    """``str``: file name of the gravity field to load, any supported file if unset."""

    data_directory: Optional[str] = None
    """``str``: directory holding gravity field files, ``gravity.DataDirectory`` if unset."""

    degree: int = Field(default=4, ge=0)
    """``int``: Degree of the gravity model."""

    order: int = Field(default=4, ge=0)
    """``int``: Order of the gravity model."""

    algorithm: AttractionModelLabel = AttractionModelLabel.CUNNINGHAM
    """:class:`.AttractionModelLabel`: recursion evaluating the non-spherical acceleration."""

    @model_validator(mode="after")
    def orderWithinDegree(self) -> Self:
        """Ensure the order of the gravity model does not exceed its degree."""
        if self.order > self.degree:
            err = f"Geopotential order {self.order} exceeds its degree {self.degree}"
            raise ValueError(err)
        return self
