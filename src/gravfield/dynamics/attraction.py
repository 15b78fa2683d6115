"""Defines the non-spherical attraction force contributions of a central body."""

from __future__ import annotations

# Standard Library Imports
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

# Third Party Imports
from numpy import asarray, float64, matmul

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.labels import AttractionModelLabel
from ..physics.bodies.gravitational_potential import cunninghamAcceleration, drozinerAcceleration
from ..potential.factory import GravityFieldFactory

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from datetime import datetime

    # Third Party Imports
    from numpy import ndarray

    # Local Imports
    from ..config.geopotential_config import GeopotentialConfig
    from ..potential.providers import SphericalHarmonicsProvider


class AttractionModel(ABC):
    """Perturbing acceleration of a central body gravity field beyond its central term.

    The model works in the body-fixed frame. Computing the body-fixed to inertial rotation is the
    caller's responsibility.
    """

    def __init__(self, provider: SphericalHarmonicsProvider):
        """Wrap the gravity field evaluated by this model.

        Args:
            provider (:class:`.SphericalHarmonicsProvider`): un-normalized coefficients source.
        """
        self._provider = provider

    @property
    def provider(self) -> SphericalHarmonicsProvider:
        """:class:`.SphericalHarmonicsProvider`: gravity field evaluated by this model."""
        return self._provider

    @abstractmethod
    def bodyFixedAcceleration(self, position: ndarray, offset: float) -> ndarray:
        """Compute the perturbing acceleration at a body-fixed position.

        Args:
            position (``ndarray``): 3x1 body-fixed position, (m).
            offset (``float``): seconds since the reference date of the provider.

        Returns:
            ``ndarray``: 3x1 body-fixed acceleration, (m/sec^2).
        """
        raise NotImplementedError

    def acceleration(self, date: datetime, inertial_position: ndarray, body_to_inertial: ndarray) -> ndarray:
        """Compute the perturbing acceleration at an inertial position.

        Args:
            date (``datetime``): epoch of the evaluation.
            inertial_position (``ndarray``): 3x1 inertial position, (m).
            body_to_inertial (``ndarray``): 3x3 rotation from the body-fixed to the inertial frame.

        Returns:
            ``ndarray``: 3x1 inertial acceleration, (m/sec^2).
        """
        offset = self._provider.getOffset(date)
        rotation = asarray(body_to_inertial, dtype=float64)
        r_body = matmul(rotation.T, asarray(inertial_position, dtype=float64))
        return matmul(rotation, self.bodyFixedAcceleration(r_body, offset))


class CunninghamAttractionModel(AttractionModel):
    """Rectangular coordinates recursion, usable anywhere outside the reference sphere."""

    def bodyFixedAcceleration(self, position: ndarray, offset: float) -> ndarray:
        """Compute the perturbing acceleration with :func:`.cunninghamAcceleration`."""
        c_nm, s_nm = self._provider.getUnnormalizedArrays(offset)
        return cunninghamAcceleration(
            asarray(position, dtype=float64),
            self._provider.getMu(),
            self._provider.getAe(),
            c_nm,
            s_nm,
            self._provider.getMaxDegree(),
            self._provider.getMaxOrder(),
        )


class DrozinerAttractionModel(AttractionModel):
    """Zonal/tesseral recursion, undefined close to the polar axis."""

    def __init__(self, provider: SphericalHarmonicsProvider, polar_floor: float | None = None):
        """Wrap the gravity field evaluated by this model.

        Args:
            provider (:class:`.SphericalHarmonicsProvider`): un-normalized coefficients source.
            polar_floor (``float``, optional): smallest accepted distance to the polar axis, (m).
                Defaults to ``gravity.PolarFloor``.
        """
        super().__init__(provider)
        if polar_floor is None:
            polar_floor = BehavioralConfig.getConfig().gravity.PolarFloor
        self._polar_floor = polar_floor

    def bodyFixedAcceleration(self, position: ndarray, offset: float) -> ndarray:
        """Compute the perturbing acceleration with :func:`.drozinerAcceleration`."""
        return drozinerAcceleration(position, self._provider, offset, self._polar_floor)


def attractionModelFactory(
    config: GeopotentialConfig,
    factory: GravityFieldFactory | None = None,
) -> AttractionModel:
    """Build the attraction model described by a geopotential configuration.

    Args:
        config (:class:`.GeopotentialConfig`): gravity field & algorithm selection.
        factory (:class:`.GravityFieldFactory`, optional): registry reading the gravity field.
            Defaults to a new registry over `config.data_directory`.

    Returns:
        :class:`.AttractionModel`: model evaluating `config.degree` x `config.order` terms.
    """
    if factory is None:
        data_roots = [config.data_directory] if config.data_directory else None
        factory = GravityFieldFactory(data_roots=data_roots)
        if config.model:
            factory.addDefaultPotentialCoefficientsReaders(f"^{re.escape(config.model)}$")

    provider = factory.getSphericalHarmonicsProvider(config.degree, config.order)
    if config.algorithm == AttractionModelLabel.DROZINER:
        return DrozinerAttractionModel(provider)
    return CunninghamAttractionModel(provider)
