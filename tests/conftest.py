from __future__ import annotations

# Standard Library Imports
import logging
import sys

# Third Party Imports
import pytest

# gravfield Imports
from gravfield.common.behavioral_config import BehavioralConfig
from gravfield.potential.factory import GravityFieldFactory
from gravfield.potential.providers import ConstantSphericalHarmonics

# Local Imports
from . import GRAVITY_DATA_DIR, buildEGM96Provider


@pytest.fixture(autouse=True)
def _resetGravityConfig() -> None:
    """Restore the ``gravity`` behavioral settings a test may have overwritten.

    Note:
        This is used so tests can assume a "blank" configuration.
    """
    gravity = BehavioralConfig.getConfig().gravity
    saved = dict(vars(gravity))
    yield
    for key, value in saved.items():
        setattr(gravity, key, value)


@pytest.fixture(scope="session", name="test_logger")
def getTestLoggerObject() -> logging.Logger:
    """Create a custom :class:`logging.Logger` object."""
    logger = logging.getLogger("Unit Test Logger")
    logger.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return logger


@pytest.fixture(name="gravity_factory")
def getGravityFactory() -> GravityFieldFactory:
    """Return a :class:`.GravityFieldFactory` scanning the valid test gravity fields."""
    return GravityFieldFactory(data_roots=[GRAVITY_DATA_DIR])


@pytest.fixture(name="egm96_provider")
def getEGM96Provider() -> ConstantSphericalHarmonics:
    """Return the 4x4 EGM96 :class:`.ConstantSphericalHarmonics` provider."""
    return buildEGM96Provider(4, 4)
