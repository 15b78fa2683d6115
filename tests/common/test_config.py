from __future__ import annotations

# Standard Library Imports
import os
from collections import OrderedDict
from logging import DEBUG, INFO
from typing import TYPE_CHECKING

# Third Party Imports
import pytest

# gravfield Imports
from gravfield.common.behavioral_config import BehavioralConfig

# Local Imports
from .. import FIXTURE_DATA_DIR

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    import logging

CONFIG_FILE_VALID: tuple[str] = (
    "[logging]\n",
    "OutputLocation = ./logs/\n",
    "Level = INFO\n",
    "MaxFileSize = 2048\n",
    "MaxFileCount = 10\n",
    "[gravity]\n",
    "DataDirectory = /data/potential\n",
    "DefaultReaders = egm, icgem\n",
    "PolarFloor = 1.5\n",
)

CORRECT_DEFAULTS = OrderedDict(
    {
        "logging": {
            "OutputLocation": "stdout",
            "Level": DEBUG,
            "MaxFileSize": 1048576,
            "MaxFileCount": 50,
            "AllowMultipleHandlers": False,
        },
        "gravity": {
            "DataDirectory": "",
            "DefaultReaders": ["icgem", "shm", "grgs", "egm"],
            "AllowMissingCoefficients": False,
            "PolarFloor": 0.1,
        },
    },
)


@pytest.fixture(name="file_config")
def mockCustomSettingsFile(datafiles: str) -> BehavioralConfig:
    """Build a :class:`.BehavioralConfig` from a custom settings file.

    Args:
        datafiles (str): location of current test data directory

    Yields:
        :class:.`BehavioralConfig`: non-default configuration object
    """
    config_path = os.path.join(datafiles, "test.config")
    with open(config_path, "w", encoding="utf-8") as config_file:
        config_file.writelines(CONFIG_FILE_VALID)

    yield BehavioralConfig(config_path)

    # Reinstall the default configuration as the shared one
    BehavioralConfig()


def testImported():
    """Test that importing :class:`.BehavioralConfig` results in the default values."""
    config = BehavioralConfig.getConfig()
    for section, section_conf in CORRECT_DEFAULTS.items():
        for option, value in section_conf.items():
            conf_section = getattr(config, section)
            conf_option = getattr(conf_section, option)
            assert value == conf_option


def testSinglePattern():
    """Test that :class:.`BehavioralConfig` is a proper Singleton class."""
    config = BehavioralConfig.getConfig()
    # gravfield Imports
    from gravfield.common.behavioral_config import BehavioralConfig as SecondConfig

    assert config is SecondConfig.getConfig()


def testOverwrite():
    """Test overwriting the default :class:`.BehavioralConfig` directly with custom settings."""
    custom_config = BehavioralConfig.getConfig()
    custom_config.logging.OutputLocation = "./logs/"
    custom_config.logging.Level = INFO
    custom_config.gravity.PolarFloor = 2.0

    second_config = BehavioralConfig.getConfig()
    assert second_config.logging.OutputLocation == "./logs/"
    assert second_config.logging.Level == INFO
    assert second_config.gravity.PolarFloor == 2.0

    # Reset the values to the defaults
    second_config.logging.OutputLocation = CORRECT_DEFAULTS["logging"]["OutputLocation"]
    second_config.logging.Level = CORRECT_DEFAULTS["logging"]["Level"]

    assert custom_config is second_config


@pytest.mark.datafiles(FIXTURE_DATA_DIR)
def testNonDefaultFile(test_logger: logging.Logger, file_config: BehavioralConfig):
    """Test overwriting the default :class:`.BehavioralConfig` with custom config file.

    Args:
        test_logger (:class:`logging.Logger`): unit test logger object
        file_config (:class:.`BehavioralConfig`): non-default config object
    """
    test_logger.debug(f"Custom gravity section: {vars(file_config.gravity)}")

    assert file_config.logging.OutputLocation == "./logs/"
    assert file_config.logging.Level == INFO
    assert file_config.logging.MaxFileSize == 2048
    assert file_config.logging.MaxFileCount == 10
    assert file_config.gravity.DataDirectory == "/data/potential"
    assert file_config.gravity.DefaultReaders == ["egm", "icgem"]
    assert file_config.gravity.PolarFloor == 1.5

    # Items absent from the file keep their defaults
    assert file_config.logging.AllowMultipleHandlers is False
    assert file_config.gravity.AllowMissingCoefficients is False

    # The last built configuration is the shared one
    assert BehavioralConfig.getConfig() is file_config


def testMissingFile():
    """Test that a missing config file falls back on the default values."""
    config = BehavioralConfig("does/not/exist.config")
    try:
        for section, section_conf in CORRECT_DEFAULTS.items():
            for option, value in section_conf.items():
                assert getattr(getattr(config, section), option) == value
    finally:
        BehavioralConfig()
