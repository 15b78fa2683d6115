from __future__ import annotations

# Standard Library Imports
import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from math import sqrt
from pathlib import Path

# Third Party Imports
import pytest
from numpy import isclose

# gravfield Imports
from gravfield.common.behavioral_config import BehavioralConfig
from gravfield.common.exceptions import FormatError, MissingCoefficientError, NoGravityFieldDataError
from gravfield.common.logger import LOGGER_NAME
from gravfield.potential import coefficients
from gravfield.potential.factory import GravityFieldFactory, getUnnormalizationFactors, iterCandidateFiles
from gravfield.potential.providers import ConstantSphericalHarmonics, SecularTrendSphericalHarmonics
from gravfield.potential.readers import (
    EGMFormatReader,
    GRGSFormatReader,
    ICGEMFormatReader,
    SHMFormatReader,
)

# Local Imports
from .. import COMPRESSED_DATA_DIR, CORRUPTED_DATA_DIR, EGM96_AE, EGM96_C, GRAVITY_DATA_DIR, GRIM5_AE


def testDefaultReaders(gravity_factory: GravityFieldFactory):
    """Test the configured default readers are installed on first read, ICGEM first."""
    assert gravity_factory.getPotentialCoefficientsReaders() == []

    reader = gravity_factory.readGravityField(3, 3)
    assert isinstance(reader, ICGEMFormatReader)
    installed = gravity_factory.getPotentialCoefficientsReaders()
    assert [type(installed_reader) for installed_reader in installed] == [
        ICGEMFormatReader,
        SHMFormatReader,
        GRGSFormatReader,
        EGMFormatReader,
    ]

    provider = gravity_factory.getSphericalHarmonicsProvider(3, 3)
    assert isinstance(provider, SecularTrendSphericalHarmonics)
    assert provider.getReferenceDate() == datetime(2005, 1, 1, 12)
    assert isclose(provider.getUnnormalizedCnm(0.0, 2, 0), sqrt(5.0) * -0.484165406043110e-03, rtol=1e-14)


def testRegistrationOrder(gravity_factory: GravityFieldFactory):
    """Test the first registered reader able to complete wins."""
    gravity_factory.addPotentialCoefficientsReader(GRGSFormatReader(r"^grim\d_.*$", False))
    gravity_factory.addPotentialCoefficientsReader(SHMFormatReader(r"^eigen[-_](\w)+_coef$", False))

    provider = gravity_factory.getConstantSphericalHarmonicsProvider(5, 5)
    assert isinstance(provider, ConstantSphericalHarmonics)
    assert provider.getAe() == GRIM5_AE

    gravity_factory.clearPotentialCoefficientsReaders()
    assert gravity_factory.getPotentialCoefficientsReaders() == []
    gravity_factory.addPotentialCoefficientsReader(SHMFormatReader(r"^eigen[-_](\w)+_coef$", False))
    gravity_factory.addPotentialCoefficientsReader(GRGSFormatReader(r"^grim\d_.*$", False))

    provider = gravity_factory.getConstantSphericalHarmonicsProvider(4, 4)
    assert provider.getAe() == 0.6378136460e07
    assert isclose(provider.getUnnormalizedCnm(0.0, 2, 0), sqrt(5.0) * -0.484165143790815e-03, rtol=1e-14)


def testReaderCopy(gravity_factory: GravityFieldFactory):
    """Test the returned list of readers does not alias the registry."""
    gravity_factory.addPotentialCoefficientsReader(GRGSFormatReader(r"^grim\d_.*$", False))
    readers = gravity_factory.getPotentialCoefficientsReaders()
    readers.clear()
    assert len(gravity_factory.getPotentialCoefficientsReaders()) == 1


def testCompressedFile():
    """Test gzip compressed files are matched on their name without suffix & decompressed."""
    assert [name for name, _ in iterCandidateFiles([COMPRESSED_DATA_DIR])] == ["egm96_to4_packed.ascii"]

    factory = GravityFieldFactory(data_roots=[str(COMPRESSED_DATA_DIR)])
    assert factory.data_roots == [COMPRESSED_DATA_DIR]
    reader = factory.readGravityField(4, 4)
    assert isinstance(reader, EGMFormatReader)
    assert reader.getField().c.get(4, 4) == EGM96_C[4][4]


def testModelSelection():
    """Test a file name pattern selects one field among several candidates."""
    factory = GravityFieldFactory(data_roots=[GRAVITY_DATA_DIR])
    factory.addDefaultPotentialCoefficientsReaders(r"^egm96_to4\.ascii$")
    readers = factory.getPotentialCoefficientsReaders()
    assert all(reader.getSupportedNames() == r"^egm96_to4\.ascii$" for reader in readers)

    provider = factory.getConstantSphericalHarmonicsProvider(4, 4)
    assert provider.getAe() == EGM96_AE


def testCorruptedFile(caplog: pytest.LogCaptureFixture):
    """Test a malformed file disqualifies its reader, the error is kept as the failure cause."""
    caplog.set_level(logging.ERROR, logger=LOGGER_NAME)
    factory = GravityFieldFactory(data_roots=[CORRUPTED_DATA_DIR])
    with pytest.raises(NoGravityFieldDataError) as error:
        factory.readGravityField(5, 5)

    assert isinstance(error.value.__cause__, MissingCoefficientError)
    assert any(
        record.levelno == logging.ERROR and "eigen_corrupted1_coef" in record.getMessage()
        for record in caplog.records
    )


@pytest.mark.parametrize("name", ["eigen_corrupted2_coef", "eigen_corrupted3_coef"])
def testCorruptedFileIsFormatError(name: str):
    """Test every corrupted file fails the search with a :class:`.FormatError` cause."""
    factory = GravityFieldFactory(data_roots=[CORRUPTED_DATA_DIR / name])
    with pytest.raises(NoGravityFieldDataError) as error:
        factory.readGravityField(5, 5)

    assert isinstance(error.value.__cause__, FormatError)
    assert name in str(error.value.__cause__)


def testNextReaderAfterFormatError(tmp_path: Path):
    """Test the readers registered after one that met a malformed file are still tried."""
    shutil.copy(CORRUPTED_DATA_DIR / "eigen_corrupted3_coef", tmp_path)
    shutil.copy(GRAVITY_DATA_DIR / "grim5_C1.dat", tmp_path)

    factory = GravityFieldFactory(data_roots=[tmp_path])
    reader = factory.readGravityField(4, 4)
    assert isinstance(reader, GRGSFormatReader)
    assert reader.getField().ae == GRIM5_AE
    shm_reader = factory.getPotentialCoefficientsReaders()[1]
    assert isinstance(shm_reader, SHMFormatReader)
    assert shm_reader.stillAcceptsData()


def testNoData(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    """Test a search without any matching file."""
    caplog.set_level(logging.ERROR, logger=LOGGER_NAME)
    factory = GravityFieldFactory(data_roots=[tmp_path])
    with pytest.raises(NoGravityFieldDataError, match="No gravity field data"):
        factory.getSphericalHarmonicsProvider(2, 2)
    assert caplog.records[-1].levelno == logging.ERROR

    (tmp_path / "egm96_to4.txt").write_text("nothing to see here\n", encoding="ascii")
    factory.clearPotentialCoefficientsReaders()
    factory.addPotentialCoefficientsReader(ICGEMFormatReader(r".*", False))
    with pytest.raises(NoGravityFieldDataError):
        factory.readGravityField(2, 2)


def testNestedDirectories(tmp_path: Path):
    """Test data roots are scanned recursively, skipping hidden & package files."""
    nested = tmp_path / "fields" / "egm"
    nested.mkdir(parents=True)
    shutil.copy(GRAVITY_DATA_DIR / "egm96_to4.ascii", nested)
    (tmp_path / ".egm96_to4.swp").write_text("", encoding="ascii")
    (tmp_path / "__init__.py").write_text("", encoding="ascii")

    assert [name for name, _ in iterCandidateFiles([tmp_path])] == ["egm96_to4.ascii"]
    factory = GravityFieldFactory(data_roots=[tmp_path])
    assert isinstance(factory.readGravityField(2, 2), EGMFormatReader)


def testPackagedField():
    """Test the field shipped with the package is found without any configuration."""
    factory = GravityFieldFactory()
    provider = factory.getConstantSphericalHarmonicsProvider(4, 4)
    assert provider.getMaxDegree() == 4
    assert provider.getMaxOrder() == 4
    assert isclose(provider.getUnnormalizedCnm(0.0, 2, 0), sqrt(5.0) * EGM96_C[2][0], rtol=1e-14)


def testConfiguredDataDirectory():
    """Test the ``gravity.DataDirectory`` setting replaces the packaged fields."""
    BehavioralConfig.getConfig().gravity.DataDirectory = str(CORRUPTED_DATA_DIR)
    factory = GravityFieldFactory()
    assert factory.data_roots == [CORRUPTED_DATA_DIR]


def testFactorsReexported():
    """Test the factory exposes the un-normalization factors."""
    assert getUnnormalizationFactors is coefficients.getUnnormalizationFactors


def testConcurrentReads(gravity_factory: GravityFieldFactory):
    """Test one factory shared between threads."""

    def _read(degree: int) -> float:
        provider = gravity_factory.getConstantSphericalHarmonicsProvider(degree, degree)
        return provider.getUnnormalizedCnm(0.0, 2, 0)

    with ThreadPoolExecutor(max_workers=4) as executor:
        values = list(executor.map(_read, [2, 3, 2, 3, 2, 3, 2, 3]))

    assert len(set(values)) == 1
