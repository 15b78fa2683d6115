from __future__ import annotations

# Standard Library Imports
import logging
from datetime import datetime
from io import BytesIO

# Third Party Imports
import pytest
from numpy import isclose

# gravfield Imports
from gravfield.common.exceptions import DegreeOrderRangeError, FormatError, NoGravityFieldDataError
from gravfield.common.logger import LOGGER_NAME
from gravfield.physics.constants import JULIAN_YEAR
from gravfield.potential.coefficients import getUnnormalizationFactors
from gravfield.potential.readers import GRGS_FILENAME, GRGSFormatReader

# Local Imports
from ... import EGM96_MU, GRAVITY_DATA_DIR, GRIM5_AE

GRIM5_FILE = GRAVITY_DATA_DIR / "grim5_C1.dat"

REFERENCE_DATE = datetime(1997, 1, 1, 12)

VALUE_CASES: list[tuple[str, int, int, float, float]] = [
    # (coefficient, degree, order, normalized value, normalized drift per year)
    ("C", 3, 0, 0.95857491635129e-06, 0.28175700027753e-11),
    ("C", 5, 5, 0.17481512311600e-06, 0.0),
    ("S", 4, 0, 0.0, 0.0),
    ("S", 4, 4, 0.30882755318300e-06, 0.0),
]


def loadGRIM5(reader: GRGSFormatReader) -> GRGSFormatReader:
    """Feed the GRIM5 test file to `reader`."""
    with open(GRIM5_FILE, "rb") as stream:
        reader.loadData(stream, GRIM5_FILE.name)
    return reader


@pytest.mark.parametrize(("coefficient", "degree", "order", "constant", "trend"), VALUE_CASES)
def testRegularFile(coefficient: str, degree: int, order: int, constant: float, trend: float):
    """Test the values of the GRIM5 field, including its drift."""
    reader = loadGRIM5(GRGSFormatReader(GRGS_FILENAME, False))
    assert not reader.stillAcceptsData()

    provider = reader.getProvider(5, 5)
    assert provider.getReferenceDate() == REFERENCE_DATE
    assert provider.getMu() == EGM96_MU
    assert provider.getAe() == GRIM5_AE

    date = datetime(2011, 5, 1, 1, 2, 3)
    offset = provider.getOffset(date)
    assert offset == (date - REFERENCE_DATE).total_seconds()

    factor = getUnnormalizationFactors(degree, order).get(degree, order)
    expected = factor * (constant + trend * offset / JULIAN_YEAR)
    if coefficient == "C":
        value = provider.getUnnormalizedCnm(offset, degree, order)
    else:
        value = provider.getUnnormalizedSnm(offset, degree, order)
    assert isclose(value, expected, rtol=1e-14, atol=1e-30)


def testReadLimits(caplog: pytest.LogCaptureFixture):
    """Test a truncated provider rejects terms beyond its limits."""
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    reader = loadGRIM5(GRGSFormatReader(GRGS_FILENAME, False))
    provider = reader.getProvider(3, 2)
    assert provider.getMaxDegree() == 3
    assert provider.getMaxOrder() == 2
    provider.getUnnormalizedCnm(0.0, 3, 2)
    with pytest.raises(DegreeOrderRangeError):
        provider.getUnnormalizedCnm(0.0, 3, 3)
    with pytest.raises(DegreeOrderRangeError):
        provider.getUnnormalizedCnm(0.0, 4, 2)
    with pytest.raises(DegreeOrderRangeError):
        reader.getProvider(6, 6)

    assert (LOGGER_NAME, logging.INFO, f"{reader!r} read 'grim5_C1.dat' up to degree/order 5/5") in caplog.record_tuples
    assert (LOGGER_NAME, logging.ERROR, "Too large degree 6, maximum available is 5") in caplog.record_tuples


def testParseCap():
    """Test rows beyond the parse limits are skipped."""
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    reader.setMaxParseDegree(3)
    reader.setMaxParseOrder(1)
    loadGRIM5(reader)
    assert reader.getMaxAvailableDegree() == 3
    assert reader.getMaxAvailableOrder() == 1


def testParseCapKeepsValues():
    """Test a lower parse cap keeps the values read under a higher one."""
    small = GRGSFormatReader(GRGS_FILENAME, False)
    small.setMaxParseDegree(3)
    small.setMaxParseOrder(3)
    small_field = loadGRIM5(small).getField()
    large = GRGSFormatReader(GRGS_FILENAME, False)
    large.setMaxParseDegree(5)
    large.setMaxParseOrder(5)
    large_field = loadGRIM5(large).getField()

    assert small_field.c.maxDegree == 3
    for n in range(4):
        for m in range(n + 1):
            assert small_field.c.get(n, m) == large_field.c.get(n, m)
            assert small_field.s.get(n, m) == large_field.s.get(n, m)
            assert small_field.c_trend.get(n, m) == large_field.c_trend.get(n, m)
            assert small_field.s_trend.get(n, m) == large_field.s_trend.get(n, m)


def testOtherDialect():
    """Test a source which is not a GRGS file is left alone."""
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    reader.loadData(BytesIO(b"gfc 2 0 -0.48E-03 0.0\n"), "other.gfc")
    assert reader.stillAcceptsData()
    with pytest.raises(NoGravityFieldDataError):
        reader.getField()


def testCorruptedHeader():
    """Test a GRGS file with a broken header line is a format error."""
    lines = GRIM5_FILE.read_bytes().splitlines(keepends=True)
    lines[3] = b"REFERENCE DATE :   nineteen\n"
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    with pytest.raises(FormatError, match="line 4"):
        reader.loadData(BytesIO(b"".join(lines)), "grim5_broken.dat")
    assert reader.stillAcceptsData()


def testInvalidReferenceYear():
    """Test a reference year out of the calendar range is a format error."""
    lines = GRIM5_FILE.read_bytes().splitlines(keepends=True)
    lines[3] = b"REFERENCE DATE :   0.00\n"
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    with pytest.raises(FormatError, match="Invalid reference year 0") as excinfo:
        reader.loadData(BytesIO(b"".join(lines)), "grim5_year_zero.dat")
    assert "line 4" in str(excinfo.value)
    assert reader.stillAcceptsData()


def testCorruptedData():
    """Test a coefficient beyond the declared maximal degree is a format error."""
    content = GRIM5_FILE.read_bytes() + b"  6  0    0.10000000000000E-06 0.00000000000000E+00  0.0000E+00  0.0000E+00\n"
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    with pytest.raises(FormatError, match="exceeds declared degree"):
        reader.loadData(BytesIO(content), "grim5_extra.dat")
    assert reader.stillAcceptsData()


def testSupportedNames():
    """Test the default GRGS file names."""
    reader = GRGSFormatReader(GRGS_FILENAME, False)
    assert reader.getSupportedNames() == GRGS_FILENAME
    assert reader.supportsName("grim5_C1.dat")
    assert not reader.supportsName("eigen_c1_coef")
