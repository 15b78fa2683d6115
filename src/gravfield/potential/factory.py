"""Registry of gravity field readers and the entry point building coefficient providers."""

from __future__ import annotations

# Standard Library Imports
import gzip
from importlib import resources
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING

# Local Imports
from ..common.behavioral_config import BehavioralConfig
from ..common.exceptions import FormatError, NoGravityFieldDataError
from ..common.labels import GravityFormatLabel
from ..common.logger import Logger
from .coefficients import getUnnormalizationFactors
from .readers import (
    EGM_FILENAME,
    GRGS_FILENAME,
    ICGEM_FILENAME,
    SHM_FILENAME,
    EGMFormatReader,
    GRGSFormatReader,
    ICGEMFormatReader,
    SHMFormatReader,
)

# Type Checking Imports
if TYPE_CHECKING:
    # Standard Library Imports
    from collections.abc import Iterable, Iterator
    from importlib.abc import Traversable

    # Local Imports
    from .providers import ConstantSphericalHarmonics, SphericalHarmonicsProvider
    from .readers import PotentialCoefficientsReader


GEOPOTENTIAL_MODULE: str = "gravfield.physics.data.geopotential"
"""``str``: defines the module holding the gravity fields shipped with the package."""

COMPRESSED_SUFFIX: str = ".gz"
"""``str``: suffix of gzip compressed gravity field files."""

__all__ = ["GravityFieldFactory", "getUnnormalizationFactors"]


def getDefaultDataRoots() -> list[Traversable]:
    """Return the directory configured in ``gravity.DataDirectory``, else the packaged fields."""
    data_directory = BehavioralConfig.getConfig().gravity.DataDirectory
    if data_directory:
        return [Path(data_directory)]
    return [resources.files(GEOPOTENTIAL_MODULE)]


def iterCandidateFiles(roots: Iterable[Traversable]) -> Iterator[tuple[str, Traversable]]:
    """Recursively walk `roots`, yielding (matching name, file) pairs sorted by name.

    The matching name of a gzip compressed file is its name without the ``.gz`` suffix.
    """
    for root in roots:
        if root.is_file():
            yield _matchingName(root), root
            continue
        if not root.is_dir():
            continue
        for entry in sorted(root.iterdir(), key=lambda item: item.name):
            if entry.is_dir():
                yield from iterCandidateFiles([entry])
            elif entry.is_file() and not entry.name.startswith(("__init__", ".")):
                yield _matchingName(entry), entry


def _matchingName(entry: Traversable) -> str:
    if entry.name.endswith(COMPRESSED_SUFFIX):
        return entry.name[: -len(COMPRESSED_SUFFIX)]
    return entry.name


class GravityFieldFactory:
    """Ordered registry of :class:`.PotentialCoefficientsReader` objects.

    Each reader is offered, in registration order, every candidate file whose name it supports
    until it completes. The first reader to complete provides the gravity field. A reader raising a
    :class:`.FormatError` is abandoned and the next one is tried. When no reader was registered,
    the default ones listed in ``gravity.DefaultReaders`` are installed.

    Every registry operation holds the factory lock, so one factory can be shared between threads.
    """

    def __init__(self, data_roots: Iterable[str | Path | Traversable] | None = None):
        """Create an empty registry.

        Args:
            data_roots (``list``, optional): directories or files holding gravity fields. Defaults
                to ``gravity.DataDirectory``, else to the gravity fields shipped with the package.
        """
        if data_roots is None:
            self._data_roots = getDefaultDataRoots()
        else:
            self._data_roots = [Path(root) if isinstance(root, str) else root for root in data_roots]
        self._readers: list[PotentialCoefficientsReader] = []
        self._lock = Lock()
        self._logger = Logger("gravfield")

    @property
    def data_roots(self) -> list[Traversable]:
        """``list``: directories or files scanned for gravity fields."""
        return list(self._data_roots)

    def addPotentialCoefficientsReader(self, reader: PotentialCoefficientsReader):
        """Append `reader` to the registry, after the already registered ones."""
        with self._lock:
            self._readers.append(reader)

    def addDefaultPotentialCoefficientsReaders(self, supported_names: str | None = None):
        """Append the readers listed in ``gravity.DefaultReaders``, in the configured order.

        Args:
            supported_names (``str``, optional): regular expression replacing the default file
                names of every dialect, to select one specific gravity field.
        """
        with self._lock:
            self._addDefaultReaders(supported_names)

    def clearPotentialCoefficientsReaders(self):
        """Remove every registered reader."""
        with self._lock:
            self._readers.clear()

    def getPotentialCoefficientsReaders(self) -> list[PotentialCoefficientsReader]:
        """Return a copy of the registered readers, in registration order."""
        with self._lock:
            return list(self._readers)

    def _addDefaultReaders(self, supported_names: str | None = None):
        config = BehavioralConfig.getConfig().gravity
        allowed = config.AllowMissingCoefficients
        for label in config.DefaultReaders:
            label = GravityFormatLabel(label.lower())  # noqa: PLW2901
            if label == GravityFormatLabel.ICGEM:
                reader = ICGEMFormatReader(supported_names or ICGEM_FILENAME, allowed)
            elif label == GravityFormatLabel.SHM:
                reader = SHMFormatReader(supported_names or SHM_FILENAME, allowed)
            elif label == GravityFormatLabel.EGM:
                reader = EGMFormatReader(supported_names or EGM_FILENAME, allowed)
            else:
                reader = GRGSFormatReader(supported_names or GRGS_FILENAME, allowed)
            self._readers.append(reader)
            self._logger.info(f"Installed default gravity field reader {reader!r}")

    def readGravityField(self, max_degree: int, max_order: int) -> PotentialCoefficientsReader:
        """Read a gravity field with the first registered reader able to complete.

        Args:
            max_degree (``int``): maximal degree to parse, rows beyond it are skipped.
            max_order (``int``): maximal order to parse, terms beyond it are skipped.

        Returns:
            :class:`.PotentialCoefficientsReader`: the completed reader.

        Raises:
            NoGravityFieldDataError: if no reader completed, chained to the last
                :class:`.FormatError` met, if any.
        """
        with self._lock:
            return self._readGravityField(max_degree, max_order)

    def _readGravityField(self, max_degree: int, max_order: int) -> PotentialCoefficientsReader:
        if not self._readers:
            self._addDefaultReaders()

        candidates = list(iterCandidateFiles(self._data_roots))
        last_error: FormatError | None = None
        for reader in self._readers:
            reader.setMaxParseDegree(max_degree)
            reader.setMaxParseOrder(max_order)
            for name, entry in candidates:
                if not reader.supportsName(name):
                    continue
                self._logger.debug(f"Offering {entry.name!r} to {reader!r}")
                try:
                    with entry.open("rb") as raw:
                        if entry.name.endswith(COMPRESSED_SUFFIX):
                            with gzip.open(raw, "rb") as stream:
                                reader.loadData(stream, entry.name)
                        else:
                            reader.loadData(raw, entry.name)
                except FormatError as error:
                    # a malformed file disqualifies the reader, the next one gets a chance
                    self._logger.error(f"Invalid gravity field file, abandoning {reader!r}: {error}")
                    last_error = error
                    break

                if not reader.stillAcceptsData():
                    self._logger.info(f"Loaded gravity field {entry.name!r} with {reader!r}")
                    return reader

        msg = f"No gravity field data found in {[str(root) for root in self._data_roots]}"
        self._logger.error(msg)
        raise NoGravityFieldDataError(msg) from last_error

    def getSphericalHarmonicsProvider(self, degree: int, order: int) -> SphericalHarmonicsProvider:
        """Read a gravity field and build its provider, including its drift terms if any.

        Args:
            degree (``int``): maximal degree.
            order (``int``): maximal order.

        Returns:
            :class:`.SphericalHarmonicsProvider`: provider of un-normalized coefficients.
        """
        with self._lock:
            return self._readGravityField(degree, order).getProvider(degree, order)

    def getConstantSphericalHarmonicsProvider(self, degree: int, order: int) -> ConstantSphericalHarmonics:
        """Read a gravity field and build the provider of its constant part.

        Args:
            degree (``int``): maximal degree.
            order (``int``): maximal order.

        Returns:
            :class:`.ConstantSphericalHarmonics`: provider of un-normalized coefficients.
        """
        with self._lock:
            return self._readGravityField(degree, order).getConstantProvider(degree, order)
