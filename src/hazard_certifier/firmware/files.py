"""Firmware source discovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from hazard_certifier.config import AnalyzerSettings
from hazard_certifier.exceptions import SourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirmwareSource:
    """One firmware source file handed to the scanner."""

    path: str
    source: bytes


def _read(path: Path) -> FirmwareSource:
    try:
        return FirmwareSource(path=str(path), source=path.read_bytes())
    except OSError as exc:
        raise SourceError(f"Cannot read firmware file {path}: {exc}") from exc


def firmware_sources(
    firmware_path: Path, settings: AnalyzerSettings | None = None
) -> list[FirmwareSource]:
    """Read the firmware source files under ``firmware_path``.

    ``firmware_path`` is either a single source file or a directory that
    is walked recursively. Files are returned sorted by path.

    Raises:
        SourceError: The path does not exist, or a file cannot be read.
    """
    settings = settings or AnalyzerSettings()
    if not firmware_path.exists():
        raise SourceError(f"Firmware path does not exist: {firmware_path}")

    if firmware_path.is_file():
        if firmware_path.suffix != settings.source_extension:
            logger.debug("Not a %s file: %s", settings.source_extension, firmware_path)
            return []
        return [_read(firmware_path)]

    paths = sorted(
        p for p in firmware_path.rglob(f"*{settings.source_extension}") if p.is_file()
    )
    logger.debug("Found %d firmware files in %s", len(paths), firmware_path)
    return [_read(p) for p in paths]
