"""Device source discovery.

The device framework keeps one device type per file, named after the type
in snake_case (``smart_light.rs`` defines ``SmartLight``). Module index
files (``mod.rs``) declare no device and are skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hazard_certifier.config import AnalyzerSettings
from hazard_certifier.devices.models import DeviceSource
from hazard_certifier.exceptions import SourceError

logger = logging.getLogger(__name__)


def to_camel_case(file_stem: str) -> str:
    """Convert a snake_case file stem to the CamelCase device name.

    Every ``_`` is dropped and the character after it is upper-cased, as
    is the first character: ``smart_light`` -> ``SmartLight``.
    """
    parts: list[str] = []
    capitalize_next = True
    for ch in file_stem:
        if ch == "_":
            capitalize_next = True
        elif capitalize_next:
            parts.append(ch.upper())
            capitalize_next = False
        else:
            parts.append(ch)
    return "".join(parts)


def device_sources(
    devices_path: Path, settings: AnalyzerSettings | None = None
) -> list[DeviceSource]:
    """Read every device source file in ``devices_path``.

    The directory is not walked recursively. Files are returned sorted by
    name so that runs over the same directory are reproducible.

    Args:
        devices_path: Directory holding the device source files.
        settings: Source extension and reserved module names. Defaults
            to ``AnalyzerSettings()``.

    Returns:
        One ``DeviceSource`` per device file.

    Raises:
        SourceError: The directory or one of its device files cannot be read.
    """
    settings = settings or AnalyzerSettings()
    if not devices_path.is_dir():
        raise SourceError(f"Devices path is not a directory: {devices_path}")

    try:
        entries = sorted(devices_path.iterdir())
    except OSError as exc:
        raise SourceError(f"Cannot list devices directory {devices_path}: {exc}") from exc

    sources: list[DeviceSource] = []
    for entry in entries:
        if not entry.is_file() or entry.suffix != settings.source_extension:
            continue
        if entry.stem in settings.reserved_module_names:
            logger.debug("Skipping module index file: %s", entry)
            continue
        try:
            data = entry.read_bytes()
        except OSError as exc:
            raise SourceError(f"Cannot read device file {entry}: {exc}") from exc
        sources.append(
            DeviceSource(name=to_camel_case(entry.stem), source=data, path=str(entry))
        )

    logger.debug("Found %d device files in %s", len(sources), devices_path)
    return sources
