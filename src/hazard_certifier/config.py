"""Analyzer settings and their YAML loader.

Settings can come from a YAML mapping such as::

    source_extension: .rs
    reserved_module_names: [mod]
    workers: 4

Every key is optional. Command-line options override file values.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from hazard_certifier.exceptions import ConfigError

DEFAULT_SOURCE_EXTENSION = ".rs"
DEFAULT_RESERVED_MODULE_NAMES: tuple[str, ...] = ("mod",)


@dataclass(frozen=True)
class AnalyzerSettings:
    """Tunables shared by the source providers and the pipelines.

    Attributes:
        source_extension: Extension (with leading dot) of the source files
            read from the device and firmware paths.
        reserved_module_names: File stems in the device directory that are
            module indexes rather than devices.
        workers: Transform pool size for both pipeline runs. None selects
            ``default_workers()``.
    """

    source_extension: str = DEFAULT_SOURCE_EXTENSION
    reserved_module_names: tuple[str, ...] = DEFAULT_RESERVED_MODULE_NAMES
    workers: int | None = None

    def with_overrides(self, **overrides: object) -> AnalyzerSettings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _validated(raw: dict) -> dict:
    known = {f.name for f in fields(AnalyzerSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

    values: dict[str, object] = {}
    if "source_extension" in raw:
        ext = raw["source_extension"]
        if not isinstance(ext, str) or not ext:
            raise ConfigError("source_extension must be a non-empty string")
        values["source_extension"] = ext if ext.startswith(".") else f".{ext}"
    if "reserved_module_names" in raw:
        names = raw["reserved_module_names"]
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise ConfigError("reserved_module_names must be a list of strings")
        values["reserved_module_names"] = tuple(names)
    if "workers" in raw:
        workers = raw["workers"]
        if workers is not None and (
            isinstance(workers, bool) or not isinstance(workers, int) or workers < 1
        ):
            raise ConfigError("workers must be a positive integer")
        values["workers"] = workers
    return values


def load_settings(path: Path) -> AnalyzerSettings:
    """Load analyzer settings from a YAML file.

    Args:
        path: YAML file holding a mapping of settings. An empty file
            yields the defaults.

    Returns:
        The loaded ``AnalyzerSettings``.

    Raises:
        ConfigError: The file is unreadable, is not valid YAML, is not a
            mapping, or holds unknown keys or badly typed values.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read settings file {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return AnalyzerSettings()
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return AnalyzerSettings(**_validated(raw))
