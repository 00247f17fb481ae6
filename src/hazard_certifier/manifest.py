"""Compliance manifest serialization.

The manifest is a JSON array with one entry per firmware file that
instantiates at least one device::

    [{"file": "src/main.rs",
      "devices": [{"name": "Light",
                   "position": [3, 16],
                   "mandatoryActions": [{"name": "turn_on",
                                         "hazards": ["FireHazard"],
                                         "mandatoryHazards": ["FireHazard"]}],
                   "allowedHazards": ["FireHazard"]}]}]

``missingHazards``, ``notAllowedHazards``, ``missingMandatoryActions`` and
``optionalActions`` are omitted when empty. ``missingMandatoryActions`` is
never emitted for positional devices. Every hazard list is sorted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hazard_certifier.exceptions import ManifestError
from hazard_certifier.firmware.models import (
    ComplianceAction,
    ComplianceManifest,
    DeviceComplianceRecord,
    FileComplianceReport,
    OptionalAction,
)
from hazard_certifier.hazards import sorted_hazards

logger = logging.getLogger(__name__)


def _mandatory_action_to_json(action: ComplianceAction) -> dict[str, Any]:
    out: dict[str, Any] = {
        "name": action.name,
        "hazards": sorted_hazards(action.supplied_hazards),
        "mandatoryHazards": sorted_hazards(action.required_hazards),
    }
    if action.missing_hazards:
        out["missingHazards"] = sorted_hazards(action.missing_hazards)
    if action.disallowed_hazards:
        out["notAllowedHazards"] = sorted_hazards(action.disallowed_hazards)
    return out


def _optional_action_to_json(action: OptionalAction) -> dict[str, Any]:
    out: dict[str, Any] = {
        "name": action.name,
        "hazards": sorted_hazards(action.supplied_hazards),
    }
    if action.disallowed_hazards:
        out["notAllowedHazards"] = sorted_hazards(action.disallowed_hazards)
    return out


def device_to_json(device: DeviceComplianceRecord) -> dict[str, Any]:
    """Convert one device compliance record to its JSON object."""
    out: dict[str, Any] = {
        "name": device.name,
        "position": list(device.position),
        "mandatoryActions": [
            _mandatory_action_to_json(a) for a in device.mandatory_actions
        ],
    }
    if device.missing_mandatory_action_names:
        out["missingMandatoryActions"] = list(device.missing_mandatory_action_names)
    if device.optional_actions:
        out["optionalActions"] = [
            _optional_action_to_json(a) for a in device.optional_actions
        ]
    out["allowedHazards"] = sorted_hazards(device.allowed_hazards)
    return out


def file_report_to_json(report: FileComplianceReport) -> dict[str, Any]:
    return {
        "file": report.file,
        "devices": [device_to_json(d) for d in report.devices],
    }


def manifest_to_json(manifest: ComplianceManifest) -> list[dict[str, Any]]:
    """Convert the manifest to JSON-serializable data.

    Reports without devices are left out.
    """
    return [file_report_to_json(r) for r in manifest if r.devices]


def check_manifest_path(path: Path) -> None:
    """Reject manifest paths that do not name a JSON file.

    A path without an extension is accepted.

    Raises:
        ManifestError: The path has an extension other than ``.json``.
    """
    if path.suffix and path.suffix.lower() != ".json":
        raise ManifestError(f"Manifest path must be a json file: {path}")


def write_manifest(manifest: ComplianceManifest, path: Path) -> None:
    """Write the manifest as JSON to ``path``.

    Raises:
        ManifestError: The path is not a JSON file or cannot be written.
    """
    check_manifest_path(path)
    data = json.dumps(manifest_to_json(manifest), indent=2)
    try:
        path.write_text(data + "\n", encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot write manifest {path}: {exc}") from exc
    logger.debug("Manifest written to %s", path)


def manifest_summary(manifest: ComplianceManifest) -> dict[str, int]:
    """Count files, device instances and non-compliant instances."""
    devices = [d for report in manifest for d in report.devices]
    return {
        "files": len(manifest),
        "devices": len(devices),
        "non_compliant": sum(1 for d in devices if not d.is_compliant),
    }
