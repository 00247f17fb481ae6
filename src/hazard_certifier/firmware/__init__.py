"""Firmware scanning: device instances, compliance records and source discovery."""

from hazard_certifier.firmware.files import FirmwareSource, firmware_sources
from hazard_certifier.firmware.models import (
    ComplianceAction,
    ComplianceManifest,
    DeviceComplianceRecord,
    FileComplianceReport,
    FirmwareDeviceInstance,
    OptionalAction,
)
from hazard_certifier.firmware.scanner import FirmwareScanner, scan_source

__all__ = [
    "ComplianceAction",
    "ComplianceManifest",
    "DeviceComplianceRecord",
    "FileComplianceReport",
    "FirmwareDeviceInstance",
    "FirmwareScanner",
    "FirmwareSource",
    "OptionalAction",
    "firmware_sources",
    "scan_source",
]
