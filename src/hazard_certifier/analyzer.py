"""End-to-end hazard compliance analysis.

The analysis runs two pipelines strictly one after the other: contract
extraction must collect the complete contract set before any firmware file
is scanned, since every file is checked against every contract.
"""

from __future__ import annotations

import logging
from pathlib import Path

from hazard_certifier.config import AnalyzerSettings
from hazard_certifier.devices import ContractExtractor, DeviceContract, device_sources
from hazard_certifier.firmware import ComplianceManifest, FirmwareScanner, firmware_sources

logger = logging.getLogger(__name__)


def extract_contracts(
    devices_path: Path, settings: AnalyzerSettings | None = None
) -> tuple[DeviceContract, ...]:
    """Extract the hazard contracts of every device in ``devices_path``."""
    settings = settings or AnalyzerSettings()
    sources = device_sources(devices_path, settings)
    contracts = ContractExtractor().run(sources, settings.workers)
    logger.debug(
        "Extracted %d contracts from %d device files", len(contracts), len(sources)
    )
    return contracts


def scan_firmware(
    firmware_path: Path,
    contracts: tuple[DeviceContract, ...],
    settings: AnalyzerSettings | None = None,
) -> ComplianceManifest:
    """Check the firmware under ``firmware_path`` against ``contracts``."""
    settings = settings or AnalyzerSettings()
    sources = firmware_sources(firmware_path, settings)
    manifest = FirmwareScanner(contracts).run(sources, settings.workers)
    logger.debug(
        "Scanned %d firmware files, %d instantiate devices", len(sources), len(manifest)
    )
    return manifest


def analyze(
    devices_path: Path,
    firmware_path: Path,
    settings: AnalyzerSettings | None = None,
) -> ComplianceManifest:
    """Certify the firmware under ``firmware_path`` against the device framework.

    Args:
        devices_path: Directory of the framework's device source files.
        firmware_path: Firmware source file or directory.
        settings: Analyzer settings. Defaults to ``AnalyzerSettings()``.

    Returns:
        The compliance manifest, sorted by file path.

    Raises:
        SourceError: A device or firmware source cannot be read.
        ConcurrencyError: A pipeline run failed.
    """
    contracts = extract_contracts(devices_path, settings)
    return scan_firmware(firmware_path, contracts, settings)
