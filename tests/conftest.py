"""Shared fixtures for hazard_certifier tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from hazard_certifier.devices import DeviceContract, extract_contract
from hazard_certifier.devices.extractor import ContractExtractor
from hazard_certifier.devices.files import device_sources

FIXTURES = Path(__file__).parent / "fixtures" / "hazards"


@pytest.fixture
def devices_dir() -> Path:
    """Directory of device framework sources (two devices, a module index, one non-device)."""
    return FIXTURES / "devices"


@pytest.fixture
def firmware_dir() -> Path:
    """Directory of firmware sources, with a nested subdirectory."""
    return FIXTURES / "firmware"


@pytest.fixture
def contracts(devices_dir: Path) -> tuple[DeviceContract, ...]:
    """The contract set extracted from ``devices_dir``."""
    return ContractExtractor().run(device_sources(devices_dir), workers=2)


@pytest.fixture
def light_contract(devices_dir: Path) -> DeviceContract:
    contract = extract_contract("SmartLight", (devices_dir / "smart_light.rs").read_bytes())
    assert contract is not None
    return contract


@pytest.fixture
def thermostat_contract(devices_dir: Path) -> DeviceContract:
    contract = extract_contract("Thermostat", (devices_dir / "thermostat.rs").read_bytes())
    assert contract is not None
    return contract
