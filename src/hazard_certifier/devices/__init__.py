"""Device hazard contracts: models, source discovery and extraction."""

from hazard_certifier.devices.extractor import ContractExtractor, extract_contract
from hazard_certifier.devices.files import device_sources, to_camel_case
from hazard_certifier.devices.models import (
    ActionContract,
    ActionStyle,
    DeviceContract,
    DeviceSource,
    MandatoryActions,
)

__all__ = [
    "ActionContract",
    "ActionStyle",
    "ContractExtractor",
    "DeviceContract",
    "DeviceSource",
    "MandatoryActions",
    "device_sources",
    "extract_contract",
    "to_camel_case",
]
