"""Data models for firmware compliance records.

These are the types produced by the firmware scanner and consumed by the
manifest writer and the terminal renderer. Hazard sets are frozensets;
serializers sort them.
"""

from __future__ import annotations

from dataclasses import dataclass

from hazard_certifier.hazards import HazardSet, difference


@dataclass(frozen=True)
class FirmwareDeviceInstance:
    """A device instantiation found in a firmware file.

    Attributes:
        name: Device type name.
        position: ``(row, column)`` of the instantiation, both 0-based.
        text: Full text of the outermost call, i.e. the constructor call
            and every builder call chained onto it.
    """

    name: str
    position: tuple[int, int]
    text: str


@dataclass(frozen=True)
class ComplianceAction:
    """A mandatory action as supplied by a device instance.

    Attributes:
        name: Action name.
        supplied_hazards: Hazards the firmware declares for the action.
        required_hazards: Hazards the device contract requires.
        missing_hazards: Required hazards that were not supplied.
        disallowed_hazards: Supplied hazards the device does not allow.
    """

    name: str
    supplied_hazards: HazardSet
    required_hazards: HazardSet
    missing_hazards: HazardSet
    disallowed_hazards: HazardSet

    @classmethod
    def compare(
        cls,
        name: str,
        supplied: HazardSet,
        required: HazardSet,
        allowed: HazardSet,
    ) -> ComplianceAction:
        """Build the record for ``supplied`` against the contract sets."""
        return cls(
            name=name,
            supplied_hazards=supplied,
            required_hazards=required,
            missing_hazards=difference(required, supplied),
            disallowed_hazards=difference(supplied, allowed),
        )

    @property
    def is_compliant(self) -> bool:
        return not self.missing_hazards and not self.disallowed_hazards


@dataclass(frozen=True)
class OptionalAction:
    """An action added beyond the mandatory set.

    Optional actions have no required hazards, so they can only be
    non-compliant by carrying hazards the device does not allow.
    """

    name: str
    supplied_hazards: HazardSet
    disallowed_hazards: HazardSet

    @classmethod
    def compare(cls, name: str, supplied: HazardSet, allowed: HazardSet) -> OptionalAction:
        return cls(
            name=name,
            supplied_hazards=supplied,
            disallowed_hazards=difference(supplied, allowed),
        )

    @property
    def is_compliant(self) -> bool:
        return not self.disallowed_hazards


@dataclass(frozen=True)
class DeviceComplianceRecord:
    """Compliance of one device instance against its contract.

    Attributes:
        name: Device type name.
        position: ``(row, column)`` of the instance, both 0-based.
        mandatory_actions: Mandatory actions the instance supplies.
        missing_mandatory_action_names: Names of mandatory actions the
            instance never supplies. Always None for positional devices,
            whose constructor forces every action to be passed.
        optional_actions: Actions added beyond the mandatory set.
        allowed_hazards: Hazards the device allows.
    """

    name: str
    position: tuple[int, int]
    mandatory_actions: tuple[ComplianceAction, ...]
    missing_mandatory_action_names: tuple[str, ...] | None
    optional_actions: tuple[OptionalAction, ...]
    allowed_hazards: HazardSet

    @property
    def is_compliant(self) -> bool:
        return (
            not self.missing_mandatory_action_names
            and all(a.is_compliant for a in self.mandatory_actions)
            and all(a.is_compliant for a in self.optional_actions)
        )


@dataclass(frozen=True)
class FileComplianceReport:
    """Every device instance found in one firmware file."""

    file: str
    devices: tuple[DeviceComplianceRecord, ...]

    @property
    def is_compliant(self) -> bool:
        return all(device.is_compliant for device in self.devices)


ComplianceManifest = tuple[FileComplianceReport, ...]
