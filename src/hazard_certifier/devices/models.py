"""Data models for device hazard contracts.

A ``DeviceContract`` is what the device framework itself declares about a
device type: which actions every instantiation must supply, which hazards
each of those actions must carry, and which hazards the device allows at
all. Contracts are built once, never mutated, and shared read-only by
every firmware-scanning worker.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hazard_certifier.hazards import HazardSet


class ActionStyle(Enum):
    """How a device type receives its mandatory actions.

    POSITIONAL -- as constructor parameters, ``Device::new(a, b, c)``; an
        action is identified by its parameter position.
    NAMED -- as builder methods, ``Device::new().a(..).b(..)``; an action
        is identified by its method name, in enum declaration order.
    """

    POSITIONAL = "positional"
    NAMED = "named"


@dataclass(frozen=True)
class ActionContract:
    """A mandatory action and the hazards it must declare.

    Attributes:
        name: Action name. For NAMED devices this is also the builder
            method name (snake_case); for POSITIONAL devices it is the
            constructor parameter name.
        required_hazards: Hazards every supplied action must carry.
    """

    name: str
    required_hazards: HazardSet


@dataclass(frozen=True)
class MandatoryActions:
    """The ordered mandatory actions of a device, tagged with their style.

    For POSITIONAL devices the index of an action in ``actions`` is its
    constructor parameter position.
    """

    style: ActionStyle
    actions: tuple[ActionContract, ...]

    @classmethod
    def positional(cls, actions: tuple[ActionContract, ...]) -> MandatoryActions:
        return cls(ActionStyle.POSITIONAL, actions)

    @classmethod
    def named(cls, actions: tuple[ActionContract, ...]) -> MandatoryActions:
        return cls(ActionStyle.NAMED, actions)

    @property
    def is_positional(self) -> bool:
        return self.style is ActionStyle.POSITIONAL

    def at(self, position: int) -> ActionContract | None:
        """Return the action at constructor ``position``, if any."""
        if 0 <= position < len(self.actions):
            return self.actions[position]
        return None


@dataclass(frozen=True)
class DeviceContract:
    """The hazard contract of one device type.

    Attributes:
        name: Device type name (CamelCase), unique within a run.
        mandatory_actions: Actions every instance must supply.
        allowed_hazards: Every hazard any action of this device may carry.
    """

    name: str
    mandatory_actions: MandatoryActions
    allowed_hazards: HazardSet

    @property
    def constructor(self) -> str:
        """The constructor path firmware uses to instantiate the device."""
        return f"{self.name}::new"


@dataclass(frozen=True)
class DeviceSource:
    """One device source file handed to the contract extractor."""

    name: str
    source: bytes
    path: str = ""
