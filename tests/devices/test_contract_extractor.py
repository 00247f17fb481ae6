"""Tests for hazard contract extraction from device sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from hazard_certifier.devices import (
    ActionContract,
    ActionStyle,
    ContractExtractor,
    DeviceContract,
    DeviceSource,
    extract_contract,
)
from hazard_certifier.devices.files import device_sources
from hazard_certifier.devices.lookup import find_const
from hazard_certifier.devices.named import to_snake_case
from hazard_certifier.syntax import SourceTree


def _contract(source: str, name: str = "Device") -> DeviceContract | None:
    return extract_contract(name, source.encode("utf-8"))


class TestPositionalContracts:
    """Devices whose mandatory actions are ``fn new`` parameters."""

    def test_smart_light(self, light_contract: DeviceContract) -> None:
        assert light_contract.name == "SmartLight"
        assert light_contract.mandatory_actions.style is ActionStyle.POSITIONAL
        assert light_contract.mandatory_actions.actions == (
            ActionContract("turn_on", frozenset({"FireHazard", "ElectricEnergyConsumption"})),
            ActionContract("turn_off", frozenset({"ElectricEnergyConsumption"})),
            ActionContract("toggle", frozenset()),
        )
        assert light_contract.allowed_hazards == {
            "FireHazard",
            "ElectricEnergyConsumption",
            "PowerSurge",
        }

    def test_position_lookup(self, light_contract: DeviceContract) -> None:
        actions = light_contract.mandatory_actions
        assert actions.at(1) is not None
        assert actions.at(1).name == "turn_off"
        assert actions.at(3) is None
        assert actions.at(-1) is None

    def test_constructor_path(self, light_contract: DeviceContract) -> None:
        assert light_contract.constructor == "SmartLight::new"

    def test_first_constructor_wins(self) -> None:
        contract = _contract(
            """
            const ALLOWED_HAZARDS: &[Hazard] = &[Hazard::Smoke];
            impl A { fn new(first: Action) -> Self { todo!() } }
            impl B { fn new(second: Action, third: Action) -> Self { todo!() } }
            """
        )
        assert contract is not None
        assert [a.name for a in contract.mandatory_actions.actions] == ["first"]

    def test_constructor_without_parameters(self) -> None:
        contract = _contract(
            "const ALLOWED_HAZARDS: Hazard = Hazard::Smoke;\n"
            "impl A { fn new() -> Self { A } }\n"
        )
        assert contract is not None
        assert contract.mandatory_actions.actions == ()

    def test_no_constructor_no_contract(self) -> None:
        assert _contract("const ALLOWED_HAZARDS: Hazard = Hazard::Smoke;\n") is None


class TestNamedContracts:
    """Devices whose mandatory actions are listed in ``enum Actions``."""

    def test_thermostat(self, thermostat_contract: DeviceContract) -> None:
        assert thermostat_contract.mandatory_actions.style is ActionStyle.NAMED
        assert thermostat_contract.mandatory_actions.actions == (
            ActionContract(
                "increase_temperature",
                frozenset({"ElectricEnergyConsumption", "SpoiledFood"}),
            ),
            ActionContract("decrease_temperature", frozenset({"ElectricEnergyConsumption"})),
        )
        assert thermostat_contract.allowed_hazards == {
            "ElectricEnergyConsumption",
            "SpoiledFood",
        }

    def test_enum_takes_precedence_over_constructor(
        self, thermostat_contract: DeviceContract
    ) -> None:
        assert not thermostat_contract.mandatory_actions.is_positional

    def test_nested_actions_enum_ignored(self) -> None:
        contract = _contract(
            """
            const ALLOWED_HAZARDS: &[Hazard] = &[];
            mod inner { enum Actions { Hidden } }
            fn new(visible: Action) {}
            """
        )
        assert contract is not None
        assert contract.mandatory_actions.is_positional
        assert [a.name for a in contract.mandatory_actions.actions] == ["visible"]

    def test_action_without_constant_has_no_required_hazards(self) -> None:
        contract = _contract(
            "const ALLOWED_HAZARDS: Hazard = Hazard::Smoke;\n"
            "enum Actions { OpenDoor }\n"
        )
        assert contract is not None
        assert contract.mandatory_actions.actions == (ActionContract("open_door", frozenset()),)

    def test_empty_allowed_hazards(self) -> None:
        contract = _contract("const ALLOWED_HAZARDS: &[Hazard] = &[];\nenum Actions { Open }\n")
        assert contract is not None
        assert contract.allowed_hazards == frozenset()


class TestMissingAllowedHazards:
    """Devices without an ``ALLOWED_HAZARDS`` constant allow no hazard."""

    def test_named_device(self) -> None:
        contract = _contract("enum Actions { Open }\nfn new(a: Action) {}\n")
        assert contract is not None
        assert contract.mandatory_actions.style is ActionStyle.NAMED
        assert contract.allowed_hazards == frozenset()

    def test_positional_device(self) -> None:
        contract = _contract(
            "const PLAY: Hazard = Hazard::LoudNoise;\n"
            "impl Speaker { fn new(play: DeviceAction) -> Self { todo!() } }\n"
        )
        assert contract is not None
        assert contract.mandatory_actions.actions == (
            ActionContract("play", frozenset({"LoudNoise"})),
        )
        assert contract.allowed_hazards == frozenset()

    def test_speaker_fixture(self, devices_dir: Path) -> None:
        contract = extract_contract("Speaker", (devices_dir / "speaker.rs").read_bytes())
        assert contract is not None
        assert contract.mandatory_actions.is_positional
        assert contract.allowed_hazards == frozenset()


class TestUnresolvedFiles:
    def test_empty_source(self) -> None:
        assert _contract("") is None


class TestConstantLookup:
    """Exact constant names win over substring matches."""

    def test_exact_name_preferred(self) -> None:
        tree = SourceTree.from_text(
            "const TURN_ON_DELAY: u8 = 3;\n"
            "const TURN_ON: Hazard = Hazard::FireHazard;\n"
        )
        assert find_const(tree, "TURN_ON") == "const TURN_ON: Hazard = Hazard::FireHazard;"

    def test_substring_fallback(self) -> None:
        tree = SourceTree.from_text("const DEFAULT_TURN_ON: Hazard = Hazard::Smoke;\n")
        assert find_const(tree, "TURN_ON") == "const DEFAULT_TURN_ON: Hazard = Hazard::Smoke;"

    def test_missing(self) -> None:
        tree = SourceTree.from_text("const OTHER: u8 = 1;\n")
        assert find_const(tree, "TURN_ON") is None


@pytest.mark.parametrize(
    ("variant", "expected"),
    [
        ("Open", "open"),
        ("IncreaseTemperature", "increase_temperature"),
        ("A", "a"),
        ("TurnOnLED", "turn_on_l_e_d"),
    ],
)
def test_to_snake_case(variant: str, expected: str) -> None:
    assert to_snake_case(variant) == expected


class TestContractExtractor:
    """The concurrent extraction pass."""

    def test_contract_set_sorted_by_name(
        self, contracts: tuple[DeviceContract, ...]
    ) -> None:
        assert [c.name for c in contracts] == ["SmartLight", "Speaker", "Thermostat"]

    def test_unresolved_files_skipped(self) -> None:
        sources = [
            DeviceSource("Broken", b"fn main() {}"),
            DeviceSource("Door", b"const ALLOWED_HAZARDS: Hazard = Hazard::Smoke;\nenum Actions { Open }\n"),
        ]
        contracts = ContractExtractor().run(sources, workers=3)
        assert [c.name for c in contracts] == ["Door"]

    def test_no_sources(self) -> None:
        assert ContractExtractor().run([], workers=1) == ()

    @pytest.mark.parametrize("workers", [1, 2, 5])
    def test_independent_of_worker_count(
        self, workers: int, contracts: tuple[DeviceContract, ...], devices_dir: Path
    ) -> None:
        assert ContractExtractor().run(device_sources(devices_dir), workers=workers) == contracts
