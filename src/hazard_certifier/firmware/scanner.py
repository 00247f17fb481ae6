"""Firmware scanning: device instances checked against their hazard contracts.

For every contract, the scanner finds each instantiation of the device in
a firmware file. An instantiation is the outermost call expression whose
text contains ``<Device>::new``, so its span covers the constructor call
and the whole builder chain hanging off it::

    let light = Light::new(
        DeviceAction::with_hazard(on_config, on, Hazard::FireHazard),
        DeviceAction::no_hazards(off_config, off),
    )?
    .add_action(DeviceAction::no_hazards(dim_config, dim))?
    .build();

The instance text is then matched against the contract purely textually:

- POSITIONAL devices: the arguments of the constructor call are captured,
  and the Nth parenthesized group inside them is the Nth mandatory action.
- NAMED devices: each mandatory action is looked up as a chained method
  call (``.turn_on(...)``); an action without a call is reported missing.
- Optional actions: every chained ``add_action(...)`` call. Its name is the
  second argument of the ``DeviceAction`` it receives.

Instances that cannot be resolved (a positional constructor call whose
arguments cannot be captured) are dropped without failing the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from hazard_certifier.devices.models import DeviceContract
from hazard_certifier.firmware.files import FirmwareSource
from hazard_certifier.firmware.models import (
    ComplianceAction,
    ComplianceManifest,
    DeviceComplianceRecord,
    FileComplianceReport,
    FirmwareDeviceInstance,
    OptionalAction,
)
from hazard_certifier.hazards import (
    ARGS_PATTERN,
    hazards_in,
    method_call_args,
    method_call_pattern,
)
from hazard_certifier.pipeline import ConcurrentPipeline
from hazard_certifier.syntax import (
    CALL_EXPRESSION,
    SourceTree,
    all_occurrences,
    has_ancestor,
    is_kind,
)

logger = logging.getLogger(__name__)

OPTIONAL_ACTION_METHOD = "add_action"


def find_instances(tree: SourceTree, contract: DeviceContract) -> list[FirmwareDeviceInstance]:
    """Return every instantiation of ``contract``'s device in ``tree``."""
    constructor = contract.constructor
    is_call = is_kind(CALL_EXPRESSION)
    nodes = all_occurrences(
        tree.root,
        lambda n: (
            n.type == CALL_EXPRESSION
            and constructor in tree.text(n)
            and not has_ancestor(n, is_call)
        ),
    )
    return [
        FirmwareDeviceInstance(
            name=contract.name,
            position=(node.start_point[0], node.start_point[1]),
            text=tree.text(node),
        )
        for node in nodes
    ]


def positional_actions(
    instance: FirmwareDeviceInstance, contract: DeviceContract
) -> tuple[ComplianceAction, ...] | None:
    """Match the constructor arguments of ``instance`` to the contract by position.

    Returns:
        One record per captured argument the contract has an action for,
        or None when the constructor call arguments cannot be captured.
    """
    arguments = method_call_args(instance.text, contract.constructor)
    if arguments is None:
        return None

    actions: list[ComplianceAction] = []
    for position, capture in enumerate(ARGS_PATTERN.finditer(arguments)):
        action = contract.mandatory_actions.at(position)
        if action is None:
            continue
        actions.append(
            ComplianceAction.compare(
                action.name,
                hazards_in(capture.group(1)),
                action.required_hazards,
                contract.allowed_hazards,
            )
        )
    return tuple(actions)


def named_actions(
    instance: FirmwareDeviceInstance, contract: DeviceContract
) -> tuple[tuple[ComplianceAction, ...], tuple[str, ...]]:
    """Match each mandatory action of the contract to a chained method call.

    Returns:
        The supplied actions and the names of the missing ones, both in
        contract order.
    """
    supplied: list[ComplianceAction] = []
    missing: list[str] = []
    for action in contract.mandatory_actions.actions:
        arguments = method_call_args(instance.text, action.name)
        if arguments is None:
            missing.append(action.name)
            continue
        supplied.append(
            ComplianceAction.compare(
                action.name,
                hazards_in(arguments),
                action.required_hazards,
                contract.allowed_hazards,
            )
        )
    return tuple(supplied), tuple(missing)


def optional_actions(
    instance: FirmwareDeviceInstance, contract: DeviceContract
) -> tuple[OptionalAction, ...]:
    """Return every ``add_action`` call chained onto ``instance``.

    The action name is the second comma-separated argument of the action
    passed to ``add_action``, following the ``(config, name, hazards)``
    convention. Calls whose action has no such argument are skipped.
    """
    actions: list[OptionalAction] = []
    for call in method_call_pattern(OPTIONAL_ACTION_METHOD).finditer(instance.text):
        arguments = call.group(1)
        inner = ARGS_PATTERN.search(arguments)
        if inner is None:
            continue
        parts = inner.group(1).split(",")
        if len(parts) < 2:
            continue
        actions.append(
            OptionalAction.compare(
                parts[1].strip(), hazards_in(arguments), contract.allowed_hazards
            )
        )
    return tuple(actions)


def build_record(
    instance: FirmwareDeviceInstance, contract: DeviceContract
) -> DeviceComplianceRecord | None:
    """Compare one device instance against its contract.

    Returns:
        The compliance record, or None when the instance cannot be resolved.
    """
    if contract.mandatory_actions.is_positional:
        mandatory = positional_actions(instance, contract)
        if mandatory is None:
            logger.debug(
                "%s at %s: constructor arguments not found, skipping",
                instance.name, instance.position,
            )
            return None
        missing: tuple[str, ...] | None = None
    else:
        mandatory, missing = named_actions(instance, contract)

    return DeviceComplianceRecord(
        name=contract.name,
        position=instance.position,
        mandatory_actions=mandatory,
        missing_mandatory_action_names=missing,
        optional_actions=optional_actions(instance, contract),
        allowed_hazards=contract.allowed_hazards,
    )


def scan_source(
    path: str, source: bytes, contracts: Sequence[DeviceContract]
) -> FileComplianceReport | None:
    """Check every device instance in one firmware file.

    Args:
        path: Path reported for the file.
        source: Raw source bytes.
        contracts: The complete contract set.

    Returns:
        The file report, or None when the file instantiates no device.
    """
    tree = SourceTree(source)
    records: list[DeviceComplianceRecord] = []
    for contract in contracts:
        for instance in find_instances(tree, contract):
            record = build_record(instance, contract)
            if record is not None:
                records.append(record)

    if not records:
        return None
    records.sort(key=lambda r: (r.position, r.name))
    logger.debug("%s: %d device instances", path, len(records))
    return FileComplianceReport(file=path, devices=tuple(records))


class FirmwareScanner(
    ConcurrentPipeline[
        Iterable[FirmwareSource], FirmwareSource, FileComplianceReport, ComplianceManifest
    ]
):
    """Scans firmware sources against a frozen contract set, one file per task.

    Usage::

        contracts = ContractExtractor().run(device_sources(devices_dir))
        manifest = FirmwareScanner(contracts).run(firmware_sources(fw_dir))
    """

    def __init__(self, contracts: Sequence[DeviceContract]) -> None:
        self.contracts: tuple[DeviceContract, ...] = tuple(contracts)

    def transform(self, item: FirmwareSource) -> FileComplianceReport | None:
        return scan_source(item.path, item.source, self.contracts)

    def aggregate(self, results: Iterable[FileComplianceReport]) -> ComplianceManifest:
        return tuple(sorted(results, key=lambda report: report.file))
