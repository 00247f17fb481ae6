"""Hazard contract extraction from device framework sources.

Each device file is handled on its own, so extraction runs in parallel
through a ``ConcurrentPipeline``:

1. Parse the file.
2. If it declares a top-level ``enum Actions``, its mandatory actions are
   NAMED builder methods.
3. Otherwise they are the POSITIONAL parameters of the first ``fn new``.
4. The required hazards of each action come from the constant named after
   it; the allowed hazards from ``ALLOWED_HAZARDS``. A device without that
   constant allows no hazard at all.

A positional device without a constructor declares no contract and is
left out of the result. That is not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hazard_certifier.devices import named, positional
from hazard_certifier.devices.lookup import allowed_hazards
from hazard_certifier.devices.models import DeviceContract, DeviceSource
from hazard_certifier.pipeline import ConcurrentPipeline
from hazard_certifier.syntax import SourceTree

logger = logging.getLogger(__name__)


def extract_contract(name: str, source: bytes) -> DeviceContract | None:
    """Extract the hazard contract declared by one device source file.

    Args:
        name: Device type name (CamelCase).
        source: Raw source bytes of the device file.

    Returns:
        The device contract, or None when the file declares none.
    """
    tree = SourceTree(source)

    actions_enum = named.find_actions_enum(tree)
    if actions_enum is not None:
        mandatory = named.extract(tree, actions_enum)
    else:
        constructor = positional.find_constructor(tree)
        if constructor is None:
            logger.debug("%s: no actions enum and no constructor, skipping", name)
            return None
        mandatory = positional.extract(tree, constructor)

    logger.debug(
        "%s: %s contract with %d mandatory actions",
        name, mandatory.style.value, len(mandatory.actions),
    )
    return DeviceContract(
        name=name,
        mandatory_actions=mandatory,
        allowed_hazards=allowed_hazards(tree),
    )


class ContractExtractor(
    ConcurrentPipeline[
        Iterable[DeviceSource], DeviceSource, DeviceContract, tuple[DeviceContract, ...]
    ]
):
    """Extracts the contract set from device sources, one file per task.

    The result is sorted by device name and immutable, ready to be shared
    with every firmware-scanning worker.

    Usage::

        contracts = ContractExtractor().run(device_sources(path))
    """

    def transform(self, item: DeviceSource) -> DeviceContract | None:
        logger.debug("Extracting %s from %s", item.name, item.path or "<memory>")
        return extract_contract(item.name, item.source)

    def aggregate(
        self, results: Iterable[DeviceContract]
    ) -> tuple[DeviceContract, ...]:
        return tuple(sorted(results, key=lambda contract: contract.name))
