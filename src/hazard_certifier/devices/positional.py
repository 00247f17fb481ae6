"""Mandatory actions declared as constructor parameters::

    pub fn new(turn_on: DeviceAction, turn_off: DeviceAction) -> Result<Self>

The parameter at position N is action N. Its required hazards live in the
constant named after the parameter (``TURN_ON``).
"""

from __future__ import annotations

from tree_sitter import Node

from hazard_certifier.devices.lookup import const_hazards
from hazard_certifier.devices.models import ActionContract, MandatoryActions
from hazard_certifier.syntax import (
    FUNCTION_ITEM,
    IDENTIFIER,
    PARAMETER,
    PARAMETERS,
    SourceTree,
    all_occurrences,
    first_child,
    first_occurrence,
    is_kind,
)

CONSTRUCTOR = "new"


def find_constructor(tree: SourceTree) -> Node | None:
    """Return the first ``fn new`` in the file, in pre-order."""
    return first_occurrence(
        tree.root,
        lambda n: tree.is_kind_with_child_text(n, FUNCTION_ITEM, IDENTIFIER, CONSTRUCTOR),
    )


def parameter_names(tree: SourceTree, constructor: Node) -> list[str]:
    """Return the constructor parameter identifiers, in order."""
    parameters = first_child(constructor, is_kind(PARAMETERS))
    if parameters is None:
        return []
    names: list[str] = []
    for parameter in all_occurrences(parameters, is_kind(PARAMETER)):
        identifier = first_child(parameter, is_kind(IDENTIFIER))
        if identifier is not None:
            names.append(tree.text(identifier))
    return names


def extract(tree: SourceTree, constructor: Node) -> MandatoryActions:
    """Build the POSITIONAL mandatory actions of ``constructor``."""
    actions = tuple(
        ActionContract(name=name, required_hazards=const_hazards(tree, name.upper()))
        for name in parameter_names(tree, constructor)
    )
    return MandatoryActions.positional(actions)
