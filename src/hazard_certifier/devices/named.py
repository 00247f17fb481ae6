"""Mandatory actions declared as builder methods.

The device file lists its actions in a top-level ``Actions`` enum::

    enum Actions {
        TurnOn,
        TurnOff,
    }

Each variant names a method (``turn_on``) and the constant holding the
hazards it requires (``TURN_ON``).
"""

from __future__ import annotations

from tree_sitter import Node

from hazard_certifier.devices.lookup import const_hazards
from hazard_certifier.devices.models import ActionContract, MandatoryActions
from hazard_certifier.syntax import (
    ENUM_ITEM,
    IDENTIFIER,
    TYPE_IDENTIFIER,
    SourceTree,
    all_occurrences,
    first_child,
    is_kind,
)

ACTIONS_ENUM = "Actions"


def to_snake_case(variant: str) -> str:
    """Convert an enum variant to the snake_case method name: ``TurnOn`` -> ``turn_on``."""
    chars: list[str] = []
    for i, ch in enumerate(variant):
        if ch.isupper():
            if i != 0:
                chars.append("_")
            chars.append(ch.lower())
        else:
            chars.append(ch)
    return "".join(chars)


def find_actions_enum(tree: SourceTree) -> Node | None:
    """Return the top-level ``enum Actions`` declaration, if any."""
    return first_child(
        tree.root,
        lambda n: tree.is_kind_with_child_text(n, ENUM_ITEM, TYPE_IDENTIFIER, ACTIONS_ENUM),
    )


def action_names(tree: SourceTree, actions_enum: Node) -> list[str]:
    """Return the snake_case action names, in declaration order."""
    return [
        to_snake_case(tree.text(identifier))
        for identifier in all_occurrences(actions_enum, is_kind(IDENTIFIER))
    ]


def extract(tree: SourceTree, actions_enum: Node) -> MandatoryActions:
    """Build the NAMED mandatory actions declared by ``actions_enum``."""
    actions = tuple(
        ActionContract(name=name, required_hazards=const_hazards(tree, name.upper()))
        for name in action_names(tree, actions_enum)
    )
    return MandatoryActions.named(actions)
