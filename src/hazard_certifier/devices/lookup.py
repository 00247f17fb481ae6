"""Constant lookup: where a device declares the hazards of an action.

Device files declare hazard requirements as constants named after the
action in UPPER_SNAKE_CASE, and the hazards the device allows in
``ALLOWED_HAZARDS``::

    const TURN_ON: &[Hazard] = &[Hazard::FireHazard, Hazard::PowerSurge];
    const ALLOWED_HAZARDS: &[Hazard] = &[Hazard::FireHazard, Hazard::PowerSurge];

A lookup key resolves to a ``const_item`` as follows:

1. the first constant, in pre-order, whose declared name equals the key;
2. otherwise the first constant, in pre-order, whose text contains the key
   anywhere. This substring rule can pick up an unrelated constant whose
   name or value happens to contain the key.
"""

from __future__ import annotations

from tree_sitter import Node

from hazard_certifier.hazards import EMPTY_HAZARDS, HazardSet, hazards_in
from hazard_certifier.syntax import (
    CONST_ITEM,
    IDENTIFIER,
    SourceTree,
    first_occurrence,
)

ALLOWED_HAZARDS_KEY = "ALLOWED_HAZARDS"


def const_name(tree: SourceTree, node: Node) -> str | None:
    """Return the declared name of a ``const_item``."""
    name = node.child_by_field_name("name")
    if name is None or name.type != IDENTIFIER:
        return None
    return tree.text(name)


def find_const(tree: SourceTree, key: str) -> str | None:
    """Return the text of the constant ``key`` resolves to, or None."""
    exact = first_occurrence(
        tree.root,
        lambda n: n.type == CONST_ITEM and const_name(tree, n) == key,
    )
    if exact is not None:
        return tree.text(exact)

    loose = first_occurrence(
        tree.root,
        lambda n: n.type == CONST_ITEM and key in tree.text(n),
    )
    if loose is not None:
        return tree.text(loose)
    return None


def const_hazards(tree: SourceTree, key: str) -> HazardSet:
    """Return the hazards declared by the constant ``key`` resolves to.

    A missing constant declares no hazards.
    """
    text = find_const(tree, key)
    if text is None:
        return EMPTY_HAZARDS
    return hazards_in(text)


def allowed_hazards(tree: SourceTree) -> HazardSet:
    """Return the device's allowed hazards.

    A device without an ``ALLOWED_HAZARDS`` constant allows no hazard.
    """
    return const_hazards(tree, ALLOWED_HAZARDS_KEY)
