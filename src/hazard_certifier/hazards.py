"""Hazard set algebra and the textual patterns shared by both analysis passes.

Hazards are harvested purely lexically: every ``Hazard::Name`` token inside a
span of source text contributes ``Name`` to the span's hazard set. No
identifier is ever resolved, so aliases or re-exports of the hazard
enumeration are invisible to the analysis.

Patterns:

- ``HAZARD_PATTERN`` -- a hazard token, e.g. ``Hazard::FireHazard``.
- ``ARGS_PATTERN`` -- the content between a ``(`` and the *first* following
  ``)``. This capture is not nesting-aware: given
  ``with_hazards(cfg, toggle, &[Hazard::FireHazard])`` it captures
  ``cfg, toggle, &[Hazard::FireHazard]``, but an argument that itself
  contains a closed parenthesis group ends the capture early.
- ``method_call_pattern(name)`` -- a builder-style method call
  ``name(args).`` or ``name(args)?.`` whose ``args`` group is captured.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

HazardSet = frozenset[str]

EMPTY_HAZARDS: HazardSet = frozenset()

HAZARD_PATTERN = re.compile(r"Hazard::(\w+)")
ARGS_PATTERN = re.compile(r"\((.*?)\)", re.DOTALL)


@lru_cache(maxsize=256)
def method_call_pattern(name: str) -> re.Pattern[str]:
    """Compile the pattern matching a chained call to ``name``.

    The call must be followed by a ``.`` (optionally after a ``?``), which
    is how calls inside a builder chain look. The captured group holds
    the call arguments, up to the first ``)`` that is followed by the
    chain continuation.
    """
    return re.compile(rf"{re.escape(name)}\((.*?)\)\s*\??\s*\.", re.DOTALL)


def hazards_in(text: str) -> HazardSet:
    """Return every hazard named in ``text``.

    Args:
        text: Any span of source text.

    Returns:
        The set of hazard identifiers. Empty when ``text`` names none.
    """
    return frozenset(HAZARD_PATTERN.findall(text))


def difference(first: Iterable[str], second: Iterable[str]) -> HazardSet:
    """Return the hazards in ``first`` that are not in ``second``."""
    return frozenset(first).difference(second)


def method_call_args(text: str, name: str) -> str | None:
    """Return the arguments of the first chained call to ``name`` in ``text``.

    Returns:
        The captured argument text, or None when ``text`` has no such call.
    """
    match = method_call_pattern(name).search(text)
    if match is None:
        return None
    return match.group(1)


def sorted_hazards(hazards: Iterable[str]) -> list[str]:
    """Return hazards as a sorted list, the order used in every report."""
    return sorted(hazards)
