from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from ..core.types import ActionKind
from ..errors import InvalidConfigurationError
from .models import ACTION_TYPES, Action, normalize_keys


def extract_actions(interactions: object) -> list[Any]:
    """Accepts a bare action list or a bundle mapping {"actions": [...]}."""
    if interactions is None:
        return []

    if isinstance(interactions, Mapping):
        if "actions" not in interactions:
            raise InvalidConfigurationError(
                "Interaction bundle does not define 'actions'.",
                data={"keys": sorted(str(k) for k in interactions.keys())},
            )
        interactions = interactions["actions"]

    if isinstance(interactions, (str, bytes)) or not isinstance(interactions, Sequence):
        raise InvalidConfigurationError(
            f"Interactions must be a list of actions; got {type(interactions).__name__}."
        )
    return list(interactions)


def _kind_of(entry: Mapping[str, Any], index: int) -> ActionKind:
    present = [k for k in ActionKind if k.value in entry]
    if len(present) != 1:
        markers = [k.value for k in ActionKind]
        found = [k.value for k in present]
        raise InvalidConfigurationError(
            f"Interaction {index} must define exactly one of {markers}; found {found or 'none'}.",
            data={"index": index, "found": found},
        )
    return present[0]


def parse_interactions(interactions: object) -> list[Action]:
    """Validates a raw action list and returns parsed, indexed actions.

    The raw entries are deep-copied first so callers' structures are never
    aliased; callable 'type' validators are kept by reference.

    Raises:
        InvalidConfigurationError: On the first structural problem, naming the
            offending index.
    """
    raw_actions = copy.deepcopy(extract_actions(interactions))

    actions: list[Action] = []
    for index, raw in enumerate(raw_actions):
        if not isinstance(raw, Mapping):
            raise InvalidConfigurationError(
                f"Interaction {index} is not a mapping ({type(raw).__name__}).",
                data={"index": index},
            )
        entry = normalize_keys(raw)
        kind = _kind_of(entry, index)
        actions.append(ACTION_TYPES[kind].from_dict(entry, index=index))

    return actions


def count_by_kind(actions: Sequence[Action]) -> dict[str, int]:
    out = {k.name.lower(): 0 for k in ActionKind}
    for a in actions:
        out[a.kind.name.lower()] += 1
    return out
