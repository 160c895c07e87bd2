"""Action maps: choosing them and writing them into a dataset."""

import copy
from collections.abc import MutableMapping
from typing import Any, Dict, Mapping, Optional

from .errors import MutationTargetMissingError
from .paths import NOT_FOUND, as_index, own_item, split_path
from .types import Rule


def select_actions(rule: Rule, matched: bool) -> Dict[str, Any]:
    """Deep copy of the action map for the rule outcome."""
    return copy.deepcopy(dict(rule.on_true if matched else rule.on_false))


def apply_actions(
    actions: Mapping[str, Any],
    dataset: MutableMapping,
    rule_name: Optional[str] = None
) -> None:
    """Write each `path -> value` of `actions` into `dataset` in place.

    Every segment but the last must already resolve to a mapping or list;
    nothing is created along the way. The final segment is overwritten.

    Raises:
        MutationTargetMissingError: If an intermediate segment is missing or
            is not a container, or the last container can't take the value
    """
    for path, value in actions.items():
        segments = split_path(path)
        target: Any = dataset

        for segment in segments[:-1]:
            target = own_item(target, segment)
            if target is NOT_FOUND or not isinstance(target, (MutableMapping, list)):
                raise MutationTargetMissingError(
                    f"Cannot write '{path}': '{segment}' does not resolve to an object",
                    path=path,
                    segment=segment,
                    rule_name=rule_name
                )

        last = segments[-1]
        if isinstance(target, MutableMapping):
            target[last] = copy.deepcopy(value)
            continue

        index = as_index(last) if isinstance(target, list) else None
        if index is None or index >= len(target):
            raise MutationTargetMissingError(
                f"Cannot write '{path}': no element '{last}' to assign",
                path=path,
                segment=last,
                rule_name=rule_name
            )
        target[index] = copy.deepcopy(value)
