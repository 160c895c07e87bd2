"""Rule set compiler.

Loads rule sets from JSON, compiles them into typed models, and computes
rule set hashes. Compilation happens once per engine; the source mapping
is never modified.
"""

import copy
import hashlib
import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from .equality import value_kind
from .errors import InvalidArgumentError, RuleSetIntegrityError, UnsupportedConditionError
from .paths import parse_key
from .types import (
    ConditionGroup, Equals, FieldCheck, FieldCondition, LogicOperator,
    OperatorSpec, Rule, RuleSet
)

_LOGIC_KEYS = {op.value for op in LogicOperator}
_CONDITION_KEYS = ("IF", "condition")


def load_rule_set(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a rule set mapping from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidArgumentError: If the file doesn't hold a JSON object
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Rule set not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Rule set file must hold a JSON object: {path}")

    return data


def _json_default(value: Any) -> Any:
    if isinstance(value, re.Pattern):
        return value.pattern
    return repr(value)


def compute_rule_set_hash(rules: Mapping) -> str:
    """Compute SHA256 hash of the rule set's JSON form.

    Key order is kept: rules run in insertion order, so reordering
    a rule set changes its hash.
    """
    canonical = json.dumps(dict(rules), separators=(",", ":"), default=_json_default)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def verify_rule_set_hash(rules: Mapping, expected_hash: str) -> str:
    """Return the hash of `rules`, raising if it differs from `expected_hash`."""
    actual = compute_rule_set_hash(rules)
    if actual != expected_hash:
        raise RuleSetIntegrityError(
            f"Rule set hash mismatch: expected {expected_hash}, got {actual}",
            expected_hash=expected_hash,
            actual_hash=actual
        )
    return actual


def compile_field(key: str, value: Any) -> FieldCheck:
    """Compile one `path key -> condition` entry."""
    check: FieldCondition
    if value_kind(value) != "object":
        check = Equals(value=value)
    elif isinstance(value, Mapping):
        check = OperatorSpec.model_validate(dict(value))
    else:
        # Lists and other objects carry no operator keys
        check = OperatorSpec()

    return FieldCheck(key=key, path=parse_key(key), check=check)


def compile_condition(raw: Any, rule_name: str = "") -> ConditionGroup:
    """Compile an IF expression.

    {"AND": {...}} and {"OR": {...}} select the logic; any other mapping
    is a flat field map combined under AND.

    Raises:
        UnsupportedConditionError: If logic keys are combined with each
            other or with field keys
        InvalidArgumentError: If the expression or a logic body isn't a mapping
    """
    if raw is None:
        return ConditionGroup()

    if not isinstance(raw, Mapping):
        raise InvalidArgumentError(
            f"Rule '{rule_name}': condition must be a mapping",
            rule_name=rule_name
        )

    logic_keys = [key for key in raw if key in _LOGIC_KEYS]
    if logic_keys and len(raw) > 1:
        raise UnsupportedConditionError(
            f"Rule '{rule_name}': {', '.join(logic_keys)} cannot be combined with other condition keys",
            keys=list(raw),
            rule_name=rule_name
        )

    if logic_keys:
        logic = LogicOperator(logic_keys[0])
        fields = raw[logic_keys[0]]
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(
                f"Rule '{rule_name}': {logic.value} must map field paths to conditions",
                rule_name=rule_name
            )
    else:
        logic = LogicOperator.AND
        fields = raw

    try:
        checks = [compile_field(key, value) for key, value in fields.items()]
    except ValidationError as e:
        raise InvalidArgumentError(
            f"Rule '{rule_name}': invalid field condition",
            validation_errors=_error_messages(e),
            rule_name=rule_name
        ) from e

    return ConditionGroup(logic=logic, checks=checks)


def compile_rule(name: str, body: Any) -> Rule:
    """Compile one named rule body."""
    if not isinstance(body, Mapping):
        raise InvalidArgumentError(f"Rule '{name}': body must be a mapping", rule_name=name)

    raw_condition = None
    for key in _CONDITION_KEYS:
        if key in body:
            raw_condition = body[key]
            break

    condition = compile_condition(raw_condition, name)
    data = {k: copy.deepcopy(v) for k, v in body.items() if k not in _CONDITION_KEYS}

    try:
        return Rule.model_validate({**data, "name": name, "condition": condition})
    except ValidationError as e:
        raise InvalidArgumentError(
            f"Rule '{name}': invalid rule body",
            validation_errors=_error_messages(e),
            rule_name=name
        ) from e


def compile_rule_set(rules: Any) -> RuleSet:
    """Compile a mapping of rule name -> rule body, keeping its order.

    Raises:
        InvalidArgumentError: If `rules` is None or not a mapping, or a
            rule can't be compiled
        UnsupportedConditionError: If a condition mixes logic keys
    """
    if rules is None:
        raise InvalidArgumentError("Rules can't be None")

    if not isinstance(rules, Mapping):
        raise InvalidArgumentError(
            f"Rules must be a mapping of rule name to rule, got {type(rules).__name__}"
        )

    compiled = [compile_rule(str(name), body) for name, body in rules.items()]
    return RuleSet(rules=compiled, rule_set_hash=compute_rule_set_hash(rules))


def _error_messages(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(loc) for loc in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]
