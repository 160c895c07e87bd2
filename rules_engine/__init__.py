"""Rules Engine v1.0 - declarative conditions over nested records.

Rules are data: each names a condition over dataset paths and the actions
to return or write when it holds (or doesn't).
"""

from .paths import NOT_FOUND, find_path, parse_key
from .types import (
    Equals, OperatorSpec, FieldCheck, ConditionGroup, Rule, RuleSet,
    EngineOptions, RuleResult, LogicOperator
)
from .compiler import load_rule_set, compile_rule_set, compute_rule_set_hash, verify_rule_set_hash
from .evaluator import evaluate_condition
from .actions import apply_actions
from .engine import RulesEngine
from .errors import (
    RulesEngineError, InvalidArgumentError, UnsupportedConditionError,
    MutationTargetMissingError, RuleSetIntegrityError
)

__version__ = "1.0.0"

__all__ = [
    "NOT_FOUND",
    "find_path",
    "parse_key",
    "Equals",
    "OperatorSpec",
    "FieldCheck",
    "ConditionGroup",
    "Rule",
    "RuleSet",
    "EngineOptions",
    "RuleResult",
    "LogicOperator",
    "load_rule_set",
    "compile_rule_set",
    "compute_rule_set_hash",
    "verify_rule_set_hash",
    "evaluate_condition",
    "apply_actions",
    "RulesEngine",
    "RulesEngineError",
    "InvalidArgumentError",
    "UnsupportedConditionError",
    "MutationTargetMissingError",
    "RuleSetIntegrityError",
]
