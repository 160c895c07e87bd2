"""Rules engine orchestrator.

Runs a compiled rule set against a dataset in insertion order.

- Read-only mode (default): evaluates the first rule and returns its
  action map (THEN when the condition holds, OTHERWISE when not).
- Mutate mode (modify_dataset=True): evaluates every rule and writes the
  selected action map into the dataset in place.

The engine keeps only its rule set and options; nothing carries over
between runs, so one instance can serve many datasets.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .actions import apply_actions, select_actions
from .compiler import compile_rule_set
from .errors import InvalidArgumentError
from .evaluator import evaluate_condition, explain_condition
from .structured_log import log_structured
from .types import EngineOptions, Rule, RuleResult, RuleSet


def _coerce_options(options: Union[EngineOptions, Mapping, None]) -> EngineOptions:
    if options is None:
        return EngineOptions()
    if isinstance(options, EngineOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return EngineOptions.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidArgumentError(
                "Invalid engine options",
                validation_errors=[err["msg"] for err in e.errors()]
            ) from e
    raise InvalidArgumentError(f"Options must be a mapping or EngineOptions, got {type(options).__name__}")


class RulesEngine:
    """Evaluates named rules against datasets.

    Args:
        rules: Mapping of rule name -> rule body ({"IF": ..., "THEN": ...,
            "OTHERWISE": ...}), or an already compiled RuleSet
        options: EngineOptions or a mapping with caseSensitive/modifyDataset

    Raises:
        InvalidArgumentError: If rules is None or can't be compiled
    """

    def __init__(
        self,
        rules: Union[Mapping, RuleSet],
        options: Union[EngineOptions, Mapping, None] = None
    ):
        if rules is None:
            raise InvalidArgumentError("Rules can't be None")

        self.rule_set = rules if isinstance(rules, RuleSet) else compile_rule_set(rules)
        self.options = _coerce_options(options)

        for rule in self.rule_set.rules:
            if rule.weight is not None:
                log_structured(
                    "info", "rule_weight_ignored",
                    rule=rule.name, weight=rule.weight
                )

        log_structured(
            "info", "rules_engine_ready",
            rule_count=len(self.rule_set.rules),
            rule_set_hash=self.rule_set.rule_set_hash,
            case_sensitive=self.options.case_sensitive,
            modify_dataset=self.options.modify_dataset
        )

    @property
    def rules(self) -> List[Rule]:
        return self.rule_set.rules

    def _matches(self, rule: Rule, dataset: Dict[str, Any]) -> bool:
        return evaluate_condition(rule.condition, dataset, self.options.case_sensitive)

    def run(self, dataset: Any) -> Optional[Dict[str, Any]]:
        """Evaluate the rule set against `dataset`.

        Returns:
            Read-only mode: the action map chosen by the first rule (None
            when there are no rules). Mutate mode: None; the dataset is
            updated in place.

        Raises:
            MutationTargetMissingError: In mutate mode, if an action path
                can't be written
        """
        if dataset is None or not isinstance(dataset, Mapping):
            log_structured("debug", "dataset_ignored", dataset_type=type(dataset).__name__)
            return None

        mode = "modify" if self.options.modify_dataset else "read_only"

        for rule in self.rule_set.rules:
            matched = self._matches(rule, dataset)
            actions = select_actions(rule, matched)
            log_structured("debug", "rule_evaluated", rule=rule.name, matched=matched, mode=mode)

            if not self.options.modify_dataset:
                return actions

            apply_actions(actions, dataset, rule_name=rule.name)
            log_structured("debug", "actions_applied", rule=rule.name, paths=list(actions))

        return None

    def report(self, dataset: Any) -> List[RuleResult]:
        """Evaluate every rule without touching `dataset`.

        Each entry holds whether the rule matched, the action map it selects
        and a human-readable explanation.
        """
        if dataset is None or not isinstance(dataset, Mapping):
            return []

        results = []
        for rule in self.rule_set.rules:
            matched = self._matches(rule, dataset)
            actions = select_actions(rule, matched)
            results.append(RuleResult(
                rule_name=rule.name,
                matched=matched,
                actions=actions,
                explanation_text=_generate_explanation(rule, matched, actions, dataset)
            ))
        return results


def _generate_explanation(
    rule: Rule,
    matched: bool,
    actions: Dict[str, Any],
    dataset: Mapping
) -> str:
    """Generate human-readable explanation of a rule outcome.

    Includes:
    - Rule name and outcome
    - Conditions with the values they saw
    - Paths the selected actions write
    """
    parts = [f"Rule '{rule.name}' {'matched' if matched else 'did not match'}:"]
    parts.append(f"conditions: {explain_condition(rule.condition, dataset)}")
    if actions:
        parts.append(f"→ actions: {', '.join(actions)}")
    else:
        parts.append("→ no actions")
    return "; ".join(parts)
