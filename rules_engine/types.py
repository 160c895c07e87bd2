"""Rules engine type definitions (Pydantic models).

Defines the compiled form of a rule set: field checks, condition groups,
rules, engine options and report entries. Rule sets are compiled once
and never modified by evaluation.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LogicOperator(str, Enum):
    """Logical combinators for a condition group."""
    AND = "AND"
    OR = "OR"


class Equals(BaseModel):
    """Field condition: dataset value equals a primitive."""
    model_config = ConfigDict(frozen=True)

    value: Any = Field(..., description="Primitive compared against the dataset value")


class OperatorSpec(BaseModel):
    """Field condition: one or more operators, AND-combined.

    Unset or falsy arguments (None, 0, "", False) mean "operator absent".
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    between: Any = None
    contains: Any = None
    includes: Any = None
    in_: Any = Field(default=None, alias="in")
    greater_than: Any = Field(default=None, alias="greaterThan")
    less_than: Any = Field(default=None, alias="lessThan")
    matches: Any = None
    not_: Any = Field(default=None, alias="not")

    @field_validator("matches")
    @classmethod
    def compile_pattern(cls, v: Any) -> Any:
        if isinstance(v, str) and v:
            try:
                return re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern {v!r}: {e}") from e
        return v


FieldCondition = Union[Equals, OperatorSpec]


class FieldCheck(BaseModel):
    """One entry of a condition: where to look and what to check."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str = Field(..., description="Key as written in the rule")
    path: Any = Field(..., description="Dot path or segment list decoded from the key")
    check: FieldCondition


class ConditionGroup(BaseModel):
    """Field checks combined under a single logical operator."""
    model_config = ConfigDict(frozen=True)

    logic: LogicOperator = LogicOperator.AND
    checks: List[FieldCheck] = Field(default_factory=list)


class Rule(BaseModel):
    """Named condition with actions for the true and false outcomes."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    name: str
    condition: ConditionGroup = Field(default_factory=ConditionGroup)
    on_true: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("on_true", "THEN", "onTrue"),
    )
    on_false: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("on_false", "OTHERWISE", "onFalse"),
    )
    # Carried for callers; evaluation order is insertion order only
    weight: Any = Field(
        default=None,
        validation_alias=AliasChoices("weight", "WEIGHT"),
    )

    @field_validator("on_true", "on_false", mode="before")
    @classmethod
    def empty_when_null(cls, v: Any) -> Any:
        return {} if v is None else v


class RuleSet(BaseModel):
    """Compiled rule set in evaluation order."""
    model_config = ConfigDict(frozen=True)

    rules: List[Rule] = Field(default_factory=list)
    rule_set_hash: str = Field(default="", description="SHA256 of the source rule set")

    @property
    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]


class EngineOptions(BaseModel):
    """Options fixed for the lifetime of an engine."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    case_sensitive: bool = Field(default=False, alias="caseSensitive")
    modify_dataset: bool = Field(default=False, alias="modifyDataset")

    @field_validator("case_sensitive", "modify_dataset", mode="before")
    @classmethod
    def false_when_null(cls, v: Any) -> Any:
        return False if v is None else v


class RuleResult(BaseModel):
    """Outcome of one rule in a report."""
    rule_name: str
    matched: bool
    actions: Dict[str, Any] = Field(default_factory=dict)
    explanation_text: str = ""
