"""
rules_engine/errors.py

Standardized errors raised by the rules engine.
All errors include structured data for logging and debugging.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import traceback


@dataclass
class RulesEngineError(Exception):
    """Base class for rules engine errors."""
    message: str
    error_code: str
    rule_name: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "rule_name": self.rule_name,
            "context": self.context
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class InvalidArgumentError(RulesEngineError):
    """Rule set, rule body or options could not be used."""
    validation_errors: List[str] = field(default_factory=list)

    def __init__(self, message: str, validation_errors: Optional[List[str]] = None, **kwargs):
        super().__init__(
            message=message,
            error_code="INVALID_ARGUMENT",
            **kwargs
        )
        self.validation_errors = validation_errors or []

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base["validation_errors"] = self.validation_errors
        return base


@dataclass
class UnsupportedConditionError(RulesEngineError):
    """Condition mixes logical operators in a way that has no defined meaning."""
    keys: List[str] = field(default_factory=list)

    def __init__(self, message: str, keys: Optional[List[str]] = None, **kwargs):
        super().__init__(
            message=message,
            error_code="UNSUPPORTED_CONDITION",
            **kwargs
        )
        self.keys = keys or []


@dataclass
class MutationTargetMissingError(RulesEngineError):
    """Action path does not lead to a container that can take the assignment."""
    path: str = ""
    segment: str = ""

    def __init__(self, message: str, path: str = "", segment: str = "", **kwargs):
        super().__init__(
            message=message,
            error_code="MUTATION_TARGET_MISSING",
            **kwargs
        )
        self.path = path
        self.segment = segment

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "path": self.path,
            "segment": self.segment
        })
        return base


@dataclass
class RuleSetIntegrityError(RulesEngineError):
    """Rule set hash does not match the expected value."""
    expected_hash: str = ""
    actual_hash: str = ""

    def __init__(self, message: str, expected_hash: str = "", actual_hash: str = "", **kwargs):
        super().__init__(
            message=message,
            error_code="RULE_SET_HASH_MISMATCH",
            **kwargs
        )
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash


class ErrorConverter:
    """Convert standard exceptions to RulesEngineError."""

    @staticmethod
    def from_exception(
        exc: Exception,
        rule_name: Optional[str] = None
    ) -> RulesEngineError:
        """Wrap any exception as RulesEngineError."""
        if isinstance(exc, RulesEngineError):
            return exc

        return RulesEngineError(
            message=str(exc),
            error_code="UNEXPECTED_ERROR",
            rule_name=rule_name,
            context={
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc()
            }
        )
