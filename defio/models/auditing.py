"""
Defines the records produced when auditing a DEF event stream.

Provides violation types, violation records, and the result container
filled by the protocol auditor.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

__all__ = ["ViolationType", "ProtocolViolation", "AuditResult", "ProtocolError"]


class ViolationType(Enum):
    """
    Enumeration of producer contract violations.

    DUPLICATE_RESIZE: A collection was resized more than once.
    RESIZE_AFTER_ADD: A resize arrived after adds into the same collection.
    COUNT_MISMATCH: The number of adds differs from the announced size.
    CALL_AFTER_END: A callback arrived after end_of_design.
    METADATA_AFTER_STRUCTURE: Units were set after coordinates were added.
    RECORD_INVARIANT: A record carries parallel arrays of unequal length.
    """

    DUPLICATE_RESIZE = auto()
    RESIZE_AFTER_ADD = auto()
    COUNT_MISMATCH = auto()
    CALL_AFTER_END = auto()
    METADATA_AFTER_STRUCTURE = auto()
    RECORD_INVARIANT = auto()


@dataclass(slots=True)
class ProtocolViolation:
    """
    Records a single contract violation.

    :param violation_type: Category of the violation.
    :param message: Human-readable description.
    :param callback: Name of the callback that exposed the violation.
    """

    violation_type: ViolationType
    message: str
    callback: str


@dataclass(slots=True)
class AuditResult:
    """
    Collected outcome of an audited event stream.

    :param violations: Violations in detection order.
    :param resizes: Announced size per collection.
    :param adds: Number of adds seen per collection.
    """

    violations: list[ProtocolViolation] = field(default_factory=list)
    resizes: dict[str, int] = field(default_factory=dict)
    adds: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.violations

    def of_type(self, violation_type: ViolationType) -> list[ProtocolViolation]:
        return [v for v in self.violations if v.violation_type is violation_type]


class ProtocolError(ValueError):
    """Raised by a strict auditor on the first contract violation."""

    def __init__(self, violation: ProtocolViolation):
        super().__init__(violation.message)
        self.violation = violation
