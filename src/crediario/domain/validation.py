"""
Tiered validation for command handlers.

A tier is an ordered list of Checks. Every check in a tier is evaluated and
each failure is pushed to the notification collector before the tier verdict
is derived from the recorded outcomes, so callers receive all failures of a
tier in one round trip. Handlers stop between tiers, never inside one.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from .notifications import DomainNotificationHandler


@dataclass(frozen=True)
class Check:
    """A named predicate and the message reported when it fails."""

    key: str
    message: str
    predicate: Callable[[], bool]


@dataclass(frozen=True)
class ValidationResult:
    """Recorded outcome of one tier."""

    outcomes: Tuple[Tuple[Check, bool], ...]

    @property
    def is_valid(self) -> bool:
        return all(passed for _, passed in self.outcomes)

    @property
    def failed_keys(self) -> List[str]:
        return [check.key for check, passed in self.outcomes if not passed]

    def __bool__(self) -> bool:
        return self.is_valid


def run_checks(
    notifications: DomainNotificationHandler, checks: Iterable[Check]
) -> ValidationResult:
    """Evaluate every check, report the failures, and return the tier result."""
    outcomes = tuple((check, bool(check.predicate())) for check in checks)

    for check, passed in outcomes:
        if not passed:
            notifications.notify(check.key, check.message)

    return ValidationResult(outcomes=outcomes)
