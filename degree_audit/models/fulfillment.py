"""
Fulfillment data models.

Contains the FulfillmentResult returned by every basket evaluation, the
events baskets broadcast to their ancestors, and the shared BasketState
used to stop one course from counting toward several exclusive groups.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .course import CourseRecord


@dataclass
class FulfillmentResult:
    """
    Outcome of evaluating one basket.

    For single-course and multi-course baskets ``matched_credits`` is the
    sum of the credits of ``matched_modules``. Combinators and gates report
    the progress of their children even when they are not satisfied, so
    ``matched_credits`` and ``matched_modules`` do not imply ``satisfied``.
    """
    satisfied: bool = False
    matched_credits: float = 0
    matched_modules: set = field(default_factory=set)

    def merge(self, result: "FulfillmentResult") -> None:
        """
        Fold a newer evaluation into this accumulated result.

        satisfied is sticky (OR), modules accumulate (union) and credits
        are replaced by the newer figure.
        """
        self.satisfied = self.satisfied or result.satisfied
        self.matched_credits = result.matched_credits
        self.matched_modules |= result.matched_modules

    def copy(self) -> "FulfillmentResult":
        return FulfillmentResult(self.satisfied, self.matched_credits, set(self.matched_modules))

    @property
    def matched_codes(self) -> list:
        return sorted(course.code for course in self.matched_modules)


# =============================================================================
# EVENTS
# =============================================================================

@dataclass(frozen=True)
class BasketEvent:
    """Something that happened to a course inside a basket subtree."""
    course: CourseRecord


@dataclass(frozen=True)
class CourseMatchedEvent(BasketEvent):
    """A basket matched the course against the plan."""


@dataclass(frozen=True)
class DoubleCountEvent(BasketEvent):
    """A basket was explicitly allowed to reuse a course counted elsewhere."""


# =============================================================================
# SHARED STATE
# =============================================================================

class BasketState:
    """
    The set of course codes already claimed by a group of baskets.

    Several StatefulBaskets may share one BasketState; once any of them
    matches a course, every other one stops seeing it. The set can be
    seeded with codes that should never be available to the group.
    """

    def __init__(self, claimed_codes: Iterable[str] = (), key: Optional[str] = None):
        self.key = key
        self.claimed_codes = set(claimed_codes)

    def claim(self, code: str) -> None:
        self.claimed_codes.add(code)

    def is_claimed(self, code: str) -> bool:
        return code in self.claimed_codes

    def clear(self) -> None:
        self.claimed_codes.clear()

    def __contains__(self, code):
        return code in self.claimed_codes

    def __len__(self):
        return len(self.claimed_codes)

    def __repr__(self):
        return f"BasketState(key={self.key!r}, claimed={sorted(self.claimed_codes)!r})"


class BasketStateStore:
    """
    Keyed store of BasketStates belonging to one requirement tree.

    Requirement documents refer to shared state by name; the store hands
    out the same BasketState for the same key so the aliasing is explicit
    and can be inspected after an audit.
    """

    def __init__(self):
        self._states = {}

    def get(self, key: str) -> BasketState:
        """Return the state registered under ``key``, creating it on first use."""
        if key not in self._states:
            self._states[key] = BasketState(key=key)
        return self._states[key]

    def keys(self) -> list:
        return sorted(self._states)

    def clear(self) -> None:
        """Release every claimed course in every state of this tree."""
        for state in self._states.values():
            state.clear()

    def __contains__(self, key):
        return key in self._states

    def __len__(self):
        return len(self._states)
