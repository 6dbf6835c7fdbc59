"""
Requirement Baskets.

This module holds the requirement tree itself. Every node of a degree
requirement is a "basket": something a set of courses either fills or
does not. Baskets are evaluated against a PlanView and report a
FulfillmentResult.
"""

import logging
import re
from enum import Enum
from typing import Callable, Iterable, Optional

from ..config import DEFAULT_EARLY_TERMINATE
from ..exceptions import BasketConstructionError
from ..models import (
    BasketEvent,
    BasketState,
    CourseMatchedEvent,
    CourseRecord,
    DoubleCountEvent,
    FulfillmentResult,
    PlanView,
    PropertySetFilter,
)

logger = logging.getLogger(__name__)


class ComparisonOp(Enum):
    """How an ArrayBasket compares its satisfied-child count to ``n``."""
    GEQ = ">="
    GT = ">"


class Basket:
    """
    Base class for every requirement node.

    TREE SHAPE:
    -----------
    Parents own their children. Each child keeps a non-owning ``parent``
    back-reference that the parent sets exactly once in its constructor,
    so a basket can sit under only one parent. The back-reference exists
    for one reason: broadcasting events to every ancestor.

    ACCUMULATED STATE:
    ------------------
    ``criterion_state`` is the running merge of every evaluation of this
    basket since the last reset (see FulfillmentResult.merge). Parents
    read their children's accumulated state, not the raw result of the
    latest call, which is what makes partial progress visible.

    EVENTS:
    -------
    When a basket matches a course it sends an event upwards. Every
    ancestor sees it, in order, and nothing can stop it. The default
    handler records the basket in the course's provenance log.
    """

    kind = "basket"

    def __init__(self, title: str = ""):
        self.title = title or ""
        self.criterion_state = FulfillmentResult()
        self._parent = None

    @property
    def parent(self) -> Optional["Basket"]:
        return self._parent

    def _adopt(self, child: "Basket") -> None:
        self._adopt_all([child])

    def _adopt_all(self, children: list) -> None:
        # Every child is checked before any is claimed, so a failed
        # constructor leaves the children free for another parent.
        seen = set()
        for child in children:
            if not isinstance(child, Basket):
                raise BasketConstructionError(f"Expected a basket, got {child!r}")
            if child._parent is not None:
                raise BasketConstructionError(
                    f"{child!r} already belongs to {child._parent!r}; build a separate basket instead"
                )
            if id(child) in seen:
                raise BasketConstructionError(f"{child!r} is listed twice; build a separate basket instead")
            seen.add(id(child))
        for child in children:
            child._parent = self

    def is_top_level(self) -> bool:
        return self._parent is None

    def children(self) -> list:
        return []

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        """Evaluate this basket against ``view`` without touching accumulated state."""
        raise NotImplementedError

    def evaluate_with_state(self, view: PlanView) -> FulfillmentResult:
        """Evaluate, fold the result into accumulated state and return that state."""
        result = self.evaluate(view)
        self.criterion_state.merge(result)
        logger.debug(
            f"{self!r}: satisfied={result.satisfied} credits={result.matched_credits} "
            f"modules={result.matched_codes}"
        )
        return self.criterion_state

    def reset_subtree_state(self) -> None:
        self.criterion_state = FulfillmentResult()
        for child in self.children():
            child.reset_subtree_state()

    def send_event_upwards(self, event: BasketEvent) -> None:
        current = self
        while current is not None:
            current.accept_event(event)
            current = current._parent

    def accept_event(self, event: BasketEvent) -> None:
        event.course.record_match(self)
        if isinstance(event, DoubleCountEvent):
            self.criterion_state.matched_modules.add(event.course)

    def has_meaningful_name(self) -> bool:
        return len(self.title) > 0

    def describe(self) -> str:
        """Short human-readable description, used when there is no title."""
        return self.kind

    def __repr__(self):
        return f"{type(self).__name__}({self.title or self.describe()!r})"


class ModuleBasket(Basket):
    """
    A single required course (e.g., "Take CS2103T").

    The basket holds its own CourseRecord for the target code. Matching is
    by code, and the result reports the student's record from the view,
    so credits come from the plan.
    """

    kind = "module"

    def __init__(self, course: CourseRecord, title: str = ""):
        if not isinstance(course, CourseRecord):
            raise BasketConstructionError(f"A module basket needs a course record, got {course!r}")
        super().__init__(title)
        self.course = course

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        found = view.find(self.course.code)
        if found is None:
            return FulfillmentResult()

        self.send_event_upwards(CourseMatchedEvent(found))
        return FulfillmentResult(True, found.credits, {found})

    def double_count(self, view: Optional[PlanView] = None) -> None:
        """
        Mark this requirement satisfied by a course already counted elsewhere.

        Used when a course is explicitly allowed to satisfy two otherwise
        exclusive requirements (e.g., a cross-listed module). The course
        does not have to be visible in any view.

        With a ``view``, the event carries the student's record for the code
        from the whole plan, so ``provenance(plan.courses())`` shows the
        match. Without one, or when the plan lacks the code, the event
        carries this basket's own record.
        """
        course = self.course
        if view is not None:
            found = view.with_original_plan().find(self.course.code)
            if found is not None:
                course = found
        self.criterion_state.satisfied = True
        self.send_event_upwards(DoubleCountEvent(course))

    def describe(self) -> str:
        return self.course.code


class MultiModuleBasket(Basket):
    """
    A bulk or category requirement (e.g., "20 credits of level-3 CS modules").

    FILTERS (all optional, AND-combined):
    ------------------------------------
    pattern:  regular expression searched in the course code
    prefixes: allowed code prefixes ("CS", "MA")
    suffixes: allowed code suffixes ("", "T")
    levels:   allowed levels (3 for 3xxx modules)

    CREDIT SELECTION:
    -----------------
    With ``required_credits`` and ``early_terminate`` the basket spends the
    cheapest matching courses first and stops as soon as the requirement is
    met, leaving costlier courses for other requirements. This is a local
    greedy choice: two sibling baskets drawing from the same pool can still
    starve each other depending on evaluation order.
    """

    kind = "modules"

    def __init__(self, pattern=None, prefixes: Optional[Iterable[str]] = None,
                 suffixes: Optional[Iterable[str]] = None, levels: Optional[Iterable[int]] = None,
                 required_credits: Optional[float] = None,
                 early_terminate: bool = DEFAULT_EARLY_TERMINATE, title: str = ""):
        super().__init__(title)
        if required_credits is not None and required_credits < 0:
            raise BasketConstructionError(f"Required credits cannot be negative, got {required_credits}")

        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.prefixes = set(prefixes) if prefixes is not None else None
        self.suffixes = set(suffixes) if suffixes is not None else None
        self.levels = set(levels) if levels is not None else None
        self.required_credits = required_credits
        self.early_terminate = early_terminate

    def has_constraints(self) -> bool:
        return any(
            constraint is not None
            for constraint in (self.pattern, self.prefixes, self.suffixes, self.levels)
        )

    def accepts(self, course: CourseRecord) -> bool:
        if self.pattern is not None and not self.pattern.search(course.code):
            return False
        if self.prefixes is not None and course.prefix not in self.prefixes:
            return False
        if self.suffixes is not None and course.suffix not in self.suffixes:
            return False
        if self.levels is not None and course.level not in self.levels:
            return False
        return True

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        selected = [course for course in view.courses() if self.accepts(course)]

        if self.early_terminate and self.required_credits is not None:
            selected = self._cheapest_covering(selected, self.required_credits)

        for course in selected:
            self.send_event_upwards(CourseMatchedEvent(course))

        total = sum(course.credits for course in selected)
        if self.required_credits is None:
            satisfied = True
        else:
            satisfied = total >= self.required_credits

        return FulfillmentResult(satisfied, total, set(selected))

    @staticmethod
    def _cheapest_covering(courses: list, required: float) -> list:
        chosen = []
        running = 0
        for course in sorted(courses, key=lambda c: c.credits):
            if running >= required:
                break
            chosen.append(course)
            running += course.credits
        return chosen

    def effective_pattern(self) -> str:
        """A regular expression describing the course codes this basket accepts."""
        if self.pattern is not None:
            return self.pattern.pattern

        prefix = _alternation(self.prefixes) if self.prefixes is not None else "[A-Z]+"
        if self.levels is not None:
            level = "[" + "".join(str(level) for level in sorted(self.levels)) + "]"
        else:
            level = r"\d"
        suffix = _alternation(self.suffixes) if self.suffixes is not None else "[A-Z]*"
        return f"^{prefix}{level}\\d+{suffix}$"

    def describe(self) -> str:
        if self.required_credits is None:
            return self.effective_pattern()
        return f"{self.effective_pattern()} ({self.required_credits:g} credits)"


def _alternation(values) -> str:
    if not values:
        return "(?!)"
    escaped = sorted(re.escape(value) for value in values)
    if len(escaped) == 1:
        return escaped[0]
    return "(" + "|".join(escaped) + ")"


class ArrayBasket(Basket):
    """
    Combines child baskets with AND / OR / at-least-N logic.

    REQUIREMENT LOGIC TYPES:
    -----------------------
    ALL_OF:     every child must be satisfied
                Example: "Complete MA2101 AND MA2104 AND MA2213"

    ANY_OF:     at least one child must be satisfied
                Example: "Take CS1101S OR CS1010X"

    AT_LEAST_N: at least N children must be satisfied
                Example: "Choose 2 from List III"

    With ``early_terminate`` the basket stops evaluating children once
    enough are satisfied; later children then emit no events and keep
    their previous state. Credits and modules are collected from every
    child that was evaluated, satisfied or not.
    """

    kind = "array"

    def __init__(self, title: str, baskets: Iterable[Basket], op: ComparisonOp = ComparisonOp.GEQ,
                 n: int = 1, early_terminate: bool = True):
        super().__init__(title)
        if n < 0:
            raise BasketConstructionError(f"Threshold cannot be negative, got {n}")

        self.baskets = list(baskets)
        self._adopt_all(self.baskets)
        self.op = op
        self.n = n
        self.early_terminate = early_terminate

    @classmethod
    def all_of(cls, title: str, baskets: Iterable[Basket]) -> "ArrayBasket":
        baskets = list(baskets)
        return cls(title, baskets, ComparisonOp.GEQ, len(baskets), False)

    @classmethod
    def any_of(cls, title: str, baskets: Iterable[Basket]) -> "ArrayBasket":
        return cls(title, baskets, ComparisonOp.GEQ, 1, True)

    @classmethod
    def at_least(cls, title: str, n: int, baskets: Iterable[Basket], strict: bool = False) -> "ArrayBasket":
        op = ComparisonOp.GT if strict else ComparisonOp.GEQ
        return cls(title, baskets, op, n, True)

    @property
    def threshold(self) -> int:
        """Number of satisfied children needed, after applying the comparison."""
        if self.op is ComparisonOp.GT:
            return self.n + 1
        return self.n

    def children(self) -> list:
        return self.baskets

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        threshold = self.threshold
        satisfied_count = 0
        evaluated = []

        for basket in self.baskets:
            evaluated.append(basket)
            if not basket.evaluate_with_state(view).satisfied:
                continue
            satisfied_count += 1
            if self.early_terminate and satisfied_count >= threshold:
                break

        total = 0
        modules = set()
        for basket in evaluated:
            total += basket.criterion_state.matched_credits
            modules |= basket.criterion_state.matched_modules

        return FulfillmentResult(satisfied_count >= threshold, total, modules)

    def describe(self) -> str:
        if self.op is ComparisonOp.GEQ and self.n == len(self.baskets) and not self.early_terminate:
            return "all of"
        if self.op is ComparisonOp.GEQ and self.n == 1:
            return "any of"
        if self.op is ComparisonOp.GT:
            return f"more than {self.n} of"
        return f"at least {self.n} of"


class FulfillmentResultBasket(Basket):
    """
    Gates a child basket behind a predicate on its result.

    Example: "At least 24 credits from the electives below". The child is
    evaluated normally; if it is unsatisfied or the predicate fails the
    gate is unsatisfied, but the child's credits and modules still show.
    """

    kind = "gate"

    def __init__(self, title: str, basket: Basket,
                 predicate: Callable[[FulfillmentResult], bool], description: str = "gate"):
        super().__init__(title)
        self.basket = basket
        self._adopt(basket)
        self.predicate = predicate
        self.description = description

    @classmethod
    def at_least_credits(cls, title: str, credits: float, basket: Basket) -> "FulfillmentResultBasket":
        return cls(
            title, basket,
            lambda result: result.matched_credits >= credits,
            f"at least {credits:g} credits",
        )

    @classmethod
    def at_least_modules(cls, title: str, count: int, basket: Basket) -> "FulfillmentResultBasket":
        return cls(
            title, basket,
            lambda result: len(result.matched_modules) >= count,
            f"at least {count} modules",
        )

    def children(self) -> list:
        return [self.basket]

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        result = self.basket.evaluate_with_state(view)
        if not result.satisfied or not self.predicate(result):
            return FulfillmentResult(False, result.matched_credits, set(result.matched_modules))
        return result.copy()

    def describe(self) -> str:
        return self.description


class StatefulBasket(Basket):
    """
    Stops a course from counting toward more than one group.

    DOUBLE-COUNT PREVENTION:
    ------------------------
    Wrap each group in its own StatefulBasket and give them all the same
    BasketState. Whenever a course is matched anywhere below a wrapper, the
    wrapper claims its code in the shared state. Every wrapper hides
    claimed courses from its child, so the first group evaluated keeps the
    course and later groups never see it.

    Example: "List II, List III or List IV, but one module cannot serve two
    lists" becomes three StatefulBaskets sharing one BasketState.
    """

    kind = "scope"

    def __init__(self, basket: Basket, state: Optional[BasketState] = None, title: str = ""):
        super().__init__(title)
        self.basket = basket
        self._adopt(basket)
        self.shared_state = state if state is not None else BasketState()

    def children(self) -> list:
        return [self.basket]

    def evaluate(self, view: PlanView) -> FulfillmentResult:
        unclaimed = view.filtered_by(
            PropertySetFilter("code", self.shared_state.claimed_codes, negate=True)
        )
        return self.basket.evaluate_with_state(unclaimed).copy()

    def accept_event(self, event: BasketEvent) -> None:
        super().accept_event(event)
        if isinstance(event, CourseMatchedEvent):
            self.shared_state.claim(event.course.code)
            logger.debug(f"{self!r} claimed {event.course.code} in {self.shared_state!r}")

    def describe(self) -> str:
        if self.shared_state.key:
            return f"exclusive ({self.shared_state.key})"
        return "exclusive"


# The closed set of basket variants. Code that dispatches on basket type
# (snapshots, flattening, display) handles exactly these.
BASKET_TYPES = (
    ModuleBasket,
    MultiModuleBasket,
    ArrayBasket,
    FulfillmentResultBasket,
    StatefulBasket,
)
