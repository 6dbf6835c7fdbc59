"""
Requirement Tree Evaluation.

Entry points the application layer uses to run a basket tree against a
plan and to explain the outcome afterwards.
"""

import logging
from typing import Iterable, Iterator

from ..config import DEFAULT_MEANINGFUL_DEPTH
from ..models import BasketSnapshot, CourseRecord, FulfillmentResult, PlanView
from .baskets import Basket, ModuleBasket, MultiModuleBasket

logger = logging.getLogger(__name__)


def evaluate(root: Basket, view: PlanView) -> FulfillmentResult:
    """
    Evaluate a requirement tree against a plan view.

    Evaluation is depth-first and strictly left to right; a child finishes
    completely, events included, before its next sibling starts. Shared
    BasketStates rely on that order, so the first group evaluated keeps a
    contested course.

    Returns a copy of the root's accumulated state. Calling this again
    without ``reset_subtree_state`` merges into the previous outcome.
    """
    logger.info(f"Evaluating {root!r} against {len(view)} courses")
    result = root.evaluate_with_state(view).copy()
    logger.info(
        f"{root!r}: satisfied={result.satisfied}, {result.matched_credits:g} credits "
        f"from {len(result.matched_modules)} courses"
    )
    return result


def reset_subtree_state(root: Basket) -> None:
    """
    Forget accumulated results for ``root`` and every basket below it.

    Shared BasketStates are deliberately left alone: they record which group
    committed to which course. Clear them explicitly with BasketState.clear()
    or BasketStateStore.clear() to start from scratch.
    """
    root.reset_subtree_state()


def iter_baskets(root: Basket) -> Iterator[Basket]:
    """Yield every basket of the tree in pre-order."""
    yield root
    for child in root.children():
        yield from iter_baskets(child)


def snapshot(root: Basket, meaningful_depth: int = DEFAULT_MEANINGFUL_DEPTH) -> BasketSnapshot:
    """
    Take a printable copy of the tree's accumulated state.

    DEPTH BUDGET:
    -------------
    Only titled baskets use up depth. A titled child is expanded with one
    unit less than its parent had; an untitled child (a single module, an
    anonymous "any of") keeps its parent's budget. Children are listed
    only while the budget is above zero.
    """
    state = root.criterion_state
    node = BasketSnapshot(
        name=root.title,
        kind=root.kind,
        label=root.describe(),
        satisfied=state.satisfied,
        matched_credits=state.matched_credits,
        matched_module_codes=state.matched_codes,
    )
    if meaningful_depth > 0:
        for child in root.children():
            child_depth = meaningful_depth - 1 if child.has_meaningful_name() else meaningful_depth
            node.children.append(snapshot(child, child_depth))
    return node


def requirement_specifiers(root: Basket) -> list:
    """
    Flatten a tree into the baskets that name courses.

    Returns the ModuleBaskets and MultiModuleBaskets in tree order, which is
    what a planner shows as "courses that could fill this requirement".
    """
    if isinstance(root, (ModuleBasket, MultiModuleBasket)):
        return [root]
    return [specifier for child in root.children() for specifier in requirement_specifiers(child)]


def provenance(courses: Iterable[CourseRecord]) -> dict:
    """
    Map each course code to the baskets that claimed it, in claim order.

    Baskets are named by title, or by their description when untitled.
    Courses nobody claimed map to an empty list.
    """
    return {
        course.code: [basket.title or basket.describe() for basket in course.matched_baskets]
        for course in courses
    }
