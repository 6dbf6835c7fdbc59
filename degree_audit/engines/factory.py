"""
Basket factories.

Small constructors used by requirement loaders (and tests) to build a
basket tree bottom-up. Unlike the basket classes themselves, these refuse
to build baskets that could never mean anything, such as a multi-module
basket with no filter at all.
"""

from typing import Iterable, Optional

from ..config import DEFAULT_CREDITS, DEFAULT_EARLY_TERMINATE
from ..exceptions import BasketConstructionError
from ..models import BasketState, CourseRecord
from .baskets import (
    ArrayBasket,
    Basket,
    FulfillmentResultBasket,
    ModuleBasket,
    MultiModuleBasket,
    StatefulBasket,
)


def module(code: str, credits: float = DEFAULT_CREDITS, name: str = "", title: str = "") -> ModuleBasket:
    """Require one course by code."""
    if not code:
        raise BasketConstructionError("A module requirement needs a course code")
    return ModuleBasket(CourseRecord(code, credits, name), title=title)


def modules(pattern=None, prefixes: Optional[Iterable[str]] = None,
            suffixes: Optional[Iterable[str]] = None, levels: Optional[Iterable[int]] = None,
            required_credits: Optional[float] = None,
            early_terminate: bool = DEFAULT_EARLY_TERMINATE, title: str = "") -> MultiModuleBasket:
    """Require courses by code pattern, prefix, suffix or level."""
    basket = MultiModuleBasket(
        pattern=pattern,
        prefixes=prefixes,
        suffixes=suffixes,
        levels=levels,
        required_credits=required_credits,
        early_terminate=early_terminate,
        title=title,
    )
    if not basket.has_constraints():
        raise BasketConstructionError(
            "A multi-module requirement needs at least one of pattern, prefixes, suffixes or levels"
        )
    return basket


def all_of(title: str, baskets: Iterable[Basket]) -> ArrayBasket:
    return ArrayBasket.all_of(title, baskets)


def any_of(title: str, baskets: Iterable[Basket]) -> ArrayBasket:
    return ArrayBasket.any_of(title, baskets)


def at_least(title: str, n: int, baskets: Iterable[Basket], strict: bool = False) -> ArrayBasket:
    return ArrayBasket.at_least(title, n, baskets, strict=strict)


def at_least_credits(title: str, credits: float, basket: Basket) -> FulfillmentResultBasket:
    return FulfillmentResultBasket.at_least_credits(title, credits, basket)


def at_least_modules(title: str, count: int, basket: Basket) -> FulfillmentResultBasket:
    return FulfillmentResultBasket.at_least_modules(title, count, basket)


def scoped(basket: Basket, state: Optional[BasketState] = None, title: str = "") -> StatefulBasket:
    """Wrap ``basket`` so it shares claimed courses with other wrappers of ``state``."""
    return StatefulBasket(basket, state if state is not None else BasketState(), title=title)
