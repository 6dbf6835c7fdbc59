"""
Requirement tree engine.

This package contains the basket classes that make up a requirement tree,
the factories used to build one and the evaluation entry points.
"""

from .baskets import (
    BASKET_TYPES,
    ComparisonOp,
    Basket,
    ModuleBasket,
    MultiModuleBasket,
    ArrayBasket,
    FulfillmentResultBasket,
    StatefulBasket,
)
from .evaluation import (
    evaluate,
    reset_subtree_state,
    iter_baskets,
    snapshot,
    requirement_specifiers,
    provenance,
)
from . import factory

__all__ = [
    # Baskets
    "BASKET_TYPES",
    "ComparisonOp",
    "Basket",
    "ModuleBasket",
    "MultiModuleBasket",
    "ArrayBasket",
    "FulfillmentResultBasket",
    "StatefulBasket",
    # Evaluation
    "evaluate",
    "reset_subtree_state",
    "iter_baskets",
    "snapshot",
    "requirement_specifiers",
    "provenance",
    # Factories
    "factory",
]
