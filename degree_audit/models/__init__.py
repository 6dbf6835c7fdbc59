"""
Data models for the degree audit system.

This package contains all dataclasses and value types used throughout the
system. These serve as "contracts" between the engine, the loaders and the
presentation layer.
"""

from .course import CourseRecord
from .plan import (
    Filter,
    PropertyFilter,
    PropertyListFilter,
    PropertySetFilter,
    TermPlan,
    AcademicPlan,
    PlanView,
)
from .fulfillment import (
    FulfillmentResult,
    BasketEvent,
    CourseMatchedEvent,
    DoubleCountEvent,
    BasketState,
    BasketStateStore,
)
from .snapshot import BasketSnapshot

__all__ = [
    # Course models
    "CourseRecord",
    # Plans and filters
    "Filter",
    "PropertyFilter",
    "PropertyListFilter",
    "PropertySetFilter",
    "TermPlan",
    "AcademicPlan",
    "PlanView",
    # Fulfillment
    "FulfillmentResult",
    "BasketEvent",
    "CourseMatchedEvent",
    "DoubleCountEvent",
    "BasketState",
    "BasketStateStore",
    # Presentation
    "BasketSnapshot",
]
