"""
Degree Audit Package
====================

Checks a student's academic plan against a declarative tree of degree
requirements and explains which courses went toward which requirement.

ARCHITECTURE OVERVIEW
---------------------

┌─────────────────────────────────────────────────────────────────────────┐
│                         ENGINE LAYER                                     │
│        (Pure logic - returns data structures, NO UI/printing)           │
│                                                                         │
│  ┌───────────────────┐  ┌──────────────┐  ┌──────────────────────────┐  │
│  │ RequirementLoader │  │  PlanParser  │  │  Baskets + evaluate()    │  │
│  │  (JSON -> tree)   │  │  (plan I/O)  │  │  (requirement logic)     │  │
│  └───────────────────┘  └──────────────┘  └──────────────────────────┘  │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   │ Returns FulfillmentResult / BasketSnapshot
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                      PRESENTATION LAYER                                  │
│                        TerminalDisplay                                   │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                        DegreeAuditor                                     │
│          (Orchestrator - connects engine to presentation)               │
└─────────────────────────────────────────────────────────────────────────┘

PACKAGE STRUCTURE
-----------------

degree_audit/
├── __init__.py          # This file - main exports
├── config.py            # Configuration constants
├── exceptions.py        # AuditError hierarchy
├── auditor.py           # DegreeAuditor orchestrator
├── cli.py               # Command-line interface
│
├── models/              # Data classes
│   ├── course.py        # CourseRecord
│   ├── plan.py          # Filters, AcademicPlan, PlanView
│   ├── fulfillment.py   # FulfillmentResult, events, BasketState
│   └── snapshot.py      # BasketSnapshot
│
├── engines/             # Requirement tree
│   ├── baskets.py       # The five basket variants
│   ├── factory.py       # Basket constructors
│   └── evaluation.py    # evaluate, reset, snapshot, provenance
│
├── data/                # Data loading and parsing
│   ├── loader.py        # RequirementLoader
│   └── parser.py        # PlanParser
│
└── ui/                  # User interface implementations
    └── terminal.py      # TerminalDisplay

USAGE
-----

Building a tree by hand:

    from degree_audit import CourseRecord, PlanView, evaluate, factory

    view = PlanView.of([CourseRecord("CS1101S", 4), CourseRecord("MA1521", 4)])
    root = factory.all_of("Foundation", [
        factory.any_of("", [factory.module("CS1101S"), factory.module("CS1010X")]),
        factory.module("MA1521"),
    ])
    evaluate(root, view).satisfied   # True

Running from command line:

    degree-audit requirements.json plan.json
    degree-audit applied_mathematics data/plans/applied_mathematics_student.json

"""

# Version
__version__ = "1.0.0"

# Main exports
from .auditor import DegreeAuditor
from .cli import main

# Model exports
from .models import (
    CourseRecord,
    Filter,
    PropertyFilter,
    PropertyListFilter,
    PropertySetFilter,
    TermPlan,
    AcademicPlan,
    PlanView,
    FulfillmentResult,
    BasketEvent,
    CourseMatchedEvent,
    DoubleCountEvent,
    BasketState,
    BasketStateStore,
    BasketSnapshot,
)

# Engine exports
from .engines import (
    BASKET_TYPES,
    ComparisonOp,
    Basket,
    ModuleBasket,
    MultiModuleBasket,
    ArrayBasket,
    FulfillmentResultBasket,
    StatefulBasket,
    evaluate,
    reset_subtree_state,
    iter_baskets,
    snapshot,
    requirement_specifiers,
    provenance,
    factory,
)

# Data exports
from .data import RequirementLoader, RequirementTree, PlanParser

# UI exports
from .ui import TerminalDisplay

# Error exports
from .exceptions import (
    AuditError,
    InvalidCourseError,
    InvalidCourseCodeError,
    BasketConstructionError,
    RequirementConfigError,
    PlanFormatError,
)

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "DegreeAuditor",
    "main",
    # Models
    "CourseRecord",
    "Filter",
    "PropertyFilter",
    "PropertyListFilter",
    "PropertySetFilter",
    "TermPlan",
    "AcademicPlan",
    "PlanView",
    "FulfillmentResult",
    "BasketEvent",
    "CourseMatchedEvent",
    "DoubleCountEvent",
    "BasketState",
    "BasketStateStore",
    "BasketSnapshot",
    # Engine
    "BASKET_TYPES",
    "ComparisonOp",
    "Basket",
    "ModuleBasket",
    "MultiModuleBasket",
    "ArrayBasket",
    "FulfillmentResultBasket",
    "StatefulBasket",
    "evaluate",
    "reset_subtree_state",
    "iter_baskets",
    "snapshot",
    "requirement_specifiers",
    "provenance",
    "factory",
    # Data
    "RequirementLoader",
    "RequirementTree",
    "PlanParser",
    # UI
    "TerminalDisplay",
    # Errors
    "AuditError",
    "InvalidCourseError",
    "InvalidCourseCodeError",
    "BasketConstructionError",
    "RequirementConfigError",
    "PlanFormatError",
]
