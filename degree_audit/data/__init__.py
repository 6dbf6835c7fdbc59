"""
Data loading and parsing module.

This package handles all file and network I/O: requirement documents and
student plans.
"""

from .loader import RequirementLoader, RequirementTree, create_retry_session
from .parser import PlanParser

__all__ = ["RequirementLoader", "RequirementTree", "create_retry_session", "PlanParser"]
