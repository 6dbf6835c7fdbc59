"""
Degree Auditor - Main Orchestrator.

This module contains the DegreeAuditor class that connects the
requirement engine to the presentation layer.
"""

import logging

from .config import DEFAULT_MEANINGFUL_DEPTH
from .data import PlanParser, RequirementLoader, RequirementTree
from .engines import evaluate, provenance, requirement_specifiers, snapshot
from .models import AcademicPlan
from .ui import TerminalDisplay

logger = logging.getLogger(__name__)


class DegreeAuditor:
    """
    Main interface for the degree audit system.

    ═══════════════════════════════════════════════════════════════════════════
    ROLE: ORCHESTRATOR
    ═══════════════════════════════════════════════════════════════════════════

    1. Loads the requirement document and the student's plan
    2. Evaluates the requirement tree against the plan (pure data)
    3. Passes that data to the presentation layer for display

    TO CHANGE THE UI:
    -----------------
    Replace `self.display = TerminalDisplay()` with your custom display class,
    or call `audit_plan()` directly and render the returned data yourself.

    ═══════════════════════════════════════════════════════════════════════════

    USAGE:
        auditor = DegreeAuditor()
        audit = auditor.run_audit("requirements/cs.json", "plans/alice.json")
        audit["result"].satisfied
    """

    def __init__(self, loader: RequirementLoader = None, parser: PlanParser = None):
        self.loader = loader or RequirementLoader()
        self.parser = parser or PlanParser()
        self.display = TerminalDisplay()

    def audit_plan(self, tree: RequirementTree, plan: AcademicPlan,
                   meaningful_depth: int = DEFAULT_MEANINGFUL_DEPTH) -> dict:
        """
        Evaluate a plan against a freshly built requirement tree.

        Shared BasketStates keep their claims between calls, so audit each
        plan against its own tree (RequirementLoader.load builds a new one
        every time).

        Returns:
            {
                "programme": "Applied Mathematics",
                "result": FulfillmentResult,
                "snapshot": BasketSnapshot,
                "provenance": {code: [basket names]},
            }
        """
        result = evaluate(tree.root, plan.view())
        return {
            "programme": tree.name,
            "result": result,
            "snapshot": snapshot(tree.root, meaningful_depth),
            "provenance": provenance(plan.courses()),
        }

    def run_audit(self, requirements, plan_path, meaningful_depth: int = DEFAULT_MEANINGFUL_DEPTH,
                  show: bool = True) -> dict:
        """
        Run a complete audit and (optionally) display the results.

        Args:
            requirements: Path or URL of the requirement document
            plan_path: Path to the student's plan JSON file
            meaningful_depth: How many titled levels the snapshot expands
            show: Print the results to the terminal

        Returns:
            The audit_plan() dict plus "student"
        """
        tree = self.loader.load(requirements)
        parsed = self.parser.parse_file(plan_path)

        audit = self.audit_plan(tree, parsed["plan"], meaningful_depth)
        audit["student"] = parsed["student"]
        logger.info(f"Audit of {audit['programme']!r}: satisfied={audit['result'].satisfied}")

        if show:
            self.display.print_student_info(parsed["student"], tree.name)
            self.display.print_course_summary(parsed["plan"].courses())
            self.display.print_requirement_tree(audit["snapshot"])
            self.display.print_provenance(audit["provenance"])
            self.display.print_summary(audit["result"])

        return audit

    def requirement_options(self, requirements) -> list:
        """Describe every course or course pattern named by a requirement document."""
        tree = self.loader.load(requirements)
        return [basket.describe() for basket in requirement_specifiers(tree.root)]
