"""
Command-Line Interface for the Degree Audit System.

Audits one student plan against one requirement document and prints the
result, either as a coloured terminal report or as JSON.

USAGE:
------
    degree-audit requirements/applied_maths.json plans/alice.json
    degree-audit https://example.edu/reqs/cs.json plans/alice.json --json
    degree-audit requirements/cs.json --options
    degree-audit applied_mathematics data/plans/applied_mathematics_student.json
"""

import argparse
import json
import logging
import sys

from .auditor import DegreeAuditor
from .config import DEFAULT_MEANINGFUL_DEPTH, LOG_FORMAT, LOG_LEVEL
from .data import RequirementLoader
from .exceptions import AuditError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="degree-audit",
        description="Audit an academic plan against a tree of degree requirements",
        epilog=f"Bundled requirement documents: {', '.join(RequirementLoader.bundled()) or 'none'}",
    )
    parser.add_argument("requirements",
                        help="Requirement document (JSON path, http(s) URL or bundled name)")
    parser.add_argument("plan", nargs="?", help="Student plan JSON file")
    parser.add_argument("--depth", "-d", type=int, default=DEFAULT_MEANINGFUL_DEPTH,
                        help="Titled requirement levels to expand in the report")
    parser.add_argument("--json", action="store_true", help="Print the audit as JSON")
    parser.add_argument("--options", action="store_true",
                        help="List the courses and course patterns the requirements name")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    return parser


def _audit_to_json(audit: dict) -> dict:
    result = audit["result"]
    return {
        "programme": audit["programme"],
        "student": audit["student"],
        "satisfied": result.satisfied,
        "matched_credits": result.matched_credits,
        "matched_module_codes": result.matched_codes,
        "requirements": audit["snapshot"].to_dict(),
        "provenance": audit["provenance"],
    }


def main(argv=None) -> int:
    """
    Command-line interface for the degree audit.

    Returns the process exit status: 0 when the requirements are satisfied,
    1 when they are not and 2 when the inputs could not be used.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = {0: LOG_LEVEL, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    auditor = DegreeAuditor()
    try:
        if args.options:
            for option in auditor.requirement_options(args.requirements):
                print(option)
            return 0

        if not args.plan:
            parser.error("a plan file is required unless --options is given")

        audit = auditor.run_audit(args.requirements, args.plan, args.depth, show=not args.json)
    except AuditError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(_audit_to_json(audit), indent=2))
    return 0 if audit["result"].satisfied else 1


if __name__ == "__main__":
    sys.exit(main())
