"""
Terminal Display Implementation.

This module handles all console/terminal output formatting.
It's the ONLY place where printing happens in the degree_audit package.

To create a different UI (web, PDF, etc.), create a new class with
the same method signatures but different output handling.
"""

from ..models import BasketSnapshot, FulfillmentResult


class TerminalDisplay:
    """
    Pretty terminal output for audit results.

    ═══════════════════════════════════════════════════════════════════════════
    HOW TO REPLACE THIS UI
    ═══════════════════════════════════════════════════════════════════════════

    1. FOR WEB UI:
       Create a WebDisplay class with the same method signatures.
       BasketSnapshot.to_dict() gives a JSON-ready tree to render.

    2. FOR API RESPONSE:
       Skip the display entirely and return the snapshot dict.

    ═══════════════════════════════════════════════════════════════════════════
    """

    # ANSI color codes for terminal styling
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"

    BG_GREEN = "\033[42m"
    BG_RED = "\033[41m"

    @classmethod
    def print_header(cls, title: str):
        """Print a major section header with decorative borders."""
        width = 70
        print()
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}  {title}{cls.RESET}")
        print(f"{cls.BOLD}{cls.CYAN}{'═' * width}{cls.RESET}")

    @classmethod
    def print_subheader(cls, title: str):
        """Print a subsection header."""
        print()
        print(f"{cls.BOLD}{cls.WHITE}  ── {title} ──{cls.RESET}")

    @classmethod
    def status_badge(cls, satisfied: bool) -> str:
        """Return a colored status badge."""
        if satisfied:
            return f"{cls.BG_GREEN}{cls.WHITE} ✓ COMPLETE {cls.RESET}"
        return f"{cls.BG_RED}{cls.WHITE} ✗ MISSING {cls.RESET}"

    @classmethod
    def print_student_info(cls, student: dict, programme: str):
        """Print student identification information."""
        cls.print_header("STUDENT INFORMATION")
        print(f"  {cls.BOLD}Name:{cls.RESET} {student.get('name', 'Unknown')}")
        print(f"  {cls.BOLD}Programme:{cls.RESET} {programme or student.get('programme', 'Unknown')}")

    @classmethod
    def print_course_summary(cls, courses: list):
        """Print a quick summary of the courses on the plan."""
        cls.print_subheader("Course Summary")
        total = sum(course.credits for course in courses)
        print(f"  {cls.GREEN}Completed:{cls.RESET} {len(courses)} courses ({total:g} credits)")

    @classmethod
    def print_requirement_tree(cls, root: BasketSnapshot):
        """Print the explainability snapshot as an indented tree."""
        cls.print_header(f"REQUIREMENTS: {root.display_name.upper()}")
        cls._print_node(root, 1)

    @classmethod
    def _print_node(cls, node: BasketSnapshot, indent: int):
        mark = f"{cls.GREEN}✓{cls.RESET}" if node.satisfied else f"{cls.RED}✗{cls.RESET}"
        name = f"{cls.BOLD}{node.name}{cls.RESET}" if node.name else node.label
        detail = ""
        if node.matched_module_codes:
            codes = ", ".join(node.matched_module_codes[:4])
            if len(node.matched_module_codes) > 4:
                codes += f" +{len(node.matched_module_codes) - 4}"
            detail = f" {cls.DIM}[{node.matched_credits:g} cr: {codes}]{cls.RESET}"
        print(f"{'  ' * indent}{mark} {name}{detail}")
        for child in node.children:
            cls._print_node(child, indent + 1)

    @classmethod
    def print_provenance(cls, provenance: dict):
        """Print which requirements each course went toward."""
        cls.print_subheader("Where Each Course Counted")
        for code, baskets in provenance.items():
            if baskets:
                # Every ancestor records a match; the innermost basket is the informative one
                print(f"  {cls.GREEN}{code:<10}{cls.RESET} {baskets[0]}")
            else:
                print(f"  {cls.YELLOW}{code:<10}{cls.RESET} {cls.DIM}(unused){cls.RESET}")

    @classmethod
    def print_summary(cls, result: FulfillmentResult):
        """Print the final degree status."""
        cls.print_header("SUMMARY")
        print(f"\n  {cls.BOLD}Degree Requirements:{cls.RESET} {cls.status_badge(result.satisfied)}")
        print(f"  {cls.BOLD}Credits Counted:{cls.RESET} {result.matched_credits:g}")
        print(f"  {cls.BOLD}Courses Counted:{cls.RESET} {len(result.matched_modules)}")
        print()
