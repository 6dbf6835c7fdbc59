"""
Academic plan data models.

Contains the course filters, the per-term AcademicPlan and the PlanView
projection that baskets evaluate against.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .course import CourseRecord


# =============================================================================
# FILTERS
# =============================================================================

class Filter:
    """
    A pure predicate over a CourseRecord.

    Filters are total: they never raise for a well-formed record, they only
    answer True or False. Instances are callable so they can be passed
    straight to ``filter()``.
    """

    def matches(self, course: CourseRecord) -> bool:
        raise NotImplementedError

    def __call__(self, course: CourseRecord) -> bool:
        return self.matches(course)


class PropertyFilter(Filter):
    """Keep courses whose ``attribute`` equals ``equals`` (or differs, if negated)."""

    def __init__(self, attribute: str, equals, negate: bool = False):
        self.attribute = attribute
        self.equals = equals
        self.negate = negate

    def matches(self, course: CourseRecord) -> bool:
        return (getattr(course, self.attribute) == self.equals) != self.negate


class PropertyListFilter(Filter):
    """Keep courses whose ``attribute`` appears in an ordered list of values."""

    def __init__(self, attribute: str, values: Iterable):
        self.attribute = attribute
        self.values = list(values)

    def matches(self, course: CourseRecord) -> bool:
        value = getattr(course, self.attribute)
        return any(candidate == value for candidate in self.values)


class PropertySetFilter(Filter):
    """
    Keep courses whose ``attribute`` is in a set of values.

    With ``negate=True`` the filter keeps courses whose value is NOT in the
    set. This is how state-scoped baskets hide already-claimed courses.
    The set is copied at construction, so later claims do not leak into a
    view that was already built.
    """

    def __init__(self, attribute: str, values: Iterable, negate: bool = False):
        self.attribute = attribute
        self.values = frozenset(values)
        self.negate = negate

    def matches(self, course: CourseRecord) -> bool:
        return (getattr(course, self.attribute) in self.values) != self.negate


# =============================================================================
# PLANS AND VIEWS
# =============================================================================

@dataclass
class TermPlan:
    """Courses taken in one semester."""
    courses: list = field(default_factory=list)


class AcademicPlan:
    """
    A student's courses laid out by year and semester.

    Years and semesters are 1-based in the public API ("year 1, semester 2").
    The plan grows automatically when a course is added to a later year.

    Usage:
        plan = AcademicPlan(4)
        plan.add(1, 1, CourseRecord("CS1101S", 4))
        view = plan.view()
    """

    SEMESTERS_PER_YEAR = 2

    def __init__(self, num_years: int = 4):
        self.terms = []
        self._ensure_years(num_years)

    @classmethod
    def from_courses(cls, courses: Iterable[CourseRecord]) -> "AcademicPlan":
        """Build a one-term plan from a flat collection of courses."""
        plan = cls(1)
        for course in courses:
            plan.add(1, 1, course)
        return plan

    def _ensure_years(self, num_years: int):
        while len(self.terms) < num_years:
            self.terms.append(tuple(TermPlan() for _ in range(self.SEMESTERS_PER_YEAR)))

    def add(self, year: int, semester: int, *courses: CourseRecord) -> None:
        if year < 1:
            raise ValueError(f"Year must be 1 or later, got {year}")
        if not 1 <= semester <= self.SEMESTERS_PER_YEAR:
            raise ValueError(f"Semester must be between 1 and {self.SEMESTERS_PER_YEAR}, got {semester}")
        self._ensure_years(year)
        self.terms[year - 1][semester - 1].courses.extend(courses)

    @property
    def num_years(self) -> int:
        return len(self.terms)

    def courses(self) -> list:
        """Every course in the plan, in term order."""
        return [course for year in self.terms for term in year for course in term.courses]

    def find(self, code: str) -> Optional[CourseRecord]:
        for course in self.courses():
            if course.code == code:
                return course
        return None

    def view(self) -> "PlanView":
        return PlanView(self, self.courses())

    def reset_course_state(self) -> None:
        """Clear the provenance log of every course in the plan."""
        for course in self.courses():
            course.reset_matches()


class PlanView:
    """
    An ordered, read-only projection of the courses visible to a subtree.

    Filtering never touches the underlying plan or earlier views; each call
    returns a new PlanView that still remembers the plan it came from.
    """

    def __init__(self, plan: Optional[AcademicPlan], courses: Iterable[CourseRecord]):
        self._plan = plan
        self._courses = tuple(courses)

    @classmethod
    def of(cls, courses: Iterable[CourseRecord]) -> "PlanView":
        """Build a view (and a backing one-term plan) from loose courses."""
        plan = AcademicPlan.from_courses(courses)
        return plan.view()

    @property
    def plan(self) -> Optional[AcademicPlan]:
        return self._plan

    def courses(self) -> tuple:
        return self._courses

    def with_courses(self, courses: Iterable[CourseRecord]) -> "PlanView":
        return PlanView(self._plan, courses)

    def filtered_by(self, course_filter: Filter) -> "PlanView":
        return self.with_courses(course for course in self._courses if course_filter(course))

    def with_original_plan(self) -> "PlanView":
        """A fresh view over the whole plan, ignoring every filter applied so far."""
        if self._plan is None:
            return self
        return self._plan.view()

    def find(self, code: str) -> Optional[CourseRecord]:
        for course in self._courses:
            if course.code == code:
                return course
        return None

    def codes(self) -> list:
        return [course.code for course in self._courses]

    def __len__(self):
        return len(self._courses)

    def __iter__(self):
        return iter(self._courses)
