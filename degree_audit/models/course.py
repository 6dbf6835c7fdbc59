"""
Course data models.

Contains the CourseRecord dataclass that represents one completed course
on a student's academic plan.
"""

from dataclasses import dataclass, field

from ..config import COURSE_CODE_PATTERN
from ..exceptions import InvalidCourseCodeError, InvalidCourseError


@dataclass(frozen=True)
class CourseRecord:
    """
    Represents a single completed course.

    This is the core data unit that flows through the system. The code is
    parsed once at construction so baskets can filter on prefix, level and
    suffix without re-parsing.

    Two records are the same course when their codes are equal; credits and
    name do not take part in equality or hashing, so a record built by a
    requirement document and the student's own record for the same code are
    interchangeable inside sets.

    Attributes:
        code: Course code (e.g., "CS2103T")
        credits: Credit weight counted toward credit thresholds
        name: Human-readable course title
        prefix: Letters before the number (e.g., "CS")
        level: First digit of the number (e.g., 2 for CS2103T)
        suffix: Letters after the number (e.g., "T"), may be empty
        matched_baskets: Baskets that claimed this course, in claim order.
            This is the only mutable part of a record.
    """
    code: str
    credits: float = field(compare=False)
    name: str = field(default="", compare=False)
    prefix: str = field(init=False, compare=False)
    level: int = field(init=False, compare=False)
    suffix: str = field(init=False, compare=False)
    matched_baskets: list = field(default_factory=list, init=False, compare=False, repr=False)

    def __post_init__(self):
        match = COURSE_CODE_PATTERN.fullmatch(self.code) if isinstance(self.code, str) else None
        if match is None:
            raise InvalidCourseCodeError(self.code)

        if isinstance(self.credits, bool) or not isinstance(self.credits, (int, float)):
            raise InvalidCourseError(f"Credits for {self.code} must be a number, got {self.credits!r}")
        if self.credits <= 0:
            raise InvalidCourseError(f"Credits for {self.code} must be positive, got {self.credits}")

        object.__setattr__(self, "prefix", match.group("prefix"))
        object.__setattr__(self, "level", int(match.group("level")))
        object.__setattr__(self, "suffix", match.group("suffix"))

    def record_match(self, basket) -> None:
        """Append a basket to this course's provenance log."""
        self.matched_baskets.append(basket)

    def reset_matches(self) -> None:
        """Forget every basket that claimed this course."""
        self.matched_baskets.clear()
