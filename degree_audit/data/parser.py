"""
Academic plan parsing.

This module turns a student's plan document into CourseRecords laid out
in an AcademicPlan.
"""

import json
import logging
from pathlib import Path

from ..config import DEFAULT_CREDITS
from ..exceptions import InvalidCourseError, PlanFormatError
from ..models import AcademicPlan, CourseRecord

logger = logging.getLogger(__name__)


class PlanParser:
    """
    Parses a student plan document into an AcademicPlan.

    PLAN SHAPE:
    -----------
        {
            "student": {"name": "...", "programme": "..."},
            "courses": [
                {"code": "CS1101S", "name": "Programming Methodology",
                 "credits": 4, "year": 1, "semester": 1},
                ...
            ]
        }

    ``year`` and ``semester`` default to 1, ``credits`` to the configured
    default weight.

    DUPLICATE HANDLING:
    Each course code may only appear once on a plan because baskets match
    by code. If a student lists a course twice (a retake, a copy-paste
    slip) we keep the first entry and log a warning for the rest.
    """

    def __init__(self, default_credits: float = DEFAULT_CREDITS):
        self.default_credits = default_credits

    def parse_file(self, path) -> dict:
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except OSError as exc:
            raise PlanFormatError(f"Could not read plan {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise PlanFormatError(f"Plan {path} is not valid JSON: {exc}") from exc
        return self.parse(data)

    def parse(self, plan_data: dict) -> dict:
        """
        Parse a plan document.

        Returns:
            {
                "student": {name, programme, ...},
                "plan": AcademicPlan,
                "courses": {code: CourseRecord}   # Quick lookup by code
            }
        """
        if not isinstance(plan_data, dict):
            raise PlanFormatError("A plan document must be a JSON object")
        courses_raw = plan_data.get("courses", [])
        if not isinstance(courses_raw, list):
            raise PlanFormatError("'courses' must be a list")

        plan = AcademicPlan()
        courses = {}

        for index, entry in enumerate(courses_raw):
            course = self._parse_course(entry, index)
            if course.code in courses:
                logger.warning(f"Ignoring duplicate plan entry for {course.code} (entry {index})")
                continue

            year = entry.get("year", 1)
            semester = entry.get("semester", 1)
            try:
                plan.add(year, semester, course)
            except (TypeError, ValueError) as exc:
                raise PlanFormatError(f"Bad term for {course.code}: {exc}") from exc
            courses[course.code] = course

        logger.info(f"Parsed plan with {len(courses)} courses over {plan.num_years} years")
        return {
            "student": plan_data.get("student", {}),
            "plan": plan,
            "courses": courses,
        }

    def _parse_course(self, entry, index: int) -> CourseRecord:
        if not isinstance(entry, dict) or "code" not in entry:
            raise PlanFormatError(f"Plan entry {index} must be an object with a 'code'")
        try:
            return CourseRecord(
                code=entry["code"],
                credits=entry.get("credits", self.default_credits),
                name=entry.get("name", ""),
            )
        except InvalidCourseError as exc:
            raise PlanFormatError(f"Plan entry {index}: {exc}") from exc
