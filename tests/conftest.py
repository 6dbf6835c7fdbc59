import json
import sys
from pathlib import Path

import pytest

# Add the repository root to sys.path so we can import degree_audit
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from degree_audit.models import CourseRecord, PlanView  # noqa: E402


def make_view(*courses):
    """Build a PlanView from (code, credits) pairs."""
    return PlanView.of(CourseRecord(code, credits) for code, credits in courses)


# Common test fixtures
@pytest.fixture
def view_of():
    """Return the make_view helper."""
    return make_view


@pytest.fixture
def cs_view():
    """A small first-year computing plan."""
    return make_view(
        ("CS1101S", 4),
        ("CS1231S", 4),
        ("CS2030S", 4),
        ("CS2040S", 4),
        ("CS2103T", 4),
        ("MA1521", 4),
        ("ST2334", 4),
    )


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document into tmp_path and return its path."""
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path
    return _write


@pytest.fixture
def requirement_document():
    """A two-level requirement document with a shared exclusive pool."""
    return {
        "name": "Computer Science",
        "credits": {"CS3203": 8},
        "requirement": {
            "and": [
                {"Foundation": {"and": [
                    {"or": ["CS1101S", "CS1010X"]},
                    "CS1231S",
                    "CS2040S",
                ]}},
                {"Mathematics": {"and": ["MA1521", {"or": ["ST2334", "ST2131"]}]}},
                {"Electives": {"at_least_credits": {
                    "credits": 8,
                    "of": {"modules": {"prefixes": ["CS"], "levels": [2, 3]}},
                }}},
            ]
        },
    }


@pytest.fixture
def plan_document():
    return {
        "student": {"name": "Alex Tan", "programme": "Computer Science"},
        "courses": [
            {"code": "CS1101S", "name": "Programming Methodology", "credits": 4, "year": 1, "semester": 1},
            {"code": "CS1231S", "name": "Discrete Structures", "credits": 4, "year": 1, "semester": 1},
            {"code": "MA1521", "name": "Calculus for Computing", "credits": 4, "year": 1, "semester": 1},
            {"code": "CS2040S", "name": "Data Structures and Algorithms", "credits": 4, "year": 1, "semester": 2},
            {"code": "ST2334", "name": "Probability and Statistics", "credits": 4, "year": 1, "semester": 2},
            {"code": "CS2103T", "name": "Software Engineering", "credits": 4, "year": 2, "semester": 1},
        ],
    }
