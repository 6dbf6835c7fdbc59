"""
Unit Tests for PlanParser
"""

import logging

import pytest

from degree_audit.data import PlanParser
from degree_audit.exceptions import PlanFormatError


@pytest.fixture
def parser():
    return PlanParser()


class TestParse:

    def test_parse_when_valid_plan_then_courses_by_term(self, parser, plan_document):
        parsed = parser.parse(plan_document)
        plan = parsed["plan"]

        assert parsed["student"]["name"] == "Alex Tan"
        assert [c.code for c in plan.terms[0][0].courses] == ["CS1101S", "CS1231S", "MA1521"]
        assert [c.code for c in plan.terms[0][1].courses] == ["CS2040S", "ST2334"]
        assert [c.code for c in plan.terms[1][0].courses] == ["CS2103T"]
        assert parsed["courses"]["CS2103T"].name == "Software Engineering"

    def test_parse_when_term_omitted_then_year_one_semester_one(self, parser):
        parsed = parser.parse({"courses": [{"code": "CS1101S"}]})
        assert parsed["plan"].terms[0][0].courses[0].code == "CS1101S"
        assert parsed["student"] == {}

    def test_parse_when_credits_omitted_then_default_credits(self):
        parsed = PlanParser(default_credits=2).parse({"courses": [{"code": "GEA1000"}]})
        assert parsed["courses"]["GEA1000"].credits == 2

    def test_parse_when_duplicate_code_then_first_kept_and_warned(self, parser, caplog):
        plan_data = {"courses": [
            {"code": "CS1101S", "credits": 4, "year": 1, "semester": 1},
            {"code": "CS1101S", "credits": 6, "year": 2, "semester": 1},
        ]}

        with caplog.at_level(logging.WARNING):
            parsed = parser.parse(plan_data)

        assert parsed["courses"]["CS1101S"].credits == 4
        assert len(parsed["plan"].courses()) == 1
        assert "duplicate" in caplog.text

    def test_parse_when_late_year_then_plan_grows(self, parser):
        parsed = parser.parse({"courses": [{"code": "CS4248", "year": 5, "semester": 2}]})
        assert parsed["plan"].num_years == 5


class TestParseErrors:

    @pytest.mark.parametrize("plan_data", [
        ["CS1101S"],
        {"courses": "CS1101S"},
        {"courses": ["CS1101S"]},
        {"courses": [{"name": "No code"}]},
    ])
    def test_parse_when_malformed_then_raises_error(self, parser, plan_data):
        with pytest.raises(PlanFormatError):
            parser.parse(plan_data)

    def test_parse_when_bad_course_code_then_raises_error(self, parser):
        with pytest.raises(PlanFormatError, match="entry 1"):
            parser.parse({"courses": [{"code": "CS1101S"}, {"code": "1101"}]})

    def test_parse_when_bad_credits_then_raises_error(self, parser):
        with pytest.raises(PlanFormatError):
            parser.parse({"courses": [{"code": "CS1101S", "credits": 0}]})

    @pytest.mark.parametrize("year, semester", [(0, 1), (1, 3), ("one", 1)])
    def test_parse_when_bad_term_then_raises_error(self, parser, year, semester):
        with pytest.raises(PlanFormatError, match="Bad term"):
            parser.parse({"courses": [{"code": "CS1101S", "year": year, "semester": semester}]})


class TestParseFile:

    def test_parse_file_when_valid_then_parsed(self, parser, write_json, plan_document):
        parsed = parser.parse_file(write_json("plan.json", plan_document))
        assert len(parsed["courses"]) == 6

    def test_parse_file_when_missing_then_raises_error(self, parser, tmp_path):
        with pytest.raises(PlanFormatError, match="Could not read"):
            parser.parse_file(tmp_path / "missing.json")

    def test_parse_file_when_invalid_json_then_raises_error(self, parser, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text("[1, 2")
        with pytest.raises(PlanFormatError, match="not valid JSON"):
            parser.parse_file(path)
