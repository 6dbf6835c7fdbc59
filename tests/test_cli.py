"""
Tests for the degree-audit command line
"""

import json

import pytest

from degree_audit.cli import main


@pytest.fixture
def files(write_json, requirement_document, plan_document):
    return (
        str(write_json("cs.json", requirement_document)),
        str(write_json("plan.json", plan_document)),
    )


class TestMain:

    def test_main_when_satisfied_then_exit_zero(self, files, capsys):
        assert main(list(files)) == 0
        assert "SUMMARY" in capsys.readouterr().out

    def test_main_when_unsatisfied_then_exit_one(self, write_json, requirement_document, plan_document):
        plan_document["courses"] = plan_document["courses"][:3]
        requirements = str(write_json("cs.json", requirement_document))
        plan = str(write_json("short.json", plan_document))
        assert main([requirements, plan]) == 1

    def test_main_when_json_then_prints_audit_document(self, files, capsys):
        assert main([*files, "--json"]) == 0
        data = json.loads(capsys.readouterr().out)

        assert data["programme"] == "Computer Science"
        assert data["student"]["name"] == "Alex Tan"
        assert data["satisfied"] is True
        assert data["requirements"]["children"][0]["name"] == "Foundation"
        assert data["provenance"]["ST2334"][0] == "ST2334"

    def test_main_when_depth_zero_then_snapshot_not_expanded(self, files, capsys):
        main([*files, "--json", "--depth", "0"])
        data = json.loads(capsys.readouterr().out)
        assert data["requirements"]["children"] == []

    def test_main_when_options_then_lists_specifiers(self, files, capsys):
        assert main([files[0], "--options"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "CS1101S"
        assert "MA1521" in lines

    def test_main_when_requirements_missing_then_exit_two(self, files, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json"), files[1]]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_main_when_plan_malformed_then_exit_two(self, files, write_json, capsys):
        plan = str(write_json("bad.json", {"courses": [{"code": "???"}]}))
        assert main([files[0], plan]) == 2
        assert "Invalid course code" in capsys.readouterr().err

    def test_main_when_plan_omitted_then_usage_error(self, files):
        with pytest.raises(SystemExit) as exc_info:
            main([files[0]])
        assert exc_info.value.code == 2
