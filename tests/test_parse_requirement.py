import json

import pytest

from plan_requirements import (
    Empty,
    all_courses,
    any_courses,
    course,
    load_plan,
    parse_requirement,
)


def test_parse_none_requirement():
    assert parse_requirement({"type": "NONE"}) == Empty()


def test_parse_missing_type_is_none():
    assert parse_requirement({}) == Empty()


def test_parse_course_requirement():
    assert parse_requirement({"type": "COURSE", "id": "040105"}) == course("040105")


def test_parse_all_requirement():
    req = parse_requirement(
        {
            "type": "ALL",
            "children": [
                {"type": "COURSE", "id": "A"},
                {"type": "COURSE", "id": "B"},
            ],
        }
    )
    assert req == all_courses(["A", "B"])


def test_parse_any_requirement():
    req = parse_requirement(
        {
            "type": "ANY",
            "required": 2,
            "children": [
                {"type": "COURSE", "id": "A"},
                {"type": "COURSE", "id": "B"},
                {"type": "COURSE", "id": "C"},
            ],
        }
    )
    assert req == any_courses(2, ["A", "B", "C"])


def test_parse_empty_groups_collapse():
    assert parse_requirement({"type": "ALL", "children": []}) == Empty()
    assert parse_requirement({"type": "ANY", "required": 1, "children": []}) == Empty()


def test_parse_unknown_requirement():
    with pytest.raises(ValueError, match="Unknown requirement type"):
        parse_requirement({"type": "GPA"})


def test_parse_missing_key():
    with pytest.raises(ValueError, match="missing"):
        parse_requirement({"type": "ANY", "children": []})


def test_parse_children_not_a_list():
    with pytest.raises(ValueError, match="children must be a list"):
        parse_requirement({"type": "ALL", "children": 5})


def test_parse_null_threshold():
    with pytest.raises(ValueError, match="Malformed requirement of type ANY"):
        parse_requirement(
            {"type": "ANY", "required": None, "children": [{"type": "COURSE", "id": "A"}]}
        )


def test_parse_course_id_must_be_string():
    with pytest.raises(ValueError, match="must be a string"):
        parse_requirement({"type": "COURSE", "id": None})


def test_load_plan_malformed_node(tmp_path):
    plan_file = tmp_path / "plan.json"
    plan_file.write_text(json.dumps({"type": "ALL", "children": 5}))

    with pytest.raises(ValueError):
        load_plan(str(plan_file))


def test_parse_not_an_object():
    with pytest.raises(ValueError, match="must be an object"):
        parse_requirement(["A"])


def test_dump_matches_parse_format():
    req = all_courses(["A"]) & any_courses(1, ["X", "Y"])
    assert parse_requirement(req.model_dump(mode="json")) == req


def test_load_plan_valid(tmp_path):
    plan_file = tmp_path / "plan.json"
    plan_file.write_text(
        json.dumps({"type": "ANY", "required": 1, "children": [{"type": "COURSE", "id": "X"}]})
    )
    assert load_plan(str(plan_file)) == any_courses(1, ["X"])


def test_load_plan_file_not_found():
    with pytest.raises(FileNotFoundError):
        load_plan("/nonexistent/plan.json")


def test_load_plan_invalid_json(tmp_path):
    plan_file = tmp_path / "plan.json"
    plan_file.write_text("{invalid json")

    with pytest.raises(ValueError, match="Failed to parse"):
        load_plan(str(plan_file))
