"""Tests for manually entered courses."""
from datetime import time

import pytest

from catalog.manual import ManualCourseError, build_manual_course


def test_builds_course_with_synthesized_code() -> None:
    course = build_manual_course(
        name="  Lab  ",
        unit_count=1,
        sessions=[(6, "8:00", "10:00")],
        exam_date="۱۴۰۵/۰۴/۲۰",
        exam_time="۱۰:۰۰",
    )

    assert course.course_code.startswith("MANUAL-")
    assert course.group == 1
    assert course.course_name == "Lab"
    assert course.sessions[0].start_time == time(8, 0)
    assert (course.exam_date, course.exam_time) == ("1405/04/20", "10:00")


def test_synthesized_codes_differ() -> None:
    a = build_manual_course("A", 1, [])
    b = build_manual_course("B", 1, [])

    assert a.course_code != b.course_code


def test_explicit_code_is_kept() -> None:
    assert build_manual_course("A", 2, [], course_code="X100").course_code == "X100"


@pytest.mark.parametrize("name, units, sessions", [
    ("", 3, []),
    ("   ", 3, []),
    ("A", 0, []),
    ("A", 3, [(6, "10:00", "10:00")]),
    ("A", 3, [(6, "11:00", "10:00")]),
    ("A", 3, [(9, "08:00", "10:00")]),
])
def test_invalid_input_is_rejected(name, units, sessions) -> None:
    with pytest.raises(ManualCourseError):
        build_manual_course(name, units, sessions)


def test_invalid_exam_time_is_rejected() -> None:
    with pytest.raises(ManualCourseError):
        build_manual_course("A", 1, [], exam_time="noon")
