"""Tests for time and exam conflict detection."""
from datetime import time

from catalog.models import Session
from planner.conflicts import (
    exam_table,
    exams_conflict,
    find_exam_conflicts,
    find_time_conflicts,
    sessions_overlap,
)
from tests.conftest import make_course


def session(day: int, start: str, end: str) -> Session:
    sh, sm = map(int, start.split(":"))
    eh, em = map(int, end.split(":"))
    return Session(day, time(sh, sm), time(eh, em))


def test_sessions_on_different_days_never_overlap() -> None:
    """Identical times on different days are compatible."""
    for day in range(7):
        for other in range(7):
            if day != other:
                assert not sessions_overlap(session(day, "08:00", "10:00"), session(other, "08:00", "10:00"))


def test_overlap_is_symmetric_and_reflexive() -> None:
    a = session(6, "08:00", "10:00")
    b = session(6, "09:00", "11:00")
    assert sessions_overlap(a, b) and sessions_overlap(b, a)
    assert sessions_overlap(a, a)


def test_back_to_back_sessions_do_not_overlap() -> None:
    """Intervals are half-open."""
    assert not sessions_overlap(session(1, "08:00", "10:00"), session(1, "10:00", "12:00"))


def test_contained_session_overlaps() -> None:
    assert sessions_overlap(session(1, "08:00", "12:00"), session(1, "09:00", "10:00"))


def test_find_time_conflicts_end_to_end() -> None:
    """A and B on Saturday 08-10 and 09-11 conflict in time only."""
    a = make_course("A", sessions=((6, "08:00", "10:00"),))
    b = make_course("B", sessions=((6, "09:00", "11:00"),))

    assert find_time_conflicts(a, [a, b]) == [b]
    assert find_exam_conflicts(a, [a, b]) == []
    assert find_exam_conflicts(b, [a, b]) == []


def test_find_time_conflicts_excludes_candidate_key() -> None:
    """An entry with the candidate's own (code, group) is never reported."""
    a = make_course("A", sessions=((6, "08:00", "10:00"),))
    same_key = make_course("A", sessions=((6, "08:30", "09:00"),), name="Other copy")

    assert find_time_conflicts(a, [same_key]) == []


def test_find_time_conflicts_reports_each_course_once() -> None:
    a = make_course("A", sessions=((6, "08:00", "10:00"), (1, "08:00", "10:00")))
    b = make_course("B", sessions=((6, "09:00", "11:00"), (1, "09:00", "11:00")))

    assert find_time_conflicts(a, [b]) == [b]


def test_different_group_of_same_code_can_conflict() -> None:
    a1 = make_course("A", 1, sessions=((0, "10:00", "12:00"),))
    a2 = make_course("A", 2, sessions=((0, "11:00", "13:00"),))

    assert find_time_conflicts(a1, [a2]) == [a2]


def test_exam_conflict_requires_same_date_and_time() -> None:
    a = make_course("A", exam_date="1405/04/20", exam_time="10:00")
    b = make_course("B", exam_date="1405/04/20", exam_time="10:00")
    c = make_course("C", exam_date="1405/04/20", exam_time="14:00")

    assert exams_conflict(a, b)
    assert not exams_conflict(a, c)
    assert find_exam_conflicts(a, [a, b, c]) == [b]


def test_missing_exam_date_never_conflicts() -> None:
    a = make_course("A", exam_time="10:00")
    b = make_course("B", exam_time="10:00")

    assert not exams_conflict(a, b)


def test_exam_table_sorts_and_flags() -> None:
    a = make_course("A", exam_date="1405/04/22", exam_time="10:00")
    b = make_course("B", exam_date="1405/04/20", exam_time="10:00")
    c = make_course("C", exam_date="1405/04/22", exam_time="10:00")
    d = make_course("D")

    rows = exam_table([a, b, c, d])

    assert [course.course_code for course, _ in rows] == ["D", "B", "A", "C"]
    assert dict((course.course_code, flag) for course, flag in rows) == {
        "A": True, "B": False, "C": True, "D": False,
    }
