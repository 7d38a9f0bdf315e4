"""Shared fixtures and builders for planner tests."""
from datetime import date, time

import pytest

from catalog.models import Course, Session
from planner.term import AcademicTerm


def clock(text: str) -> time:
    hour, minute = text.split(":")
    return time(int(hour), int(minute))


def make_course(
    code: str,
    group: int = 1,
    sessions: tuple = (),
    units: int = 3,
    exam_date: str = "",
    exam_time: str = "",
    name: str = "",
    **extra,
) -> Course:
    """Build a course from (day, "HH:MM", "HH:MM") session triples."""
    return Course(
        course_code=code,
        group=group,
        course_name=name or f"Course {code}",
        unit_count=units,
        sessions=tuple(Session(day, clock(start), clock(end)) for day, start, end in sessions),
        exam_date=exam_date,
        exam_time=exam_time,
        **extra,
    )


@pytest.fixture
def term() -> AcademicTerm:
    """Spring term 1404/11/18 - 1405/03/31 (2026-02-07 - 2026-06-21)."""
    return AcademicTerm(start=date(2026, 2, 7), end=date(2026, 6, 21), label="14042")
