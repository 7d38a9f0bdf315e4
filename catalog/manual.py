"""Construction of user-entered courses that are not in the catalog."""

import secrets
import time as _time
from typing import Iterable, Optional

from .models import Course, Gender, Session
from .text import format_clock, parse_clock, to_english_digits


class ManualCourseError(ValueError):
    """Raised when manually entered course data is rejected."""


def _synthesize_code() -> str:
    return f"MANUAL-{int(_time.time() * 1000)}-{secrets.token_hex(2)}"


def build_manual_course(
    name: str,
    unit_count: int,
    sessions: Iterable[tuple[int, str, str]],
    professor: str = "",
    exam_date: str = "",
    exam_time: str = "",
    course_code: Optional[str] = None
) -> Course:
    """Validate manual input and build a course from it.
    
    Args:
        name: Course name, required.
        unit_count: Credit units, at least 1.
        sessions: (day_of_week, "HH:MM", "HH:MM") triples.
        professor: Instructor name.
        exam_date: Jalali exam date, any digit script.
        exam_time: Exam clock time, any digit script.
        course_code: Explicit code; synthesized when omitted.
        
    Returns:
        The new course, group 1, open to all genders.
        
    Raises:
        ManualCourseError: If any field is invalid.
    """
    name = (name or "").strip()
    if not name:
        raise ManualCourseError("Course name is required")
    if not unit_count or unit_count < 1:
        raise ManualCourseError("Unit count must be at least 1")
    
    parsed: list[Session] = []
    for day, start, end in sessions:
        try:
            parsed.append(Session(int(day), parse_clock(start), parse_clock(end)))
        except ValueError as e:
            raise ManualCourseError(f"Invalid session {day} {start}-{end}: {e}") from e
    
    exam_time = exam_time.strip()
    if exam_time:
        try:
            exam_time = format_clock(parse_clock(exam_time))
        except ValueError as e:
            raise ManualCourseError(str(e)) from e
    
    return Course(
        course_code=(course_code or "").strip() or _synthesize_code(),
        group=1,
        course_name=name,
        unit_count=unit_count,
        gender=Gender.MIXED,
        professor=professor.strip(),
        sessions=tuple(parsed),
        exam_date=to_english_digits(exam_date.strip()),
        exam_time=exam_time,
    )
