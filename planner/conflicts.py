"""Time and exam conflict detection between course sections."""

from typing import Iterable

from catalog.models import Course, Session


def sessions_overlap(a: Session, b: Session) -> bool:
    """Check whether two sessions share time on the same weekday.
    
    Intervals are half-open, so back-to-back sessions do not overlap.
    """
    if a.day_of_week != b.day_of_week:
        return False
    return a.start_time < b.end_time and b.start_time < a.end_time


def exams_conflict(a: Course, b: Course) -> bool:
    """Check whether two courses have their exam in the same slot.
    
    A course without an exam date never conflicts. Dates and times are
    compared as stored, without normalization.
    """
    if not a.exam_date or not b.exam_date:
        return False
    return a.exam_date == b.exam_date and a.exam_time == b.exam_time


def courses_overlap(a: Course, b: Course) -> bool:
    """Check whether any session of a overlaps any session of b."""
    return any(sessions_overlap(sa, sb) for sa in a.sessions for sb in b.sessions)


def find_time_conflicts(candidate: Course, selected: Iterable[Course]) -> list[Course]:
    """Return the selected courses whose sessions overlap the candidate's.
    
    Args:
        candidate: Course being checked.
        selected: Courses it is checked against. An entry with the
            candidate's own (code, group) is ignored.
            
    Returns:
        Conflicting courses, each reported once, in selection order.
    """
    return [
        course for course in selected
        if course.key != candidate.key and courses_overlap(candidate, course)
    ]


def find_exam_conflicts(candidate: Course, selected: Iterable[Course]) -> list[Course]:
    """Return the selected courses whose exam slot equals the candidate's."""
    return [
        course for course in selected
        if course.key != candidate.key and exams_conflict(candidate, course)
    ]


def exam_table(courses: Iterable[Course]) -> list[tuple[Course, bool]]:
    """Sort courses by exam date and time and flag exam collisions.
    
    Returns:
        (course, has_exam_conflict) pairs. Courses without an exam date
        sort first.
    """
    courses = list(courses)
    conflicting: set[tuple[str, int]] = set()
    for i, a in enumerate(courses):
        for b in courses[i + 1:]:
            if exams_conflict(a, b):
                conflicting.add(a.key)
                conflicting.add(b.key)
    
    ordered = sorted(courses, key=lambda c: (c.exam_date, c.exam_time))
    return [(course, course.key in conflicting) for course in ordered]
