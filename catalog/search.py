"""Course lookup by free-text query."""

from typing import Iterable

from .models import Course
from .text import matches_all_tokens, normalize_query, tokenize_query


def search_courses(courses: Iterable[Course], query: str) -> list[Course]:
    """Return courses whose name, code or professor matches the query.
    
    Every word of the query must appear in at least one of the fields.
    An empty query matches everything.
    """
    tokens = tokenize_query(normalize_query(query))
    if not tokens:
        return list(courses)
    
    matched = []
    for course in courses:
        fields = (course.course_name, course.course_code, course.professor)
        haystack = " ".join(normalize_query(f) for f in fields)
        if matches_all_tokens(tokens, haystack):
            matched.append(course)
    return matched
