"""Entries of a rendered schedule: persisted selections and hover previews."""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from catalog.models import Course


@dataclass(frozen=True)
class Persisted:
    """A course saved in the schedule, possibly also being previewed."""
    
    course: Course
    previewed: bool = False
    
    @property
    def mode(self) -> str:
        return "both" if self.previewed else "default"


@dataclass(frozen=True)
class Preview:
    """A course shown while hovered in search; never saved or exported."""
    
    course: Course
    
    @property
    def mode(self) -> str:
        return "hover"


ViewEntry = Union[Persisted, Preview]


def build_view(selected: Iterable[Course], hovered: Optional[Course] = None) -> list[ViewEntry]:
    """Combine the saved selection with an optional hovered course.
    
    Args:
        selected: Courses of the current schedule.
        hovered: Course under the pointer in search results, if any.
        
    Returns:
        One entry per selected course, plus a trailing Preview when the
        hovered course is not already selected.
    """
    entries: list[ViewEntry] = []
    already_selected = False
    for course in selected:
        previewed = hovered is not None and course.key == hovered.key
        already_selected = already_selected or previewed
        entries.append(Persisted(course, previewed=previewed))
    
    if hovered is not None and not already_selected:
        entries.append(Preview(hovered))
    return entries


def persisted_courses(entries: Iterable[ViewEntry]) -> list[Course]:
    """Drop preview-only entries and unwrap the rest."""
    return [e.course for e in entries if isinstance(e, Persisted)]
