"""Catalog module for course section data and its sources."""

from .loader import load_catalog, merge_gathered, save_catalog
from .manual import ManualCourseError, build_manual_course
from .models import Catalog, Course, Gender, Session
from .search import search_courses

__all__ = [
    "Catalog",
    "Course",
    "Gender",
    "ManualCourseError",
    "Session",
    "build_manual_course",
    "load_catalog",
    "merge_gathered",
    "save_catalog",
    "search_courses",
]
