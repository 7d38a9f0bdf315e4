"""Planner module: conflict detection, schedule store and grid layout."""

from .conflicts import (
    exam_table,
    exams_conflict,
    find_exam_conflicts,
    find_time_conflicts,
    sessions_overlap,
)
from .layout import LaidOutSession, TimeWindow, layout_day, layout_week
from .storage import JsonFileStorage, MemoryStorage, Storage
from .store import AddResult, Schedule, ScheduleStore
from .term import AcademicTerm
from .view import Persisted, Preview, ViewEntry, build_view

__all__ = [
    "AcademicTerm",
    "AddResult",
    "JsonFileStorage",
    "LaidOutSession",
    "MemoryStorage",
    "Persisted",
    "Preview",
    "Schedule",
    "ScheduleStore",
    "Storage",
    "TimeWindow",
    "ViewEntry",
    "build_view",
    "exam_table",
    "exams_conflict",
    "find_exam_conflicts",
    "find_time_conflicts",
    "layout_day",
    "layout_week",
    "sessions_overlap",
]
