"""Multi-schedule selection store."""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from catalog.models import Course
from .conflicts import find_exam_conflicts, find_time_conflicts
from .storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class Schedule:
    """A named set of selected sections, identified by a small integer."""
    
    id: int
    courses: list[Course] = field(default_factory=list)
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "courses": [dict(c.to_dict(), mode="default") for c in self.courses],
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schedule":
        courses = []
        for raw in data["courses"]:
            # Hover previews are never persisted; skip any that slipped in
            if raw.get("mode") == "hover":
                continue
            courses.append(Course.from_dict(raw))
        return cls(id=int(data["id"]), courses=courses)


@dataclass
class AddResult:
    """Conflicts created by adding a course; advisory only."""
    
    time_conflicts: list[Course] = field(default_factory=list)
    exam_conflicts: list[Course] = field(default_factory=list)
    
    @property
    def has_conflicts(self) -> bool:
        return bool(self.time_conflicts or self.exam_conflicts)


class ScheduleStore:
    """Owns every schedule and the pointer to the current one.
    
    State is read from storage once on construction and written back
    after each successful mutation. Refusals (schedule cap, duplicate
    course, deleting the last schedule) are reported through return
    values rather than exceptions.
    """
    
    MAX_SCHEDULES = 5
    SCHEDULES_KEY = "plan-schedules"
    CURRENT_KEY = "plan-currentScheduleId"
    
    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._schedules: list[Schedule] = []
        self._current_id = 0
        self._load()
    
    def _load(self) -> None:
        """Read persisted state, falling back to one empty schedule."""
        self._schedules = self._load_schedules(self._storage.get(self.SCHEDULES_KEY))
        
        ids = [s.id for s in self._schedules]
        current = self._storage.get(self.CURRENT_KEY, 0)
        if isinstance(current, bool) or not isinstance(current, int) or current not in ids:
            if current != 0:
                logger.warning("Unknown current schedule %r, using %d", current, min(ids))
            current = min(ids)
        self._current_id = current
    
    def _load_schedules(self, raw: Any) -> list[Schedule]:
        if raw is None:
            return [Schedule(id=0)]
        
        try:
            schedules = [Schedule.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding corrupt schedules: %s", e)
            return [Schedule(id=0)]
        
        ids = [s.id for s in schedules]
        if not schedules or len(set(ids)) != len(ids) or min(ids) < 0:
            logger.warning("Discarding invalid schedule ids %r", ids)
            return [Schedule(id=0)]
        
        return sorted(schedules, key=lambda s: s.id)[:self.MAX_SCHEDULES]
    
    def _save(self) -> None:
        self._storage.set(self.SCHEDULES_KEY, [s.to_dict() for s in self._schedules])
        self._storage.set(self.CURRENT_KEY, self._current_id)
    
    @property
    def schedules(self) -> list[Schedule]:
        return list(self._schedules)
    
    @property
    def current_schedule_id(self) -> int:
        return self._current_id
    
    @property
    def current_schedule(self) -> Schedule:
        for schedule in self._schedules:
            if schedule.id == self._current_id:
                return schedule
        return self._schedules[0]
    
    @property
    def selected_courses(self) -> list[Course]:
        return list(self.current_schedule.courses)
    
    @property
    def total_units(self) -> int:
        return sum(c.unit_count for c in self.current_schedule.courses)
    
    def select_schedule(self, schedule_id: int) -> bool:
        if schedule_id == self._current_id:
            return False
        if all(s.id != schedule_id for s in self._schedules):
            return False
        self._current_id = schedule_id
        self._save()
        return True
    
    def is_course_selected(self, course_code: str, group: int) -> bool:
        return any(c.key == (course_code, group) for c in self.current_schedule.courses)
    
    def add_course(self, course: Course) -> Optional[AddResult]:
        """Append a course to the current schedule.
        
        Args:
            course: Catalog or manual course to add.
            
        Returns:
            None if the course is already in the schedule, otherwise the
            time and exam conflicts the addition creates. Conflicts never
            prevent the addition.
        """
        if self.is_course_selected(course.course_code, course.group):
            return None
        
        selected = self.current_schedule.courses
        result = AddResult(
            time_conflicts=find_time_conflicts(course, selected),
            exam_conflicts=find_exam_conflicts(course, selected),
        )
        selected.append(course)
        self._save()
        return result
    
    def import_courses(self, courses: Iterable[Course]) -> tuple[int, int]:
        """Add several courses in one write.
        
        Returns:
            (added, skipped) counts; skipped courses were already present.
        """
        added = skipped = 0
        selected = self.current_schedule.courses
        for course in courses:
            if any(c.key == course.key for c in selected):
                skipped += 1
                continue
            selected.append(course)
            added += 1
        
        if added:
            self._save()
        return added, skipped
    
    def remove_course(self, course_code: str, group: int) -> bool:
        schedule = self.current_schedule
        remaining = [c for c in schedule.courses if c.key != (course_code, group)]
        if len(remaining) == len(schedule.courses):
            return False
        schedule.courses = remaining
        self._save()
        return True
    
    def _next_id(self) -> int:
        used = {s.id for s in self._schedules}
        new_id = 0
        while new_id in used:
            new_id += 1
        return new_id
    
    def _insert(self, schedule: Schedule) -> None:
        self._schedules.append(schedule)
        self._schedules.sort(key=lambda s: s.id)
        self._current_id = schedule.id
        self._save()
    
    def create_schedule(self) -> bool:
        """Add an empty schedule and make it current; False at the cap."""
        if len(self._schedules) >= self.MAX_SCHEDULES:
            return False
        self._insert(Schedule(id=self._next_id()))
        return True
    
    def duplicate_schedule(self) -> bool:
        """Copy the current schedule into a new current one; False at the cap."""
        if len(self._schedules) >= self.MAX_SCHEDULES:
            return False
        courses = copy.deepcopy(self.current_schedule.courses)
        self._insert(Schedule(id=self._next_id(), courses=courses))
        return True
    
    def delete_schedule(self, schedule_id: int) -> bool:
        """Remove a schedule unless it is the last one.
        
        If the removed schedule was current, the remaining schedule with
        the smallest id becomes current.
        """
        if len(self._schedules) <= 1:
            return False
        remaining = [s for s in self._schedules if s.id != schedule_id]
        if len(remaining) == len(self._schedules):
            return False
        
        self._schedules = remaining
        if self._current_id == schedule_id:
            self._current_id = remaining[0].id
        self._save()
        return True
