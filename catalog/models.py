"""Data models for catalog course sections."""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Any, Optional

from .text import format_clock, parse_clock


class Gender(str, Enum):
    """Enrollment gender restriction of a section."""
    
    MALE = "male"
    FEMALE = "female"
    MIXED = "mixed"


@dataclass(frozen=True)
class Session:
    """One recurring weekly meeting block of a section."""
    
    day_of_week: int  # 6=Saturday, 0=Sunday, ..., 5=Friday
    start_time: time
    end_time: time
    
    def __post_init__(self) -> None:
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"Day of week must be 0-6, got {self.day_of_week}")
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        return cls(
            day_of_week=int(data["dayOfWeek"]),
            start_time=parse_clock(data["startTime"]),
            end_time=parse_clock(data["endTime"]),
        )
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week,
            "startTime": format_clock(self.start_time),
            "endTime": format_clock(self.end_time),
        }


@dataclass(frozen=True)
class Course:
    """A catalog section, identified by (course_code, group)."""
    
    course_code: str
    group: int
    course_name: str
    unit_count: int
    gender: Gender = Gender.MIXED
    professor: str = ""
    sessions: tuple[Session, ...] = ()
    exam_date: str = ""  # Jalali, e.g. "1405/04/20"
    exam_time: str = ""  # "HH:MM"
    location: str = ""
    prerequisites: str = ""
    notes: str = ""
    grade: str = ""
    
    @property
    def key(self) -> tuple[str, int]:
        return (self.course_code, self.group)
    
    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        sessions: Optional[tuple[Session, ...]] = None
    ) -> "Course":
        """Build a course from its catalog JSON record.
        
        Args:
            data: Record using the catalog's camelCase keys.
            sessions: Already parsed sessions. When omitted, every entry
                of data["sessions"] is parsed and must be valid.
                
        Returns:
            The course.
            
        Raises:
            KeyError: If a required key is missing.
            ValueError: If a field has an invalid value.
        """
        if sessions is None:
            sessions = tuple(Session.from_dict(s) for s in data.get("sessions") or [])
        
        return cls(
            course_code=str(data["courseCode"]),
            group=int(data["group"]),
            course_name=data["courseName"],
            unit_count=int(data["unitCount"]),
            gender=Gender(data.get("gender") or Gender.MIXED.value),
            professor=data.get("professor") or "",
            sessions=sessions,
            exam_date=data.get("examDate") or "",
            exam_time=data.get("examTime") or "",
            location=data.get("location") or "",
            prerequisites=data.get("prerequisites") or "",
            notes=data.get("notes") or "",
            grade=data.get("grade") or "",
        )
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "courseCode": self.course_code,
            "group": self.group,
            "courseName": self.course_name,
            "unitCount": self.unit_count,
            "gender": self.gender.value,
            "professor": self.professor,
            "sessions": [s.to_dict() for s in self.sessions],
            "examDate": self.exam_date,
            "examTime": self.exam_time,
            "location": self.location,
            "prerequisites": self.prerequisites,
            "notes": self.notes,
            "grade": self.grade,
        }


@dataclass
class Catalog:
    """Course offerings of one department for one academic term."""
    
    semester: str
    semester_label: str
    department: str
    courses: list[Course] = field(default_factory=list)
    fetched_at: str = ""
    
    def find(self, course_code: str, group: int) -> Optional[Course]:
        for course in self.courses:
            if course.course_code == course_code and course.group == group:
                return course
        return None
