"""Abstract base class for schedule transformers."""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Union

from catalog.models import Course
from planner.view import Persisted, ViewEntry

ScheduleItem = Union[ViewEntry, Course]


class BaseTransformer(ABC):
    """Abstract base class defining the interface for schedule transformers.
    
    Extend this class to implement transformers for different output formats
    (e.g., iCalendar, schedule share files, etc.).
    """
    
    @staticmethod
    def saved_courses(items: Iterable[ScheduleItem]) -> list[Course]:
        """Unwrap the items that belong to the saved schedule.
        
        Plain courses count as saved; preview-only entries are dropped.
        """
        courses = []
        for item in items:
            if isinstance(item, Course):
                courses.append(item)
            elif isinstance(item, Persisted):
                courses.append(item.course)
        return courses
    
    @abstractmethod
    def transform(self, items: Iterable[ScheduleItem]) -> Any:
        """Transform the courses of a schedule into the target format.
        
        Args:
            items: Courses or view entries of the schedule.
            
        Returns:
            Transformed data in the target format.
        """
        pass
    
    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.
        
        Args:
            output_path: Path to the output file.
        """
        pass
