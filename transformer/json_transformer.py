"""Schedule share files: a list of (courseCode, group) references."""

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from catalog.models import Catalog, Course
from .base import BaseTransformer, ScheduleItem


@dataclass
class ImportResult:
    """Outcome of resolving a share file against the catalog."""
    
    found: list[Course] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)  # "code-group"


class ScheduleJsonTransformer(BaseTransformer):
    """Transformer that writes a schedule as catalog references."""
    
    def __init__(self) -> None:
        self._document: Optional[dict[str, Any]] = None
    
    def transform(self, items: Iterable[ScheduleItem]) -> dict[str, Any]:
        self._document = {
            "courses": [
                {"courseCode": c.course_code, "group": c.group}
                for c in self.saved_courses(items)
            ]
        }
        return self._document
    
    def save(self, output_path: str) -> None:
        """Save the share file as pretty-printed JSON.
        
        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._document is None:
            raise RuntimeError("No schedule data. Call transform() first.")
        
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self._document, f, ensure_ascii=False, indent=2)


def resolve_schedule_document(data: Any, catalog: Catalog) -> ImportResult:
    """Look up the courses referenced by a share document.
    
    Raises:
        ValueError: If the document does not have the share file shape.
    """
    if not isinstance(data, dict) or not isinstance(data.get("courses"), list):
        raise ValueError("Invalid schedule file: missing courses list")
    
    result = ImportResult()
    for entry in data["courses"]:
        code = entry.get("courseCode") if isinstance(entry, dict) else None
        group = entry.get("group") if isinstance(entry, dict) else None
        if not isinstance(code, str) or isinstance(group, bool) or not isinstance(group, int):
            raise ValueError(f"Invalid schedule file entry: {entry!r}")
        
        course = catalog.find(code, group)
        if course is None:
            result.not_found.append(f"{code}-{group}")
        else:
            result.found.append(course)
    return result


def read_schedule_file(path: str, catalog: Catalog) -> ImportResult:
    """Read a share file and resolve it against the catalog.
    
    Raises:
        ValueError: If the file is not valid JSON or has the wrong shape.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return resolve_schedule_document(data, catalog)
