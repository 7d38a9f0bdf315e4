"""Loading, merging and saving course catalog JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, Union

from .models import Catalog, Course, Gender, Session
from .text import normalize_persian

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

GENDER_LABELS = {
    "پسران": Gender.MALE,
    "دختران": Gender.FEMALE,
    "مخت": Gender.MIXED,
}

# Prerequisite column labels that older scrapes leaked into notes
PREREQ_LABELS = {"پيش نياز", "پیش نیاز", "همنياز", "همنیاز", "معادل", "متضاد"}


def _parse_sessions(record: dict[str, Any]) -> tuple[Session, ...]:
    sessions: list[Session] = []
    for raw in record.get("sessions") or []:
        try:
            sessions.append(Session.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "Skipping invalid session %r of %s-%s: %s",
                raw, record.get("courseCode"), record.get("group"), e
            )
    return tuple(sessions)


def parse_courses(records: list[dict[str, Any]]) -> list[Course]:
    """Parse catalog course records, skipping the ones that are invalid.
    
    Args:
        records: Course records in the catalog's camelCase schema.
        
    Returns:
        Parsed courses in input order.
    """
    courses: list[Course] = []
    for record in records:
        try:
            courses.append(Course.from_dict(record, sessions=_parse_sessions(record)))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid course record %r: %s", record.get("courseCode"), e)
    return courses


def load_catalog(path: PathLike) -> Catalog:
    """Load a catalog file produced by the scraper or the merge step.
    
    Args:
        path: Path to courses.json.
        
    Returns:
        The loaded catalog.
        
    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a catalog document.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    
    if not isinstance(data, dict) or not isinstance(data.get("courses"), list):
        raise ValueError(f"Not a course catalog: {path}")
    
    courses = parse_courses(data["courses"])
    logger.info("Loaded %d courses from %s", len(courses), path)
    
    return Catalog(
        semester=str(data.get("semester", "")),
        semester_label=data.get("semesterLabel", ""),
        department=data.get("department", ""),
        courses=courses,
        fetched_at=data.get("fetchedAt", ""),
    )


def save_catalog(catalog: Catalog, path: PathLike) -> None:
    """Write a catalog as pretty-printed UTF-8 JSON."""
    data: dict[str, Any] = {
        "semester": catalog.semester,
        "semesterLabel": catalog.semester_label,
    }
    if catalog.fetched_at:
        data["fetchedAt"] = catalog.fetched_at
    data["department"] = catalog.department
    data["courses"] = [c.to_dict() for c in catalog.courses]
    
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _clean_notes(raw: str) -> str:
    text = (raw or "").strip()
    if text in PREREQ_LABELS:
        return ""
    return text


def expand_compact_record(record: dict[str, Any]) -> dict[str, Any]:
    """Expand a gathered (compact) record into the catalog schema.
    
    Compact sessions look like "0 13:00-15:00" and the exam like
    "1405/04/20 10:00".
    """
    sessions = []
    for raw in record.get("sessions") or []:
        day, _, times = raw.partition(" ")
        start, _, end = times.partition("-")
        sessions.append({"dayOfWeek": int(day), "startTime": start, "endTime": end})
    
    exam_date, _, exam_time = (record.get("exam") or "").partition(" ")
    gender = GENDER_LABELS.get(record.get("gender", ""), Gender.MIXED)
    
    return {
        "courseCode": str(record["code"]),
        "group": record["group"],
        "courseName": normalize_persian(record.get("name", "")),
        "unitCount": record["units"],
        "gender": gender.value,
        "professor": normalize_persian(record.get("professor", "")),
        "sessions": sessions,
        "examDate": exam_date,
        "examTime": exam_time,
        "location": normalize_persian(record.get("location") or ""),
        "prerequisites": normalize_persian(record.get("prereqs") or ""),
        "notes": normalize_persian(_clean_notes(record.get("notes", ""))),
        "grade": "",
    }


def merge_gathered(
    directory: PathLike,
    semester: str,
    semester_label: str,
    department: str
) -> Catalog:
    """Merge every gathered JSON file of a directory into one catalog.
    
    Files are read in filename order; a later file overrides an earlier
    one for the same (code, group).
    
    Args:
        directory: Directory holding compact *.json files.
        semester: Term code stored in the catalog header.
        semester_label: Human readable term label.
        department: Department name.
        
    Returns:
        The merged catalog.
        
    Raises:
        FileNotFoundError: If the directory holds no JSON files.
    """
    files = sorted(Path(directory).glob("*.json"))
    if not files:
        raise FileNotFoundError(f"No JSON files found in {directory}")
    
    merged: dict[tuple[str, Any], dict[str, Any]] = {}
    for file in files:
        with open(file, encoding="utf-8") as f:
            records = json.load(f)
        logger.info("%s: %d courses", file.name, len(records))
        
        for record in records:
            merged[(str(record["code"]), record["group"])] = record
    
    expanded = []
    for record in merged.values():
        try:
            expanded.append(expand_compact_record(record))
        except (KeyError, ValueError) as e:
            logger.warning("Skipping malformed gathered record %r: %s", record.get("code"), e)
    
    return Catalog(
        semester=semester,
        semester_label=semester_label,
        department=department,
        courses=parse_courses(expanded),
    )
