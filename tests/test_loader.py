"""Tests for catalog loading and merging."""
import json

import pytest

from catalog.loader import load_catalog, merge_gathered, save_catalog
from catalog.models import Gender


def write_json(path, data) -> None:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def course_record(code: str, group: int = 1, **extra) -> dict:
    record = {
        "courseCode": code,
        "group": group,
        "courseName": f"Course {code}",
        "unitCount": 3,
        "gender": "mixed",
        "professor": "",
        "sessions": [{"dayOfWeek": 6, "startTime": "08:00", "endTime": "10:00"}],
        "examDate": "1405/04/20",
        "examTime": "10:00",
        "location": "",
        "prerequisites": "",
        "notes": "",
        "grade": "",
    }
    record.update(extra)
    return record


def test_load_catalog(tmp_path) -> None:
    path = tmp_path / "courses.json"
    write_json(path, {
        "semester": "14042",
        "semesterLabel": "label",
        "fetchedAt": "2026-01-01T00:00:00Z",
        "department": "dept",
        "courses": [course_record("A"), course_record("B", gender="female")],
    })

    catalog = load_catalog(path)

    assert catalog.semester == "14042"
    assert [c.key for c in catalog.courses] == [("A", 1), ("B", 1)]
    assert catalog.find("B", 1).gender is Gender.FEMALE
    assert catalog.find("A", 1).sessions[0].day_of_week == 6
    assert catalog.find("A", 2) is None


def test_invalid_sessions_and_records_are_skipped(tmp_path) -> None:
    path = tmp_path / "courses.json"
    bad_session = {"dayOfWeek": 6, "startTime": "10:00", "endTime": "08:00"}
    write_json(path, {"courses": [
        course_record("A", sessions=[bad_session]),
        course_record("B", gender="robot"),
        {"courseName": "no code"},
    ]})

    catalog = load_catalog(path)

    assert [c.key for c in catalog.courses] == [("A", 1)]
    assert catalog.courses[0].sessions == ()


def test_non_catalog_file_is_rejected(tmp_path) -> None:
    path = tmp_path / "courses.json"
    write_json(path, [1, 2])

    with pytest.raises(ValueError):
        load_catalog(path)


def test_save_then_load(tmp_path) -> None:
    source = tmp_path / "in.json"
    write_json(source, {"semester": "1", "semesterLabel": "", "department": "", "courses": [course_record("A")]})
    catalog = load_catalog(source)
    target = tmp_path / "out" / "courses.json"

    save_catalog(catalog, target)

    assert load_catalog(target).courses == catalog.courses


def test_merge_gathered_later_files_win(tmp_path) -> None:
    write_json(tmp_path / "001.json", [
        {"code": "1511001", "group": 1, "name": "جبر", "units": 3, "gender": "پسران",
         "professor": "علي", "sessions": ["6 08:00-10:00"], "exam": "1405/04/20 10:00",
         "notes": "پیش نیاز"},
        {"code": "1511002", "group": 1, "name": "Old", "units": 2, "gender": "مخت", "sessions": []},
    ])
    write_json(tmp_path / "002.json", [
        {"code": "1511002", "group": 1, "name": "New", "units": 2, "gender": "دختران",
         "sessions": ["1 13:00-15:00"]},
    ])

    catalog = merge_gathered(tmp_path, semester="14042", semester_label="", department="")

    first = catalog.find("1511001", 1)
    assert first.gender is Gender.MALE
    assert first.professor == "علی"
    assert first.notes == ""
    assert (first.exam_date, first.exam_time) == ("1405/04/20", "10:00")
    second = catalog.find("1511002", 1)
    assert second.course_name == "New"
    assert second.gender is Gender.FEMALE
    assert second.sessions[0].day_of_week == 1


def test_merge_empty_directory_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        merge_gathered(tmp_path, semester="", semester_label="", department="")
