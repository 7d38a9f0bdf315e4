"""Tests for the command-line interface."""
import json

import pytest

from course_planner import main, parse_session_arg


@pytest.fixture
def paths(tmp_path) -> list[str]:
    catalog = {
        "semester": "14042",
        "semesterLabel": "",
        "department": "",
        "courses": [
            {"courseCode": "1511001", "group": 1, "courseName": "Algebra", "unitCount": 3,
             "sessions": [{"dayOfWeek": 6, "startTime": "08:00", "endTime": "10:00"}],
             "examDate": "1405/04/20", "examTime": "10:00"},
            {"courseCode": "1511002", "group": 1, "courseName": "Calculus", "unitCount": 4,
             "sessions": [{"dayOfWeek": 6, "startTime": "09:00", "endTime": "11:00"}],
             "examDate": "1405/04/20", "examTime": "10:00"},
        ],
    }
    catalog_path = tmp_path / "courses.json"
    catalog_path.write_text(json.dumps(catalog), encoding="utf-8")
    return ["--catalog", str(catalog_path), "--state", str(tmp_path / "state.json")]


def test_parse_session_arg() -> None:
    assert parse_session_arg("6 08:00-10:00") == (6, "08:00", "10:00")


def test_add_reports_conflicts(paths, capsys) -> None:
    main(paths + ["add", "1511001", "1"])
    main(paths + ["add", "1511002", "1"])

    out = capsys.readouterr().out
    assert "time conflict with Algebra" in out
    assert "exam conflict with Algebra" in out
    assert "Total units: 7" in out


def test_add_unknown_course_fails(paths, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(paths + ["add", "9999", "1"])

    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_show_marks_overlapping_sessions(paths, capsys) -> None:
    main(paths + ["add", "1511001", "1"])
    main(paths + ["show", "--preview", "1511002", "1"])

    out = capsys.readouterr().out
    assert "lane 1/2" in out
    assert "lane 2/2" in out
    assert "[hover]" in out


def test_schedule_cap(paths, capsys) -> None:
    for _ in range(4):
        main(paths + ["new-schedule"])

    with pytest.raises(SystemExit) as exc:
        main(paths + ["new-schedule"])

    assert exc.value.code == 1
    assert "at most 5" in capsys.readouterr().err


def test_export_ics(paths, tmp_path, capsys) -> None:
    main(paths + ["add", "1511001", "1"])
    main(paths + ["export-ics", "-o", str(tmp_path / "plan")])

    data = (tmp_path / "plan.ics").read_bytes()
    assert data.startswith(b"BEGIN:VCALENDAR")
    assert b"UID:1511001-1-0@plan.csut.ir" in data


def test_export_empty_schedule_fails(paths, tmp_path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(paths + ["export-ics", "-o", str(tmp_path / "plan.ics")])

    assert exc.value.code == 1


def test_share_file_round_trip(paths, tmp_path, capsys) -> None:
    share = tmp_path / "share.json"
    main(paths + ["add", "1511001", "1"])
    main(paths + ["export-json", "-o", str(share)])
    main(paths + ["new-schedule"])
    main(paths + ["import-json", str(share)])

    assert "1 added, 0 already present, 0 not in catalog." in capsys.readouterr().out
