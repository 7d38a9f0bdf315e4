"""Tests for parsing the offering report markup."""
from datetime import time

from catalog.models import Gender
from catalog.scraper import parse_exam_text, parse_page_count, parse_report_page, parse_sessions_text

REPORT_PAGE = """
<html><body>
<div>صفحه ۱ از ۲۲</div>
<table>
  <tbody>
    <tr><td>شماره</td><td>نام درس</td></tr>
    <tr>
      <td>۱۵۱۱۰۰۱_۰۲</td>
      <td>مباني كامپيوتر</td>
      <td>3</td>
      <td>مرد</td>
      <td>دکتر احمدی</td>
      <td>درس(ت): یک شنبه 8:00-10:00، سه‌شنبه 08:00-10:00 امتحان(1405.04.20) ساعت : 10:00-12:00</td>
      <td>کلاس ۱۰۱</td>
      <td>پیش نیاز: ریاضی ۱</td>
      <td>ظرفیت محدود</td>
    </tr>
    <tr>
      <td>1511009-1</td>
      <td>سمینار</td>
      <td>1</td>
      <td></td>
      <td></td>
      <td></td>
      <td></td>
      <td></td>
    </tr>
  </tbody>
</table>
</body></html>
"""


def test_parse_report_page() -> None:
    courses = parse_report_page(REPORT_PAGE)

    assert [c.key for c in courses] == [("1511001", 2), ("1511009", 1)]
    first = courses[0]
    assert first.course_name == "مبانی کامپیوتر"
    assert first.unit_count == 3
    assert first.gender is Gender.MALE
    assert [(s.day_of_week, s.start_time) for s in first.sessions] == [(0, time(8, 0)), (2, time(8, 0))]
    assert (first.exam_date, first.exam_time) == ("1405/04/20", "10:00")
    assert first.location == "کلاس ۱۰۱"
    assert first.notes == "ظرفیت محدود"

    second = courses[1]
    assert second.sessions == ()
    assert second.exam_date == ""
    assert second.gender is Gender.MIXED


def test_plain_saturday_is_not_confused_with_compound_days() -> None:
    sessions = parse_sessions_text("شنبه 13:00-15:00، یکشنبه 13:00-15:00، پنج شنبه 9:00-11:00")

    assert [s.day_of_week for s in sessions] == [6, 0, 4]
    assert sessions[2].start_time == time(9, 0)


def test_invalid_session_is_skipped() -> None:
    assert parse_sessions_text("دوشنبه 15:00-13:00") == []


def test_exam_text_absent() -> None:
    assert parse_exam_text("درس(ت): شنبه 08:00-10:00") == ("", "")


def test_page_count() -> None:
    assert parse_page_count(REPORT_PAGE) == 22
    assert parse_page_count("<html><body><table></table></body></html>") == 1
