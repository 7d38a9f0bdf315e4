"""iCalendar transformer for weekly course schedules."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event, Timezone, TimezoneStandard, vRecur

from catalog.models import Course
from catalog.text import parse_clock
from planner.jalali import jalali_to_gregorian
from planner.term import AcademicTerm, first_occurrence, ical_weekday
from .base import BaseTransformer, ScheduleItem

logger = logging.getLogger(__name__)


class ICalTransformer(BaseTransformer):
    """Transformer that projects weekly sessions onto a term as iCalendar.
    
    Each session becomes a weekly recurring event from its first day in
    the term until the term's last day. A course with an exam date and
    time gets one extra single event for the exam. No generation time is
    written, so identical input yields identical bytes.
    """
    
    def __init__(
        self,
        term: AcademicTerm,
        prodid: str = "-//plan.csut.ir//Course Schedule//FA",
        calendar_name: str = "برنامه هفتگی دانشکده",
        uid_domain: str = "plan.csut.ir",
        exam_duration: timedelta = timedelta(hours=2)
    ) -> None:
        """Initialize the iCalendar transformer.
        
        Args:
            term: Term the weekly pattern is projected onto.
            prodid: PRODID of the generated calendar.
            calendar_name: Display name (X-WR-CALNAME).
            uid_domain: Domain part of event UIDs.
            exam_duration: Length of exam events.
        """
        self._term = term
        self._prodid = prodid
        self._calendar_name = calendar_name
        self._uid_domain = uid_domain
        self._exam_duration = exam_duration
        self._tz = ZoneInfo(term.timezone)
        self._calendar: Optional[Calendar] = None
    
    def _session_uid(self, course: Course, index: int) -> str:
        return f"{course.course_code}-{course.group}-{index}@{self._uid_domain}"
    
    def _exam_uid(self, course: Course) -> str:
        return f"exam-{course.course_code}-{course.group}@{self._uid_domain}"
    
    def _until(self) -> datetime:
        """End of the term's last day, local time, expressed in UTC."""
        local_end = datetime.combine(
            self._term.end,
            time(23, 59, 59),
            tzinfo=timezone(self._term.utc_offset)
        )
        return local_end.astimezone(timezone.utc)
    
    def _build_timezone(self) -> Timezone:
        """Fixed-offset VTIMEZONE for the term's zone."""
        standard = TimezoneStandard()
        standard.add("dtstart", datetime(1970, 1, 1))
        standard.add("tzoffsetfrom", self._term.utc_offset)
        standard.add("tzoffsetto", self._term.utc_offset)
        
        vtimezone = Timezone()
        vtimezone.add("tzid", self._term.timezone)
        vtimezone.add_component(standard)
        return vtimezone
    
    def _local(self, day: date, clock: time) -> datetime:
        return datetime.combine(day, clock, tzinfo=self._tz)
    
    def _session_description(self, course: Course) -> str:
        lines = [f"استاد: {course.professor}"]
        if course.location:
            lines.append(f"محل: {course.location}")
        if course.exam_date:
            lines.append(f"امتحان: {course.exam_date} ساعت {course.exam_time}")
        if course.notes:
            lines.append(f"توضیحات: {course.notes}")
        return "\n".join(lines)
    
    def _session_events(self, course: Course) -> list[Event]:
        events = []
        for index, session in enumerate(course.sessions):
            byday = ical_weekday(session.day_of_week)
            if not byday:
                continue
            
            first_date = first_occurrence(self._term.start, session.day_of_week)
            
            ical_event = Event()
            ical_event.add("uid", self._session_uid(course, index))
            ical_event.add("dtstart", self._local(first_date, session.start_time))
            ical_event.add("dtend", self._local(first_date, session.end_time))
            ical_event.add("rrule", vRecur({
                "freq": "WEEKLY",
                "until": self._until(),
                "byday": byday,
            }))
            ical_event.add("summary", f"{course.course_name} (گروه {course.group})")
            ical_event.add("description", self._session_description(course))
            if course.location:
                ical_event.add("location", course.location)
            events.append(ical_event)
        return events
    
    def _exam_event(self, course: Course) -> Optional[Event]:
        """Single event for the course's exam, or None when unavailable.
        
        An exam date or time that cannot be parsed only drops this event.
        """
        if not course.exam_date or not course.exam_time:
            return None
        
        try:
            exam_day = jalali_to_gregorian(course.exam_date)
            exam_clock = parse_clock(course.exam_time)
        except ValueError as e:
            logger.warning(
                "Skipping exam of %s-%s: %s", course.course_code, course.group, e
            )
            return None
        
        start = self._local(exam_day, exam_clock)
        
        ical_event = Event()
        ical_event.add("uid", self._exam_uid(course))
        ical_event.add("dtstart", start)
        ical_event.add("dtend", start + self._exam_duration)
        ical_event.add("summary", f"امتحان {course.course_name}")
        ical_event.add("description", f"گروه {course.group} - استاد: {course.professor}")
        if course.location:
            ical_event.add("location", course.location)
        return ical_event
    
    def transform(self, items: Iterable[ScheduleItem]) -> Calendar:
        """Transform the saved courses of a schedule into iCalendar format.
        
        Args:
            items: Courses or view entries; preview-only entries are skipped.
            
        Returns:
            iCalendar Calendar object.
        """
        self._calendar = Calendar()
        self._calendar.add("prodid", self._prodid)
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", self._calendar_name)
        self._calendar.add("x-wr-timezone", self._term.timezone)
        self._calendar.add_component(self._build_timezone())
        
        for course in self.saved_courses(items):
            session_events = self._session_events(course)
            exam_event = self._exam_event(course)
            
            # Exam follows the first class event, or stands alone
            if session_events:
                self._calendar.add_component(session_events[0])
            if exam_event is not None:
                self._calendar.add_component(exam_event)
            for ical_event in session_events[1:]:
                self._calendar.add_component(ical_event)
        
        return self._calendar
    
    def to_ical(self) -> bytes:
        """Serialized calendar.
        
        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        return self._calendar.to_ical()
    
    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.
        
        Args:
            output_path: Path to the output file.
            
        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        data = self.to_ical()
        
        with open(output_path, "wb") as f:
            f.write(data)
