"""Academic term boundaries and weekday numbering."""

from dataclasses import dataclass
from datetime import date, timedelta

from .jalali import jalali_to_gregorian

# Domain days: 6=Saturday, 0=Sunday, 1=Monday, ..., 5=Friday
ICAL_WEEKDAYS: dict[int, str] = {
    6: "SA",
    0: "SU",
    1: "MO",
    2: "TU",
    3: "WE",
    4: "TH",
    5: "FR",
}

# Domain day to date.weekday() (Monday=0 ... Sunday=6)
PYTHON_WEEKDAYS: dict[int, int] = {
    6: 5,
    0: 6,
    1: 0,
    2: 1,
    3: 2,
    4: 3,
    5: 4,
}


def ical_weekday(day_of_week: int) -> str:
    """Return the iCalendar BYDAY token of a domain day, "" if unknown."""
    return ICAL_WEEKDAYS.get(day_of_week, "")


def python_weekday(day_of_week: int) -> int:
    """Return the date.weekday() number of a domain day.
    
    Raises:
        KeyError: If the day is outside 0-6.
    """
    return PYTHON_WEEKDAYS[day_of_week]


def first_occurrence(start: date, day_of_week: int) -> date:
    """Find the first date on or after start falling on the given domain day."""
    target = python_weekday(day_of_week)
    current = start
    for _ in range(7):
        if current.weekday() == target:
            return current
        current += timedelta(days=1)
    raise ValueError(f"Weekday {day_of_week} never occurs")  # unreachable for 0-6


@dataclass(frozen=True)
class AcademicTerm:
    """Gregorian date range, time zone and label of a term."""
    
    start: date
    end: date
    timezone: str = "Asia/Tehran"
    utc_offset: timedelta = timedelta(hours=3, minutes=30)
    label: str = ""
    
    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Term start {self.start} is after term end {self.end}")
    
    @classmethod
    def from_jalali(
        cls,
        start: str,
        end: str,
        timezone: str = "Asia/Tehran",
        utc_offset: timedelta = timedelta(hours=3, minutes=30),
        label: str = ""
    ) -> "AcademicTerm":
        """Build a term from Jalali start and end dates.
        
        Raises:
            ValueError: If a date is invalid or start is after end.
        """
        return cls(
            start=jalali_to_gregorian(start),
            end=jalali_to_gregorian(end),
            timezone=timezone,
            utc_offset=utc_offset,
            label=label,
        )
