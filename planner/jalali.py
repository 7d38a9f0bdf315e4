"""Conversion of Jalali (Solar Hijri) dates to Gregorian dates."""

import re
from datetime import date

import jdatetime

from catalog.text import to_english_digits

_DATE_PATTERN = re.compile(r"^(\d{4})[/.\-](\d{1,2})[/.\-](\d{1,2})$")


def jalali_to_gregorian(text: str) -> date:
    """Convert a Jalali date string to a Gregorian date.
    
    Args:
        text: Date like "1404/11/18"; "." and "-" separators and
            Persian or Arabic-Indic digits are accepted.
            
    Returns:
        The same day in the Gregorian calendar.
        
    Raises:
        ValueError: If the text is malformed or names no real day.
    """
    match = _DATE_PATTERN.match(to_english_digits((text or "").strip()))
    if not match:
        raise ValueError(f"Invalid Jalali date: {text!r}")
    
    year, month, day = map(int, match.groups())
    return jdatetime.date(year, month, day).togregorian()
