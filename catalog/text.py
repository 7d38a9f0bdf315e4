"""Digit, letter and clock helpers for Persian catalog text."""

import re
from datetime import time
from typing import Union

PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"

_TO_ENGLISH = str.maketrans(
    PERSIAN_DIGITS + ARABIC_DIGITS, "0123456789" * 2
)
_TO_PERSIAN = str.maketrans("0123456789", PERSIAN_DIGITS)

# Arabic letter variants that show up in registrar exports
_PERSIAN_LETTERS = str.maketrans({
    "ي": "ی",
    "ك": "ک",
    "أ": "ا",
    "إ": "ا",
    "ؤ": "و",
    "ة": "ه",
})

WEEK_DAYS: dict[int, str] = {
    6: "شنبه",
    0: "یکشنبه",
    1: "دوشنبه",
    2: "سه‌شنبه",
    3: "چهارشنبه",
    4: "پنجشنبه",
    5: "جمعه",
}

# Days shown on the weekly grid, Saturday first
WEEK_DAYS_ORDER = [6, 0, 1, 2, 3]

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def to_english_digits(text: str) -> str:
    """Replace Persian and Arabic-Indic digits with ASCII digits."""
    return text.translate(_TO_ENGLISH)


def to_persian_digits(value: Union[str, int]) -> str:
    """Render ASCII digits of a value with Persian digits."""
    return str(value).translate(_TO_PERSIAN)


def normalize_persian(text: str) -> str:
    """Map Arabic letter variants to their Persian equivalents."""
    if not text:
        return ""
    return text.translate(_PERSIAN_LETTERS)


def normalize_query(text: str) -> str:
    """Normalize free text for case- and digit-insensitive matching."""
    if not isinstance(text, str):
        return ""
    return to_english_digits(text.strip().lower())


def tokenize_query(normalized: str) -> list[str]:
    """Split a normalized query into non-empty words."""
    return normalized.split()


def matches_all_tokens(tokens: list[str], target: str) -> bool:
    """Check that every token appears somewhere in target."""
    return all(token in target for token in tokens)


def day_name(day_of_week: int) -> str:
    return WEEK_DAYS.get(day_of_week, "")


def parse_clock(text: str) -> time:
    """Parse a clock string like "8:00" or "۰۸:۳۰".
    
    Args:
        text: Clock time with one- or two-digit hour, in any digit script.
        
    Returns:
        Parsed time of day.
        
    Raises:
        ValueError: If the text is not a valid HH:MM clock time.
    """
    match = _CLOCK_PATTERN.match(to_english_digits(text or ""))
    if not match:
        raise ValueError(f"Cannot parse clock time: {text!r}")
    
    hour, minute = map(int, match.groups())
    return time(hour, minute)


def format_clock(value: time) -> str:
    """Format a time of day as zero-padded "HH:MM"."""
    return value.strftime("%H:%M")
