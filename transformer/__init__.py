"""Transformer module for converting schedules to various output formats."""

from .base import BaseTransformer
from .ical_transformer import ICalTransformer
from .json_transformer import ImportResult, ScheduleJsonTransformer, read_schedule_file

__all__ = [
    "BaseTransformer",
    "ICalTransformer",
    "ImportResult",
    "ScheduleJsonTransformer",
    "read_schedule_file",
]
