from datetime import timedelta
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .layout import TimeWindow
from .term import AcademicTerm


class Settings(BaseSettings):
    # --- Term ---
    TERM_CODE: str = "14042"
    TERM_LABEL: str = "نیمسال دوم ۱۴۰۴-۱۴۰۵"
    TERM_START: str = "1404/11/18"
    TERM_END: str = "1405/03/31"
    DEPARTMENT: str = "دانشکده ریاضی، آمار و علوم کامپیوتر"

    # --- Calendar export ---
    TIMEZONE: str = "Asia/Tehran"
    UTC_OFFSET_MINUTES: int = 210
    PRODID: str = "-//plan.csut.ir//Course Schedule//FA"
    CALENDAR_NAME: str = "برنامه هفتگی دانشکده"
    UID_DOMAIN: str = "plan.csut.ir"
    EXAM_DURATION_MINUTES: int = 120

    # --- Weekly grid ---
    DAY_START_HOUR: int = 7
    DAY_END_HOUR: int = 20

    # --- Files ---
    CATALOG_FILE: str = "data/courses.json"
    STATE_FILE: str = "plan-state.json"

    # --- Logging ---
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="PLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

    def term(self) -> AcademicTerm:
        return AcademicTerm.from_jalali(
            self.TERM_START,
            self.TERM_END,
            timezone=self.TIMEZONE,
            utc_offset=timedelta(minutes=self.UTC_OFFSET_MINUTES),
            label=self.TERM_LABEL,
        )

    def window(self) -> TimeWindow:
        return TimeWindow(self.DAY_START_HOUR, self.DAY_END_HOUR)


settings = Settings()
