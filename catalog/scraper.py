"""Course offering report scraper for the university EMS portal."""

import logging
import re
import time
from typing import Optional

from bs4 import BeautifulSoup, Tag
from selenium import webdriver
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.chrome.options import Options as ChromeOptions

from .models import Course, Gender, Session
from .text import normalize_persian, parse_clock, to_english_digits

logger = logging.getLogger(__name__)

# Day names as they appear in the report, whitespace and ZWNJ removed
DAY_NUMBERS = {
    "شنبه": 6,
    "یکشنبه": 0,
    "دوشنبه": 1,
    "سهشنبه": 2,
    "چهارشنبه": 3,
    "پنجشنبه": 4,
    "جمعه": 5,
}

# Compound names first so "یک شنبه" is not read as plain "شنبه"
SESSION_PATTERN = re.compile(
    r"(یک[\s\u200c]?شنبه|دو[\s\u200c]?شنبه|سه[\s\u200c]?شنبه|چهار[\s\u200c]?شنبه"
    r"|پنج[\s\u200c]?شنبه|شنبه|جمعه)\s+(\d{1,2}:\d{2})\s*[-–]\s*(\d{1,2}:\d{2})"
)

EXAM_PATTERN = re.compile(
    r"امتحان\s*\((\d{4})[./](\d{2})[./](\d{2})\)\s*ساعت\s*:\s*(\d{1,2}:\d{2})"
)

CODE_GROUP_PATTERN = re.compile(r"(\d+)[_-](\d+)")

PAGE_INFO_PATTERN = re.compile(r"صفحه\s*(\d+)\s*از\s*(\d+)")

ROW_SELECTORS = ["table tbody tr", ".smart-grid-row", "[role='row']", ".data-row"]

NEXT_PAGE_SELECTORS = [
    "button[title*='بعد']",
    "button[title*='next']",
    ".page-next",
    "[aria-label*='next']",
    "[aria-label*='بعد']",
]


def parse_sessions_text(text: str) -> list[Session]:
    """Extract weekly sessions from a schedule cell.
    
    Args:
        text: Text like "درس(ت): شنبه 13:00-15:00، دوشنبه 13:00-15:00".
        
    Returns:
        Sessions in order of appearance; malformed ones are skipped.
    """
    sessions: list[Session] = []
    for match in SESSION_PATTERN.finditer(normalize_persian(to_english_digits(text))):
        day_key = re.sub(r"[\s\u200c]", "", match.group(1))
        day = DAY_NUMBERS.get(day_key)
        if day is None:
            continue
        try:
            sessions.append(Session(day, parse_clock(match.group(2)), parse_clock(match.group(3))))
        except ValueError as e:
            logger.warning("Skipping invalid session %r: %s", match.group(0), e)
    return sessions


def parse_exam_text(text: str) -> tuple[str, str]:
    """Extract (exam_date, exam_time) from a schedule cell.
    
    Args:
        text: Text containing e.g. "امتحان(1405.04.20) ساعت : 10:00-10:00".
        
    Returns:
        ("1405/04/20", "10:00"), or two empty strings when absent.
    """
    match = EXAM_PATTERN.search(to_english_digits(text))
    if not match:
        return "", ""
    year, month, day, clock = match.groups()
    return f"{year}/{month}/{day}", clock.zfill(5)


def _parse_gender(text: str) -> Gender:
    if "مرد" in text or "پسران" in text:
        return Gender.MALE
    if "زن" in text or "دختران" in text:
        return Gender.FEMALE
    return Gender.MIXED


def parse_report_row(row: Tag) -> Optional[Course]:
    """Parse one row of the offering report.
    
    Columns: code_group, name, units, gender, professor, sessions and
    exam, location, prerequisites, notes.
    
    Args:
        row: BeautifulSoup Tag of a table row.
        
    Returns:
        The course, or None for header and filler rows.
    """
    cells = [c.get_text(separator=" ", strip=True) for c in row.find_all("td")]
    if len(cells) < 8:
        return None
    
    code_match = CODE_GROUP_PATTERN.search(to_english_digits(cells[0]))
    if not code_match:
        return None
    
    unit_match = re.search(r"(\d+)", to_english_digits(cells[2]))
    schedule_text = cells[5]
    exam_date, exam_time = parse_exam_text(schedule_text)
    
    return Course(
        course_code=code_match.group(1),
        group=int(code_match.group(2)),
        course_name=normalize_persian(cells[1]),
        unit_count=int(unit_match.group(1)) if unit_match else 0,
        gender=_parse_gender(cells[3]),
        professor=normalize_persian(cells[4]),
        sessions=tuple(parse_sessions_text(schedule_text)),
        exam_date=exam_date,
        exam_time=exam_time,
        location=normalize_persian(cells[6]),
        prerequisites=normalize_persian(cells[7]),
        notes=normalize_persian(cells[8]) if len(cells) > 8 else "",
    )


def parse_report_page(html: str) -> list[Course]:
    """Parse every course row of one rendered report page."""
    soup = BeautifulSoup(html, "lxml")
    
    rows: list[Tag] = []
    for selector in ROW_SELECTORS:
        rows = soup.select(selector)
        if rows:
            break
    
    courses = []
    for row in rows:
        course = parse_report_row(row)
        if course is not None:
            courses.append(course)
    return courses


def parse_page_count(html: str) -> int:
    """Read the total page count from a "صفحه X از Y" pager, default 1."""
    text = BeautifulSoup(html, "lxml").get_text(" ", strip=True)
    match = PAGE_INFO_PATTERN.search(to_english_digits(text))
    return int(match.group(2)) if match else 1


class ReportScraper:
    """Browser-driven scraper for the paginated offering report.
    
    The portal uses SSO, so the browser is shown and the user logs in
    by hand; scraping starts once the report table is rendered.
    """
    
    LOGIN_TIMEOUT = 300
    PAGE_DELAY = 2
    
    def __init__(self, headless: bool = False) -> None:
        """Initialize the scraper.
        
        Args:
            headless: Run browser in headless mode (default: False, the
                login page needs a visible window).
        """
        self._headless = headless
        self._driver: Optional[webdriver.Chrome] = None
    
    def _init_driver(self) -> webdriver.Chrome:
        """Initialize Chrome WebDriver with appropriate options."""
        options = ChromeOptions()
        if self._headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--window-size=1920,1080")
        options.add_argument("--lang=fa-IR")
        
        return webdriver.Chrome(options=options)
    
    def _wait_for_table(self, timeout: float) -> None:
        WebDriverWait(self._driver, timeout).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, "table tbody tr"))
        )
    
    def _click_next_page(self) -> bool:
        """Click the pager's next button, returning False if none is found."""
        for selector in NEXT_PAGE_SELECTORS:
            buttons = self._driver.find_elements(By.CSS_SELECTOR, selector)
            if buttons:
                buttons[0].click()
                return True
        
        for button in self._driver.find_elements(By.CSS_SELECTOR, "button, a, [role='button']"):
            if button.text.strip() in (">", "›", "▶"):
                button.click()
                return True
        
        return False
    
    def fetch_courses(self, url: str) -> list[Course]:
        """Open the report, wait for login and collect every page.
        
        Args:
            url: Full URL of the offering report.
            
        Returns:
            Courses from all pages, in report order.
            
        Raises:
            TimeoutError: If the report table never appears.
        """
        self._driver = self._init_driver()
        
        try:
            self._driver.get(url)
            
            try:
                self._wait_for_table(self.LOGIN_TIMEOUT)
            except TimeoutException as e:
                raise TimeoutError("Report table did not load; was the login completed?") from e
            
            total_pages = parse_page_count(self._driver.page_source)
            logger.info("Found %d pages to scrape", total_pages)
            
            courses: list[Course] = []
            for page in range(1, total_pages + 1):
                time.sleep(self.PAGE_DELAY)
                page_courses = parse_report_page(self._driver.page_source)
                logger.info("Page %d/%d: %d courses", page, total_pages, len(page_courses))
                courses.extend(page_courses)
                
                if page < total_pages and not self._click_next_page():
                    logger.warning("Could not navigate past page %d, stopping", page)
                    break
            
            return courses
        
        finally:
            if self._driver:
                self._driver.quit()
                self._driver = None
