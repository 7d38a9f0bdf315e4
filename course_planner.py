#!/usr/bin/env python3
"""Course schedule planner.

Browse a term's course catalog, keep up to five candidate weekly
schedules, check them for time and exam conflicts, and export the
current one as an iCalendar (.ics) file.
"""

import argparse
import re
import sys
from datetime import timedelta
from typing import Optional

from catalog import (
    Catalog,
    Course,
    build_manual_course,
    load_catalog,
    merge_gathered,
    save_catalog,
    search_courses,
)
from catalog.text import WEEK_DAYS_ORDER, day_name, format_clock
from planner import (
    JsonFileStorage,
    ScheduleStore,
    build_view,
    exam_table,
    find_exam_conflicts,
    find_time_conflicts,
    layout_week,
)
from planner.config import settings
from planner.logging_config import setup_logging
from transformer import ICalTransformer, ScheduleJsonTransformer, read_schedule_file

SESSION_ARG_PATTERN = re.compile(r"^\s*([0-6])\s+(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})\s*$")

# Saturday-first order of every day, grid days first
DAY_ORDER = WEEK_DAYS_ORDER + [4, 5]


def parse_session_arg(value: str) -> tuple[int, str, str]:
    """Parse a session given as "DAY HH:MM-HH:MM" (DAY: 6=Sat ... 5=Fri)."""
    match = SESSION_ARG_PATTERN.match(value)
    if not match:
        raise argparse.ArgumentTypeError(
            f"Invalid session: '{value}'. Expected 'DAY HH:MM-HH:MM'."
        )
    day, start, end = match.groups()
    return int(day), start, end


def format_course(course: Course) -> str:
    sessions = ", ".join(
        f"{day_name(s.day_of_week)} {format_clock(s.start_time)}-{format_clock(s.end_time)}"
        for s in course.sessions
    )
    line = f"{course.course_code}-{course.group}  {course.course_name}  ({course.unit_count} units)"
    if course.professor:
        line += f"  {course.professor}"
    if sessions:
        line += f"\n    {sessions}"
    if course.exam_date:
        line += f"\n    exam: {course.exam_date} {course.exam_time}"
    return line


def open_store(args: argparse.Namespace) -> ScheduleStore:
    return ScheduleStore(JsonFileStorage(args.state))


def open_catalog(args: argparse.Namespace) -> Catalog:
    return load_catalog(args.catalog)


def find_course(catalog: Catalog, code: str, group: int) -> Course:
    course = catalog.find(code, group)
    if course is None:
        raise ValueError(f"Course {code}-{group} not found in catalog.")
    return course


def print_add_result(store: ScheduleStore, course: Course) -> None:
    result = store.add_course(course)
    if result is None:
        print(f"{course.course_code}-{course.group} is already in schedule {store.current_schedule_id + 1}.")
        return
    
    print(f"Added {course.course_name} to schedule {store.current_schedule_id + 1}.")
    for other in result.time_conflicts:
        print(f"Warning: time conflict with {other.course_name} ({other.course_code}-{other.group})")
    for other in result.exam_conflicts:
        print(f"Warning: exam conflict with {other.course_name} ({other.course_code}-{other.group})")
    print(f"Total units: {store.total_units}")


def cmd_search(args: argparse.Namespace) -> None:
    catalog = open_catalog(args)
    store = open_store(args)
    selected = store.selected_courses
    
    results = search_courses(catalog.courses, args.query)
    print(f"{len(results)} courses")
    for course in results:
        print(format_course(course))
        if store.is_course_selected(course.course_code, course.group):
            print("    [selected]")
            continue
        time_conflicts = find_time_conflicts(course, selected)
        exam_conflicts = find_exam_conflicts(course, selected)
        if time_conflicts:
            print(f"    time conflict with: {', '.join(c.course_name for c in time_conflicts)}")
        if exam_conflicts:
            print(f"    exam conflict with: {', '.join(c.course_name for c in exam_conflicts)}")


def cmd_add(args: argparse.Namespace) -> None:
    course = find_course(open_catalog(args), args.code, args.group)
    print_add_result(open_store(args), course)


def cmd_add_manual(args: argparse.Namespace) -> None:
    course = build_manual_course(
        name=args.name,
        unit_count=args.units,
        sessions=args.session or [],
        professor=args.professor,
        exam_date=args.exam_date,
        exam_time=args.exam_time,
        course_code=args.code,
    )
    print_add_result(open_store(args), course)


def cmd_remove(args: argparse.Namespace) -> None:
    store = open_store(args)
    if store.remove_course(args.code, args.group):
        print(f"Removed {args.code}-{args.group}. Total units: {store.total_units}")
    else:
        print(f"{args.code}-{args.group} is not in the current schedule.")


def cmd_schedules(args: argparse.Namespace) -> None:
    store = open_store(args)
    for schedule in store.schedules:
        marker = "*" if schedule.id == store.current_schedule_id else " "
        units = sum(c.unit_count for c in schedule.courses)
        print(f"{marker} {schedule.id}: schedule {schedule.id + 1}, "
              f"{len(schedule.courses)} courses, {units} units")


def cmd_new_schedule(args: argparse.Namespace) -> None:
    store = open_store(args)
    created = store.duplicate_schedule() if args.copy else store.create_schedule()
    if created:
        print(f"Now on schedule {store.current_schedule_id + 1}.")
    else:
        print(f"Error: at most {ScheduleStore.MAX_SCHEDULES} schedules are allowed.", file=sys.stderr)
        sys.exit(1)


def cmd_delete_schedule(args: argparse.Namespace) -> None:
    store = open_store(args)
    if store.delete_schedule(args.id):
        print(f"Deleted. Now on schedule {store.current_schedule_id + 1}.")
    else:
        print("Nothing deleted: unknown id or last remaining schedule.")


def cmd_use_schedule(args: argparse.Namespace) -> None:
    store = open_store(args)
    if not store.select_schedule(args.id) and store.current_schedule_id != args.id:
        raise ValueError(f"No schedule with id {args.id}.")
    print(f"Now on schedule {store.current_schedule_id + 1}.")


def cmd_show(args: argparse.Namespace) -> None:
    store = open_store(args)
    hovered = None
    if args.preview:
        code, group = args.preview
        hovered = find_course(open_catalog(args), code, int(group))
    
    week = layout_week(build_view(store.selected_courses, hovered), settings.window())
    print(f"Schedule {store.current_schedule_id + 1} - {store.total_units} units")
    
    for day in DAY_ORDER:
        if day not in week:
            continue
        print(day_name(day))
        for placed in week[day]:
            session = placed.entry.course.sessions[placed.session_index]
            flag = "!" if placed.conflicting else " "
            print(
                f" {flag} {format_clock(session.start_time)}-{format_clock(session.end_time)}"
                f"  lane {placed.lane + 1}/{placed.total_lanes}"
                f"  {placed.entry.course.course_name} [{placed.entry.mode}]"
            )


def cmd_exams(args: argparse.Namespace) -> None:
    store = open_store(args)
    for course, conflict in exam_table(store.selected_courses):
        exam = f"{course.exam_date} {course.exam_time}" if course.exam_date else "-"
        warning = "  CONFLICT" if conflict else ""
        print(f"{course.course_code}-{course.group}  {course.course_name}  "
              f"{course.unit_count}  {exam}{warning}")
    print(f"Total units: {store.total_units}")


def cmd_export_ics(args: argparse.Namespace) -> None:
    store = open_store(args)
    if not store.selected_courses:
        raise ValueError("The current schedule is empty.")
    
    output_path = args.output
    if not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"
    
    term = settings.term()
    transformer = ICalTransformer(
        term,
        prodid=settings.PRODID,
        calendar_name=settings.CALENDAR_NAME,
        uid_domain=settings.UID_DOMAIN,
        exam_duration=timedelta(minutes=settings.EXAM_DURATION_MINUTES),
    )
    transformer.transform(store.selected_courses)
    transformer.save(output_path)
    
    print(f"Schedule saved to: {output_path}")
    print(f"Period: {term.start} to {term.end}")


def cmd_export_json(args: argparse.Namespace) -> None:
    store = open_store(args)
    if not store.selected_courses:
        raise ValueError("The current schedule is empty.")
    
    output_path = args.output or f"schedule-{store.current_schedule_id + 1}.json"
    transformer = ScheduleJsonTransformer()
    transformer.transform(store.selected_courses)
    transformer.save(output_path)
    print(f"Schedule saved to: {output_path}")


def cmd_import_json(args: argparse.Namespace) -> None:
    result = read_schedule_file(args.file, open_catalog(args))
    if not result.found and not result.not_found:
        raise ValueError("The schedule file is empty.")
    
    added, skipped = open_store(args).import_courses(result.found)
    print(f"{added} added, {skipped} already present, {len(result.not_found)} not in catalog.")
    for key in result.not_found:
        print(f"  not found: {key}")


def cmd_merge(args: argparse.Namespace) -> None:
    catalog = merge_gathered(
        args.directory,
        semester=settings.TERM_CODE,
        semester_label=settings.TERM_LABEL,
        department=settings.DEPARTMENT,
    )
    output_path = args.output or args.catalog
    save_catalog(catalog, output_path)
    print(f"Merged {len(catalog.courses)} unique courses into {output_path}")


def cmd_scrape(args: argparse.Namespace) -> None:
    from datetime import datetime, timezone
    
    from catalog.scraper import ReportScraper
    
    print(f"Opening report: {args.url}")
    print("Log in within the browser window; scraping starts when the table loads.")
    courses = ReportScraper(headless=args.headless).fetch_courses(args.url)
    print(f"Found {len(courses)} courses.")
    
    catalog = Catalog(
        semester=settings.TERM_CODE,
        semester_label=settings.TERM_LABEL,
        department=settings.DEPARTMENT,
        courses=courses,
        fetched_at=datetime.now(timezone.utc).isoformat(),
    )
    output_path = args.output or args.catalog
    save_catalog(catalog, output_path)
    print(f"Catalog saved to: {output_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan weekly course schedules and export them to iCalendar.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 course_planner.py search "ریاضی"
  python3 course_planner.py add 1511001 2
  python3 course_planner.py add-manual --name "Lab" --units 1 --session "6 08:00-10:00"
  python3 course_planner.py show --preview 1511002 1
  python3 course_planner.py export-ics -o my_schedule.ics
        """
    )
    parser.add_argument("--catalog", default=settings.CATALOG_FILE,
                        help=f"Course catalog JSON (default: {settings.CATALOG_FILE})")
    parser.add_argument("--state", default=settings.STATE_FILE,
                        help=f"Saved schedules file (default: {settings.STATE_FILE})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details")
    
    sub = parser.add_subparsers(dest="command", required=True)
    
    p = sub.add_parser("search", help="Search the catalog by name, code or professor")
    p.add_argument("query", nargs="?", default="")
    p.set_defaults(func=cmd_search)
    
    p = sub.add_parser("add", help="Add a catalog course to the current schedule")
    p.add_argument("code")
    p.add_argument("group", type=int)
    p.set_defaults(func=cmd_add)
    
    p = sub.add_parser("add-manual", help="Add a course that is not in the catalog")
    p.add_argument("--name", required=True)
    p.add_argument("--units", type=int, required=True)
    p.add_argument("--session", type=parse_session_arg, action="append",
                   help="Weekly session 'DAY HH:MM-HH:MM', repeatable (DAY: 6=Sat, 0=Sun, ...)")
    p.add_argument("--professor", default="")
    p.add_argument("--exam-date", default="", help="Jalali date, e.g. 1405/04/20")
    p.add_argument("--exam-time", default="", help="e.g. 10:00")
    p.add_argument("--code", default=None, help="Course code (generated when omitted)")
    p.set_defaults(func=cmd_add_manual)
    
    p = sub.add_parser("remove", help="Remove a course from the current schedule")
    p.add_argument("code")
    p.add_argument("group", type=int)
    p.set_defaults(func=cmd_remove)
    
    p = sub.add_parser("schedules", help="List schedules")
    p.set_defaults(func=cmd_schedules)
    
    p = sub.add_parser("new-schedule", help="Create an empty schedule")
    p.set_defaults(func=cmd_new_schedule, copy=False)
    
    p = sub.add_parser("copy-schedule", help="Duplicate the current schedule")
    p.set_defaults(func=cmd_new_schedule, copy=True)
    
    p = sub.add_parser("delete-schedule", help="Delete a schedule by id")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_delete_schedule)
    
    p = sub.add_parser("use-schedule", help="Switch the current schedule")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_use_schedule)
    
    p = sub.add_parser("show", help="Show the weekly grid of the current schedule")
    p.add_argument("--preview", nargs=2, metavar=("CODE", "GROUP"),
                   help="Also show a catalog course as if hovered")
    p.set_defaults(func=cmd_show)
    
    p = sub.add_parser("exams", help="List exams of the current schedule")
    p.set_defaults(func=cmd_exams)
    
    p = sub.add_parser("export-ics", help="Export the current schedule to iCalendar")
    p.add_argument("-o", "--output", default="schedule.ics",
                   help="Output file path (default: schedule.ics)")
    p.set_defaults(func=cmd_export_ics)
    
    p = sub.add_parser("export-json", help="Export the current schedule as a share file")
    p.add_argument("-o", "--output", default=None)
    p.set_defaults(func=cmd_export_json)
    
    p = sub.add_parser("import-json", help="Add the courses of a share file")
    p.add_argument("file")
    p.set_defaults(func=cmd_import_json)
    
    p = sub.add_parser("merge", help="Merge gathered JSON files into a catalog")
    p.add_argument("directory")
    p.add_argument("-o", "--output", default=None)
    p.set_defaults(func=cmd_merge)
    
    p = sub.add_parser("scrape", help="Scrape the offering report with a browser")
    p.add_argument("url")
    p.add_argument("-o", "--output", default=None)
    p.add_argument("--headless", action="store_true")
    p.set_defaults(func=cmd_scrape)
    
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the planner CLI."""
    args = build_parser().parse_args(argv)
    setup_logging("INFO" if args.verbose else settings.LOG_LEVEL, settings.LOG_FILE)
    
    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except (ValueError, FileNotFoundError, TimeoutError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
