#!/usr/bin/env python3
"""Command-line job application tracker.

Stores applications in a SQLite database (default: data/jobs.db, or the
JOB_TRACKER_DB environment variable).

Usage:
    python track_jobs.py add --company TechCorp --position Engineer --location Remote
    python track_jobs.py list
    python track_jobs.py show 3
    python track_jobs.py update 3 --status interview --round 2
    python track_jobs.py delete 3
    python track_jobs.py clear --yes
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from job_tracker.config import DEFAULT_TARGET
from job_tracker.errors import JobTrackerError
from job_tracker.forms import ApplicationForm, StatusChoice
from job_tracker.models import JobApplication
from job_tracker.store import JobStore

_STATUS_NAMES = {choice.value.lower(): choice for choice in StatusChoice}

# (option, form attribute, help)
_FIELD_OPTIONS = [
    ("--company", "company", "Company name"),
    ("--position", "position", "Position title"),
    ("--location", "location", "Job location"),
    ("--date", "date", "Application date (YYYY-MM-DD, empty for none)"),
    ("--salary-min", "salary_min", "Minimum salary"),
    ("--salary-max", "salary_max", "Maximum salary"),
    ("--cv", "cv_path", "Path to the CV sent"),
    ("--round", "interview_round", "Interview round (with --status interview)"),
    ("--amount", "offer_amount", "Offer amount (with --status offer)"),
]


def format_row(job: JobApplication) -> str:
    date = job.date.isoformat() if job.date else "-"
    return (
        f"{job.id:>4}  {date:<10}  {job.company:<20.20}  {job.position:<24.24}  "
        f"{job.location:<16.16}  {job.status.label:<20}  {job.salary}"
    )


def format_detail(job: JobApplication) -> str:
    return "\n".join([
        f"ID:        {job.id}",
        f"Company:   {job.company}",
        f"Position:  {job.position}",
        f"Location:  {job.location}",
        f"Date:      {job.date.isoformat() if job.date else '-'}",
        f"Status:    {job.status.label}",
        f"Salary:    {job.salary}",
        f"CV:        {job.cv or '-'}",
    ])


def apply_args(form: ApplicationForm, args: argparse.Namespace) -> ApplicationForm:
    """Copy every option the user supplied onto *form*."""
    for _, attr, _ in _FIELD_OPTIONS:
        value = getattr(args, attr)
        if value is not None:
            setattr(form, attr, value)
    if args.status is not None:
        form.status = _STATUS_NAMES[args.status]
    return form


async def run_command(args: argparse.Namespace) -> int:
    async with await JobStore.open(args.db) as store:
        if args.command == "add":
            blank = ApplicationForm(
                date=JobApplication().date.isoformat(), salary_min="0", salary_max="0"
            )
            form = apply_args(blank, args)
            job_id = await store.insert(form.to_application())
            print(f"Added application {job_id}")

        elif args.command == "list":
            jobs = await store.fetch_all()
            for job in jobs:
                print(format_row(job))
            print(f"\nTotal applications: {len(jobs)}")

        elif args.command == "show":
            print(format_detail(await store.fetch_by_id(args.id)))

        elif args.command == "update":
            current = await store.fetch_by_id(args.id)
            form = apply_args(ApplicationForm.from_application(current), args)
            await store.update(form.to_application(args.id))
            print(f"Updated application {args.id}")

        elif args.command == "delete":
            await store.delete(args.id)
            print(f"Deleted application {args.id}")

        elif args.command == "clear":
            if not args.yes:
                print("Error: clear removes every application; pass --yes to confirm")
                return 1
            count = await store.count()
            await store.clear_all()
            print(f"Removed {count} application(s)")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track job applications")
    parser.add_argument(
        "--db",
        default=DEFAULT_TARGET,
        help=f"Database target (default: {DEFAULT_TARGET})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_field_options(p: argparse.ArgumentParser) -> None:
        for option, attr, help_text in _FIELD_OPTIONS:
            p.add_argument(option, dest=attr, help=help_text)
        p.add_argument("--status", choices=sorted(_STATUS_NAMES), help="Application status")

    add_field_options(sub.add_parser("add", help="Add an application"))
    sub.add_parser("list", help="List applications, newest first")

    show = sub.add_parser("show", help="Show one application")
    show.add_argument("id", type=int)

    update = sub.add_parser("update", help="Change fields of an application")
    update.add_argument("id", type=int)
    add_field_options(update)

    delete = sub.add_parser("delete", help="Delete an application")
    delete.add_argument("id", type=int)

    clear = sub.add_parser("clear", help="Delete every application")
    clear.add_argument("--yes", action="store_true", help="Confirm removal")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run_command(args))
    except JobTrackerError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
