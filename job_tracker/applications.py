"""CRUD operations for the job_applications table.

Every function takes the connection as the keyword-only *db* argument and
commits its own write. JobStore runs these on its shared connection.
"""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path

from .errors import DecodeError, NotFoundError, SchemaMismatchError
from .log import get_logger
from .models import U32_MAX, JobApplication, SalaryRange, Status

log = get_logger(__name__)

# Newest first; id breaks ties between rows created in the same second
_SELECT_ALL = "SELECT * FROM job_applications ORDER BY created_at DESC, id DESC"

# Id used in the NotFoundError raised when updating a record that has no id
MISSING_ID = 0


def _to_params(app: JobApplication) -> tuple:
    return (
        app.date.isoformat() if app.date is not None else None,
        str(app.cv) if app.cv is not None else None,
        app.company,
        app.position,
        app.status.encode(),
        app.location,
        app.salary.min,
        app.salary.max,
    )


def insert_application(app: JobApplication, *, db: sqlite3.Connection) -> int:
    """Insert *app* and return the new row id. ``app.id`` is ignored."""
    cursor = db.execute(
        """
        INSERT INTO job_applications
            (date, cv_path, company, position, status, location, salary_min, salary_max)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        _to_params(app),
    )
    app_id = cursor.lastrowid
    db.commit()
    log.debug("Inserted application %d (%s / %s)", app_id, app.company, app.position)
    return app_id


def get_application(app_id: int, *, db: sqlite3.Connection) -> JobApplication:
    """Fetch a single application by id. Raises NotFoundError if absent."""
    row = db.execute(
        "SELECT * FROM job_applications WHERE id = ?", (app_id,)
    ).fetchone()
    if row is None:
        raise NotFoundError(app_id)
    return row_to_application(row)


def list_applications(*, db: sqlite3.Connection) -> list[JobApplication]:
    """Return every application, most recently created first."""
    rows = db.execute(_SELECT_ALL).fetchall()
    return [row_to_application(r) for r in rows]


def count_applications(*, db: sqlite3.Connection) -> int:
    return db.execute("SELECT COUNT(*) FROM job_applications").fetchone()[0]


def update_application(app: JobApplication, *, db: sqlite3.Connection) -> None:
    """Overwrite every stored field of the row with id ``app.id``.

    Raises NotFoundError(MISSING_ID) when *app* has no id and
    NotFoundError(app.id) when no row has that id.
    """
    if app.id is None:
        raise NotFoundError(MISSING_ID)

    cursor = db.execute(
        """
        UPDATE job_applications
           SET date = ?, cv_path = ?, company = ?, position = ?, status = ?,
               location = ?, salary_min = ?, salary_max = ?
         WHERE id = ?
        """,
        (*_to_params(app), app.id),
    )
    db.commit()
    if cursor.rowcount == 0:
        raise NotFoundError(app.id)
    log.debug("Updated application %d", app.id)


def delete_application(app_id: int, *, db: sqlite3.Connection) -> None:
    """Delete the application with *app_id*. Raises NotFoundError if absent."""
    cursor = db.execute("DELETE FROM job_applications WHERE id = ?", (app_id,))
    db.commit()
    if cursor.rowcount == 0:
        raise NotFoundError(app_id)
    log.debug("Deleted application %d", app_id)


def clear_applications(*, db: sqlite3.Connection) -> int:
    """Delete every application. Returns the number of rows removed."""
    cursor = db.execute("DELETE FROM job_applications")
    db.commit()
    log.debug("Cleared %d application(s)", cursor.rowcount)
    return cursor.rowcount


# ------------------------------------------------------------------
# Row deserialization
# ------------------------------------------------------------------


def _column(row: sqlite3.Row, name: str, kind: type, *, nullable: bool = False):
    try:
        value = row[name]
    except (IndexError, KeyError):
        raise SchemaMismatchError(f"Missing column: {name}") from None
    if value is None and nullable:
        return None
    if not isinstance(value, kind):
        raise SchemaMismatchError(
            f"Column {name} holds {type(value).__name__}, expected {kind.__name__}"
        )
    return value


def _salary_bound(value: int, column: str, app_id: int) -> int:
    # Out-of-range values can only come from writes made outside this
    # package; they are read back as 0 instead of failing the whole row.
    if 0 <= value <= U32_MAX:
        return value
    log.warning(
        "Application %d has out-of-range %s=%d; reading it as 0",
        app_id, column, value,
    )
    return 0


def row_to_application(row: sqlite3.Row) -> JobApplication:
    """Build a JobApplication from a job_applications row.

    Raises DecodeError for unparseable date or status text and
    SchemaMismatchError for missing or wrong-typed columns.
    """
    app_id = _column(row, "id", int)
    date_text = _column(row, "date", str, nullable=True)
    cv_text = _column(row, "cv_path", str, nullable=True)
    company = _column(row, "company", str)
    position = _column(row, "position", str)
    status_text = _column(row, "status", str)
    location = _column(row, "location", str)
    salary_min = _column(row, "salary_min", int)
    salary_max = _column(row, "salary_max", int)

    applied_on = None
    if date_text is not None:
        try:
            applied_on = date.fromisoformat(date_text)
        except ValueError:
            raise DecodeError(f"Invalid date format: {date_text}", date_text) from None

    return JobApplication(
        id=app_id,
        date=applied_on,
        cv=Path(cv_text) if cv_text is not None else None,
        company=company,
        position=position,
        status=Status.decode(status_text),
        location=location,
        salary=SalaryRange(
            _salary_bound(salary_min, "salary_min", app_id),
            _salary_bound(salary_max, "salary_max", app_id),
        ),
    )
