"""Free-text form fields to JobApplication conversion.

The form keeps every field as the text a user typed. to_application()
parses it and raises ValidationError naming the first bad field.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .errors import ValidationError
from .models import (
    I32_MAX,
    I32_MIN,
    U8_MAX,
    U32_MAX,
    Applied,
    Interview,
    JobApplication,
    Offer,
    Rejected,
    SalaryRange,
    Status,
    parse_int,
)


class StatusChoice(enum.Enum):
    """Status kind without its payload, as picked from a list."""

    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"

    @classmethod
    def from_status(cls, status: Status) -> StatusChoice:
        if isinstance(status, Interview):
            return cls.INTERVIEW
        if isinstance(status, Offer):
            return cls.OFFER
        if isinstance(status, Rejected):
            return cls.REJECTED
        return cls.APPLIED

    def __str__(self) -> str:
        return self.value


def _parse_field(text: str, minimum: int, maximum: int, name: str, message: str) -> int:
    try:
        return parse_int(text, minimum, maximum)
    except ValueError:
        raise ValidationError(name, message) from None


@dataclass
class ApplicationForm:
    company: str = ""
    position: str = ""
    location: str = ""
    date: str = ""
    salary_min: str = ""
    salary_max: str = ""
    status: StatusChoice = field(default=StatusChoice.APPLIED)
    cv_path: str = ""
    interview_round: str = "1"
    offer_amount: str = ""

    @classmethod
    def from_application(cls, app: JobApplication) -> ApplicationForm:
        interview_round, offer_amount = "", ""
        if isinstance(app.status, Interview):
            interview_round = str(app.status.round)
        elif isinstance(app.status, Offer):
            offer_amount = str(app.status.amount)

        return cls(
            company=app.company,
            position=app.position,
            location=app.location,
            date=app.date.isoformat() if app.date is not None else "",
            salary_min=str(app.salary.min),
            salary_max=str(app.salary.max),
            status=StatusChoice.from_status(app.status),
            cv_path=str(app.cv) if app.cv is not None else "",
            interview_round=interview_round,
            offer_amount=offer_amount,
        )

    def to_application(self, app_id: int | None = None) -> JobApplication:
        """Validate the form and build a JobApplication with id *app_id*."""
        applied_on = None
        if self.date:
            try:
                applied_on = date.fromisoformat(self.date)
            except ValueError:
                raise ValidationError(
                    "date", "Invalid date format. Use YYYY-MM-DD"
                ) from None

        salary_min = _parse_field(
            self.salary_min, 0, U32_MAX, "salary_min", "Invalid minimum salary"
        )
        salary_max = _parse_field(
            self.salary_max, 0, U32_MAX, "salary_max", "Invalid maximum salary"
        )

        if self.status is StatusChoice.INTERVIEW:
            status = Interview(_parse_field(
                self.interview_round, 0, U8_MAX,
                "interview_round", "Invalid interview round",
            ))
        elif self.status is StatusChoice.OFFER:
            status = Offer(_parse_field(
                self.offer_amount, I32_MIN, I32_MAX,
                "offer_amount", "Invalid offer amount",
            ))
        elif self.status is StatusChoice.REJECTED:
            status = Rejected()
        else:
            status = Applied()

        return JobApplication(
            id=app_id,
            date=applied_on,
            cv=Path(self.cv_path) if self.cv_path else None,
            company=self.company,
            position=self.position,
            status=status,
            location=self.location,
            salary=SalaryRange(salary_min, salary_max),
        )
