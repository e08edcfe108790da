"""Dataclasses for job applications and their status."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import ClassVar

from .errors import DecodeError

U8_MAX = 2**8 - 1
U32_MAX = 2**32 - 1
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str, minimum: int, maximum: int) -> int:
    """Parse *text* as a decimal integer within [minimum, maximum].

    Only ASCII digits with an optional sign are accepted; a minus sign is
    accepted only when *minimum* is negative. Raises ValueError otherwise.
    """
    pattern = _SIGNED_RE if minimum < 0 else _UNSIGNED_RE
    if not pattern.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    value = int(text)
    if not minimum <= value <= maximum:
        raise ValueError(f"{value} outside {minimum}..{maximum}")
    return value


def _check_range(name: str, value: int, minimum: int, maximum: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not minimum <= value <= maximum:
        raise ValueError(f"{name} must be within {minimum}..{maximum}, got {value}")


@functools.total_ordering
class Status:
    """Application status: Applied, Interview(round), Offer(amount) or Rejected.

    Stored as text: ``applied``, ``interview:<round>``, ``offer:<amount>``,
    ``rejected``. Variants order in that sequence; payloads break ties.
    """

    _rank: ClassVar[int]

    def __new__(cls, *args, **kwargs):
        if cls is Status:
            raise TypeError("Status is abstract; use Applied, Interview, Offer or Rejected")
        return super().__new__(cls)

    def encode(self) -> str:
        raise NotImplementedError

    @property
    def label(self) -> str:
        return type(self).__name__

    @classmethod
    def decode(cls, text: str) -> Status:
        """Parse stored status text. Raises DecodeError for anything else."""
        if text == "applied":
            return Applied()
        if text == "rejected":
            return Rejected()
        if text.startswith("interview:"):
            token = text[len("interview:"):]
            try:
                return Interview(parse_int(token, 0, U8_MAX))
            except ValueError:
                raise DecodeError(f"Invalid interview round: {token}", text) from None
        if text.startswith("offer:"):
            token = text[len("offer:"):]
            try:
                return Offer(parse_int(token, I32_MIN, I32_MAX))
            except ValueError:
                raise DecodeError(f"Invalid offer amount: {token}", text) from None
        raise DecodeError(f"Unknown status: {text}", text)

    def _sort_key(self) -> tuple[int, int]:
        return (self._rank, 0)

    def __lt__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Applied(Status):
    _rank: ClassVar[int] = 0

    def encode(self) -> str:
        return "applied"


@dataclass(frozen=True)
class Interview(Status):
    round: int

    _rank: ClassVar[int] = 1

    def __post_init__(self):
        _check_range("interview round", self.round, 0, U8_MAX)

    def encode(self) -> str:
        return f"interview:{self.round}"

    @property
    def label(self) -> str:
        return f"Interview (round {self.round})"

    def _sort_key(self) -> tuple[int, int]:
        return (self._rank, self.round)


@dataclass(frozen=True)
class Offer(Status):
    amount: int

    _rank: ClassVar[int] = 2

    def __post_init__(self):
        _check_range("offer amount", self.amount, I32_MIN, I32_MAX)

    def encode(self) -> str:
        return f"offer:{self.amount}"

    @property
    def label(self) -> str:
        return f"Offer ({self.amount})"

    def _sort_key(self) -> tuple[int, int]:
        return (self._rank, self.amount)


@dataclass(frozen=True)
class Rejected(Status):
    _rank: ClassVar[int] = 3

    def encode(self) -> str:
        return "rejected"


@dataclass(frozen=True, order=True)
class SalaryRange:
    """Salary bounds. min <= max is not enforced."""

    min: int = 0
    max: int = 0

    def __post_init__(self):
        _check_range("salary min", self.min, 0, U32_MAX)
        _check_range("salary max", self.max, 0, U32_MAX)

    def __str__(self) -> str:
        return f"{self.min} - {self.max}"


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


@dataclass
class JobApplication:
    id: int | None = None
    date: date | None = field(default_factory=_today_utc)
    cv: Path | None = None
    company: str = ""
    position: str = ""
    status: Status = field(default_factory=Applied)
    location: str = ""
    salary: SalaryRange = field(default_factory=SalaryRange)
