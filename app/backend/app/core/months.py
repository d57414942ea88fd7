"""Month identifiers and the time grid used as the planning column axis."""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta

Clock = Callable[[], date]

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
LABEL_PATTERN = re.compile(r"^([A-Z][a-z]{2}) (\d{4})$")
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DEFAULT_HOURS_PER_DAY = 8


@dataclass(frozen=True, order=True, slots=True)
class Month:
    """Calendar month value, serialized as ``YYYY-MM``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}.")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"year must be in 1..9999, got {self.year}.")

    @classmethod
    def parse(cls, value: str) -> Month:
        match = MONTH_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"Invalid month identifier {value!r}; expected YYYY-MM.")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> Month:
        return cls(value.year, value.month)

    def shift(self, months: int) -> Month:
        index = self.year * 12 + (self.month - 1) + months
        return Month(index // 12, index % 12 + 1)

    def next(self) -> Month:
        return self.shift(1)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def next_months(count: int, *, clock: Clock = date.today) -> list[Month]:
    """Return ``count`` consecutive months starting with the clock's current month."""

    if count < 0:
        raise ValueError("count must be greater or equal zero.")
    start = Month.from_date(clock())
    return [start.shift(offset) for offset in range(count)]


def business_days_in_month(month: Month) -> int:
    # weekday(): Monday == 0 ... Sunday == 6
    first = month.first_day
    return sum(1 for offset in range(month.days()) if (first + timedelta(days=offset)).weekday() < 5)


def business_hours_in_month(month: Month, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> int:
    """Billable hours in a month: weekdays (Mon-Fri) times the workday length."""

    return business_days_in_month(month) * hours_per_day


def display_label(month: Month) -> str:
    """Column label such as ``Nov 2024``; the full year keeps it reversible."""

    return f"{MONTH_ABBREVIATIONS[month.month - 1]} {month.year:04d}"


def parse_display_label(label: str) -> Month:
    match = LABEL_PATTERN.match(label.strip())
    if match is None or match.group(1) not in MONTH_ABBREVIATIONS:
        raise ValueError(f"Invalid month label {label!r}.")
    return Month(int(match.group(2)), MONTH_ABBREVIATIONS.index(match.group(1)) + 1)
