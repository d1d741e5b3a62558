"""Age calculation - pure calendar arithmetic, no I/O."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class AgeDuration:
    """Elapsed time between two calendar dates."""

    years: int = 0
    months: int = 0
    days: int = 0

    def to_record(self) -> dict:
        return {"years": self.years, "months": self.months, "days": self.days}

    @classmethod
    def from_record(cls, data: dict) -> "AgeDuration":
        return cls(
            years=int(data.get("years", 0)),
            months=int(data.get("months", 0)),
            days=int(data.get("days", 0)),
        )


def parse_date(value: date | datetime | str) -> date:
    """
    Coerce a date-like value to a calendar date.

    Strings may carry a time component ("2024-04-20T08:00:00.000Z");
    only the date part is kept.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def add_months(start: date, months: int) -> date:
    """Advance a date by whole calendar months, clamping to the month's last day."""
    year_offset, month_index = divmod(start.month - 1 + months, 12)
    year = start.year + year_offset
    month = month_index + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def compute_age(birth_date: date, at_date: date) -> AgeDuration:
    """
    Compute age in years, months and days at a given date.

    Whole months are counted first (borrowing a month when the day of month
    has not been reached yet), then the remaining days are counted from the
    birth date advanced by those months. Dates on or before the birth date
    clamp to zero, so pre-birth entries read as 0 years 0 months 0 days.

    Pure function - no I/O.
    """
    if at_date <= birth_date:
        return AgeDuration(0, 0, 0)

    total_months = (at_date.year - birth_date.year) * 12 + at_date.month - birth_date.month
    if at_date.day < birth_date.day:
        total_months -= 1

    # Month-end birthdays: Jan 31 + 1 month lands on Feb 28/29
    if add_months(birth_date, total_months + 1) <= at_date:
        total_months += 1

    anchor = add_months(birth_date, total_months)
    years, months = divmod(total_months, 12)
    return AgeDuration(years=years, months=months, days=(at_date - anchor).days)
