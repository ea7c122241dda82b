"""Working-day calendar for the annual planning horizon."""

from datetime import date as Date, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator

# One planning year is always 365 days, also in leap years.
HORIZON_DAYS = 365


def easter_sunday(year: int) -> Date:
    """Gregorian Easter Sunday (anonymous Gregorian algorithm)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return Date(year, month, day + 1)


def _observed(holiday: Date) -> Date:
    """Saturday holidays are observed on Friday, Sunday holidays on Monday."""
    if holiday.weekday() == 5:
        return holiday - timedelta(days=1)
    if holiday.weekday() == 6:
        return holiday + timedelta(days=1)
    return holiday


def us_federal_holidays(year: int) -> set[Date]:
    """
    Plant holidays used for the default calendar.

    Fixed-date holidays are shifted to their observed weekday. Easter Sunday
    is included as a closure day even though it never falls on a weekday.

    Args:
        year: Calendar year

    Returns:
        Set of holiday dates
    """
    holidays = {
        _observed(Date(year, 1, 1)),
        easter_sunday(year),
        _observed(Date(year, 6, 19)),
        _observed(Date(year, 7, 4)),
        _observed(Date(year, 12, 24)),
        _observed(Date(year, 12, 25)),
        _observed(Date(year, 12, 31)),
    }

    # Memorial Day: last Monday of May
    may_31 = Date(year, 5, 31)
    holidays.add(may_31 - timedelta(days=may_31.weekday()))

    # Labor Day: first Monday of September
    sept_1 = Date(year, 9, 1)
    holidays.add(sept_1 + timedelta(days=(7 - sept_1.weekday()) % 7))

    # Thanksgiving: fourth Thursday of November
    nov_1 = Date(year, 11, 1)
    holidays.add(nov_1 + timedelta(days=(3 - nov_1.weekday()) % 7 + 21))

    return holidays


def horizon_dates(year: int) -> list[Date]:
    """The 365 consecutive dates starting January 1st of ``year``."""
    start = Date(year, 1, 1)
    return [start + timedelta(days=i) for i in range(HORIZON_DAYS)]


class WorkingCalendar(BaseModel):
    """
    Resolved working/non-working flag per date.

    The calendar is supplied by the caller; the planning core only asks
    whether a date is a working day.

    Attributes:
        year: Planning year (day 0 is January 1st)
        working_dates: Dates on which the line runs
    """
    year: int = Field(..., description="Planning year", ge=1900, le=9999)
    working_dates: frozenset[Date] = Field(
        default_factory=frozenset,
        description="Working dates"
    )

    @field_validator('working_dates', mode='before')
    @classmethod
    def parse_date_keys(cls, v):
        """Accept ISO date strings ("2025-01-02") as well as dates."""
        if v is None:
            return frozenset()
        return frozenset(
            Date.fromisoformat(item) if isinstance(item, str) else item
            for item in v
        )

    @classmethod
    def from_date_keys(cls, date_keys: Iterable[str], year: Optional[int] = None) -> "WorkingCalendar":
        """
        Build a calendar from ISO date keys.

        Args:
            date_keys: ISO formatted working dates
            year: Planning year (defaults to the year of the earliest key)

        Returns:
            WorkingCalendar

        Raises:
            ValueError: If no year is given and there are no keys
        """
        dates = sorted(Date.fromisoformat(k) for k in date_keys)
        if year is None:
            if not dates:
                raise ValueError("Cannot infer calendar year from an empty working-day list")
            year = dates[0].year
        return cls(year=year, working_dates=frozenset(dates))

    @classmethod
    def weekdays(cls, year: int) -> "WorkingCalendar":
        """Monday-Friday calendar without holidays."""
        dates = [d for d in horizon_dates(year) if d.weekday() < 5]
        return cls(year=year, working_dates=frozenset(dates))

    @classmethod
    def default_for_year(cls, year: int) -> "WorkingCalendar":
        """Monday-Friday calendar with US federal holidays removed."""
        holidays = us_federal_holidays(year)
        dates = [
            d for d in horizon_dates(year)
            if d.weekday() < 5 and d not in holidays
        ]
        return cls(year=year, working_dates=frozenset(dates))

    def is_working_day(self, target_date: Date) -> bool:
        """Check if the line runs on ``target_date``."""
        return target_date in self.working_dates

    @property
    def num_working_days(self) -> int:
        """Number of working dates (used to spread annual overhead)."""
        return len(self.working_dates)

    def dates(self) -> list[Date]:
        """Dates of the planning horizon."""
        return horizon_dates(self.year)

    def __str__(self) -> str:
        """String representation."""
        return f"WorkingCalendar {self.year}: {self.num_working_days} working days"
