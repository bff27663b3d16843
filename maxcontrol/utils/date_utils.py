"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta


def add_months(from_date: date, months: int) -> date:
    """
    Add calendar months, keeping the day of month where it exists.

    Days past the end of the target month clamp to its last day:
    Jan 31 + 1 month -> Feb 28 (Feb 29 in leap years).
    """
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(from_date.day, last_day))


def add_weeks(from_date: date, weeks: int) -> date:
    return from_date + timedelta(weeks=weeks)


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`"""
    return day - timedelta(days=day.weekday())
