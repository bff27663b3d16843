"""Accounts payable lifecycle, filtering and summaries"""

import calendar
from dataclasses import replace
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from maxcontrol.domain.models import AccountsPayableEntry, PayableSummary
from maxcontrol.utils.date_utils import start_of_week


class StatusFilter(str, Enum):
    ALL = "all"
    PAID = "paid"
    PENDING = "pending"


class PeriodFilter(str, Enum):
    ALL = "all"
    WEEK = "week"  # Monday to Sunday around today
    MONTH = "month"  # Calendar month of today
    SPECIFIC_MONTH = "specific_month"


def toggle_paid(entry: AccountsPayableEntry) -> AccountsPayableEntry:
    """Flip PENDING <-> PAID"""
    return replace(entry, is_paid=not entry.is_paid)


def apply_edit(
    entry: AccountsPayableEntry,
    name: str,
    amount: float,
    due_date: date,
    is_paid: bool,
    notes: Optional[str] = None,
) -> AccountsPayableEntry:
    """Full-field edit of a single entry; series membership is kept"""
    return replace(entry, name=name, amount=amount, due_date=due_date, is_paid=is_paid, notes=notes)


def series_siblings(entries: Iterable[AccountsPayableEntry], series_id: str) -> List[AccountsPayableEntry]:
    """All installments of a series, in installment order"""
    siblings = [e for e in entries if e.series_id == series_id]
    return sorted(siblings, key=lambda e: e.installment_number_of_series or 0)


def period_bounds(
    period: PeriodFilter,
    today: date,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> Optional[Tuple[date, date]]:
    """Inclusive due-date range of a period, None for ALL"""
    if period == PeriodFilter.WEEK:
        week_start = start_of_week(today)
        return week_start, week_start + timedelta(days=6)
    if period == PeriodFilter.MONTH:
        year, month = today.year, today.month
    elif period == PeriodFilter.SPECIFIC_MONTH:
        year, month = year or today.year, month or today.month
    else:
        return None
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def filter_entries(
    entries: Iterable[AccountsPayableEntry],
    status: StatusFilter = StatusFilter.ALL,
    search: str = "",
    period: PeriodFilter = PeriodFilter.ALL,
    today: Optional[date] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[AccountsPayableEntry]:
    """
    Select entries by paid status, name search and due-date period.

    SPECIFIC_MONTH uses year/month, defaulting to the current ones.
    """
    if today is None:
        today = date.today()
    needle = search.lower()
    bounds = period_bounds(period, today, year, month)

    result = []
    for entry in entries:
        if status == StatusFilter.PAID and not entry.is_paid:
            continue
        if status == StatusFilter.PENDING and entry.is_paid:
            continue
        if needle and needle not in entry.name.lower():
            continue
        if bounds and not bounds[0] <= entry.due_date <= bounds[1]:
            continue
        result.append(entry)

    return result


def summarize(entries: Iterable[AccountsPayableEntry]) -> PayableSummary:
    entries = list(entries)
    total = sum((e.amount for e in entries), 0.0)
    total_paid = sum((e.amount for e in entries if e.is_paid), 0.0)
    total_pending = sum((e.amount for e in entries if not e.is_paid), 0.0)
    return PayableSummary(total=total, total_paid=total_paid, total_pending=total_pending)


def monthly_summary(entries: Iterable[AccountsPayableEntry], today: Optional[date] = None) -> PayableSummary:
    """Paid vs pending for entries due in the current month"""
    return summarize(filter_entries(entries, period=PeriodFilter.MONTH, today=today))
