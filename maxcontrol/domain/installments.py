"""Installment schedule generation for accounts payable"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from maxcontrol.domain.exceptions import InvalidInstallmentCountError
from maxcontrol.domain.models import AccountsPayableEntry, Cadence
from maxcontrol.domain.money import round2
from maxcontrol.utils.date_utils import add_months, add_weeks


def new_entry_id() -> str:
    return str(uuid.uuid4())


def new_series_id() -> str:
    return f"series-{uuid.uuid4().hex}"


def installment_due_date(start_date: date, index: int, cadence: Cadence) -> date:
    """Due date of installment `index` (0-based), always counted from start_date"""
    if index == 0:
        return start_date
    if cadence == Cadence.WEEKLY:
        return add_weeks(start_date, index)
    return add_months(start_date, index)


def generate_installments(
    total: float,
    start_date: date,
    count: int,
    cadence: Cadence,
    base_name: str,
    *,
    notes: Optional[str] = None,
    is_paid: bool = False,
    series_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> List[AccountsPayableEntry]:
    """
    Split a debt into dated accounts payable entries.

    Requirements:
    - count == 1 (or cadence NONE) gives one entry for the full total,
      keeping the caller's is_paid flag and no series fields
    - Otherwise each installment is round2(total / count) and the last one
      absorbs the rounding remainder, so amounts sum to the total
    - Dates advance by whole weeks or calendar months from start_date,
      clamping to month end (Jan 31 -> Feb 28 -> Mar 31)
    - Installments share one series_id and always start unpaid
    - Notes are kept on the first installment only

    Raises:
        InvalidInstallmentCountError: count < 1

    Example:
        100.00 in 3 monthly from 2025-01-31 ->
        [33.33 @ 01-31, 33.33 @ 02-28, 33.34 @ 03-31]
    """
    if count < 1:
        raise InvalidInstallmentCountError(f"Installment count must be at least 1, got {count}")

    if created_at is None:
        created_at = datetime.now()

    if count == 1 or cadence == Cadence.NONE:
        return [
            AccountsPayableEntry(
                id=new_entry_id(),
                name=base_name,
                amount=total,
                due_date=start_date,
                is_paid=is_paid,
                notes=notes,
                created_at=created_at,
            )
        ]

    if series_id is None:
        series_id = new_series_id()

    per_installment = round2(total / count)

    entries = []
    for i in range(count):
        # Last installment absorbs remainder to ensure exact total
        if i == count - 1:
            amount = round2(total - per_installment * (count - 1))
        else:
            amount = per_installment

        entries.append(
            AccountsPayableEntry(
                id=new_entry_id(),
                name=f"{base_name} - Parcela {i + 1}/{count}",
                amount=amount,
                due_date=installment_due_date(start_date, i, cadence),
                is_paid=False,
                notes=notes if i == 0 else None,
                series_id=series_id,
                total_installments_in_series=count,
                installment_number_of_series=i + 1,
                created_at=created_at,
            )
        )

    return entries
