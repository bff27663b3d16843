"""Data access layer for quotes and accounts payable"""

import uuid
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from maxcontrol.infrastructure.database.models import AccountsPayable, Quote, QuoteItem
from maxcontrol.domain.models import AccountsPayableEntry, DiscountConfig, LineItem, PayableSummary, QuotePricing
from maxcontrol.domain.payables import PeriodFilter, StatusFilter, period_bounds
from maxcontrol.domain.exceptions import EntryNotFoundError


def to_domain_entry(row: AccountsPayable) -> AccountsPayableEntry:
    return AccountsPayableEntry(
        id=row.id,
        name=row.name,
        amount=row.amount,
        due_date=row.due_date,
        is_paid=row.is_paid,
        notes=row.notes or None,
        series_id=row.series_id,
        total_installments_in_series=row.total_installments_in_series,
        installment_number_of_series=row.installment_number_of_series,
        created_at=row.created_at,
    )


class AccountsPayableRepository:
    """Repository for accounts payable entries"""

    def __init__(self, db: Session):
        self.db = db

    def create_entries(self, entries: List[AccountsPayableEntry]) -> List[AccountsPayable]:
        """Insert generated entries verbatim"""
        rows = [
            AccountsPayable(
                id=entry.id,
                name=entry.name,
                amount=entry.amount,
                due_date=entry.due_date,
                is_paid=entry.is_paid,
                notes=entry.notes or "",
                series_id=entry.series_id,
                total_installments_in_series=entry.total_installments_in_series,
                installment_number_of_series=entry.installment_number_of_series,
                created_at=entry.created_at,
            )
            for entry in entries
        ]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def _filtered_query(
        self,
        status: StatusFilter = StatusFilter.ALL,
        search: str = "",
        period: PeriodFilter = PeriodFilter.ALL,
        today: Optional[date] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        columns=None,
    ):
        query = self.db.query(*(columns or [AccountsPayable]))

        if status == StatusFilter.PAID:
            query = query.filter(AccountsPayable.is_paid.is_(True))
        elif status == StatusFilter.PENDING:
            query = query.filter(AccountsPayable.is_paid.is_(False))

        if search:
            query = query.filter(func.lower(AccountsPayable.name).contains(search.lower(), autoescape=True))

        bounds = period_bounds(period, today or date.today(), year, month)
        if bounds:
            query = query.filter(AccountsPayable.due_date.between(*bounds))

        return query

    def list_entries(
        self,
        status: StatusFilter = StatusFilter.ALL,
        search: str = "",
        period: PeriodFilter = PeriodFilter.ALL,
        today: Optional[date] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        limit: int = 500,
    ) -> List[AccountsPayable]:
        """Matching entries ordered by due date, soonest first; only the page is limited"""
        return (
            self._filtered_query(status, search, period, today, year, month)
            .order_by(AccountsPayable.due_date.asc(), AccountsPayable.installment_number_of_series.asc())
            .limit(limit)
            .all()
        )

    def summarize(
        self,
        status: StatusFilter = StatusFilter.ALL,
        search: str = "",
        period: PeriodFilter = PeriodFilter.ALL,
        today: Optional[date] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Tuple[int, PayableSummary]:
        """Count and paid/pending totals over every matching entry"""
        rows = (
            self._filtered_query(
                status, search, period, today, year, month,
                columns=[AccountsPayable.is_paid, func.count(AccountsPayable.id), func.sum(AccountsPayable.amount)],
            )
            .group_by(AccountsPayable.is_paid)
            .all()
        )

        count = sum(row[1] for row in rows)
        total_paid = sum((row[2] or 0.0 for row in rows if row[0]), 0.0)
        total_pending = sum((row[2] or 0.0 for row in rows if not row[0]), 0.0)
        return count, PayableSummary(
            total=total_paid + total_pending,
            total_paid=total_paid,
            total_pending=total_pending,
        )

    def get_entry(self, entry_id: str) -> AccountsPayable:
        """
        Fetch a single entry.

        Raises:
            EntryNotFoundError: No entry with that id
        """
        row = self.db.query(AccountsPayable).filter(AccountsPayable.id == entry_id).first()
        if row is None:
            raise EntryNotFoundError(f"Accounts payable entry {entry_id} not found")
        return row

    def update_entry(self, entry: AccountsPayableEntry) -> AccountsPayable:
        """Write back every editable field (last write wins)"""
        row = self.get_entry(entry.id)
        row.name = entry.name
        row.amount = entry.amount
        row.due_date = entry.due_date
        row.is_paid = entry.is_paid
        row.notes = entry.notes or ""
        self.db.flush()
        return row

    def delete_entry(self, entry_id: str) -> int:
        row = self.get_entry(entry_id)
        self.db.delete(row)
        self.db.flush()
        return 1

    def delete_series(self, series_id: str) -> int:
        """Delete every installment sharing series_id, returns rows removed"""
        deleted = (
            self.db.query(AccountsPayable)
            .filter(AccountsPayable.series_id == series_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted


class QuoteRepository:
    """Repository for priced quotes"""

    def __init__(self, db: Session):
        self.db = db

    def create_quote(
        self,
        quote_number: str,
        client_name: str,
        items: List[LineItem],
        discount: DiscountConfig,
        pricing: QuotePricing,
        status: str = "draft",
        notes: Optional[str] = None,
    ) -> Quote:
        """Persist quote with its items and totals"""
        totals = pricing.totals
        db_quote = Quote(
            quote_number=quote_number,
            client_name=client_name,
            status=status,
            discount_type=discount.type.value,
            discount_value=discount.value,
            subtotal=totals.subtotal,
            discount_amount_calculated=totals.discount_amount,
            subtotal_after_discount=totals.subtotal_after_discount,
            total_cash=totals.total_cash,
            total_card=totals.total_card,
            down_payment_applied=pricing.credit_applied,
            selected_payment_method=pricing.payment_method.label,
            notes=notes,
        )
        self.db.add(db_quote)
        self.db.flush()

        for item in items:
            self.db.add(
                QuoteItem(
                    quote_id=db_quote.id,
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                    pricing_model=item.pricing_model.value,
                    width=item.width,
                    height=item.height,
                    item_count_for_area_calc=item.item_count_for_area_calc,
                )
            )

        return db_quote

    def get_quote(self, quote_id: uuid.UUID) -> Optional[Quote]:
        """Fetch quote with items"""
        return (
            self.db.query(Quote)
            .filter(Quote.id == quote_id)
            .first()
        )
