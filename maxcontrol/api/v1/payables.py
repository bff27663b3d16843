"""Accounts payable endpoints - create (with installments), list, toggle, edit, delete"""

import logging
from datetime import date
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from maxcontrol.api.v1.schemas import (
    CreatePayableRequest,
    CreatePayableResponse,
    DeletePayableResponse,
    PayableEntrySchema,
    PayableListResponse,
    PayableSummarySchema,
    UpdatePayableRequest,
)
from maxcontrol.api.dependencies import get_request_id
from maxcontrol.config import settings
from maxcontrol.infrastructure.database.session import get_db
from maxcontrol.infrastructure.database.repositories import AccountsPayableRepository, to_domain_entry
from maxcontrol.domain.installments import generate_installments
from maxcontrol.domain.payables import (
    PeriodFilter,
    StatusFilter,
    apply_edit,
    toggle_paid,
)
from maxcontrol.domain.exceptions import EntryNotFoundError, InvalidInstallmentCountError
from maxcontrol.infrastructure.observability.metrics import record_payables_created, payables_deleted_counter
from maxcontrol.infrastructure.observability.logging import log_payables_created

router = APIRouter()


def _entry_schema(entry) -> PayableEntrySchema:
    return PayableEntrySchema(
        id=entry.id,
        name=entry.name,
        amount=entry.amount,
        due_date=entry.due_date,
        is_paid=entry.is_paid,
        notes=entry.notes,
        series_id=entry.series_id,
        total_installments_in_series=entry.total_installments_in_series,
        installment_number_of_series=entry.installment_number_of_series,
    )


def _summary_schema(summary) -> PayableSummarySchema:
    return PayableSummarySchema(
        total=summary.total,
        total_paid=summary.total_paid,
        total_pending=summary.total_pending,
    )


@router.post("/payables", response_model=CreatePayableResponse, status_code=201)
def create_payable(
    request_body: CreatePayableRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Register a bill, optionally split into weekly or monthly installments.

    Installments share a series id and always start unpaid; a single
    entry keeps the submitted is_paid flag.
    """
    request_id = get_request_id(request)

    if request_body.number_of_installments > settings.max_installments:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.max_installments} installments are allowed",
        )

    try:
        entries = generate_installments(
            request_body.total_amount,
            request_body.due_date,
            request_body.number_of_installments,
            request_body.parcel_type,
            request_body.name,
            notes=request_body.notes,
            is_paid=request_body.is_paid,
        )

        repo = AccountsPayableRepository(db)
        repo.create_entries(entries)
        db.commit()

    except InvalidInstallmentCountError as e:
        db.rollback()
        logging.warning(f"Invalid installment count: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    series_id = entries[0].series_id
    record_payables_created(len(entries), series=series_id is not None)
    log_payables_created(request_id, request_body.name, request_body.total_amount, len(entries), series_id)

    return CreatePayableResponse(
        series_id=series_id,
        entries=[_entry_schema(entry) for entry in entries],
    )


@router.get("/payables", response_model=PayableListResponse)
def list_payables(
    status: StatusFilter = Query(StatusFilter.PENDING, description="Paid status filter"),
    search: str = Query("", description="Case-insensitive name search"),
    period: PeriodFilter = Query(PeriodFilter.ALL, description="Due date period"),
    year: Optional[int] = Query(None, description="Year for specific_month"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12) for specific_month"),
    db: Session = Depends(get_db),
):
    """
    List accounts payable with filters.

    Only the first payables_page_limit matches are returned; total_count
    and both summaries cover every match.
    """
    repo = AccountsPayableRepository(db)
    today = date.today()

    rows = repo.list_entries(status, search, period, today, year, month, limit=settings.payables_page_limit)
    total_count, summary = repo.summarize(status, search, period, today, year, month)
    _, month_summary = repo.summarize(period=PeriodFilter.MONTH, today=today)

    return PayableListResponse(
        status=status,
        period=period,
        total_count=total_count,
        entries=[_entry_schema(to_domain_entry(row)) for row in rows],
        summary=_summary_schema(summary),
        month_summary=_summary_schema(month_summary),
    )


@router.patch("/payables/{entry_id}/toggle-paid", response_model=PayableEntrySchema)
def toggle_payable_paid(entry_id: str, request: Request, db: Session = Depends(get_db)):
    """Flip an entry between pending and paid"""
    repo = AccountsPayableRepository(db)

    try:
        entry = toggle_paid(to_domain_entry(repo.get_entry(entry_id)))
        repo.update_entry(entry)
        db.commit()
    except EntryNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    logging.info(
        "Accounts payable status changed",
        extra={"request_id": get_request_id(request), "entry_id": entry_id, "is_paid": entry.is_paid},
    )
    return _entry_schema(entry)


@router.put("/payables/{entry_id}", response_model=PayableEntrySchema)
def update_payable(
    entry_id: str,
    request_body: UpdatePayableRequest,
    db: Session = Depends(get_db),
):
    """Edit one entry; installments are edited one at a time"""
    repo = AccountsPayableRepository(db)

    try:
        entry = apply_edit(
            to_domain_entry(repo.get_entry(entry_id)),
            name=request_body.name,
            amount=request_body.amount,
            due_date=request_body.due_date,
            is_paid=request_body.is_paid,
            notes=request_body.notes,
        )
        repo.update_entry(entry)
        db.commit()
    except EntryNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    return _entry_schema(entry)


@router.delete("/payables/{entry_id}", response_model=DeletePayableResponse)
def delete_payable(
    entry_id: str,
    request: Request,
    scope: Literal["entry", "series"] = Query("entry", description="Delete only this entry or its whole series"),
    db: Session = Depends(get_db),
):
    """
    Delete an entry, or every installment of its series with scope=series.

    scope=series on an entry without a series deletes just that entry.
    """
    repo = AccountsPayableRepository(db)

    try:
        row = repo.get_entry(entry_id)
        if scope == "series" and row.series_id:
            deleted = repo.delete_series(row.series_id)
        else:
            scope = "entry"
            deleted = repo.delete_entry(entry_id)
        db.commit()
    except EntryNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    payables_deleted_counter.labels(scope=scope).inc(deleted)
    logging.info(
        "Accounts payable deleted",
        extra={"request_id": get_request_id(request), "entry_id": entry_id, "scope": scope, "deleted": deleted},
    )
    return DeletePayableResponse(deleted=deleted)
