"""Quote pricing endpoints - POST /v1/quotes/price, POST /v1/quotes, GET /v1/quotes/{quote_id}"""

import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from maxcontrol.api.v1.schemas import (
    CreateQuoteRequest,
    LineItemResponse,
    PriceQuoteRequest,
    PriceQuoteResponse,
    QuoteResponse,
    QuoteTotalsSchema,
)
from maxcontrol.api.dependencies import get_request_id, get_surcharge_percentage
from maxcontrol.infrastructure.database.session import get_db
from maxcontrol.infrastructure.database.repositories import QuoteRepository
from maxcontrol.domain.models import DiscountConfig, LineItem, PaymentMethod, Product, QuotePricing
from maxcontrol.domain.pricing import build_line_item, price_quote
from maxcontrol.domain.money import format_currency
from maxcontrol.domain.exceptions import InvalidLineItemError
from maxcontrol.infrastructure.observability.metrics import record_quote_priced, quote_saved_counter
from maxcontrol.infrastructure.observability.logging import log_quote_priced

router = APIRouter()

QUOTE_NUMBER_ATTEMPTS = 5


def new_quote_number() -> str:
    return f"ORC-{uuid.uuid4().int % 1_000_000:06d}"


def _build_items(request_body: PriceQuoteRequest) -> List[LineItem]:
    return [
        build_line_item(
            Product(
                id=item.product_id,
                name=item.product_name,
                base_price=item.unit_price,
                pricing_model=item.pricing_model,
            ),
            quantity=item.quantity,
            width=item.width,
            height=item.height,
            item_count=item.item_count_for_area_calc,
        )
        for item in request_body.items
    ]


def _payment_method(request_body: PriceQuoteRequest) -> PaymentMethod:
    method = request_body.payment_method
    if isinstance(method, str):
        return PaymentMethod.parse(method)
    return PaymentMethod(kind=method.kind, installments=method.installments, description=method.description)


def _price(request_body: PriceQuoteRequest, surcharge_percentage: float) -> tuple[List[LineItem], DiscountConfig, QuotePricing]:
    """Recompute line items and totals from the request"""
    items = _build_items(request_body)
    discount = DiscountConfig(type=request_body.discount.type, value=request_body.discount.value)
    pricing = price_quote(
        items,
        discount,
        _payment_method(request_body),
        credit_applied=request_body.credit_applied,
        surcharge_percentage=surcharge_percentage,
    )
    return items, discount, pricing


def _item_response(item) -> LineItemResponse:
    return LineItemResponse(
        product_id=item.product_id,
        product_name=item.product_name,
        quantity=item.quantity,
        unit_price=item.unit_price,
        total_price=item.total_price,
        pricing_model=item.pricing_model,
        width=item.width,
        height=item.height,
        item_count_for_area_calc=item.item_count_for_area_calc,
    )


def _totals_schema(totals) -> QuoteTotalsSchema:
    return QuoteTotalsSchema(
        subtotal=totals.subtotal,
        discount_amount=totals.discount_amount,
        subtotal_after_discount=totals.subtotal_after_discount,
        total_cash=totals.total_cash,
        total_card=totals.total_card,
    )


@router.post("/quotes/price", response_model=PriceQuoteResponse)
def price_quote_endpoint(
    request_body: PriceQuoteRequest,
    request: Request,
    surcharge_percentage: float = Depends(get_surcharge_percentage),
):
    """
    Price a cart without storing anything.

    Returns totals, the amount due after credit and the installment text
    shown for credit card payments.
    """
    request_id = get_request_id(request)

    try:
        items, _, pricing = _price(request_body, surcharge_percentage)
    except InvalidLineItemError as e:
        logging.warning(f"Invalid line item: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    net = pricing.net_amount_due
    record_quote_priced(pricing.payment_method.kind.value, net.is_overpaid)
    log_quote_priced(
        request_id,
        pricing.payment_method.label,
        pricing.totals.total_cash,
        pricing.totals.total_card,
        net.amount,
        net.is_overpaid,
    )

    return PriceQuoteResponse(
        items=[_item_response(item) for item in items],
        totals=_totals_schema(pricing.totals),
        payment_method=pricing.payment_method.label,
        credit_applied=pricing.credit_applied,
        net_amount_due=net.amount,
        net_amount_due_display=format_currency(net.amount),
        is_overpaid=net.is_overpaid,
        installment_text_before_credit=pricing.installment_text_before_credit,
        installment_text_after_credit=pricing.installment_text_after_credit,
    )


def _quote_response(db_quote) -> QuoteResponse:
    return QuoteResponse(
        quote_id=str(db_quote.id),
        quote_number=db_quote.quote_number,
        client_name=db_quote.client_name,
        status=db_quote.status,
        payment_method=db_quote.selected_payment_method,
        items=[_item_response(item) for item in db_quote.items],
        totals=QuoteTotalsSchema(
            subtotal=db_quote.subtotal,
            discount_amount=db_quote.discount_amount_calculated,
            subtotal_after_discount=db_quote.subtotal_after_discount,
            total_cash=db_quote.total_cash,
            total_card=db_quote.total_card,
        ),
        down_payment_applied=db_quote.down_payment_applied,
        created_at=db_quote.created_at.isoformat(),
    )


@router.post("/quotes", response_model=QuoteResponse, status_code=201)
def create_quote(
    request_body: CreateQuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
    surcharge_percentage: float = Depends(get_surcharge_percentage),
):
    """
    Price and persist a quote.

    Flow:
    1. Rebuild line items from the submitted products and dimensions
    2. Compute totals with the configured card surcharge
    3. Store quote, items and totals under a fresh ORC-NNNNNN number,
       drawing again when the number is already taken
    """
    request_id = get_request_id(request)

    if not request_body.items:
        raise HTTPException(status_code=422, detail="Quote needs at least one item")

    try:
        items, discount, pricing = _price(request_body, surcharge_percentage)
    except InvalidLineItemError as e:
        logging.warning(f"Invalid line item: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    quote_repo = QuoteRepository(db)
    for attempt in range(1, QUOTE_NUMBER_ATTEMPTS + 1):
        quote_number = new_quote_number()
        try:
            db_quote = quote_repo.create_quote(
                quote_number=quote_number,
                client_name=request_body.client_name,
                items=items,
                discount=discount,
                pricing=pricing,
                status=request_body.status,
                notes=request_body.notes,
            )
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            logging.warning(
                "Quote number already taken",
                extra={"request_id": request_id, "quote_number": quote_number, "attempt": attempt},
            )
    else:
        logging.error("Could not allocate a quote number", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Could not allocate a quote number, try again")

    db.refresh(db_quote)

    quote_saved_counter.inc()
    log_quote_priced(
        request_id,
        pricing.payment_method.label,
        pricing.totals.total_cash,
        pricing.totals.total_card,
        pricing.net_amount_due.amount,
        pricing.net_amount_due.is_overpaid,
        quote_id=str(db_quote.id),
    )

    return _quote_response(db_quote)


@router.get("/quotes/{quote_id}", response_model=QuoteResponse)
def get_quote(quote_id: str, db: Session = Depends(get_db)):
    """Retrieve a stored quote with its items and frozen totals"""
    try:
        quote_uuid = uuid.UUID(quote_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid quote ID format")

    quote_repo = QuoteRepository(db)
    db_quote = quote_repo.get_quote(quote_uuid)

    if not db_quote:
        raise HTTPException(status_code=404, detail="Quote not found")

    return _quote_response(db_quote)
