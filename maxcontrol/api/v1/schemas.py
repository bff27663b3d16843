"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import List, Optional, Union

from maxcontrol.domain.models import Cadence, DiscountType, PaymentKind, PricingModel
from maxcontrol.domain.payables import PeriodFilter, StatusFilter


class LineItemSchema(BaseModel):
    """Quote line as picked in the editor; totals are recomputed server-side"""

    product_id: str
    product_name: str
    unit_price: float = Field(..., ge=0, description="Cash unit price")
    pricing_model: PricingModel = PricingModel.PER_UNIT
    quantity: float = 1
    width: Optional[float] = None
    height: Optional[float] = None
    item_count_for_area_calc: Optional[int] = None


class LineItemResponse(BaseModel):
    product_id: Optional[str]
    product_name: str
    quantity: float
    unit_price: float
    total_price: float
    pricing_model: PricingModel
    width: Optional[float] = None
    height: Optional[float] = None
    item_count_for_area_calc: Optional[int] = None


class DiscountSchema(BaseModel):
    type: DiscountType = DiscountType.NONE
    value: float = Field(0.0, ge=0)


class PaymentMethodSchema(BaseModel):
    """Structured payment method; a legacy label string is also accepted"""

    kind: PaymentKind
    installments: int = Field(0, ge=0)
    description: str = ""


class PriceQuoteRequest(BaseModel):
    """Request body for POST /v1/quotes/price"""

    items: List[LineItemSchema] = Field(default_factory=list)
    discount: DiscountSchema = Field(default_factory=DiscountSchema)
    payment_method: Union[PaymentMethodSchema, str] = ""
    credit_applied: float = Field(0.0, ge=0, description="Customer credit used on this quote")


class QuoteTotalsSchema(BaseModel):
    subtotal: float
    discount_amount: float
    subtotal_after_discount: float
    total_cash: float
    total_card: float


class PriceQuoteResponse(BaseModel):
    """Response for POST /v1/quotes/price"""

    items: List[LineItemResponse]
    totals: QuoteTotalsSchema
    payment_method: str
    credit_applied: float
    net_amount_due: float
    net_amount_due_display: str
    is_overpaid: bool
    installment_text_before_credit: str
    installment_text_after_credit: str


class CreateQuoteRequest(PriceQuoteRequest):
    """Request body for POST /v1/quotes"""

    client_name: str = Field(..., min_length=1)
    status: str = "draft"
    notes: Optional[str] = None


class QuoteResponse(BaseModel):
    """Response for POST /v1/quotes and GET /v1/quotes/{quote_id}"""

    quote_id: str
    quote_number: str
    client_name: str
    status: str
    payment_method: str
    items: List[LineItemResponse]
    totals: QuoteTotalsSchema
    down_payment_applied: float
    created_at: str


class CreatePayableRequest(BaseModel):
    """Request body for POST /v1/payables"""

    name: str = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    due_date: date
    is_paid: bool = False
    parcel_type: Cadence = Cadence.NONE
    number_of_installments: int = 1
    notes: Optional[str] = None


class UpdatePayableRequest(BaseModel):
    """Request body for PUT /v1/payables/{entry_id}"""

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    due_date: date
    is_paid: bool
    notes: Optional[str] = None


class PayableEntrySchema(BaseModel):
    id: str
    name: str
    amount: float
    due_date: date
    is_paid: bool
    notes: Optional[str] = None
    series_id: Optional[str] = None
    total_installments_in_series: Optional[int] = None
    installment_number_of_series: Optional[int] = None


class PayableSummarySchema(BaseModel):
    total: float
    total_paid: float
    total_pending: float


class PayableListResponse(BaseModel):
    """Response for GET /v1/payables"""

    status: StatusFilter
    period: PeriodFilter
    total_count: int
    entries: List[PayableEntrySchema]
    summary: PayableSummarySchema
    month_summary: PayableSummarySchema


class CreatePayableResponse(BaseModel):
    series_id: Optional[str] = None
    entries: List[PayableEntrySchema]


class DeletePayableResponse(BaseModel):
    deleted: int
