"""Domain models - pure Python dataclasses representing business entities"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class PricingModel(str, Enum):
    """How a product's quantity is measured on a quote"""

    PER_UNIT = "unit"
    PER_SQUARE_METER = "square_meter"


class DiscountType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PaymentKind(str, Enum):
    CASH = "cash"
    PIX = "pix"
    DEBIT_CARD = "debit_card"
    CREDIT_CARD = "credit_card"
    BANK_SLIP = "bank_slip"
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class Cadence(str, Enum):
    """Spacing between installment due dates"""

    NONE = "none"  # Single unparceled entry
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Product:
    """Catalog product as seen by the quote editor"""

    id: str
    name: str
    base_price: float
    pricing_model: PricingModel = PricingModel.PER_UNIT
    unit: Optional[str] = None
    custom_cash_price: Optional[float] = None
    custom_card_price: Optional[float] = None


@dataclass(frozen=True)
class LineItem:
    """Single quote line; replaced (never edited) when it changes"""

    product_id: str
    product_name: str
    quantity: float
    unit_price: float
    total_price: float
    pricing_model: PricingModel = PricingModel.PER_UNIT
    width: Optional[float] = None
    height: Optional[float] = None
    item_count_for_area_calc: Optional[int] = None


@dataclass(frozen=True)
class DiscountConfig:
    type: DiscountType = DiscountType.NONE
    value: float = 0.0


@dataclass(frozen=True)
class QuoteTotals:
    """Derived quote totals, always computed together"""

    subtotal: float
    discount_amount: float
    subtotal_after_discount: float
    total_cash: float
    total_card: float


_LABELS = {
    PaymentKind.CASH: "Dinheiro",
    PaymentKind.PIX: "PIX",
    PaymentKind.DEBIT_CARD: "Cartão de Débito",
    PaymentKind.CREDIT_CARD: "Cartão de Crédito",
    PaymentKind.BANK_SLIP: "Boleto Bancário",
    PaymentKind.BANK_TRANSFER: "Transferência Bancária",
    PaymentKind.OTHER: "Outro",
}

_INSTALLMENT_PATTERN = re.compile(r"(\d+)x")


@dataclass(frozen=True)
class PaymentMethod:
    """
    Payment method selected for a quote.

    `installments` only applies to credit cards; 0 means the count was not
    given. `description` keeps the free text of an OTHER method.
    """

    kind: PaymentKind
    installments: int = 0
    description: str = ""

    @classmethod
    def credit(cls, installments: int) -> "PaymentMethod":
        return cls(PaymentKind.CREDIT_CARD, installments=installments)

    @property
    def is_card(self) -> bool:
        return self.kind in (PaymentKind.DEBIT_CARD, PaymentKind.CREDIT_CARD)

    @property
    def label(self) -> str:
        """Legacy display label, e.g. "Cartão de Crédito 6x" """
        if self.kind == PaymentKind.CREDIT_CARD and self.installments > 0:
            return f"{_LABELS[self.kind]} {self.installments}x"
        if self.kind == PaymentKind.OTHER and self.description:
            return self.description
        return _LABELS[self.kind]

    @classmethod
    def parse(cls, text: Optional[str]) -> "PaymentMethod":
        """
        Parse a legacy free-text label such as "Cartão de Crédito 6x".

        Any label containing "cartão" is a card; only "cartão de crédito"
        is a credit card, and its count is read from a lowercase "Nx", so
        "Cartão de Crédito 6X" carries no installments. Unaccented spellings
        are not cards.

        Never raises: unknown or empty labels become OTHER.
        """
        if not text:
            return cls(PaymentKind.OTHER)

        lowered = text.strip().lower()

        if "cartão" in lowered:
            if "cartão de crédito" in lowered:
                match = _INSTALLMENT_PATTERN.search(text)
                installments = int(match.group(1)) if match else 0
                return cls(PaymentKind.CREDIT_CARD, installments=installments)
            return cls(PaymentKind.DEBIT_CARD)

        if "pix" in lowered:
            return cls(PaymentKind.PIX)
        if "dinheiro" in lowered or lowered == "cash":
            return cls(PaymentKind.CASH)
        if "boleto" in lowered:
            return cls(PaymentKind.BANK_SLIP)
        if "transfer" in lowered:
            return cls(PaymentKind.BANK_TRANSFER)

        return cls(PaymentKind.OTHER, description=text.strip())


@dataclass(frozen=True)
class NetAmountDue:
    """Amount left to pay after customer credit; negative when overpaid"""

    amount: float
    is_overpaid: bool


@dataclass(frozen=True)
class InstallmentDetails:
    count: int
    value: float


@dataclass(frozen=True)
class QuotePricing:
    """Everything the quote editor shows for the current cart"""

    totals: QuoteTotals
    payment_method: PaymentMethod
    credit_applied: float
    net_amount_due: NetAmountDue
    installment_text_before_credit: str
    installment_text_after_credit: str


@dataclass(frozen=True)
class CustomerDownPayment:
    """Credit a customer paid in advance (sinal/haver)"""

    amount: float
    date: date
    description: str = ""


@dataclass
class AccountsPayableEntry:
    """Single bill or one installment of a parceled debt"""

    id: str
    name: str
    amount: float
    due_date: date
    is_paid: bool = False
    notes: Optional[str] = None
    series_id: Optional[str] = None
    total_installments_in_series: Optional[int] = None
    installment_number_of_series: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class PayableSummary:
    total: float
    total_paid: float
    total_pending: float
