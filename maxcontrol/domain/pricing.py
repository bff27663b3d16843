"""Quote pricing engine - totals, discounts, card surcharge and installments"""

from typing import Iterable, List, Optional, Union

from maxcontrol.domain.exceptions import InvalidLineItemError
from maxcontrol.domain.models import (
    CustomerDownPayment,
    DiscountConfig,
    DiscountType,
    InstallmentDetails,
    LineItem,
    NetAmountDue,
    PaymentKind,
    PaymentMethod,
    PricingModel,
    Product,
    QuotePricing,
    QuoteTotals,
)
from maxcontrol.domain.money import format_currency

CARD_SURCHARGE_PERCENTAGE = 15.0  # Default surcharge on card payments

PaymentMethodLike = Union[PaymentMethod, str, None]


def _as_payment_method(payment_method: PaymentMethodLike) -> PaymentMethod:
    if isinstance(payment_method, PaymentMethod):
        return payment_method
    return PaymentMethod.parse(payment_method)


def product_unit_price(
    product: Product,
    card: bool = False,
    surcharge_percentage: float = CARD_SURCHARGE_PERCENTAGE,
) -> float:
    """
    Unit price of a product for cash or card payment.

    Custom prices set on the product win over the base price and the
    computed card surcharge.
    """
    cash_price = product.custom_cash_price if product.custom_cash_price is not None else product.base_price
    if not card:
        return cash_price
    if product.custom_card_price is not None:
        return product.custom_card_price
    return cash_price * (1 + surcharge_percentage / 100)


def build_line_item(
    product: Product,
    quantity: float = 1,
    width: Optional[float] = None,
    height: Optional[float] = None,
    item_count: Optional[int] = None,
) -> LineItem:
    """
    Build a quote line from a catalog product at its cash price.

    Per-square-meter products take their quantity from
    width * height * item_count; `quantity` is ignored for them.

    Raises:
        InvalidLineItemError: non-positive quantity or dimensions
    """
    unit_price = product_unit_price(product)

    if product.pricing_model == PricingModel.PER_SQUARE_METER:
        if not width or not height or not item_count or width <= 0 or height <= 0 or item_count <= 0:
            raise InvalidLineItemError(
                f"Width, height and piece count must be positive for '{product.name}'"
            )
        area = width * height * item_count
        return LineItem(
            product_id=product.id,
            product_name=product.name,
            quantity=area,
            unit_price=unit_price,
            total_price=unit_price * area,
            pricing_model=product.pricing_model,
            width=width,
            height=height,
            item_count_for_area_calc=item_count,
        )

    if quantity <= 0:
        raise InvalidLineItemError(f"Quantity must be positive for '{product.name}'")

    return LineItem(
        product_id=product.id,
        product_name=product.name,
        quantity=quantity,
        unit_price=unit_price,
        total_price=unit_price * quantity,
        pricing_model=product.pricing_model,
    )


def compute_totals(
    items: Iterable[LineItem],
    discount: DiscountConfig,
    surcharge_percentage: float = CARD_SURCHARGE_PERCENTAGE,
) -> QuoteTotals:
    """
    Derive quote totals from the line items and discount.

    Rules:
    - Percentage discount is taken from the pre-discount subtotal
    - Discount is applied before the card surcharge
    - Nothing is clamped: a fixed discount above the subtotal gives a
      negative subtotal_after_discount, callers validate input
    - No rounding; values keep full precision
    """
    subtotal = sum((item.total_price for item in items), 0.0)

    if discount.type == DiscountType.PERCENTAGE:
        discount_amount = subtotal * discount.value / 100
    elif discount.type == DiscountType.FIXED:
        discount_amount = discount.value
    else:
        discount_amount = 0.0

    subtotal_after_discount = subtotal - discount_amount
    total_cash = subtotal_after_discount
    total_card = subtotal_after_discount * (1 + surcharge_percentage / 100)

    return QuoteTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        subtotal_after_discount=subtotal_after_discount,
        total_cash=total_cash,
        total_card=total_card,
    )


def compute_net_amount_due(
    totals: QuoteTotals,
    payment_method: PaymentMethodLike,
    credit_applied: float,
) -> NetAmountDue:
    """
    Amount still due after the customer's credit is applied.

    Card payments (credit or debit) use total_card, everything else
    total_cash. The result is not clamped at zero; is_overpaid marks the
    case where the credit exceeds the selected total.
    """
    method = _as_payment_method(payment_method)
    selected = totals.total_card if method.is_card else totals.total_cash
    amount = selected - credit_applied
    return NetAmountDue(amount=amount, is_overpaid=amount < 0)


def compute_installment_details(
    payment_method: PaymentMethodLike,
    amount_to_install: float,
) -> Optional[InstallmentDetails]:
    """Installment count and value for credit card payments, else None"""
    method = _as_payment_method(payment_method)

    if method.kind != PaymentKind.CREDIT_CARD or method.installments <= 0:
        return None
    if amount_to_install <= 0:
        return None

    return InstallmentDetails(
        count=method.installments,
        value=amount_to_install / method.installments,
    )


def compute_installment_text(payment_method: PaymentMethodLike, amount_to_install: float) -> str:
    """Display text like "(Em 4x de R$ 100,00)", or "" when not installable"""
    details = compute_installment_details(payment_method, amount_to_install)
    if details is None:
        return ""
    return f"(Em {details.count}x de {format_currency(details.value)})"


def available_credit(down_payments: Iterable[CustomerDownPayment]) -> float:
    """Total credit a customer has from previous down payments"""
    return sum((dp.amount for dp in down_payments), 0.0)


def price_quote(
    items: List[LineItem],
    discount: DiscountConfig,
    payment_method: PaymentMethodLike,
    credit_applied: float = 0.0,
    surcharge_percentage: float = CARD_SURCHARGE_PERCENTAGE,
) -> QuotePricing:
    """
    Main entry point for the quote editor: totals plus payment breakdown.

    Installment text is given for the full card total and for the card
    total left after the credit.
    """
    method = _as_payment_method(payment_method)
    totals = compute_totals(items, discount, surcharge_percentage)
    net_amount_due = compute_net_amount_due(totals, method, credit_applied)

    return QuotePricing(
        totals=totals,
        payment_method=method,
        credit_applied=credit_applied,
        net_amount_due=net_amount_due,
        installment_text_before_credit=compute_installment_text(method, totals.total_card),
        installment_text_after_credit=compute_installment_text(method, net_amount_due.amount),
    )
