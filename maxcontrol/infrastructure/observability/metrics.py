"""Prometheus metrics for quote pricing and accounts payable activity"""

from prometheus_client import Counter, Histogram

# Quote metrics
quote_priced_counter = Counter(
    "maxcontrol_quote_priced_total",
    "Quotes priced",
    ["payment_kind"],  # cash | pix | debit_card | credit_card | ...
)

quote_saved_counter = Counter(
    "maxcontrol_quote_saved_total",
    "Quotes persisted",
)

quote_overpaid_counter = Counter(
    "maxcontrol_quote_overpaid_total",
    "Quotes where applied credit exceeded the amount due",
)

# Accounts payable metrics
payables_created_counter = Counter(
    "maxcontrol_payables_created_total",
    "Accounts payable entries created",
    ["kind"],  # single | installment
)

payables_deleted_counter = Counter(
    "maxcontrol_payables_deleted_total",
    "Accounts payable entries deleted",
    ["scope"],  # entry | series
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote_priced(payment_kind: str, is_overpaid: bool) -> None:
    """Record pricing by payment method, flagging over-applied credit"""
    quote_priced_counter.labels(payment_kind=payment_kind).inc()
    if is_overpaid:
        quote_overpaid_counter.inc()


def record_payables_created(count: int, series: bool) -> None:
    payables_created_counter.labels(kind="installment" if series else "single").inc(count)
