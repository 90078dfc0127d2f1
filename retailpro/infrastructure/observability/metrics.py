"""Prometheus metrics for billing volume, stock movements, reminders and collaborator health"""

from prometheus_client import Counter, Histogram

# Billing metrics
invoice_counter = Counter(
    "retailpro_invoices_total",
    "Invoices committed",
    ["status"],  # paid | pending
)

invoice_amount_histogram = Histogram(
    "retailpro_invoice_grand_total",
    "Grand total of committed invoices",
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

# Inventory metrics
stock_adjustment_counter = Counter(
    "retailpro_stock_adjustments_total",
    "Stock adjustment requests",
    ["action", "outcome"],  # ADD_STOCK | REDUCE_STOCK ; matched | unmatched
)

# Reminder metrics
reminder_counter = Counter(
    "retailpro_reminders_total",
    "Payment reminders recorded",
    ["method"],  # IN_APP | WHATSAPP
)

# Collaborator metrics
assistant_failure_counter = Counter(
    "retailpro_assistant_failures_total",
    "Failed assistant calls (absorbed)",
    ["operation"],  # suggest | parse_command
)

messaging_failure_counter = Counter(
    "retailpro_messaging_failures_total",
    "Failed outbound message hand-offs",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_invoice(is_paid: bool, grand_total: float) -> None:
    """Record invoice volume by payment status"""
    invoice_counter.labels(status="paid" if is_paid else "pending").inc()
    invoice_amount_histogram.observe(grand_total)


def record_stock_adjustment(action: str, matched_count: int) -> None:
    outcome = "matched" if matched_count else "unmatched"
    stock_adjustment_counter.labels(action=action, outcome=outcome).inc()
