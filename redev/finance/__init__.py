"""Financial computation engine: amortization, returns and project aggregation."""

from .amortization import (
    AmortizationResult,
    apply_schedule,
    calculate_payment_amount,
    generate_schedule,
    record_payment,
    schedule_inputs_changed,
)
from .portfolio import (
    MonthlyCashFlow,
    ProjectMetrics,
    cash_flow,
    debt_coverage_ratio,
    loan_to_value,
    monthly_cash_flow,
    portfolio_roi,
    refresh_financial_summary,
    summarize_project,
)
from .returns import ReturnMetrics, compute_return, distributions_by_kind

__all__ = [
    "AmortizationResult",
    "apply_schedule",
    "calculate_payment_amount",
    "generate_schedule",
    "record_payment",
    "schedule_inputs_changed",
    "ReturnMetrics",
    "compute_return",
    "distributions_by_kind",
    "MonthlyCashFlow",
    "ProjectMetrics",
    "cash_flow",
    "debt_coverage_ratio",
    "loan_to_value",
    "monthly_cash_flow",
    "portfolio_roi",
    "refresh_financial_summary",
    "summarize_project",
]
