"""Return metrics for an investment, computed from its distribution history."""

from typing import Dict

from pydantic import BaseModel, Field

from redev.exceptions import FinancialValidationError
from redev.models.entities import Investment
from redev.models.enums import DistributionKind


class ReturnMetrics(BaseModel):
    """Realized and outstanding return on one investment."""

    total_distributed: float = Field(..., description="Sum of all distributions")
    realized_roi: float = Field(..., description="Distributed / invested, in percent")
    unrealized_roi: float = Field(
        ..., description="Expected ROI minus realized ROI, in percent"
    )


def compute_return(investment: Investment) -> ReturnMetrics:
    """
    Compute realized and unrealized ROI for an investment.

    Distributions are summed in the order given; ordering and uniqueness are
    up to the caller.

    Args:
        investment: The investment and its distributions

    Returns:
        ReturnMetrics for the investment

    Raises:
        FinancialValidationError: If the invested amount is not positive
    """
    if investment.amount <= 0:
        raise FinancialValidationError(
            f"Investment amount must be positive to compute returns, got {investment.amount}"
        )

    total_distributed = sum(d.amount for d in investment.distributions)
    realized_roi = total_distributed / investment.amount * 100

    return ReturnMetrics(
        total_distributed=total_distributed,
        realized_roi=realized_roi,
        unrealized_roi=investment.expected_roi - realized_roi,
    )


def distributions_by_kind(investment: Investment) -> Dict[DistributionKind, float]:
    """Total distributed per distribution kind; kinds never paid are 0."""
    totals = {kind: 0.0 for kind in DistributionKind}
    for distribution in investment.distributions:
        totals[distribution.kind] += distribution.amount
    return totals
