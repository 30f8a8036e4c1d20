"""
Project-level financial aggregation.

Every function here is a pure reduction over loans, investments and
transactions. Results are recomputed on each call and never cached, since
the underlying collections can change between calls.
"""

from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field

from redev.models.entities import FinancialSummary, Investment, Loan, Project, Transaction
from redev.models.enums import TransactionType

REVENUE_TYPES = frozenset(
    {TransactionType.INCOME, TransactionType.REVENUE, TransactionType.DEPOSIT}
)
EXPENSE_TYPES = frozenset(
    {
        TransactionType.EXPENSE,
        TransactionType.PRINCIPAL_PAYMENT,
        TransactionType.INTEREST_PAYMENT,
    }
)


class ProjectMetrics(BaseModel):
    """Financial summary of one project."""

    total_invested: float = Field(..., description="Sum of investment amounts")
    total_loans: float = Field(..., description="Sum of loan principal")
    total_loans_remaining: float = Field(..., description="Sum of remaining balances")
    total_expenses: float = Field(..., description="Expense-side transactions")
    total_revenue: float = Field(..., description="Revenue-side transactions")
    cash_flow: float = Field(..., description="Revenue minus expenses")
    roi: float = Field(..., description="Portfolio ROI in percent")
    loan_to_value: float = Field(..., description="Remaining debt / budget, in percent")
    debt_coverage_ratio: float = Field(..., description="Revenue / debt service")


class MonthlyCashFlow(BaseModel):
    """Revenue and expenses for one calendar month."""

    month: str = Field(..., description="Month as YYYY-MM")
    revenue: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


def _amounts_of(
    transactions: Iterable[Transaction], types: FrozenSet[TransactionType]
) -> NDArray[np.float64]:
    return np.array([t.amount for t in transactions if t.type in types], dtype=np.float64)


def total_revenue(transactions: Iterable[Transaction]) -> float:
    """Sum of revenue-side transactions (income, revenue, deposit)."""
    return float(np.sum(_amounts_of(transactions, REVENUE_TYPES)))


def total_expenses(transactions: Iterable[Transaction]) -> float:
    """Sum of expense-side transactions (expense, principal and interest payments)."""
    return float(np.sum(_amounts_of(transactions, EXPENSE_TYPES)))


def cash_flow(transactions: Iterable[Transaction]) -> float:
    """Revenue minus expenses."""
    transactions = list(transactions)
    return total_revenue(transactions) - total_expenses(transactions)


def loan_to_value(loans: Iterable[Loan], total_budget: float) -> float:
    """
    Remaining loan balance as a percentage of the project budget.

    A project without a positive budget has a loan-to-value of 0.
    """
    if total_budget <= 0:
        return 0.0
    remaining = np.sum(np.array([loan.remaining_balance for loan in loans], dtype=np.float64))
    return float(remaining / total_budget * 100)


def debt_service(loans: Iterable[Loan]) -> float:
    """Interest and principal actually paid across all loans."""
    paid = np.array(
        [(loan.total_interest_paid, loan.total_principal_paid) for loan in loans],
        dtype=np.float64,
    )
    return float(np.sum(paid))


def debt_coverage_ratio(
    loans: Iterable[Loan], transactions: Iterable[Transaction]
) -> float:
    """
    Revenue divided by total debt service.

    Returns 0 when no debt service has been paid yet.
    """
    service = debt_service(loans)
    if service <= 0:
        return 0.0
    return total_revenue(transactions) / service


def portfolio_roi(investments: Iterable[Investment]) -> float:
    """Actual returns across investments as a percentage of capital invested."""
    investments = list(investments)
    invested = np.sum(np.array([inv.amount for inv in investments], dtype=np.float64))
    if invested <= 0:
        return 0.0
    returns = np.sum(np.array([inv.actual_returns for inv in investments], dtype=np.float64))
    return float(returns / invested * 100)


def monthly_cash_flow(transactions: Iterable[Transaction]) -> List[MonthlyCashFlow]:
    """Revenue, expenses and net cash flow per month, oldest month first."""
    revenue: Dict[str, float] = defaultdict(float)
    expenses: Dict[str, float] = defaultdict(float)

    for t in transactions:
        month = t.date.strftime("%Y-%m")
        if t.type in REVENUE_TYPES:
            revenue[month] += t.amount
        elif t.type in EXPENSE_TYPES:
            expenses[month] += t.amount

    return [
        MonthlyCashFlow(
            month=month,
            revenue=revenue[month],
            expenses=expenses[month],
            net=revenue[month] - expenses[month],
        )
        for month in sorted(set(revenue) | set(expenses))
    ]


def summarize_project(
    project: Project,
    loans: Iterable[Loan],
    investments: Iterable[Investment],
    transactions: Iterable[Transaction],
) -> ProjectMetrics:
    """
    Compute every project-level metric in one pass over the collections.

    Records belonging to other projects are ignored.

    Args:
        project: The project being summarized
        loans: Candidate loans
        investments: Candidate investments
        transactions: Candidate transactions

    Returns:
        ProjectMetrics for the project
    """
    loans = [loan for loan in loans if loan.project_id == project.id]
    investments = [inv for inv in investments if inv.project_id == project.id]
    transactions = [t for t in transactions if t.project_id == project.id]

    revenue = total_revenue(transactions)
    expenses = total_expenses(transactions)

    return ProjectMetrics(
        total_invested=sum(inv.amount for inv in investments),
        total_loans=sum(loan.amount for loan in loans),
        total_loans_remaining=sum(loan.remaining_balance for loan in loans),
        total_expenses=expenses,
        total_revenue=revenue,
        cash_flow=revenue - expenses,
        roi=portfolio_roi(investments),
        loan_to_value=loan_to_value(loans, project.total_budget),
        debt_coverage_ratio=debt_coverage_ratio(loans, transactions),
    )


def refresh_financial_summary(
    project: Project,
    loans: Iterable[Loan],
    investments: Iterable[Investment],
    transactions: Iterable[Transaction],
) -> Project:
    """Return a copy of ``project`` with its cached financial summary recomputed."""
    metrics = summarize_project(project, loans, investments, transactions)
    summary = FinancialSummary(
        total_investments=metrics.total_invested,
        total_loans=metrics.total_loans,
        total_expenses=metrics.total_expenses,
        total_revenue=metrics.total_revenue,
        net_income=metrics.cash_flow,
        roi=metrics.roi,
    )
    return project.model_copy(update={"financial_summary": summary})
