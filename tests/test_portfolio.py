"""Tests for project-level financial aggregation."""

from datetime import date

import pytest

from redev.finance.amortization import apply_schedule, record_payment
from redev.finance.portfolio import (
    ProjectMetrics,
    cash_flow,
    debt_coverage_ratio,
    loan_to_value,
    monthly_cash_flow,
    portfolio_roi,
    refresh_financial_summary,
    summarize_project,
    total_expenses,
    total_revenue,
)
from redev.models import (
    Distribution,
    Investment,
    Loan,
    Project,
    Transaction,
    TransactionType,
)


def make_transaction(amount, kind, day=date(2024, 1, 15), project_id="p1"):
    return Transaction(project_id=project_id, amount=amount, date=day, type=kind)


@pytest.fixture
def project():
    return Project(id="p1", name="Harbor Lofts", cost_breakdown={"land": 1000000})


@pytest.fixture
def transactions():
    return [
        make_transaction(50000, TransactionType.INCOME),
        make_transaction(20000, TransactionType.REVENUE, date(2024, 2, 1)),
        make_transaction(5000, TransactionType.DEPOSIT, date(2024, 2, 3)),
        make_transaction(15000, TransactionType.EXPENSE),
        make_transaction(4000, TransactionType.PRINCIPAL_PAYMENT, date(2024, 2, 1)),
        make_transaction(1000, TransactionType.INTEREST_PAYMENT, date(2024, 2, 1)),
        make_transaction(9999, TransactionType.TRANSFER),
    ]


@pytest.fixture
def loans():
    return [
        Loan(
            project_id="p1",
            amount=400000,
            interest_rate=6,
            term=24,
            start_date=date(2024, 1, 1),
            remaining_balance=300000,
            total_interest_paid=3000,
            total_principal_paid=7000,
        ),
        Loan(
            project_id="p1",
            amount=200000,
            interest_rate=8,
            term=12,
            start_date=date(2024, 1, 1),
            remaining_balance=100000,
            total_interest_paid=2000,
            total_principal_paid=3000,
        ),
    ]


@pytest.fixture
def investments():
    return [
        Investment(
            project_id="p1",
            investor_id="i1",
            amount=100000,
            distributions=[Distribution(date=date(2024, 6, 1), amount=8000)],
        ),
        Investment(
            project_id="p1",
            investor_id="i2",
            amount=50000,
            distributions=[Distribution(date=date(2024, 6, 1), amount=4000)],
        ),
    ]


class TestCashFlow:
    """Test cases for revenue, expenses and cash flow."""

    def test_classification(self, transactions):
        """Test which transaction types count on each side."""
        assert total_revenue(transactions) == 75000
        assert total_expenses(transactions) == 20000
        assert cash_flow(transactions) == 55000

    def test_accepts_generators(self, transactions):
        """Test that one-shot iterables are handled."""
        assert cash_flow(t for t in transactions) == 55000

    def test_empty(self):
        """Test that no transactions means no cash flow."""
        assert cash_flow([]) == 0

    def test_monthly_cash_flow(self, transactions):
        """Test grouping cash flow by month."""
        months = monthly_cash_flow(transactions)

        assert [m.month for m in months] == ["2024-01", "2024-02"]
        assert months[0].revenue == 50000
        assert months[0].expenses == 15000
        assert months[0].net == 35000
        assert months[1].revenue == 25000
        assert months[1].expenses == 5000
        assert months[1].net == 20000


class TestRatios:
    """Test cases for loan-to-value, debt coverage and ROI."""

    def test_loan_to_value(self, loans):
        """Test remaining debt as a share of budget."""
        assert loan_to_value(loans, 1000000) == pytest.approx(40.0)

    def test_loan_to_value_zero_budget(self, loans):
        """Test that a zero budget gives 0 instead of dividing by zero."""
        assert loan_to_value(loans, 0) == 0

    def test_debt_coverage_ratio(self, loans, transactions):
        """Test revenue over interest plus principal paid."""
        assert debt_coverage_ratio(loans, transactions) == pytest.approx(75000 / 15000)

    def test_debt_coverage_without_debt_service(self, transactions):
        """Test that zero debt service gives 0."""
        loan = Loan(project_id="p1", amount=1, interest_rate=0, term=1, start_date=date(2024, 1, 1))

        assert debt_coverage_ratio([loan], transactions) == 0
        assert debt_coverage_ratio([], transactions) == 0

    def test_portfolio_roi(self, investments):
        """Test actual returns over capital invested."""
        assert portfolio_roi(investments) == pytest.approx(8.0)

    def test_portfolio_roi_without_capital(self):
        """Test that no investments gives 0."""
        assert portfolio_roi([]) == 0

    def test_debt_service_from_recorded_payments(self, transactions):
        """Test coverage computed from payments recorded against a schedule."""
        loan = apply_schedule(
            Loan(project_id="p1", amount=12000, interest_rate=0, term=12, start_date=date(2024, 1, 1))
        )
        loan = record_payment(record_payment(loan, 0), 1)

        assert debt_coverage_ratio([loan], transactions) == pytest.approx(75000 / 2000)


class TestSummarizeProject:
    """Test cases for the project summary."""

    def test_summary(self, project, loans, investments, transactions):
        """Test every metric together."""
        metrics = summarize_project(project, loans, investments, transactions)

        assert isinstance(metrics, ProjectMetrics)
        assert metrics.total_invested == 150000
        assert metrics.total_loans == 600000
        assert metrics.total_loans_remaining == 400000
        assert metrics.total_revenue == 75000
        assert metrics.total_expenses == 20000
        assert metrics.cash_flow == 55000
        assert metrics.roi == pytest.approx(8.0)
        assert metrics.loan_to_value == pytest.approx(40.0)
        assert metrics.debt_coverage_ratio == pytest.approx(5.0)

    def test_other_projects_ignored(self, project, loans, investments, transactions):
        """Test that records of other projects are left out."""
        transactions.append(make_transaction(1000000, TransactionType.INCOME, project_id="p2"))

        metrics = summarize_project(project, loans, investments, transactions)

        assert metrics.total_revenue == 75000

    def test_zero_budget_project(self, loans, investments, transactions):
        """Test that an unbudgeted project reports a zero loan-to-value."""
        project = Project(id="p1", name="Land bank")

        metrics = summarize_project(project, loans, investments, transactions)

        assert metrics.loan_to_value == 0

    def test_inputs_not_mutated(self, project, loans, investments, transactions):
        """Test that aggregation is read-only."""
        before = [m.model_copy(deep=True) for m in [project, *loans, *investments, *transactions]]

        summarize_project(project, loans, investments, transactions)

        assert [project, *loans, *investments, *transactions] == before

    def test_recomputed_on_each_call(self, project, loans, investments, transactions):
        """Test that new transactions show up in the next summary."""
        first = summarize_project(project, loans, investments, transactions)
        transactions.append(make_transaction(5000, TransactionType.INCOME))

        second = summarize_project(project, loans, investments, transactions)

        assert second.total_revenue == first.total_revenue + 5000

    def test_refresh_financial_summary(self, project, loans, investments, transactions):
        """Test that the cached summary on the project is rebuilt."""
        refreshed = refresh_financial_summary(project, loans, investments, transactions)
        summary = refreshed.financial_summary

        assert summary.total_investments == 150000
        assert summary.total_loans == 600000
        assert summary.total_revenue == 75000
        assert summary.total_expenses == 20000
        assert summary.net_income == 55000
        assert summary.roi == pytest.approx(8.0)
        assert project.financial_summary.total_revenue == 0
