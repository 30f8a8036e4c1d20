"""Tests for the entity models."""

from datetime import date

import pytest
from pydantic import ValidationError

from redev.exceptions import FinancialValidationError
from redev.models import (
    CostBreakdown,
    Distribution,
    DistributionKind,
    Investment,
    Loan,
    Project,
    RepaymentFrequency,
    Transaction,
    TransactionType,
)


class TestProject:
    """Test cases for the Project model."""

    def test_budget_follows_cost_breakdown(self):
        """Test that the total budget is the sum of the cost breakdown."""
        project = Project(
            name="Harbor Lofts",
            cost_breakdown=CostBreakdown(
                land=400000, construction=900000, permits=25000, legal=15000
            ),
        )

        assert project.total_budget == 1340000
        assert project.cost_breakdown.total == project.total_budget

    def test_budget_zero_without_breakdown(self):
        """Test that a project with no itemized costs has no budget."""
        project = Project(name="Harbor Lofts")

        assert project.total_budget == 0

    def test_matching_budget_accepted(self):
        """Test that a total agreeing with the breakdown is kept."""
        project = Project(
            name="Harbor Lofts", total_budget=1500, cost_breakdown={"land": 1000, "legal": 500}
        )

        assert project.total_budget == 1500

    @pytest.mark.parametrize(
        "total_budget,breakdown",
        [(750000, {}), (1, {"land": 400000}), (900, {"land": 500, "other": 500})],
    )
    def test_mismatched_budget_rejected(self, total_budget, breakdown):
        """Test that a total disagreeing with the breakdown is an error, not coerced."""
        with pytest.raises(ValidationError):
            Project(name="Harbor Lofts", total_budget=total_budget, cost_breakdown=breakdown)

    def test_negative_cost_rejected(self):
        """Test that cost categories cannot be negative."""
        with pytest.raises(ValidationError):
            CostBreakdown(land=-1)

    def test_serializes_with_camel_case_aliases(self):
        """Test that records are dumped under camelCase keys."""
        project = Project(name="Harbor Lofts", cost_breakdown={"land": 10})
        dumped = project.model_dump(mode="json", by_alias=True)

        assert dumped["totalBudget"] == 10
        assert dumped["costBreakdown"]["land"] == 10
        assert "financialSummary" in dumped
        assert "createdAt" in dumped

    def test_accepts_aliases_on_input(self):
        """Test that camelCase input populates snake_case fields."""
        project = Project.model_validate(
            {
                "name": "Harbor Lofts",
                "totalBudget": 500,
                "costBreakdown": {"land": 500},
                "location": {"zipCode": "02110"},
            }
        )

        assert project.total_budget == 500
        assert project.location.zip_code == "02110"


class TestInvestment:
    """Test cases for the Investment model."""

    @pytest.fixture
    def investment(self):
        return Investment(
            project_id="p1",
            investor_id="i1",
            amount=10000,
            expected_roi=12,
            distributions=[
                Distribution(date=date(2024, 3, 31), amount=1000),
                Distribution(
                    date=date(2024, 6, 30), amount=500, kind=DistributionKind.PROFIT_SHARE
                ),
            ],
        )

    def test_derived_totals(self, investment):
        """Test the computed distribution and return figures."""
        assert investment.total_distributed == 1500
        assert investment.actual_returns == 1500
        assert investment.expected_returns == pytest.approx(1200)

    def test_expected_roi_alias(self, investment):
        """Test that expected ROI is stored under its own alias."""
        dumped = investment.model_dump(mode="json", by_alias=True)

        assert dumped["expectedROI"] == 12
        assert dumped["totalDistributed"] == 1500

    def test_add_distribution_appends(self, investment):
        """Test that appending keeps earlier distributions and grows the total."""
        updated = investment.add_distribution(
            Distribution(date=date(2024, 9, 30), amount=250)
        )

        assert len(updated.distributions) == 3
        assert updated.distributions[:2] == investment.distributions
        assert updated.total_distributed == 1750
        assert investment.total_distributed == 1500

    def test_add_distribution_rejects_backdated(self, investment):
        """Test that a distribution older than the last one is rejected."""
        with pytest.raises(FinancialValidationError):
            investment.add_distribution(Distribution(date=date(2024, 1, 1), amount=100))

    def test_negative_distribution_rejected(self):
        """Test that distribution amounts cannot be negative."""
        with pytest.raises(ValidationError):
            Distribution(date=date(2024, 1, 1), amount=-10)


class TestLoanAndTransaction:
    """Test cases for Loan and Transaction models."""

    def test_loan_defaults(self):
        """Test that a loan starts with empty derived fields."""
        loan = Loan(
            project_id="p1",
            amount=100000,
            interest_rate=5,
            term=12,
            start_date=date(2024, 1, 1),
        )

        assert loan.repayment_frequency == RepaymentFrequency.MONTHLY
        assert loan.repayment_schedule == []
        assert loan.total_interest_paid == 0
        assert loan.id is None

    def test_transaction_weak_reference(self):
        """Test that a transaction may reference an entity that doesn't exist."""
        transaction = Transaction(
            project_id="p1",
            amount=1200,
            date=date(2024, 2, 1),
            type=TransactionType.INTEREST_PAYMENT,
            related_entity_type="loan",
            related_entity_id="no-such-loan",
        )

        assert transaction.related_entity_id == "no-such-loan"

    def test_invalid_transaction_type(self):
        """Test that unknown transaction types are rejected."""
        with pytest.raises(ValidationError):
            Transaction(project_id="p1", amount=1, date=date(2024, 1, 1), type="gift")
