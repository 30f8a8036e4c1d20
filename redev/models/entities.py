"""
Pydantic models for the real-estate development entities.

Every entity shares the identity/timestamp contract of ``Entity``. Records are
persisted under camelCase aliases; either the field name or the alias is
accepted on input.
"""

import datetime as dt
import math
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from redev.exceptions import FinancialValidationError

from .enums import (
    DistributionKind,
    InvestmentStatus,
    InvestmentType,
    InvestorType,
    LoanStatus,
    LoanType,
    ProjectStatus,
    PropertyType,
    RelatedEntityType,
    RepaymentFrequency,
    TransactionType,
    UserRole,
)


class RecordModel(BaseModel):
    """Base for everything serialized into a store record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Entity(RecordModel):
    """Identity and timestamps, assigned by the store."""

    id: Optional[str] = Field(default=None, description="Opaque stable identifier")
    created_at: Optional[dt.datetime] = Field(default=None, description="Creation time")
    updated_at: Optional[dt.datetime] = Field(default=None, description="Last update")


# Field names the store owns; callers never set them.
STORE_MANAGED_FIELDS = frozenset(Entity.model_fields)


class Location(RecordModel):
    """Street address of a project."""

    address: str = Field(default="", description="Street address")
    city: str = Field(default="", description="City")
    state: str = Field(default="", description="State or province")
    zip_code: str = Field(default="", description="Postal code")
    country: str = Field(default="USA", description="Country")


class CostBreakdown(RecordModel):
    """Budgeted cost per category."""

    land: float = Field(default=0, ge=0)
    construction: float = Field(default=0, ge=0)
    permits: float = Field(default=0, ge=0)
    marketing: float = Field(default=0, ge=0)
    legal: float = Field(default=0, ge=0)
    financing: float = Field(default=0, ge=0)
    other: float = Field(default=0, ge=0)

    @property
    def total(self) -> float:
        return (
            self.land
            + self.construction
            + self.permits
            + self.marketing
            + self.legal
            + self.financing
            + self.other
        )


class FinancialSummary(RecordModel):
    """Cached project totals, refreshed by the portfolio aggregator."""

    total_investments: float = 0
    total_loans: float = 0
    total_expenses: float = 0
    total_revenue: float = 0
    net_income: float = 0
    roi: float = 0


class Project(Entity):
    """A development project and its budget."""

    name: str = Field(..., min_length=1, description="Project name")
    description: str = Field(default="", description="Project description")
    status: ProjectStatus = Field(default=ProjectStatus.PLANNING)
    property_type: PropertyType = Field(default=PropertyType.OTHER)
    location: Location = Field(default_factory=Location)
    acquisition_date: Optional[dt.date] = None
    estimated_completion_date: Optional[dt.date] = None
    total_budget: float = Field(default=0, ge=0, description="Sum of the cost breakdown")
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    financial_summary: FinancialSummary = Field(default_factory=FinancialSummary)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def derive_budget_from_breakdown(self):
        breakdown_total = self.cost_breakdown.total
        if "total_budget" in self.model_fields_set and not math.isclose(
            self.total_budget, breakdown_total, abs_tol=0.005
        ):
            raise ValueError(
                f"totalBudget {self.total_budget} does not match the cost "
                f"breakdown total {breakdown_total}"
            )
        self.total_budget = breakdown_total
        return self


class ScheduledPayment(RecordModel):
    """One entry of a loan repayment schedule."""

    date: dt.date
    total_payment: float
    principal_payment: float
    interest_payment: float
    remaining_balance: float
    is_paid: bool = False


class Loan(Entity):
    """Debt financing attached to a project."""

    project_id: str = Field(..., description="Owning project id")
    lender_name: str = Field(default="", description="Lender")
    loan_type: LoanType = Field(default=LoanType.CONSTRUCTION)
    amount: float = Field(..., ge=0, description="Principal amount")
    interest_rate: float = Field(..., ge=0, description="Annual rate in percent")
    term: int = Field(..., ge=0, description="Term in months")
    start_date: dt.date = Field(..., description="Loan start date")
    end_date: Optional[dt.date] = None
    repayment_frequency: RepaymentFrequency = Field(default=RepaymentFrequency.MONTHLY)
    remaining_balance: float = Field(default=0, ge=0)
    payment_amount: float = Field(default=0, ge=0)
    next_payment_date: Optional[dt.date] = None
    total_interest_paid: float = Field(default=0, ge=0)
    total_principal_paid: float = Field(default=0, ge=0)
    status: LoanStatus = Field(default=LoanStatus.ACTIVE)
    notes: Optional[str] = None
    repayment_schedule: List[ScheduledPayment] = Field(default_factory=list)


class Investor(Entity):
    """A party providing equity or debt to projects."""

    name: str = Field(..., min_length=1)
    email: str = Field(default="")
    phone: str = Field(default="")
    investor_type: InvestorType = Field(default=InvestorType.INDIVIDUAL)


class Distribution(RecordModel):
    """A payment from an investment back to its investor."""

    date: dt.date
    amount: float = Field(..., ge=0)
    kind: DistributionKind = Field(default=DistributionKind.DIVIDEND)


class Investment(Entity):
    """An investor's stake in a project."""

    project_id: str = Field(..., description="Owning project id")
    investor_id: str = Field(..., description="Investor id")
    investment_type: InvestmentType = Field(default=InvestmentType.EQUITY)
    amount: float = Field(..., ge=0, description="Amount invested")
    equity_percentage: float = Field(default=0, ge=0, le=100)
    investment_date: Optional[dt.date] = None
    expected_roi: float = Field(default=0, alias="expectedROI")
    status: InvestmentStatus = Field(default=InvestmentStatus.ACTIVE)
    distributions: List[Distribution] = Field(default_factory=list)

    @computed_field(alias="totalDistributed")
    @property
    def total_distributed(self) -> float:
        return sum(d.amount for d in self.distributions)

    @computed_field(alias="actualReturns")
    @property
    def actual_returns(self) -> float:
        return self.total_distributed

    @computed_field(alias="expectedReturns")
    @property
    def expected_returns(self) -> float:
        return self.amount * self.expected_roi / 100

    def add_distribution(self, distribution: Distribution) -> "Investment":
        """
        Return a copy with ``distribution`` appended.

        Raises:
            FinancialValidationError: If the distribution predates the last one
        """
        if self.distributions and distribution.date < self.distributions[-1].date:
            raise FinancialValidationError(
                f"Distribution dated {distribution.date} precedes the last "
                f"distribution ({self.distributions[-1].date})"
            )
        return self.model_copy(
            update={"distributions": [*self.distributions, distribution]}
        )


class Transaction(Entity):
    """A flat income or expense record for a project."""

    project_id: str = Field(..., description="Owning project id")
    amount: float = Field(..., description="Transaction amount")
    date: dt.date
    type: TransactionType
    category: str = Field(default="")
    description: str = Field(default="")
    # Weak reference: the related record is not required to exist
    related_entity_type: Optional[RelatedEntityType] = None
    related_entity_id: Optional[str] = None


class User(Entity):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: UserRole = Field(default=UserRole.CLIENT)
    password_hash: Optional[str] = None


class Document(Entity):
    title: str = Field(..., min_length=1)
    description: str = Field(default="")
    file_url: str = Field(default="")
    file_type: str = Field(default="")
    uploaded_by: str = Field(default="")
    project_id: str = Field(..., description="Owning project id")
    last_updated_by: Optional[str] = None


ENTITY_MODELS: Dict[str, type] = {
    "projects": Project,
    "users": User,
    "documents": Document,
    "loans": Loan,
    "investors": Investor,
    "investments": Investment,
    "transactions": Transaction,
}
