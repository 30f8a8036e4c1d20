"""Entity models for the real-estate development store."""

from .entities import (
    ENTITY_MODELS,
    CostBreakdown,
    Distribution,
    Document,
    Entity,
    FinancialSummary,
    Investment,
    Investor,
    Loan,
    Location,
    Project,
    ScheduledPayment,
    Transaction,
    User,
)
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

__all__ = [
    "ENTITY_MODELS",
    "Entity",
    "Project",
    "Location",
    "CostBreakdown",
    "FinancialSummary",
    "Loan",
    "ScheduledPayment",
    "Investor",
    "Investment",
    "Distribution",
    "Transaction",
    "User",
    "Document",
    "DistributionKind",
    "InvestmentStatus",
    "InvestmentType",
    "InvestorType",
    "LoanStatus",
    "LoanType",
    "ProjectStatus",
    "PropertyType",
    "RelatedEntityType",
    "RepaymentFrequency",
    "TransactionType",
    "UserRole",
]
