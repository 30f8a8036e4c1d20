"""String enums shared by the entity models."""

from enum import Enum


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACQUISITION = "acquisition"
    PRE_DEVELOPMENT = "pre_development"
    DEVELOPMENT = "development"
    CONSTRUCTION = "construction"
    STABILIZATION = "stabilization"
    HOLDING = "holding"
    DISPOSITION = "disposition"
    CLOSED = "closed"


class PropertyType(str, Enum):
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
    COMMERCIAL = "commercial"
    RETAIL = "retail"
    INDUSTRIAL = "industrial"
    OFFICE = "office"
    MIXED_USE = "mixed_use"
    LAND = "land"
    OTHER = "other"


class LoanType(str, Enum):
    MORTGAGE = "mortgage"
    CONSTRUCTION = "construction"
    BRIDGE = "bridge"
    HARD_MONEY = "hard_money"
    PRIVATE = "private"
    LINE_OF_CREDIT = "line_of_credit"
    OTHER = "other"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"
    DEFAULTED = "defaulted"
    PENDING = "pending"


class RepaymentFrequency(str, Enum):
    """Period between scheduled loan payments."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    BULLET = "bullet"


class InvestorType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"
    INSTITUTION = "institution"


class InvestmentType(str, Enum):
    EQUITY = "equity"
    DEBT = "debt"
    PREFERRED_EQUITY = "preferred_equity"
    JOINT_VENTURE = "joint_venture"
    SYNDICATION = "syndication"
    OTHER = "other"


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    EXITED = "exited"
    PENDING = "pending"


class DistributionKind(str, Enum):
    DIVIDEND = "dividend"
    CAPITAL_RETURN = "capital_return"
    PROFIT_SHARE = "profit_share"


class TransactionType(str, Enum):
    """Direction of a transaction; see ``redev.finance.portfolio`` for grouping."""

    INCOME = "income"
    EXPENSE = "expense"
    REVENUE = "revenue"
    DEPOSIT = "deposit"
    PRINCIPAL_PAYMENT = "principal_payment"
    INTEREST_PAYMENT = "interest_payment"
    DIVIDEND = "dividend"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    TAX = "tax"
    OTHER = "other"


class RelatedEntityType(str, Enum):
    LOAN = "loan"
    INVESTMENT = "investment"
    OPERATION = "operation"


class UserRole(str, Enum):
    ADMIN = "admin"
    CEO = "ceo"
    AGENT = "agent"
    SUPPORT_STAFF = "support_staff"
    CLIENT = "client"
