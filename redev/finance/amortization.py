"""
Loan amortization calculations.

This module turns loan terms into a level-payment (or bullet) repayment
schedule and keeps a loan's derived fields in step with its terms. All
functions are pure: they never touch storage and never mutate their inputs.
"""

import math
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from redev.exceptions import FinancialValidationError
from redev.models.entities import Loan, ScheduledPayment
from redev.models.enums import LoanStatus, RepaymentFrequency

# Months between scheduled payments; bullet loans accrue monthly
PERIOD_MONTHS = {
    RepaymentFrequency.MONTHLY: 1,
    RepaymentFrequency.QUARTERLY: 3,
    RepaymentFrequency.SEMI_ANNUAL: 6,
    RepaymentFrequency.ANNUAL: 12,
    RepaymentFrequency.BULLET: 1,
}

# Loan fields the schedule is derived from
SCHEDULE_INPUT_FIELDS = (
    "amount",
    "interest_rate",
    "term",
    "start_date",
    "repayment_frequency",
)


class AmortizationResult(BaseModel):
    """A generated repayment schedule and its summary figures."""

    payment_amount: float = Field(..., ge=0, description="Regular payment amount")
    schedule: List[ScheduledPayment] = Field(..., description="Scheduled payments")
    end_date: date = Field(..., description="Maturity date")
    next_payment_date: Optional[date] = Field(None, description="First payment date")
    total_interest: float = Field(..., ge=0, description="Interest over the schedule")
    total_principal: float = Field(..., ge=0, description="Principal over the schedule")


def period_months(frequency: RepaymentFrequency) -> int:
    """Length of one repayment period in months."""
    return PERIOD_MONTHS[RepaymentFrequency(frequency)]


def number_of_payments(term: int, frequency: RepaymentFrequency) -> int:
    """Whole repayment periods in ``term`` months; partial periods are dropped."""
    return term // period_months(frequency)


def validate_loan_terms(
    amount: float, interest_rate: float, term: int, frequency: RepaymentFrequency
) -> None:
    """
    Reject loan terms that cannot produce a schedule.

    Raises:
        FinancialValidationError: If any term is out of range
    """
    if amount <= 0:
        raise FinancialValidationError(f"Loan amount must be positive, got {amount}")
    if term < 1:
        raise FinancialValidationError(f"Loan term must be at least 1 month, got {term}")
    if interest_rate < 0:
        raise FinancialValidationError(
            f"Interest rate cannot be negative, got {interest_rate}"
        )
    if number_of_payments(term, frequency) < 1:
        raise FinancialValidationError(
            f"A {term}-month term is shorter than one {RepaymentFrequency(frequency).value} period"
        )


def calculate_payment_amount(
    amount: float,
    interest_rate: float,
    term: int,
    frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY,
) -> float:
    """
    Calculate the regular payment for a loan.

    Non-bullet loans pay the monthly annuity over ``term`` months scaled by
    the period length. Bullet loans pay interest only.

    Args:
        amount: Principal amount
        interest_rate: Annual interest rate in percent (e.g., 6 for 6%)
        term: Loan term in months
        frequency: Repayment frequency

    Returns:
        Payment amount per period, rounded to the cent

    Raises:
        FinancialValidationError: If the loan terms are invalid
    """
    validate_loan_terms(amount, interest_rate, term, frequency)
    months = period_months(frequency)

    if RepaymentFrequency(frequency) == RepaymentFrequency.BULLET:
        return round(amount * interest_rate / 100 * months / 12, 2)

    monthly_rate = interest_rate / 100 / 12
    # (1 + r) ** term - 1, accurate for rates too small to move 1 + r
    growth_less_one = math.expm1(term * math.log1p(monthly_rate))
    if growth_less_one == 0:
        return round(amount / number_of_payments(term, frequency), 2)

    monthly_payment = amount * monthly_rate * (1 + growth_less_one) / growth_less_one
    return round(monthly_payment * months, 2)


def generate_schedule(
    amount: float,
    interest_rate: float,
    term: int,
    start_date: date,
    frequency: RepaymentFrequency = RepaymentFrequency.MONTHLY,
) -> AmortizationResult:
    """
    Generate the full repayment schedule for a loan.

    The first payment falls one period after ``start_date``. Each period pays
    interest on the running balance and puts the rest of the payment towards
    principal; the last period repays whatever principal remains so the
    schedule always closes at a zero balance.

    Args:
        amount: Principal amount
        interest_rate: Annual interest rate in percent
        term: Loan term in months
        start_date: Loan start date
        frequency: Repayment frequency

    Returns:
        AmortizationResult holding the schedule and its totals

    Raises:
        FinancialValidationError: If the loan terms are invalid
    """
    payment = calculate_payment_amount(amount, interest_rate, term, frequency)
    bullet = RepaymentFrequency(frequency) == RepaymentFrequency.BULLET
    months = period_months(frequency)
    periods = number_of_payments(term, frequency)
    period_rate = interest_rate / 100 * months / 12

    schedule: List[ScheduledPayment] = []
    balance = float(amount)
    total_interest = 0.0
    total_principal = 0.0

    for period in range(1, periods + 1):
        interest = round(balance * period_rate, 2)

        if period == periods:
            principal = balance
        elif bullet:
            principal = 0.0
        else:
            principal = min(max(round(payment - interest, 2), 0.0), balance)

        balance = round(balance - principal, 2)
        total_interest += interest
        total_principal += principal

        schedule.append(
            ScheduledPayment(
                date=start_date + relativedelta(months=period * months),
                total_payment=round(principal + interest, 2),
                principal_payment=principal,
                interest_payment=interest,
                remaining_balance=balance,
            )
        )

        if balance <= 0:
            break

    return AmortizationResult(
        payment_amount=payment,
        schedule=schedule,
        end_date=start_date + relativedelta(months=term),
        next_payment_date=schedule[0].date if schedule else None,
        total_interest=round(total_interest, 2),
        total_principal=round(total_principal, 2),
    )


def schedule_inputs_changed(before: Loan, after: Loan) -> bool:
    """True if any field the schedule is derived from differs."""
    return any(
        getattr(before, field) != getattr(after, field)
        for field in SCHEDULE_INPUT_FIELDS
    )


def apply_schedule(loan: Loan) -> Loan:
    """
    Return a copy of ``loan`` with a freshly generated schedule.

    Cumulative paid totals restart at zero; they track payments actually
    recorded against the new schedule. A paid-off loan becomes active again.

    Raises:
        FinancialValidationError: If the loan terms are invalid
    """
    result = generate_schedule(
        loan.amount,
        loan.interest_rate,
        loan.term,
        loan.start_date,
        loan.repayment_frequency,
    )
    return loan.model_copy(
        update={
            "repayment_schedule": result.schedule,
            "payment_amount": result.payment_amount,
            "end_date": result.end_date,
            "next_payment_date": result.next_payment_date,
            "remaining_balance": float(loan.amount),
            "total_interest_paid": 0.0,
            "total_principal_paid": 0.0,
            "status": LoanStatus.ACTIVE if loan.status == LoanStatus.PAID else loan.status,
        }
    )


def record_payment(loan: Loan, index: int) -> Loan:
    """
    Return a copy of ``loan`` with one scheduled payment marked as paid.

    Args:
        loan: Loan with a generated schedule
        index: 0-based position in the repayment schedule

    Returns:
        Loan with updated cumulative totals, balance and next payment date

    Raises:
        FinancialValidationError: If the entry doesn't exist or is already paid
    """
    schedule = loan.repayment_schedule
    if not 0 <= index < len(schedule):
        raise FinancialValidationError(
            f"Loan {loan.id} has no scheduled payment at position {index}"
        )

    entry = schedule[index]
    if entry.is_paid:
        raise FinancialValidationError(
            f"Scheduled payment {index} of loan {loan.id} is already paid"
        )

    updated_schedule = [e.model_copy() for e in schedule]
    updated_schedule[index] = entry.model_copy(update={"is_paid": True})

    principal_paid = round(loan.total_principal_paid + entry.principal_payment, 2)
    interest_paid = round(loan.total_interest_paid + entry.interest_payment, 2)
    next_due = next((e.date for e in updated_schedule if not e.is_paid), None)

    return loan.model_copy(
        update={
            "repayment_schedule": updated_schedule,
            "total_principal_paid": principal_paid,
            "total_interest_paid": interest_paid,
            "remaining_balance": round(max(loan.amount - principal_paid, 0.0), 2),
            "next_payment_date": next_due,
            "status": LoanStatus.PAID if next_due is None else loan.status,
        }
    )
