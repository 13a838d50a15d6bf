"""Single-point investment calculation: purchase costs, PMT, tax, amortization."""

from __future__ import annotations

import logging
import math

from evanaliz.config import FinancialConstants
from evanaliz.models import CalculationResult

logger = logging.getLogger(__name__)


def pmt(rate: float, periods: int, present_value: float) -> float:
    """Fixed periodic payment that amortizes ``present_value`` over ``periods``.

    Same figure as the spreadsheet PMT(rate, periods, -present_value).
    """
    if periods <= 0:
        raise ValueError(f"Loan term must be positive, got {periods}")
    if rate == 0:
        return present_value / periods
    compound = (1 + rate) ** periods
    return present_value * (rate * compound) / (compound - 1)


def require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be greater than zero, got {value}")


class CalculationEngine:
    """Computes the full CalculationResult under the baseline constants.

    Steps:
    A. purchase expenses, loan amount, down payment
    B. monthly installment (PMT) and total repayment
    C. real total cost of ownership
    D. after-tax annual rent
    E. amortization years = real total cost / net annual rent
    """

    def __init__(self, constants: FinancialConstants | None = None):
        self.constants = constants or FinancialConstants()

    def calculate(self, house_price: float, monthly_rent: float) -> CalculationResult:
        require_positive("House price", house_price)
        require_positive("Monthly rent", monthly_rent)
        c = self.constants

        # A. Purchase and capital structure
        purchase_expenses = house_price * c.purchase_expense_rate
        loan_amount = house_price * c.loan_usage_ratio
        down_payment = house_price - loan_amount

        # B. Loan amortization
        monthly_installment = pmt(c.monthly_interest_rate, c.loan_term_months, loan_amount)
        total_loan_repayment = monthly_installment * c.loan_term_months

        # C. Everything that leaves the investor's pocket
        real_total_cost = down_payment + total_loan_repayment + purchase_expenses

        # D. After-tax rent
        gross_annual_rent = monthly_rent * 12
        taxable_income = gross_annual_rent - c.annual_rent_tax_exemption
        annual_tax = taxable_income * c.income_tax_rate if taxable_income > 0 else 0.0
        net_annual_rent = gross_annual_rent - annual_tax

        # E. Final KPI
        amortization_years = real_total_cost / net_annual_rent

        logger.debug(
            "price=%.2f rent=%.2f installment=%.2f amortization=%.2f years",
            house_price, monthly_rent, monthly_installment, amortization_years,
        )

        return CalculationResult(
            house_price=house_price,
            monthly_rent=monthly_rent,
            purchase_expenses=purchase_expenses,
            loan_amount=loan_amount,
            down_payment=down_payment,
            monthly_installment=monthly_installment,
            total_loan_repayment=total_loan_repayment,
            real_total_cost=real_total_cost,
            gross_annual_rent=gross_annual_rent,
            annual_tax=annual_tax,
            net_annual_rent=net_annual_rent,
            amortization_years=amortization_years,
        )
