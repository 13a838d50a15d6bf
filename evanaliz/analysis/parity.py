"""Spreadsheet parity checks for the core calculation engine.

Each reference case re-derives the expected figures straight from the
spreadsheet formulae, then the validator compares them field by field with
what CalculationEngine produces.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from evanaliz.analysis.engine import CalculationEngine
from evanaliz.config import FinancialConstants

logger = logging.getLogger(__name__)

MAX_ALLOWED_DIFFERENCE = 0.01
MAX_ALLOWED_RELATIVE_DIFFERENCE = 0.0001

# CalculationResult fields compared against the spreadsheet
COMPARED_FIELDS = (
    "purchase_expenses",
    "loan_amount",
    "down_payment",
    "monthly_installment",
    "total_loan_repayment",
    "real_total_cost",
    "gross_annual_rent",
    "annual_tax",
    "net_annual_rent",
    "amortization_years",
)


class ParityTestCase(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    house_price: float
    monthly_rent: float
    expected: dict[str, float]


class FieldValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    expected: float
    actual: float
    absolute_difference: float
    passed: bool


class ScenarioValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    case_name: str
    fields: list[FieldValidationResult]

    @property
    def passed(self) -> bool:
        return all(f.passed for f in self.fields)

    @property
    def failed_fields(self) -> list[FieldValidationResult]:
        return [f for f in self.fields if not f.passed]


class FullValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    scenario_results: list[ScenarioValidationResult]
    validated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def overall_passed(self) -> bool:
        return all(r.passed for r in self.scenario_results)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.scenario_results if r.passed)

    @property
    def failed_count(self) -> int:
        return len(self.scenario_results) - self.passed_count


def build_test_case(
    name: str,
    description: str,
    house_price: float,
    monthly_rent: float,
    constants: FinancialConstants | None = None,
) -> ParityTestCase:
    """Expected values written out cell by cell, as the spreadsheet does it."""
    c = constants or FinancialConstants()

    purchase_expenses = house_price * c.purchase_expense_rate
    loan_amount = house_price * c.loan_usage_ratio
    down_payment = house_price - loan_amount

    # =PMT(rate, n, -loan)
    r = c.monthly_interest_rate
    n = c.loan_term_months
    if r == 0:
        monthly_installment = loan_amount / n
    else:
        factor = (1 + r) ** n
        monthly_installment = loan_amount * (r * factor) / (factor - 1)
    total_loan_repayment = monthly_installment * n

    real_total_cost = down_payment + total_loan_repayment + purchase_expenses

    gross_annual_rent = monthly_rent * 12
    annual_tax = max(gross_annual_rent - c.annual_rent_tax_exemption, 0.0) * c.income_tax_rate
    net_annual_rent = gross_annual_rent - annual_tax

    return ParityTestCase(
        name=name,
        description=description,
        house_price=house_price,
        monthly_rent=monthly_rent,
        expected={
            "purchase_expenses": purchase_expenses,
            "loan_amount": loan_amount,
            "down_payment": down_payment,
            "monthly_installment": monthly_installment,
            "total_loan_repayment": total_loan_repayment,
            "real_total_cost": real_total_cost,
            "gross_annual_rent": gross_annual_rent,
            "annual_tax": annual_tax,
            "net_annual_rent": net_annual_rent,
            "amortization_years": real_total_cost / net_annual_rent,
        },
    )


def reference_cases(constants: FinancialConstants | None = None) -> list[ParityTestCase]:
    return [
        build_test_case(
            "A: typical market",
            "5M TL house, 25K TL/month rent",
            5_000_000.0, 25_000.0, constants,
        ),
        build_test_case(
            "B: tax exemption boundary",
            "Annual rent right at the exemption limit, no tax",
            1_500_000.0, 4_833.33, constants,
        ),
        build_test_case(
            "C: high value",
            "10M TL house, 50K TL/month rent",
            10_000_000.0, 50_000.0, constants,
        ),
    ]


def within_tolerance(expected: float, actual: float) -> bool:
    if expected == 0:
        return actual == 0
    diff = abs(expected - actual)
    return diff <= MAX_ALLOWED_DIFFERENCE or diff / abs(expected) <= MAX_ALLOWED_RELATIVE_DIFFERENCE


class ParityValidator:
    def __init__(self, engine: CalculationEngine | None = None):
        self.engine = engine or CalculationEngine()

    def validate_case(self, case: ParityTestCase) -> ScenarioValidationResult:
        result = self.engine.calculate(case.house_price, case.monthly_rent)
        fields = []
        for name in COMPARED_FIELDS:
            expected = case.expected[name]
            actual = getattr(result, name)
            fields.append(FieldValidationResult(
                field_name=name,
                expected=expected,
                actual=actual,
                absolute_difference=abs(expected - actual),
                passed=within_tolerance(expected, actual),
            ))
        outcome = ScenarioValidationResult(case_name=case.name, fields=fields)
        if not outcome.passed:
            logger.warning(
                "Parity failed for %s: %s",
                case.name, ", ".join(f.field_name for f in outcome.failed_fields),
            )
        return outcome

    def validate_all(self, cases: list[ParityTestCase] | None = None) -> FullValidationReport:
        if cases is None:
            cases = reference_cases(self.engine.constants)
        return FullValidationReport(scenario_results=[self.validate_case(c) for c in cases])
