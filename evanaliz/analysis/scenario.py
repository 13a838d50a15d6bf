"""Multi-year cash-flow projection under a named economic scenario."""

from __future__ import annotations

import logging

from evanaliz.analysis.engine import pmt, require_positive
from evanaliz.config import FinancialConstants, ScenarioConfig
from evanaliz.models import (
    InvestmentScenario,
    RiskMetrics,
    ScenarioResult,
    ScenarioType,
    YearlyProjection,
)

logger = logging.getLogger(__name__)


OPTIMISTIC = InvestmentScenario(
    name="Optimistic",
    description="Strong economic growth, low interest, high demand for property",
    type=ScenarioType.OPTIMISTIC,
    monthly_interest_rate=0.0199,
    annual_inflation_rate=0.15,
    annual_property_appreciation=0.25,
    annual_rent_growth=0.20,
    vacancy_rate=0.02,
    maintenance_cost_rate=0.03,
)

REALISTIC = InvestmentScenario(
    name="Realistic",
    description="Current economic conditions continue",
    type=ScenarioType.REALISTIC,
    monthly_interest_rate=0.0249,
    annual_inflation_rate=0.45,
    annual_property_appreciation=0.35,
    annual_rent_growth=0.30,
    vacancy_rate=0.05,
    maintenance_cost_rate=0.05,
)

PESSIMISTIC = InvestmentScenario(
    name="Pessimistic",
    description="Economic slowdown, high interest, weak demand",
    type=ScenarioType.PESSIMISTIC,
    monthly_interest_rate=0.0349,
    annual_inflation_rate=0.60,
    annual_property_appreciation=0.15,
    annual_rent_growth=0.15,
    vacancy_rate=0.10,
    maintenance_cost_rate=0.08,
)

EXTREME_STRESS = InvestmentScenario(
    name="Extreme stress",
    description="Economic crisis, very high interest, property market stalls",
    type=ScenarioType.EXTREME_STRESS,
    monthly_interest_rate=0.0499,
    annual_inflation_rate=0.80,
    annual_property_appreciation=0.0,
    annual_rent_growth=0.10,
    vacancy_rate=0.20,
    maintenance_cost_rate=0.12,
)

PREDEFINED_SCENARIOS: tuple[InvestmentScenario, ...] = (
    OPTIMISTIC,
    REALISTIC,
    PESSIMISTIC,
    EXTREME_STRESS,
)


def get_scenario(scenario_type: ScenarioType | str) -> InvestmentScenario:
    """Look up a predefined scenario by type or type name."""
    key = ScenarioType(scenario_type)
    for scenario in PREDEFINED_SCENARIOS:
        if scenario.type == key:
            return scenario
    raise ValueError(f"Unknown scenario: {scenario_type}")


class ScenarioEngine:
    """Projects yearly cash flows and derives risk metrics for one scenario.

    Purchase costs and loan size come from the baseline constants; only the
    interest rate is taken from the scenario. Loan payments are charged for the
    first ``loan_payment_years`` years regardless of the configured loan term.
    """

    def __init__(
        self,
        constants: FinancialConstants | None = None,
        config: ScenarioConfig | None = None,
    ):
        self.constants = constants or FinancialConstants()
        self.cfg = config or ScenarioConfig()

    def calculate(
        self,
        house_price: float,
        monthly_rent: float,
        scenario: InvestmentScenario,
        years: int | None = None,
    ) -> ScenarioResult:
        years = self.cfg.projection_years if years is None else years
        if years < 1:
            raise ValueError(f"Projection needs at least one year, got {years}")
        require_positive("House price", house_price)
        require_positive("Monthly rent", monthly_rent)
        c = self.constants

        purchase_expenses = house_price * c.purchase_expense_rate
        loan_amount = house_price * c.loan_usage_ratio
        down_payment = house_price - loan_amount

        monthly_installment = pmt(scenario.monthly_interest_rate, c.loan_term_months, loan_amount)
        total_loan_repayment = monthly_installment * c.loan_term_months
        real_total_cost = down_payment + total_loan_repayment + purchase_expenses

        initial_investment = down_payment + purchase_expenses
        projections = self._project(
            house_price, monthly_rent, scenario, years, monthly_installment, initial_investment
        )
        final_property_value = projections[-1].property_value

        risk_metrics = self._risk_metrics(
            initial_investment,
            projections,
            final_property_value,
            scenario.annual_inflation_rate,
        )

        logger.debug(
            "%s: npv=%.0f irr=%.4f payback=%s",
            scenario.name, risk_metrics.npv, risk_metrics.irr, risk_metrics.payback_period_years,
        )

        return ScenarioResult(
            scenario=scenario,
            monthly_installment=monthly_installment,
            total_loan_repayment=total_loan_repayment,
            real_total_cost=real_total_cost,
            yearly_projections=projections,
            risk_metrics=risk_metrics,
            final_property_value=final_property_value,
        )

    def calculate_all(
        self,
        house_price: float,
        monthly_rent: float,
        scenarios: tuple[InvestmentScenario, ...] | list[InvestmentScenario] = PREDEFINED_SCENARIOS,
        years: int | None = None,
    ) -> list[ScenarioResult]:
        return [self.calculate(house_price, monthly_rent, s, years) for s in scenarios]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _project(
        self,
        house_price: float,
        monthly_rent: float,
        scenario: InvestmentScenario,
        years: int,
        monthly_installment: float,
        initial_investment: float,
    ) -> list[YearlyProjection]:
        c = self.constants
        projections: list[YearlyProjection] = []
        cumulative = -initial_investment
        property_value = house_price
        rent = monthly_rent

        for year in range(1, years + 1):
            if year > 1:
                rent *= 1 + scenario.annual_rent_growth

            gross = rent * 12
            vacancy_loss = gross * scenario.vacancy_rate
            maintenance = gross * scenario.maintenance_cost_rate
            noi = gross - vacancy_loss - maintenance

            taxable = gross - c.annual_rent_tax_exemption
            tax = taxable * c.income_tax_rate if taxable > 0 else 0.0

            loan_payment = monthly_installment * 12 if year <= self.cfg.loan_payment_years else 0.0

            net_cash_flow = noi - tax - loan_payment
            cumulative += net_cash_flow
            property_value *= 1 + scenario.annual_property_appreciation

            projections.append(YearlyProjection(
                year=year,
                gross_rent=gross,
                vacancy_loss=vacancy_loss,
                maintenance_cost=maintenance,
                net_operating_income=noi,
                annual_tax=tax,
                loan_payment=loan_payment,
                net_cash_flow=net_cash_flow,
                cumulative_cash_flow=cumulative,
                property_value=property_value,
            ))

        return projections

    def _risk_metrics(
        self,
        initial_investment: float,
        projections: list[YearlyProjection],
        final_property_value: float,
        discount_rate: float,
    ) -> RiskMetrics:
        payback = next(
            (float(p.year) for p in projections if p.cumulative_cash_flow >= 0),
            None,
        )

        npv = -initial_investment
        for i, p in enumerate(projections, start=1):
            npv += p.net_cash_flow / (1 + discount_rate) ** i
        npv += final_property_value / (1 + discount_rate) ** len(projections)

        # Geometric mean of total return, not a cash-flow-timed IRR
        total_return = sum(p.net_cash_flow for p in projections) + final_property_value
        if total_return > 0:
            irr = (total_return / initial_investment) ** (1 / len(projections)) - 1
        else:
            irr = -1.0

        return RiskMetrics(
            payback_period_years=payback,
            npv=npv,
            irr=irr,
            cash_on_cash_return=projections[0].net_cash_flow / initial_investment,
            worst_case_drawdown=min(p.cumulative_cash_flow for p in projections),
        )
