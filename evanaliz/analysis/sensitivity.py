"""Parameter sweeps over the scenario engine and coarse break-even scans."""

from __future__ import annotations

import logging

from evanaliz.analysis.scenario import REALISTIC, ScenarioEngine
from evanaliz.config import SensitivityConfig
from evanaliz.models import (
    BreakEvenPoints,
    InvestmentScenario,
    ScenarioResult,
    SensitivityAnalysisResult,
    SensitivityPoint,
    SensitivityVariable,
)

logger = logging.getLogger(__name__)


def _point(change: float, result: ScenarioResult) -> SensitivityPoint:
    # Single-year approximation, unlike the core engine's after-tax figure
    first_noi = result.yearly_projections[0].net_operating_income
    amortization = result.real_total_cost / first_noi if first_noi else float("inf")
    return SensitivityPoint(
        change_percent=change * 100,
        amortization_years=amortization,
        npv=result.risk_metrics.npv,
        irr=result.risk_metrics.irr,
    )


def _npv_spread(points: list[SensitivityPoint]) -> float:
    if not points:
        return 0.0
    npvs = [p.npv for p in points]
    return max(npvs) - min(npvs)


class SensitivityAnalyzer:
    """How much NPV moves when interest, price or rent shift."""

    def __init__(
        self,
        scenario_engine: ScenarioEngine | None = None,
        config: SensitivityConfig | None = None,
    ):
        self.engine = scenario_engine or ScenarioEngine()
        self.cfg = config or SensitivityConfig()

    def analyze(
        self,
        house_price: float,
        monthly_rent: float,
        base: InvestmentScenario = REALISTIC,
    ) -> SensitivityAnalysisResult:
        base_result = self.engine.calculate(house_price, monthly_rent, base)

        interest = self.interest_rate_sensitivity(house_price, monthly_rent, base)
        price = self.price_sensitivity(house_price, monthly_rent, base)
        rent = self.rent_sensitivity(house_price, monthly_rent, base)

        most_impactful = self.most_impactful_variable(interest, price, rent)
        break_even = self.break_even_points(house_price, monthly_rent, base)

        logger.debug("Most impactful variable for %s/%s: %s", house_price, monthly_rent, most_impactful.value)

        return SensitivityAnalysisResult(
            base_result=base_result,
            interest_rate_sensitivity=interest,
            price_sensitivity=price,
            rent_sensitivity=rent,
            most_impactful_variable=most_impactful,
            break_even_points=break_even,
        )

    def interest_rate_sensitivity(
        self, house_price: float, monthly_rent: float, base: InvestmentScenario
    ) -> list[SensitivityPoint]:
        """Annual rate deltas, applied to the monthly rate as delta / 12."""
        points = []
        for change in self.cfg.interest_rate_changes:
            rate = base.monthly_interest_rate + change / 12
            if rate <= 0:
                continue
            scenario = base.model_copy(update={"monthly_interest_rate": rate})
            points.append(_point(change, self.engine.calculate(house_price, monthly_rent, scenario)))
        return points

    def price_sensitivity(
        self, house_price: float, monthly_rent: float, base: InvestmentScenario
    ) -> list[SensitivityPoint]:
        return [
            _point(change, self.engine.calculate(house_price * (1 + change), monthly_rent, base))
            for change in self.cfg.price_changes
        ]

    def rent_sensitivity(
        self, house_price: float, monthly_rent: float, base: InvestmentScenario
    ) -> list[SensitivityPoint]:
        return [
            _point(change, self.engine.calculate(house_price, monthly_rent * (1 + change), base))
            for change in self.cfg.rent_changes
        ]

    @staticmethod
    def most_impactful_variable(
        interest: list[SensitivityPoint],
        price: list[SensitivityPoint],
        rent: list[SensitivityPoint],
    ) -> SensitivityVariable:
        """Largest NPV spread wins; ties go to interest, then price."""
        interest_spread = _npv_spread(interest)
        price_spread = _npv_spread(price)
        rent_spread = _npv_spread(rent)

        if interest_spread >= price_spread and interest_spread >= rent_spread:
            return SensitivityVariable.INTEREST_RATE
        if price_spread >= rent_spread:
            return SensitivityVariable.HOUSE_PRICE
        return SensitivityVariable.RENT

    def break_even_points(
        self, house_price: float, monthly_rent: float, base: InvestmentScenario
    ) -> BreakEvenPoints:
        """Discrete multiplier scans; the first hit stops each scan."""
        minimum_rent = monthly_rent
        for multiplier in self.cfg.break_even_rent_multipliers:
            test_rent = monthly_rent * multiplier
            result = self.engine.calculate(house_price, test_rent, base)
            if result.risk_metrics.npv <= 0:
                minimum_rent = test_rent * self.cfg.break_even_rent_markup
                break

        maximum_price = house_price
        for multiplier in self.cfg.break_even_price_multipliers:
            test_price = house_price * multiplier
            result = self.engine.calculate(test_price, monthly_rent, base)
            if result.risk_metrics.npv >= 0:
                maximum_price = test_price
                break

        return BreakEvenPoints(
            minimum_rent_for_break_even=minimum_rent,
            maximum_price_for_break_even=maximum_price,
            max_acceptable_interest_rate=base.monthly_interest_rate * self.cfg.max_interest_rate_factor,
        )
