"""Categorical investment decision over all scenarios plus sensitivity."""

from __future__ import annotations

import logging

from evanaliz.analysis.scenario import PREDEFINED_SCENARIOS, ScenarioEngine
from evanaliz.analysis.sensitivity import SensitivityAnalyzer
from evanaliz.config import DecisionConfig
from evanaliz.models import (
    InvestmentDecision,
    InvestmentDecisionReport,
    RiskExplanation,
    ScenarioResult,
    ScenarioType,
    SensitivityAnalysisResult,
    SensitivityVariable,
)

logger = logging.getLogger(__name__)


_VARIABLE_LABELS = {
    SensitivityVariable.INTEREST_RATE: "Interest rate",
    SensitivityVariable.HOUSE_PRICE: "House price",
    SensitivityVariable.RENT: "Rental income",
}

_BIGGEST_RISK = {
    SensitivityVariable.INTEREST_RATE: (
        "Rising interest rates are the risk that affects this investment most. "
        "If loan rates go up, the monthly installment grows and profitability drops."
    ),
    SensitivityVariable.HOUSE_PRICE: (
        "The purchase price is the factor that affects this investment most. "
        "Buying at a higher price stretches the amortization period."
    ),
    SensitivityVariable.RENT: (
        "Rental income is the most critical variable of this investment. "
        "If the expected rent is not achieved, the investment may lose money."
    ),
}

_FRAGILE_FAILURE = (
    "This investment fails when:\n"
    "- an economic crisis brings very high interest rates\n"
    "- no tenant is found or rent payments are missed\n"
    "- large unexpected maintenance costs come up"
)

_RESILIENT_FAILURE = (
    "This investment looks resilient, but caution is still advised under extreme scenarios."
)


def format_currency(value: float) -> str:
    return f"{value:,.0f} TL"


def _by_type(results: list[ScenarioResult]) -> dict[ScenarioType, ScenarioResult]:
    return {r.scenario.type: r for r in results}


class DecisionEngine:
    """Combines the four canonical scenarios into a single recommendation."""

    def __init__(
        self,
        scenario_engine: ScenarioEngine | None = None,
        sensitivity_analyzer: SensitivityAnalyzer | None = None,
        config: DecisionConfig | None = None,
    ):
        self.scenario_engine = scenario_engine or ScenarioEngine()
        self.sensitivity = sensitivity_analyzer or SensitivityAnalyzer(self.scenario_engine)
        self.cfg = config or DecisionConfig()

    def generate_decision(self, house_price: float, monthly_rent: float) -> InvestmentDecisionReport:
        results = self.scenario_engine.calculate_all(house_price, monthly_rent, PREDEFINED_SCENARIOS)
        sensitivity = self.sensitivity.analyze(house_price, monthly_rent)

        decision = self.evaluate(results)
        logger.info("Decision for %s / %s: %s", house_price, monthly_rent, decision.value)

        return InvestmentDecisionReport(
            decision=decision,
            scenario_results=results,
            sensitivity_analysis=sensitivity,
            reasons=self._reasons(results, sensitivity),
            risk_explanation=self._risk_explanation(results, sensitivity),
        )

    def evaluate(self, results: list[ScenarioResult]) -> InvestmentDecision:
        """Rules are checked in order; the first match decides."""
        by_type = _by_type(results)

        def npv_positive(scenario_type: ScenarioType) -> bool:
            result = by_type.get(scenario_type)
            return result is not None and result.risk_metrics.is_npv_positive

        stress = by_type.get(ScenarioType.EXTREME_STRESS)
        stress_npv = stress.risk_metrics.npv if stress is not None else 0.0

        if all(r.risk_metrics.is_npv_positive for r in results) and npv_positive(ScenarioType.EXTREME_STRESS):
            return InvestmentDecision.STRONG_BUY

        if (
            npv_positive(ScenarioType.REALISTIC)
            and npv_positive(ScenarioType.OPTIMISTIC)
            and stress_npv > self.cfg.stress_npv_floor
        ):
            return InvestmentDecision.CONDITIONAL_BUY

        if npv_positive(ScenarioType.REALISTIC):
            return InvestmentDecision.NEUTRAL_WAIT

        return InvestmentDecision.HIGH_RISK_AVOID

    def _reasons(
        self,
        results: list[ScenarioResult],
        sensitivity: SensitivityAnalysisResult,
    ) -> list[str]:
        by_type = _by_type(results)
        reasons: list[str] = []

        realistic = by_type.get(ScenarioType.REALISTIC)
        if realistic is not None:
            metrics = realistic.risk_metrics
            if metrics.is_npv_positive:
                reasons.append(f"NPV is positive in the realistic scenario: {format_currency(metrics.npv)}")
            else:
                reasons.append(f"NPV is negative in the realistic scenario: {format_currency(metrics.npv)}")

            payback = metrics.payback_period_years
            if payback is None:
                horizon = len(realistic.yearly_projections)
                reasons.append(f"Payback period is long: not reached within {horizon} years")
            elif payback < self.cfg.reasonable_payback_years:
                reasons.append(f"Payback period is reasonable: {payback:.1f} years")
            else:
                reasons.append(f"Payback period is long: {payback:.1f} years")

        stress = by_type.get(ScenarioType.EXTREME_STRESS)
        if stress is not None:
            if stress.risk_metrics.is_npv_positive:
                reasons.append("Profitable even in the stress scenario")
            else:
                reasons.append(f"Loss in the stress scenario: {format_currency(stress.risk_metrics.npv)}")

        reasons.append(f"Most impactful variable: {_VARIABLE_LABELS[sensitivity.most_impactful_variable]}")
        return reasons

    def _risk_explanation(
        self,
        results: list[ScenarioResult],
        sensitivity: SensitivityAnalysisResult,
    ) -> RiskExplanation:
        break_even = sensitivity.break_even_points
        success = (
            "For this investment to succeed:\n"
            f"- rent should be at least {format_currency(break_even.minimum_rent_for_break_even)}\n"
            f"- the price should not exceed {format_currency(break_even.maximum_price_for_break_even)}\n"
            "- vacant periods between tenants should be kept short"
        )

        stress = _by_type(results).get(ScenarioType.EXTREME_STRESS)
        if stress is not None and not stress.risk_metrics.is_npv_positive:
            failure = _FRAGILE_FAILURE
        else:
            failure = _RESILIENT_FAILURE

        return RiskExplanation(
            biggest_risk=_BIGGEST_RISK[sensitivity.most_impactful_variable],
            success_condition=success,
            failure_condition=failure,
        )
