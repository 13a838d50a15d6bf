"""Data models for EvAnaliz."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from evanaliz.errors import ParseError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Extraction input / discrimination output
# ---------------------------------------------------------------------------


class RawObservation(BaseModel):
    """One batch of on-screen strings handed over by the extraction side.

    Order of ``texts`` matters: label adjacency and first-match rules depend on it.
    """

    model_config = ConfigDict(frozen=True)

    texts: list[str] = Field(default_factory=list)
    source_id: str = "unknown"
    timestamp: datetime = Field(default_factory=_utcnow)
    success: bool = True
    error_message: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return len(self.texts) > 0

    @property
    def count(self) -> int:
        return len(self.texts)

    @classmethod
    def empty(cls, source_id: str, error_message: str | None = None) -> RawObservation:
        return cls(
            texts=[],
            source_id=source_id,
            success=error_message is None,
            error_message=error_message,
        )


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class ParsedListingData(BaseModel):
    """Roles assigned to the numbers found on a listing screen."""

    model_config = ConfigDict(frozen=True)

    house_price: Optional[float] = None
    monthly_rent: Optional[float] = None
    all_values: list[float] = Field(default_factory=list)  # descending
    coordinate: Optional[Coordinate] = None
    source_id: str = "unknown"

    @property
    def has_price_and_rent(self) -> bool:
        return self.house_price is not None and self.monthly_rent is not None

    @property
    def is_complete(self) -> bool:
        return self.has_price_and_rent or self.coordinate is not None

    @classmethod
    def empty(cls, source_id: str = "unknown") -> ParsedListingData:
        return cls(source_id=source_id)


class ParseSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    data: ParsedListingData


class ParseFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    error: ParseError
    raw_texts: list[str] = Field(default_factory=list)


ParseResult = Union[ParseSuccess, ParseFailure]


# ---------------------------------------------------------------------------
# Single-point calculation and verdict
# ---------------------------------------------------------------------------


class CalculationResult(BaseModel):
    """Every intermediate and final figure for one (price, rent) pair.

    Carries numbers only; the verdict is derived separately.
    """

    model_config = ConfigDict(frozen=True)

    house_price: float
    monthly_rent: float

    # Purchase and capital structure
    purchase_expenses: float
    loan_amount: float
    down_payment: float

    # Loan amortization
    monthly_installment: float
    total_loan_repayment: float

    real_total_cost: float

    # After-tax rent
    gross_annual_rent: float
    annual_tax: float
    net_annual_rent: float

    amortization_years: float

    @classmethod
    def neutral(cls) -> CalculationResult:
        """All-zero snapshot for listings that only yielded a coordinate."""
        return cls(
            house_price=0.0,
            monthly_rent=0.0,
            purchase_expenses=0.0,
            loan_amount=0.0,
            down_payment=0.0,
            monthly_installment=0.0,
            total_loan_repayment=0.0,
            real_total_cost=0.0,
            gross_annual_rent=0.0,
            annual_tax=0.0,
            net_annual_rent=0.0,
            amortization_years=0.0,
        )


class InvestmentCategory(str, Enum):
    LOGICAL = "logical"
    OVERPRICED = "overpriced"


class ColorHint(str, Enum):
    """Semantic color suggestion; the presentation layer picks the real color."""

    GREEN = "green"
    RED = "red"


class InvestmentVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    amortization_years: float
    status_text: str
    category: InvestmentCategory
    color_hint: ColorHint
    summary_explanation: str

    @classmethod
    def neutral(cls) -> InvestmentVerdict:
        return cls(
            amortization_years=0.0,
            status_text="LOCATION FOUND",
            category=InvestmentCategory.LOGICAL,
            color_hint=ColorHint.GREEN,
            summary_explanation=(
                "Only a location was detected on screen. "
                "Price and rent are needed for a financial verdict."
            ),
        )


# ---------------------------------------------------------------------------
# Scenario projection
# ---------------------------------------------------------------------------


class ScenarioType(str, Enum):
    OPTIMISTIC = "optimistic"
    REALISTIC = "realistic"
    PESSIMISTIC = "pessimistic"
    EXTREME_STRESS = "extreme_stress"


class InvestmentScenario(BaseModel):
    """Named bundle of economic assumptions."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    type: ScenarioType
    monthly_interest_rate: float
    annual_inflation_rate: float
    annual_property_appreciation: float
    annual_rent_growth: float
    vacancy_rate: float  # share of the year without a tenant
    maintenance_cost_rate: float  # share of gross annual rent


class YearlyProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    gross_rent: float
    vacancy_loss: float
    maintenance_cost: float
    net_operating_income: float
    annual_tax: float
    loan_payment: float
    net_cash_flow: float
    cumulative_cash_flow: float
    property_value: float


class RiskMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None when the cumulative cash flow never turns positive within the horizon
    payback_period_years: Optional[float] = None
    npv: float
    irr: float  # geometric-mean approximation, see ScenarioEngine
    cash_on_cash_return: float
    worst_case_drawdown: float

    @property
    def irr_percentage(self) -> float:
        return self.irr * 100

    @property
    def cash_on_cash_percentage(self) -> float:
        return self.cash_on_cash_return * 100

    @property
    def is_payback_achieved(self) -> bool:
        return self.payback_period_years is not None

    @property
    def is_npv_positive(self) -> bool:
        return self.npv > 0


class ScenarioResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scenario: InvestmentScenario
    monthly_installment: float
    total_loan_repayment: float
    real_total_cost: float
    yearly_projections: list[YearlyProjection]
    risk_metrics: RiskMetrics
    final_property_value: float


# ---------------------------------------------------------------------------
# Sensitivity and decision
# ---------------------------------------------------------------------------


class SensitivityVariable(str, Enum):
    INTEREST_RATE = "interest_rate"
    HOUSE_PRICE = "house_price"
    RENT = "rent"


class SensitivityPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    change_percent: float
    amortization_years: float  # real_total_cost / first-year NOI
    npv: float
    irr: float


class BreakEvenPoints(BaseModel):
    """Coarse multiplier-scan estimates, not exact roots."""

    model_config = ConfigDict(frozen=True)

    minimum_rent_for_break_even: float
    maximum_price_for_break_even: float
    max_acceptable_interest_rate: float


class SensitivityAnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_result: ScenarioResult
    interest_rate_sensitivity: list[SensitivityPoint]
    price_sensitivity: list[SensitivityPoint]
    rent_sensitivity: list[SensitivityPoint]
    most_impactful_variable: SensitivityVariable
    break_even_points: BreakEvenPoints


class InvestmentDecision(str, Enum):
    STRONG_BUY = "strong_buy"
    CONDITIONAL_BUY = "conditional_buy"
    NEUTRAL_WAIT = "neutral_wait"
    HIGH_RISK_AVOID = "high_risk_avoid"


_DECISION_TEXT = {
    InvestmentDecision.STRONG_BUY: "STRONG BUY - profitable in every scenario",
    InvestmentDecision.CONDITIONAL_BUY: "CONDITIONAL BUY - risks exist but the outlook is positive",
    InvestmentDecision.NEUTRAL_WAIT: "NEUTRAL / WAIT - uncertainty is high",
    InvestmentDecision.HIGH_RISK_AVOID: "HIGH RISK - AVOID",
}


class RiskExplanation(BaseModel):
    model_config = ConfigDict(frozen=True)

    biggest_risk: str
    success_condition: str
    failure_condition: str


class InvestmentDecisionReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    decision: InvestmentDecision
    scenario_results: list[ScenarioResult]
    sensitivity_analysis: SensitivityAnalysisResult
    reasons: list[str]
    risk_explanation: RiskExplanation

    @property
    def decision_text(self) -> str:
        return _DECISION_TEXT[self.decision]

    def scenario(self, scenario_type: ScenarioType) -> ScenarioResult | None:
        for result in self.scenario_results:
            if result.scenario.type == scenario_type:
                return result
        return None


# ---------------------------------------------------------------------------
# Pipeline output handed to the presentation layer
# ---------------------------------------------------------------------------


class IntegrationSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    parsed_data: ParsedListingData
    calculation: CalculationResult
    verdict: InvestmentVerdict


class PartialSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["partial"] = "partial"
    parsed_data: ParsedListingData
    message: str


class IntegrationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    error: ParseError
    raw_texts: list[str] = Field(default_factory=list)
    user_message: str


IntegrationResult = Union[IntegrationSuccess, PartialSuccess, IntegrationError]
