"""Binary investment verdict from the amortization KPI."""

from __future__ import annotations

from evanaliz.config import VerdictConfig
from evanaliz.models import CalculationResult, ColorHint, InvestmentCategory, InvestmentVerdict


class VerdictEngine:
    """Interprets a CalculationResult; never recomputes any figure."""

    def __init__(self, config: VerdictConfig | None = None):
        self.cfg = config or VerdictConfig()

    def evaluate(self, calculation: CalculationResult) -> InvestmentVerdict:
        years = calculation.amortization_years
        threshold = self.cfg.max_acceptable_amortization_years

        if years < threshold:
            return InvestmentVerdict(
                amortization_years=years,
                status_text="LOGICAL INVESTMENT",
                category=InvestmentCategory.LOGICAL,
                color_hint=ColorHint.GREEN,
                summary_explanation=self._logical_summary(years, threshold),
            )
        return InvestmentVerdict(
            amortization_years=years,
            status_text="OVERPRICED",
            category=InvestmentCategory.OVERPRICED,
            color_hint=ColorHint.RED,
            summary_explanation=self._overpriced_summary(years, threshold),
        )

    def _logical_summary(self, years: float, threshold: float) -> str:
        parts = [
            f"Including the loan and purchase costs, this property pays for itself "
            f"from rent in about {years:.1f} years.",
            f"That is within the acceptable range (under {threshold:g} years), "
            f"so the investment is considered logical.",
            "You can expect to recover the investment from rent in a reasonable time.",
        ]
        return "\n\n".join(parts)

    def _overpriced_summary(self, years: float, threshold: float) -> str:
        parts = [
            f"Including the loan and purchase costs, this property pays for itself "
            f"from rent in about {years:.1f} years.",
            f"That exceeds the acceptable range ({threshold:g} years), "
            f"so the investment is considered overpriced.",
            "Looking for more reasonably priced alternatives is recommended.",
        ]
        return "\n\n".join(parts)
