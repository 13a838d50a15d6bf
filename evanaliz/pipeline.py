"""End-to-end pipeline: raw screen texts -> listing -> calculation -> verdict."""

from __future__ import annotations

import logging

from evanaliz.analysis.engine import CalculationEngine
from evanaliz.analysis.verdict import VerdictEngine
from evanaliz.config import AppConfig
from evanaliz.errors import ParseError, ParseErrorKind, to_app_error
from evanaliz.models import (
    CalculationResult,
    IntegrationError,
    IntegrationResult,
    IntegrationSuccess,
    InvestmentVerdict,
    ParsedListingData,
    ParseFailure,
    PartialSuccess,
    RawObservation,
)
from evanaliz.parsing.discriminator import PriceRentDiscriminator

logger = logging.getLogger(__name__)


def _format_currency(value: float) -> str:
    return f"{value:,.0f} TL"


def user_message(error: ParseError) -> str:
    if error.kind == ParseErrorKind.UNEXPECTED_ERROR:
        return f"An unexpected error occurred: {error.message or 'Unknown error'}"
    return to_app_error(error).user_message


def partial_message(data: ParsedListingData) -> str:
    """Describe what was found when the listing is not usable for a verdict."""
    if data.house_price is not None and data.monthly_rent is None:
        return (
            f"House price found: {_format_currency(data.house_price)}. "
            "No rent information was found."
        )
    if data.house_price is None and data.monthly_rent is not None:
        return (
            f"Rent found: {_format_currency(data.monthly_rent)}. "
            "No house price was found."
        )
    return "Data is incomplete."


class IntegrationPipeline:
    """Runs one observation through discrimination, calculation and verdict."""

    def __init__(self, config: AppConfig | None = None):
        self.config = config or AppConfig()
        parsing = self.config.parsing
        analysis = self.config.analysis
        self.discriminator = PriceRentDiscriminator(parsing.discriminator, parsing.parser)
        self.engine = CalculationEngine(analysis.constants)
        self.verdict_engine = VerdictEngine(analysis.verdict)

    def process(self, observation: RawObservation) -> IntegrationResult:
        parsed = self.discriminator.discriminate(observation)

        if isinstance(parsed, ParseFailure):
            return IntegrationError(
                error=parsed.error,
                raw_texts=parsed.raw_texts,
                user_message=user_message(parsed.error),
            )

        data = parsed.data
        if not data.is_complete:
            return PartialSuccess(parsed_data=data, message=partial_message(data))

        if not data.has_price_and_rent:
            # Location only: no numbers to compute with
            logger.info("Coordinate-only result from %s", data.source_id)
            return IntegrationSuccess(
                parsed_data=data,
                calculation=CalculationResult.neutral(),
                verdict=InvestmentVerdict.neutral(),
            )

        calculation = self.engine.calculate(data.house_price, data.monthly_rent)
        verdict = self.verdict_engine.evaluate(calculation)
        return IntegrationSuccess(parsed_data=data, calculation=calculation, verdict=verdict)
