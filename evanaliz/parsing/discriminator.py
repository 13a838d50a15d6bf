"""Price/rent discrimination over a batch of raw screen strings.

Assigns roles (house price, monthly rent, location) to the bag of numbers
found on a listing screen.
"""

from __future__ import annotations

import logging

from evanaliz.config import DiscriminatorConfig, ParserConfig
from evanaliz.errors import ParseError
from evanaliz.models import (
    Coordinate,
    ParsedListingData,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    RawObservation,
)
from evanaliz.parsing.candidates import label_key
from evanaliz.parsing.numbers import parse_all, parse_coordinates, parse_number

logger = logging.getLogger(__name__)


class PriceRentDiscriminator:
    """Turns a RawObservation into ParsedListingData or a typed failure."""

    def __init__(
        self,
        config: DiscriminatorConfig | None = None,
        parser_config: ParserConfig | None = None,
    ):
        self.cfg = config or DiscriminatorConfig()
        self.parser_cfg = parser_config or ParserConfig()
        self._labels = {label_key(label) for label in self.cfg.price_labels}

    def discriminate(self, observation: RawObservation) -> ParseResult:
        logger.debug("Discriminating %d texts from %s", observation.count, observation.source_id)

        if not observation.success:
            message = observation.error_message or "Unknown error"
            logger.error("Extraction failed for %s: %s", observation.source_id, message)
            return ParseFailure(error=ParseError.unexpected(message), raw_texts=list(observation.texts))

        texts = observation.texts
        if not texts:
            return ParseFailure(error=ParseError.no_data_found(), raw_texts=[])

        for index, text in enumerate(texts):
            logger.debug("Text[%d]: %s", index, text)

        coordinate = self._find_coordinate(texts)
        labeled_price = self._find_labeled_price(texts)

        parsed = parse_all(texts, self.parser_cfg)
        all_values = sorted((v for v in parsed if v > 0), reverse=True)

        if not all_values and coordinate is None:
            error = ParseError.invalid_format() if parsed else ParseError.no_data_found()
            logger.warning("No usable numbers in %d texts (%s)", len(texts), error.kind.value)
            return ParseFailure(error=error, raw_texts=list(texts))

        price, rent = self._pair(all_values, labeled_price)

        data = ParsedListingData(
            house_price=price,
            monthly_rent=rent,
            all_values=all_values,
            coordinate=coordinate,
            source_id=observation.source_id,
        )

        if not data.is_complete:
            logger.warning("Insufficient data: price=%s rent=%s values=%s", price, rent, all_values)
            return ParseFailure(error=ParseError.insufficient_data(), raw_texts=list(texts))

        logger.info("Discriminated price=%s rent=%s coordinate=%s", price, rent, coordinate)
        return ParseSuccess(data=data)

    def _find_coordinate(self, texts: list[str]) -> Coordinate | None:
        """First text that parses as a coordinate wins."""
        for text in texts:
            coordinate = parse_coordinates(text, self.parser_cfg)
            if coordinate is not None:
                logger.info("Coordinate %s, %s found in %r", coordinate.lat, coordinate.lon, text)
                return coordinate
        return None

    def _find_labeled_price(self, texts: list[str]) -> float | None:
        """Value right after a "Fiyat" label, if it is large enough to be a price."""
        for current, following in zip(texts, texts[1:]):
            if label_key(current) not in self._labels:
                continue
            value = parse_number(following, self.parser_cfg)
            if value is not None and value >= self.cfg.min_house_price:
                logger.debug("Labeled price %s after %r", value, current)
                return value
        return None

    def _in_price_range(self, value: float) -> bool:
        return self.cfg.min_house_price <= value <= self.cfg.max_house_price

    def _in_rent_range(self, value: float) -> bool:
        return self.cfg.min_rent <= value <= self.cfg.max_rent

    def _pair(
        self,
        all_values: list[float],
        labeled_price: float | None,
    ) -> tuple[float | None, float | None]:
        price_candidates = [v for v in all_values if self._in_price_range(v)]
        rent_candidates = [v for v in all_values if self._in_rent_range(v)]

        best_price = labeled_price
        best_rent: float | None = None

        for price in price_candidates:
            if labeled_price is not None and price != labeled_price:
                continue
            for rent in rent_candidates:
                if rent == price or rent >= price:
                    continue
                if rent / price > self.cfg.max_rent_to_price_ratio:
                    continue
                best_price, best_rent = price, rent
                break
            if best_rent is not None:
                break

        if best_price is None and price_candidates:
            best_price = price_candidates[0]

        if best_rent is None and len(all_values) > 1:
            best_rent = next(
                (v for v in all_values if v != best_price and self._in_rent_range(v)),
                None,
            )

        return best_price, best_rent
