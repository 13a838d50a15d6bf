"""Tests for price/rent discrimination."""

import pytest

from evanaliz.config import DiscriminatorConfig
from evanaliz.errors import ParseErrorKind
from evanaliz.models import ParseFailure, ParseSuccess, RawObservation
from evanaliz.parsing.discriminator import PriceRentDiscriminator


def _make_observation(texts, **overrides) -> RawObservation:
    defaults = {"texts": texts, "source_id": "test-app"}
    defaults.update(overrides)
    return RawObservation(**defaults)


class TestPriceRentDiscriminator:
    def setup_method(self):
        self.discriminator = PriceRentDiscriminator()

    def _success(self, texts):
        result = self.discriminator.discriminate(_make_observation(texts))
        assert isinstance(result, ParseSuccess), result
        return result.data

    def _failure(self, observation):
        result = self.discriminator.discriminate(observation)
        assert isinstance(result, ParseFailure), result
        return result

    def test_labeled_price_and_rent(self):
        data = self._success(["Fiyat", "5.000.000 TL", "Kira", "25.000 TL"])
        assert data.house_price == 5_000_000.0
        assert data.monthly_rent == 25_000.0
        assert data.source_id == "test-app"

    def test_label_pins_price_over_larger_values(self):
        data = self._success(["12.000.000 TL", "Fiyat", "5.000.000 TL", "25.000 TL"])
        assert data.house_price == 5_000_000.0
        assert data.monthly_rent == 25_000.0

    def test_uppercase_turkish_label(self):
        data = self._success(["12.000.000 TL", "FİYAT", "5.000.000 TL", "25.000 TL"])
        assert data.house_price == 5_000_000.0

    def test_label_followed_by_small_value_is_ignored(self):
        data = self._success(["Fiyat", "25.000 TL", "5.000.000 TL"])
        assert data.house_price == 5_000_000.0
        assert data.monthly_rent == 25_000.0

    def test_unlabeled_largest_price_pairs_first(self):
        data = self._success(["25.000 TL", "5.000.000 TL"])
        assert data.house_price == 5_000_000.0
        assert data.monthly_rent == 25_000.0

    def test_all_values_sorted_descending(self):
        data = self._success(["25.000 TL", "5.000.000 TL", "1.500 TL"])
        assert data.all_values == [5_000_000.0, 25_000.0, 1_500.0]

    def test_rejects_pairing_above_ratio(self):
        # 150.000 is 7.5% of the price, too high for a monthly rent
        data = self._success(["2.000.000 TL", "150.000 TL", "10.000 TL"])
        assert data.house_price == 2_000_000.0
        assert data.monthly_rent == 10_000.0

    def test_ratio_rejection_falls_back(self):
        # No valid pair: price falls back to the largest candidate and rent to
        # the first other value inside the rent range
        data = self._success(["1.000.000 TL", "80.000 TL"])
        assert data.house_price == 1_000_000.0
        assert data.monthly_rent == 80_000.0

    def test_custom_ratio(self):
        discriminator = PriceRentDiscriminator(DiscriminatorConfig(max_rent_to_price_ratio=0.005))
        result = discriminator.discriminate(_make_observation(["2.000.000 TL", "15.000 TL", "10.000 TL"]))
        assert result.data.monthly_rent == 10_000.0

    def test_coordinate_only(self):
        data = self._success(["Konum", "@40.8736,29.3064"])
        assert data.house_price is None
        assert data.monthly_rent is None
        assert data.coordinate.lat == pytest.approx(40.8736)
        assert data.is_complete

    def test_first_coordinate_wins(self):
        data = self._success(["@40.8736,29.3064", "@41.0082,28.9784"])
        assert data.coordinate.lat == pytest.approx(40.8736)

    def test_coordinate_with_price_and_rent(self):
        data = self._success(["5.000.000 TL", "25.000 TL", "40.8736, 29.3064"])
        assert data.has_price_and_rent
        assert data.coordinate is not None

    def test_extraction_failure(self):
        failure = self._failure(_make_observation([], success=False, error_message="service down"))
        assert failure.error.kind == ParseErrorKind.UNEXPECTED_ERROR
        assert failure.error.message == "service down"

    def test_extraction_failure_without_message(self):
        failure = self._failure(_make_observation(["5.000.000 TL"], success=False))
        assert failure.error.message == "Unknown error"

    def test_no_texts(self):
        failure = self._failure(_make_observation([]))
        assert failure.error.kind == ParseErrorKind.NO_DATA_FOUND

    def test_no_numbers(self):
        failure = self._failure(_make_observation(["Kira", "Satılık"]))
        assert failure.error.kind == ParseErrorKind.NO_DATA_FOUND
        assert failure.raw_texts == ["Kira", "Satılık"]

    def test_only_zero_values(self):
        failure = self._failure(_make_observation(["0 TL", "0,00"]))
        assert failure.error.kind == ParseErrorKind.INVALID_FORMAT

    def test_price_without_rent(self):
        failure = self._failure(_make_observation(["Fiyat", "5.000.000 TL"]))
        assert failure.error.kind == ParseErrorKind.INSUFFICIENT_DATA

    def test_values_outside_ranges(self):
        failure = self._failure(_make_observation(["500 TL", "750 TL"]))
        assert failure.error.kind == ParseErrorKind.INSUFFICIENT_DATA
