"""Tests for data models."""

from evanaliz.models import (
    CalculationResult,
    ColorHint,
    Coordinate,
    InvestmentCategory,
    InvestmentVerdict,
    ParsedListingData,
    RawObservation,
    RiskMetrics,
)


def _make_metrics(**overrides) -> RiskMetrics:
    defaults = {
        "payback_period_years": 6.0,
        "npv": 125_000.0,
        "irr": 0.184,
        "cash_on_cash_return": 0.05,
        "worst_case_drawdown": -2_000_000.0,
    }
    defaults.update(overrides)
    return RiskMetrics(**defaults)


class TestRawObservation:
    def test_counts(self):
        obs = RawObservation(texts=["Fiyat", "5.000.000 TL"], source_id="app")
        assert obs.has_data
        assert obs.count == 2
        assert obs.success
        assert obs.timestamp is not None

    def test_empty(self):
        ok = RawObservation.empty("app")
        assert ok.success and not ok.has_data
        failed = RawObservation.empty("app", error_message="denied")
        assert not failed.success
        assert failed.error_message == "denied"


class TestParsedListingData:
    def test_complete_with_price_and_rent(self):
        data = ParsedListingData(house_price=5_000_000, monthly_rent=25_000)
        assert data.has_price_and_rent
        assert data.is_complete

    def test_complete_with_coordinate_only(self):
        data = ParsedListingData(coordinate=Coordinate(lat=40.87, lon=29.30))
        assert not data.has_price_and_rent
        assert data.is_complete

    def test_incomplete(self):
        assert not ParsedListingData(house_price=5_000_000).is_complete
        assert not ParsedListingData.empty("app").is_complete


class TestRiskMetrics:
    def test_percentages(self):
        m = _make_metrics()
        assert round(m.irr_percentage, 6) == 18.4
        assert round(m.cash_on_cash_percentage, 6) == 5.0

    def test_flags(self):
        assert _make_metrics().is_payback_achieved
        assert not _make_metrics(payback_period_years=None).is_payback_achieved
        assert _make_metrics().is_npv_positive
        assert not _make_metrics(npv=0.0).is_npv_positive


def test_neutral_results():
    calc = CalculationResult.neutral()
    assert calc.amortization_years == 0.0
    assert calc.real_total_cost == 0.0
    verdict = InvestmentVerdict.neutral()
    assert verdict.category == InvestmentCategory.LOGICAL
    assert verdict.color_hint == ColorHint.GREEN
