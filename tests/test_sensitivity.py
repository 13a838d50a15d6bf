"""Tests for the sensitivity analyzer."""

from types import SimpleNamespace

import pytest

from evanaliz.analysis.scenario import REALISTIC, ScenarioEngine
from evanaliz.analysis.sensitivity import SensitivityAnalyzer
from evanaliz.models import SensitivityPoint, SensitivityVariable


class _LinearEngine:
    """Scenario engine stand-in whose NPV is a simple function of the inputs."""

    def __init__(self, npv):
        self.npv = npv

    def calculate(self, house_price, monthly_rent, scenario, years=None):
        return SimpleNamespace(
            real_total_cost=house_price,
            yearly_projections=[SimpleNamespace(net_operating_income=monthly_rent * 12)],
            risk_metrics=SimpleNamespace(npv=self.npv(house_price, monthly_rent), irr=0.0),
        )


def _make_points(*npvs) -> list[SensitivityPoint]:
    return [SensitivityPoint(change_percent=0.0, amortization_years=1.0, npv=n, irr=0.0) for n in npvs]


class TestSweeps:
    def setup_method(self):
        self.analyzer = SensitivityAnalyzer(ScenarioEngine())
        self.result = self.analyzer.analyze(5_000_000, 25_000)

    def test_base_result_uses_realistic(self):
        assert self.result.base_result.scenario is REALISTIC

    def test_interest_sweep_levels(self):
        changes = [p.change_percent for p in self.result.interest_rate_sensitivity]
        assert changes == pytest.approx([-5, -3, -1, 0, 1, 3, 5])

    def test_price_and_rent_sweep_levels(self):
        expected = [-20, -10, -5, 0, 5, 10, 20]
        assert [p.change_percent for p in self.result.price_sensitivity] == pytest.approx(expected)
        assert [p.change_percent for p in self.result.rent_sensitivity] == pytest.approx(expected)

    def test_zero_change_matches_base(self):
        base_npv = self.result.base_result.risk_metrics.npv
        for points in (
            self.result.interest_rate_sensitivity,
            self.result.price_sensitivity,
            self.result.rent_sensitivity,
        ):
            zero = next(p for p in points if p.change_percent == 0)
            assert zero.npv == pytest.approx(base_npv)

    def test_amortization_is_first_year_approximation(self):
        base = self.result.base_result
        zero = next(p for p in self.result.price_sensitivity if p.change_percent == 0)
        expected = base.real_total_cost / base.yearly_projections[0].net_operating_income
        assert zero.amortization_years == pytest.approx(expected)

    def test_higher_rent_raises_npv(self):
        npvs = [p.npv for p in self.result.rent_sensitivity]
        assert npvs == sorted(npvs)

    def test_higher_interest_lowers_npv(self):
        npvs = [p.npv for p in self.result.interest_rate_sensitivity]
        assert npvs == sorted(npvs, reverse=True)

    def test_non_positive_rates_skipped(self):
        base = REALISTIC.model_copy(update={"monthly_interest_rate": 0.003})
        points = self.analyzer.interest_rate_sensitivity(5_000_000, 25_000, base)
        assert len(points) == 6
        assert points[0].change_percent == pytest.approx(-3)

    def test_max_acceptable_interest_rate(self):
        assert self.result.break_even_points.max_acceptable_interest_rate == pytest.approx(0.0249 * 1.5)


class TestMostImpactfulVariable:
    def test_largest_spread_wins(self):
        result = SensitivityAnalyzer.most_impactful_variable(
            _make_points(0, 10), _make_points(0, 50), _make_points(0, 20)
        )
        assert result == SensitivityVariable.HOUSE_PRICE

    def test_rent(self):
        result = SensitivityAnalyzer.most_impactful_variable(
            _make_points(0, 10), _make_points(0, 20), _make_points(-100, 100)
        )
        assert result == SensitivityVariable.RENT

    def test_ties_prefer_interest_then_price(self):
        assert SensitivityAnalyzer.most_impactful_variable(
            _make_points(0, 10), _make_points(0, 10), _make_points(0, 10)
        ) == SensitivityVariable.INTEREST_RATE
        assert SensitivityAnalyzer.most_impactful_variable(
            _make_points(0, 5), _make_points(0, 10), _make_points(0, 10)
        ) == SensitivityVariable.HOUSE_PRICE

    def test_empty_interest_sweep(self):
        assert SensitivityAnalyzer.most_impactful_variable(
            [], _make_points(0, 1), _make_points(0, 2)
        ) == SensitivityVariable.RENT


class TestBreakEvenPoints:
    def test_scans_stop_at_first_hit(self):
        analyzer = SensitivityAnalyzer(_LinearEngine(lambda price, rent: rent * 12 - price / 10))
        be = analyzer.break_even_points(1_000_000, 10_000, REALISTIC)
        # rent x0.5 already loses money, so the estimate is 10% above it
        assert be.minimum_rent_for_break_even == pytest.approx(5_000 * 1.1)
        # 1.5x..1.3x lose money, 1.2x breaks even
        assert be.maximum_price_for_break_even == pytest.approx(1_200_000)

    def test_no_hit_keeps_base_values(self):
        always_profitable = SensitivityAnalyzer(_LinearEngine(lambda price, rent: 1.0))
        be = always_profitable.break_even_points(1_000_000, 10_000, REALISTIC)
        assert be.minimum_rent_for_break_even == 10_000

        always_losing = SensitivityAnalyzer(_LinearEngine(lambda price, rent: -1.0))
        be = always_losing.break_even_points(1_000_000, 10_000, REALISTIC)
        assert be.maximum_price_for_break_even == 1_000_000
