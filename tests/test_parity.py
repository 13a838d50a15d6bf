"""Tests for spreadsheet parity validation."""

from evanaliz.analysis.engine import CalculationEngine
from evanaliz.analysis.parity import (
    COMPARED_FIELDS,
    ParityValidator,
    build_test_case,
    reference_cases,
    within_tolerance,
)
from evanaliz.config import FinancialConstants


class TestReferenceCases:
    def test_three_cases(self):
        cases = reference_cases()
        assert [c.house_price for c in cases] == [5_000_000.0, 1_500_000.0, 10_000_000.0]
        assert all(set(c.expected) == set(COMPARED_FIELDS) for c in cases)

    def test_exemption_boundary_has_no_tax(self):
        case = reference_cases()[1]
        assert case.expected["annual_tax"] == 0.0


class TestParityValidator:
    def setup_method(self):
        self.validator = ParityValidator(CalculationEngine())

    def test_all_reference_cases_pass(self):
        report = self.validator.validate_all()
        assert report.overall_passed
        assert report.passed_count == 3
        assert report.failed_count == 0

    def test_field_results(self):
        result = self.validator.validate_case(reference_cases()[0])
        assert result.passed
        assert [f.field_name for f in result.fields] == list(COMPARED_FIELDS)
        assert all(f.absolute_difference <= 0.01 for f in result.fields)

    def test_mismatched_engine_fails(self):
        engine = CalculationEngine(FinancialConstants(purchase_expense_rate=0.08))
        result = ParityValidator(engine).validate_case(
            build_test_case("drift", "7% vs 8% purchase costs", 5_000_000, 25_000)
        )
        assert not result.passed
        assert "purchase_expenses" in [f.field_name for f in result.failed_fields]
        assert "loan_amount" not in [f.field_name for f in result.failed_fields]

    def test_report_with_failure(self):
        engine = CalculationEngine(FinancialConstants(income_tax_rate=0.25))
        report = ParityValidator(engine).validate_all(reference_cases())
        assert not report.overall_passed
        # Case B pays no tax, so it still matches
        assert report.passed_count == 1
        assert report.failed_count == 2


class TestTolerance:
    def test_absolute(self):
        assert within_tolerance(100.0, 100.009)
        assert not within_tolerance(100.0, 100.02)

    def test_relative(self):
        assert within_tolerance(1_000_000_000.0, 1_000_000_050.0)
        assert not within_tolerance(1_000_000_000.0, 1_000_200_000.0)

    def test_zero_expected_needs_exact_match(self):
        assert within_tolerance(0.0, 0.0)
        assert not within_tolerance(0.0, 0.001)
