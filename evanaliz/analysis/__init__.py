"""Financial analysis: core calculation, verdict, scenarios, sensitivity, decision."""

from evanaliz.analysis.engine import CalculationEngine, pmt
from evanaliz.analysis.verdict import VerdictEngine
from evanaliz.analysis.scenario import (
    EXTREME_STRESS,
    OPTIMISTIC,
    PESSIMISTIC,
    PREDEFINED_SCENARIOS,
    REALISTIC,
    ScenarioEngine,
    get_scenario,
)
from evanaliz.analysis.sensitivity import SensitivityAnalyzer
from evanaliz.analysis.decision import DecisionEngine
from evanaliz.analysis.parity import ParityValidator, build_test_case, reference_cases
