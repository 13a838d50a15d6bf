"""Configuration management for EvAnaliz."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path(__file__).parent.parent / "config"


class FinancialConstants(BaseModel):
    """Baseline Turkish residential investment model parameters.

    Read-only once built; every engine takes a reference to one instance.
    """

    model_config = ConfigDict(frozen=True)

    purchase_expense_rate: float = 0.07  # title deed fee 4% + agent 3%
    loan_usage_ratio: float = 0.50
    monthly_interest_rate: float = 0.0249  # monthly, not annual
    loan_term_months: int = 60
    annual_rent_tax_exemption: float = 58_000.0
    income_tax_rate: float = 0.20


class ParserConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency_markers: list[str] = ["TL", "₺"]
    # Regional sanity box for bare "lat, lon" pairs (Turkey)
    min_latitude: float = 35.0
    max_latitude: float = 43.0
    min_longitude: float = 25.0
    max_longitude: float = 46.0


class CandidateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_length: int = 3
    min_digit_count: int = 4
    currency_indicators: list[str] = ["TL", "₺", "tl", "Tl"]
    important_labels: list[str] = ["fiyat", "price"]


class DiscriminatorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_house_price: float = 100_000.0
    max_house_price: float = 100_000_000.0
    min_rent: float = 1_000.0
    max_rent: float = 500_000.0
    # Monthly rent above 5% of the price would mean a 60% annual yield
    max_rent_to_price_ratio: float = 0.05
    price_labels: list[str] = ["fiyat"]


class VerdictConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_acceptable_amortization_years: float = 14.0


class ScenarioConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    projection_years: int = 10
    # Debt service is booked for the first N years regardless of loan_term_months
    loan_payment_years: int = 5


class SensitivityConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Annual interest deltas, converted to monthly (/12) before applying
    interest_rate_changes: list[float] = [-0.05, -0.03, -0.01, 0.0, 0.01, 0.03, 0.05]
    price_changes: list[float] = [-0.20, -0.10, -0.05, 0.0, 0.05, 0.10, 0.20]
    rent_changes: list[float] = [-0.20, -0.10, -0.05, 0.0, 0.05, 0.10, 0.20]
    break_even_rent_multipliers: list[float] = [0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
    break_even_rent_markup: float = 1.1
    break_even_price_multipliers: list[float] = [1.5, 1.4, 1.3, 1.2, 1.1, 1.0]
    max_interest_rate_factor: float = 1.5


class DecisionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    stress_npv_floor: float = -500_000.0
    reasonable_payback_years: float = 15.0


class AnalysisConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    constants: FinancialConstants = FinancialConstants()
    verdict: VerdictConfig = VerdictConfig()
    scenario: ScenarioConfig = ScenarioConfig()
    sensitivity: SensitivityConfig = SensitivityConfig()
    decision: DecisionConfig = DecisionConfig()


class ParsingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    parser: ParserConfig = ParserConfig()
    candidates: CandidateConfig = CandidateConfig()
    discriminator: DiscriminatorConfig = DiscriminatorConfig()


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    parsing: ParsingConfig = ParsingConfig()
    analysis: AnalysisConfig = AnalysisConfig()


class RuntimeSettings(BaseSettings):
    """Process-level switches read from the environment (EVANALIZ_*)."""

    model_config = SettingsConfigDict(env_prefix="EVANALIZ_")

    log_level: str = "INFO"
    config_path: Path | None = None


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML files.

    Loads default.toml first, then merges local.toml, the EVANALIZ_CONFIG_PATH
    file or a custom path on top.
    """
    default_path = CONFIG_DIR / "default.toml"
    data: dict[str, Any] = {}

    if default_path.exists():
        with open(default_path, "rb") as f:
            data = tomllib.load(f)

    local_path = config_path or RuntimeSettings().config_path or CONFIG_DIR / "local.toml"
    if local_path.exists():
        with open(local_path, "rb") as f:
            overrides = tomllib.load(f)
        data = _deep_merge(data, overrides)

    return AppConfig(**data)
