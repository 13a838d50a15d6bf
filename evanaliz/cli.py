"""CLI interface for EvAnaliz."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from evanaliz.config import AppConfig, RuntimeSettings, load_config
from evanaliz.errors import calculation_failed, to_app_error
from evanaliz.models import (
    CalculationResult,
    IntegrationError,
    IntegrationResult,
    IntegrationSuccess,
    InvestmentCategory,
    InvestmentDecision,
    InvestmentDecisionReport,
    SensitivityPoint,
)
from evanaliz.parsing.candidates import normalize_number_format

app = typer.Typer(
    name="evanaliz",
    help="EvAnaliz - Is this listing a sensible rental investment?",
    no_args_is_help=True,
)
console = Console()

_DECISION_STYLE = {
    InvestmentDecision.STRONG_BUY: "bold green",
    InvestmentDecision.CONDITIONAL_BUY: "green",
    InvestmentDecision.NEUTRAL_WAIT: "yellow",
    InvestmentDecision.HIGH_RISK_AVOID: "bold red",
}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else RuntimeSettings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _tl(value: float) -> str:
    return f"{value:,.0f} TL"


def _fail(message: str) -> None:
    app_error = calculation_failed(message)
    console.print(f"[red]{app_error.code}: {app_error.user_message}[/red]")
    console.print(f"[dim]{app_error.technical_message}[/dim]")
    raise typer.Exit(code=1)


@app.command()
def scan(
    texts: Optional[list[str]] = typer.Argument(None, help="Raw strings as they appear on screen"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read one string per line ('-' for stdin)"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Source identifier to record"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config TOML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Extract price, rent and location from raw listing text and give a verdict."""
    setup_logging(verbose)
    cfg = load_config(config_path)

    from evanaliz.pipeline import IntegrationPipeline
    from evanaliz.sources import get_source

    parsing = cfg.parsing
    if file is not None:
        observation_source = get_source("file")(file, source, parsing.candidates, parsing.parser)
    elif texts:
        observation_source = get_source("static")(texts, source, parsing.candidates, parsing.parser)
    else:
        console.print("[yellow]Nothing to scan. Pass texts as arguments or use --file.[/yellow]")
        raise typer.Exit(code=2)

    observation = observation_source.collect()
    try:
        result = IntegrationPipeline(cfg).process(observation)
    except ValueError as e:
        _fail(str(e))

    _display_integration_result(result)
    if isinstance(result, IntegrationError):
        raise typer.Exit(code=1)


def _display_integration_result(result: IntegrationResult) -> None:
    if isinstance(result, IntegrationError):
        app_error = to_app_error(result.error)
        console.print(Panel(result.user_message, title=f"[red]{app_error.code}[/red]", border_style="red"))
        if result.raw_texts:
            seen = " | ".join(normalize_number_format(t) for t in result.raw_texts)
            console.print(f"[dim]Texts seen: {seen}[/dim]")
        return

    data = result.parsed_data
    table = Table(title=f"Listing ({data.source_id})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("House price", _tl(data.house_price) if data.house_price is not None else "-")
    table.add_row("Monthly rent", _tl(data.monthly_rent) if data.monthly_rent is not None else "-")
    if data.coordinate is not None:
        table.add_row("Location", f"{data.coordinate.lat:.6f}, {data.coordinate.lon:.6f}")
    table.add_row("Numbers found", ", ".join(f"{v:,.2f}" for v in data.all_values) or "-")
    console.print(table)

    if isinstance(result, IntegrationSuccess):
        if data.has_price_and_rent:
            _display_calculation(result.calculation)
        verdict = result.verdict
        color = "green" if verdict.category == InvestmentCategory.LOGICAL else "red"
        console.print(Panel(
            verdict.summary_explanation,
            title=f"[bold {color}]{verdict.status_text}[/bold {color}]",
            border_style=color,
        ))
    else:
        console.print(f"[yellow]{result.message}[/yellow]")


def _display_calculation(calc: CalculationResult) -> None:
    table = Table(title="Calculation", show_lines=False)
    table.add_column("Item", style="cyan")
    table.add_column("Amount", style="green", justify="right")
    table.add_row("Purchase expenses", _tl(calc.purchase_expenses))
    table.add_row("Loan amount", _tl(calc.loan_amount))
    table.add_row("Down payment", _tl(calc.down_payment))
    table.add_row("Monthly installment", f"{calc.monthly_installment:,.2f} TL")
    table.add_row("Total loan repayment", _tl(calc.total_loan_repayment))
    table.add_row("Real total cost", _tl(calc.real_total_cost))
    table.add_row("Gross annual rent", _tl(calc.gross_annual_rent))
    table.add_row("Annual tax", _tl(calc.annual_tax))
    table.add_row("Net annual rent", _tl(calc.net_annual_rent))
    table.add_row("Amortization", f"{calc.amortization_years:.1f} years")
    console.print(table)


@app.command()
def analyze(
    price: float = typer.Option(..., "--price", "-p", help="House price (TL)"),
    rent: float = typer.Option(..., "--rent", "-r", help="Expected monthly rent (TL)"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Run the core calculation and verdict for a known price and rent."""
    setup_logging(verbose)
    cfg = load_config(config_path)

    from evanaliz.analysis.engine import CalculationEngine
    from evanaliz.analysis.verdict import VerdictEngine

    try:
        calc = CalculationEngine(cfg.analysis.constants).calculate(price, rent)
    except ValueError as e:
        _fail(str(e))

    verdict = VerdictEngine(cfg.analysis.verdict).evaluate(calc)
    _display_calculation(calc)
    color = "green" if verdict.category == InvestmentCategory.LOGICAL else "red"
    console.print(Panel(verdict.summary_explanation, title=f"[bold {color}]{verdict.status_text}[/bold {color}]"))


@app.command()
def decide(
    price: float = typer.Option(..., "--price", "-p", help="House price (TL)"),
    rent: float = typer.Option(..., "--rent", "-r", help="Expected monthly rent (TL)"),
    years: Optional[int] = typer.Option(None, "--years", "-y", help="Projection horizon in years"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Project all scenarios, run the sensitivity sweep and recommend a decision."""
    setup_logging(verbose)
    cfg = load_config(config_path)

    try:
        report = _build_decision_engine(cfg, years).generate_decision(price, rent)
    except ValueError as e:
        _fail(str(e))

    _display_report(report)


def _build_decision_engine(cfg: AppConfig, years: int | None):
    from evanaliz.analysis.decision import DecisionEngine
    from evanaliz.analysis.scenario import ScenarioEngine
    from evanaliz.analysis.sensitivity import SensitivityAnalyzer

    analysis = cfg.analysis
    scenario_cfg = analysis.scenario
    if years is not None:
        scenario_cfg = scenario_cfg.model_copy(update={"projection_years": years})

    scenario_engine = ScenarioEngine(analysis.constants, scenario_cfg)
    sensitivity = SensitivityAnalyzer(scenario_engine, analysis.sensitivity)
    return DecisionEngine(scenario_engine, sensitivity, analysis.decision)


def _display_report(report: InvestmentDecisionReport) -> None:
    table = Table(title="Scenarios", show_lines=True)
    table.add_column("Scenario", style="cyan")
    table.add_column("Installment", justify="right")
    table.add_column("NPV", justify="right")
    table.add_column("IRR", justify="right")
    table.add_column("Payback", justify="right")
    table.add_column("Worst drawdown", justify="right")
    table.add_column("Final value", justify="right")

    for result in report.scenario_results:
        m = result.risk_metrics
        npv_color = "green" if m.is_npv_positive else "red"
        payback = f"{m.payback_period_years:.0f} y" if m.payback_period_years is not None else "never"
        table.add_row(
            result.scenario.name,
            f"{result.monthly_installment:,.2f}",
            f"[{npv_color}]{_tl(m.npv)}[/{npv_color}]",
            f"{m.irr_percentage:.1f}%",
            payback,
            _tl(m.worst_case_drawdown),
            _tl(result.final_property_value),
        )
    console.print(table)

    sensitivity = report.sensitivity_analysis
    _display_sensitivity("Interest rate (annual change)", sensitivity.interest_rate_sensitivity)
    _display_sensitivity("House price", sensitivity.price_sensitivity)
    _display_sensitivity("Rent", sensitivity.rent_sensitivity)

    be = sensitivity.break_even_points
    console.print(Panel(
        f"Minimum rent: {_tl(be.minimum_rent_for_break_even)}\n"
        f"Maximum price: {_tl(be.maximum_price_for_break_even)}\n"
        f"Max acceptable monthly interest: {be.max_acceptable_interest_rate * 100:.2f}%",
        title="Break-even (approximate)",
    ))

    style = _DECISION_STYLE[report.decision]
    risk = report.risk_explanation
    body = "\n".join(f"- {reason}" for reason in report.reasons)
    body += f"\n\n{risk.biggest_risk}\n\n{risk.success_condition}\n\n{risk.failure_condition}"
    console.print(Panel(body, title=f"[{style}]{report.decision_text}[/{style}]"))


def _display_sensitivity(title: str, points: list[SensitivityPoint]) -> None:
    table = Table(title=title)
    table.add_column("Change", justify="right")
    table.add_column("Amortization", justify="right")
    table.add_column("NPV", justify="right")
    table.add_column("IRR", justify="right")
    for p in points:
        table.add_row(
            f"{p.change_percent:+.0f}%",
            f"{p.amortization_years:.1f} y",
            _tl(p.npv),
            f"{p.irr * 100:.1f}%",
        )
    console.print(table)


@app.command()
def validate(
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Check the calculation engine against the reference spreadsheet cases."""
    setup_logging(verbose)
    cfg = load_config(config_path)

    from evanaliz.analysis.engine import CalculationEngine
    from evanaliz.analysis.parity import ParityValidator

    report = ParityValidator(CalculationEngine(cfg.analysis.constants)).validate_all()

    for case in report.scenario_results:
        table = Table(title=case.case_name)
        table.add_column("Field", style="cyan")
        table.add_column("Expected", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Diff", justify="right")
        table.add_column("", width=4)
        for f in case.fields:
            mark = "[green]OK[/green]" if f.passed else "[red]FAIL[/red]"
            table.add_row(f.field_name, f"{f.expected:,.4f}", f"{f.actual:,.4f}", f"{f.absolute_difference:.6f}", mark)
        console.print(table)

    summary = f"{report.passed_count} passed, {report.failed_count} failed"
    if report.overall_passed:
        console.print(f"[bold green]Parity OK: {summary}[/bold green]")
    else:
        console.print(f"[bold red]Parity FAILED: {summary}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def config_show(
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Display current configuration."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    import json

    console.print_json(json.dumps(cfg.model_dump(), indent=2, default=str))


if __name__ == "__main__":
    app()
