from __future__ import annotations

import logging
import random
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

import typer

from pcos_calculators.pcos_risk_calculator import (
    RISK_LEVEL_SUMMARIES,
    IntakeValidationError,
    PCOSCalculator,
    PCOSError,
    RiskResult,
    build_profile,
    get_demo_profile,
)
from pcos_dagster.assets.visualizations import (
    hormone_chart,
    risk_factors_chart,
    save_chart,
    score_history_chart,
)
from pcos_dagster.db.accounts import AccountStore
from pcos_dagster.db.bootstrap import ensure_pcos_database
from pcos_dagster.db.kv_store import DuckDBKeyValueStore
from pcos_dagster.db.report_store import ReportStore, score_trend
from pcos_dagster.resources.duckdb_resource import DuckDBResource, default_duckdb_path

app = typer.Typer(no_args_is_help=True, help="PCOS CLI - Risk assessments, reports and accounts")
reports_app = typer.Typer(no_args_is_help=True, help="Saved assessment reports")
app.add_typer(reports_app, name="reports")

STATUS_COLORS = {
    "low": typer.colors.GREEN,
    "moderate": typer.colors.YELLOW,
    "high": typer.colors.RED,
    "normal": typer.colors.GREEN,
    "borderline": typer.colors.YELLOW,
    "abnormal": typer.colors.RED,
}


@app.callback()
def main(
    ctx: typer.Context,
    duckdb_path: str = typer.Option(
        default_duckdb_path(), "--duckdb-path", help="DuckDB file holding reports and accounts"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"duckdb_path": duckdb_path}


@contextmanager
def _stores(ctx: typer.Context) -> Iterator[tuple[ReportStore, AccountStore]]:
    res = DuckDBResource(path=ctx.obj["duckdb_path"])
    con = res.get_connection().connect()
    try:
        kv = DuckDBKeyValueStore(con)
        yield ReportStore(kv), AccountStore(kv)
    finally:
        con.close()


@contextmanager
def _user_errors() -> Iterator[None]:
    """Turn PCOSError into a red message and exit code 1."""
    try:
        yield
    except IntakeValidationError as e:
        for field, message in e.errors.items():
            typer.secho(f"{field}: {message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e
    except PCOSError as e:
        typer.secho(e.message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e


def _echo_result(result: RiskResult) -> None:
    level = result.risk_level.value
    summary = RISK_LEVEL_SUMMARIES[result.risk_level]
    typer.secho(summary["label"], fg=STATUS_COLORS[level], bold=True)
    typer.echo(f"Score: {result.score:.2f}  Confidence: {result.confidence:.0f}%")
    typer.echo(summary["description"])

    typer.echo("\nRisk factors:")
    for factor in result.factors:
        status = typer.style(f"{factor.status.value:<10}", fg=STATUS_COLORS[factor.status.value])
        typer.echo(f"  {factor.name:<24}{factor.contribution:>6.0f}  {status}  {factor.description}")

    typer.echo("\nHormone analysis:")
    for name, reading in result.hormone_analysis.items():
        typer.echo(f"  {name:<14}{reading.value:>8.2f}  {reading.status.value:<10}  ({reading.range})")


def _write_charts(result: RiskResult, chart_path: Path) -> None:
    factors_path = save_chart(risk_factors_chart(result), chart_path)
    hormones_path = save_chart(
        hormone_chart(result), chart_path.with_name(f"{chart_path.stem}_hormones{chart_path.suffix}")
    )
    typer.echo(f"\nCharts written to {factors_path} and {hormones_path}")


@app.command(name="db-bootstrap")
def db_bootstrap(ctx: typer.Context) -> None:
    """Create PCOS schemas + tables in DuckDB.

    Creates: `main_app`, `main_intermediate`, `main_runs`.
    """

    duckdb_path = ctx.obj["duckdb_path"]
    res = DuckDBResource(path=duckdb_path)
    con = res.get_connection().connect()
    try:
        ensure_pcos_database(con)
    finally:
        con.close()

    typer.echo(f"Bootstrapped database at {Path(duckdb_path).resolve()}")


@app.command()
def analyze(
    ctx: typer.Context,
    demo: Optional[str] = typer.Option(None, "--demo", help="Start from a demo profile"),
    age: Optional[int] = typer.Option(None),
    height: Optional[float] = typer.Option(None, help="cm"),
    weight: Optional[float] = typer.Option(None, help="kg"),
    family_history: Optional[bool] = typer.Option(None, "--family-history/--no-family-history"),
    cycle_length: Optional[int] = typer.Option(None, help="days"),
    irregular_periods: Optional[bool] = typer.Option(None, "--irregular-periods/--regular-periods"),
    missed_periods: Optional[bool] = typer.Option(None, "--missed-periods/--no-missed-periods"),
    acne_severity: Optional[int] = typer.Option(None, help="0-3"),
    excess_hair_growth: Optional[int] = typer.Option(None, help="0-4"),
    hair_fall: Optional[bool] = typer.Option(None, "--hair-fall/--no-hair-fall"),
    dark_patches: Optional[bool] = typer.Option(None, "--dark-patches/--no-dark-patches"),
    mood_swings: Optional[bool] = typer.Option(None, "--mood-swings/--no-mood-swings"),
    testosterone: Optional[float] = typer.Option(None, help="ng/dL"),
    amh: Optional[float] = typer.Option(None, help="ng/mL"),
    lh: Optional[float] = typer.Option(None, help="mIU/mL"),
    fsh: Optional[float] = typer.Option(None, help="mIU/mL"),
    cortisol: Optional[float] = typer.Option(None, help="µg/dL"),
    seed: Optional[int] = typer.Option(None, help="Seed for the confidence figure"),
    save: bool = typer.Option(True, "--save/--no-save", help="Store the report"),
    chart: Optional[Path] = typer.Option(None, help="Write risk factor and hormone charts here"),
) -> None:
    """Assess PCOS risk for the signed-in user."""

    overrides: dict[str, Any] = {
        name: value
        for name, value in {
            "age": age,
            "height": height,
            "weight": weight,
            "family_history": family_history,
            "cycle_length": cycle_length,
            "irregular_periods": irregular_periods,
            "missed_periods": missed_periods,
            "acne_severity": acne_severity,
            "excess_hair_growth": excess_hair_growth,
            "hair_fall": hair_fall,
            "dark_patches": dark_patches,
            "mood_swings": mood_swings,
            "testosterone": testosterone,
            "amh": amh,
            "lh": lh,
            "fsh": fsh,
            "cortisol": cortisol,
        }.items()
        if value is not None
    }

    with _user_errors(), _stores(ctx) as (reports, accounts):
        accounts.require_user()

        fields = get_demo_profile(demo).model_dump() if demo else {}
        fields.update(overrides)
        profile = build_profile(**fields)

        calculator = PCOSCalculator(rng=random.Random(seed) if seed is not None else None)
        result = calculator.score(profile)
        _echo_result(result)

        if save:
            report = reports.append(profile, result)
            typer.echo(f"\nSaved report {report.id}")

    if chart is not None:
        _write_charts(result, chart)


@app.command()
def demo(
    name: str = typer.Argument(..., help="normal, borderline or likelyPCOS"),
    seed: Optional[int] = typer.Option(None, help="Seed for the confidence figure"),
    chart: Optional[Path] = typer.Option(None, help="Write risk factor and hormone charts here"),
) -> None:
    """Score a demo profile. Nothing is stored."""

    with _user_errors():
        profile = get_demo_profile(name)

    calculator = PCOSCalculator(rng=random.Random(seed) if seed is not None else None)
    result = calculator.score(profile)
    _echo_result(result)

    if chart is not None:
        _write_charts(result, chart)


@reports_app.command(name="list")
def reports_list(ctx: typer.Context) -> None:
    """List saved reports, newest first."""

    with _stores(ctx) as (reports, _):
        stored = reports.list()

    if not stored:
        typer.echo("No reports saved yet.")
        return

    for report in stored:
        level = report.result.risk_level.value
        typer.echo(
            f"{report.id}  {report.date}  "
            + typer.style(f"{level:<9}", fg=STATUS_COLORS[level])
            + f"  {report.result.score:6.2f}"
        )

    trend = score_trend(stored)
    if trend is not None:
        typer.echo(f"\nTrend: {trend.direction.value} ({trend.difference:+.2f})")


@reports_app.command(name="show")
def reports_show(
    ctx: typer.Context,
    report_id: str = typer.Argument(...),
    chart: Optional[Path] = typer.Option(None, help="Write risk factor and hormone charts here"),
) -> None:
    """Show one saved report."""

    with _stores(ctx) as (reports, _):
        report = reports.get(report_id)

    if report is None:
        typer.secho(f"No report with id {report_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Report {report.id} ({report.date})\n")
    _echo_result(report.result)

    if chart is not None:
        _write_charts(report.result, chart)


@reports_app.command(name="delete")
def reports_delete(ctx: typer.Context, report_id: str = typer.Argument(...)) -> None:
    """Delete a saved report."""

    with _stores(ctx) as (reports, _):
        deleted = reports.delete(report_id)

    if deleted:
        typer.echo(f"Deleted report {report_id}")
    else:
        typer.echo(f"No report with id {report_id}")


@reports_app.command(name="history-chart")
def reports_history_chart(
    ctx: typer.Context,
    output: Path = typer.Argument(..., help="Output file (.html or .json)"),
) -> None:
    """Chart the score of every saved report over time."""

    with _stores(ctx) as (reports, _):
        stored = reports.list()

    output_path = save_chart(score_history_chart(stored), output)
    typer.echo(f"Chart saved to {output_path}")


@app.command()
def register(
    ctx: typer.Context,
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    confirm_password: str = typer.Option(..., prompt="Confirm password", hide_input=True),
    name: Optional[str] = typer.Option(None),
) -> None:
    """Create an account and sign in."""

    with _user_errors(), _stores(ctx) as (_, accounts):
        user = accounts.register(email, password, name=name, confirm_password=confirm_password)

    typer.echo(f"Registered and signed in as {user.name} <{user.email}>")


@app.command()
def login(
    ctx: typer.Context,
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in."""

    with _user_errors(), _stores(ctx) as (_, accounts):
        user = accounts.login(email, password)

    typer.echo(f"Signed in as {user.name} <{user.email}>")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Sign out."""

    with _stores(ctx) as (_, accounts):
        accounts.logout()

    typer.echo("Signed out")


@app.command()
def whoami(ctx: typer.Context) -> None:
    """Show the signed-in user."""

    with _stores(ctx) as (_, accounts):
        state = accounts.current()

    if state.user is None:
        typer.echo("Not signed in")
    else:
        typer.echo(f"{state.user.name} <{state.user.email}>")


@app.command()
def language(
    ctx: typer.Context,
    code: Optional[str] = typer.Argument(None, help="Language code to set, e.g. 'en'"),
) -> None:
    """Show or set the preferred language."""

    with _user_errors(), _stores(ctx) as (_, accounts):
        if code is not None:
            accounts.set_language(code)
        current = accounts.get_language()

    typer.echo(current)


if __name__ == "__main__":
    app()
