from pathlib import Path

import altair as alt
import pandas as pd
from dagster import Config, asset
from duckdb import Error as DuckDBError

from pcos_calculators.pcos_risk_calculator import RiskResult, StoredReport
from pcos_dagster.resources.duckdb_resource import DuckDBResource

VISUALIZATIONS_DIR = Path(__file__).resolve().parents[1] / "output" / "visualizations"


class VisualizationConfig(Config):
    output_dir: str = str(VISUALIZATIONS_DIR)

STATUS_COLORS = {
    "normal": "#10b981",
    "borderline": "#f59e0b",
    "abnormal": "#ef4444",
    "Normal": "#10b981",
    "Borderline": "#f59e0b",
    "High": "#ef4444",
    "Low": "#ef4444",
}

# Full-scale value per hormone; readings are drawn as a share of it, capped at 100
HORMONE_CHART_SCALES = {
    "testosterone": 100,
    "amh": 15,
    "lh": 30,
    "fsh": 20,
    "lh_fsh_ratio": 5,
    "cortisol": 40,
}

HORMONE_LABELS = {
    "testosterone": "Testosterone",
    "amh": "AMH",
    "lh": "LH",
    "fsh": "FSH",
    "lh_fsh_ratio": "LH/FSH",
    "cortisol": "Cortisol",
}


def _status_scale(statuses: list[str]) -> alt.Scale:
    domain = list(dict.fromkeys(statuses))
    return alt.Scale(domain=domain, range=[STATUS_COLORS.get(s, "#6366f1") for s in domain])


def risk_factors_chart(result: RiskResult) -> alt.Chart:
    """Horizontal bars of each factor's sub-score, coloured by status."""
    df = pd.DataFrame(
        [
            {
                "name": f.name,
                "contribution": f.contribution,
                "status": f.status.value,
                "description": f.description,
            }
            for f in result.factors
        ]
    )

    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            x=alt.X("contribution:Q", scale=alt.Scale(domain=[0, 100]), title="Contribution"),
            y=alt.Y("name:N", sort=None, title=None),
            color=alt.Color("status:N", scale=_status_scale(df["status"].tolist()), title="Status"),
            tooltip=["name", alt.Tooltip("contribution:Q", format=".0f"), "status", "description"],
        )
        .properties(title=f"Risk Factors ({result.risk_level.value} risk, score {result.score:.1f})")
    )


def hormone_chart(result: RiskResult) -> alt.Chart:
    """Bars of each hormone reading as a share of its chart scale, coloured by status."""
    rows = []
    for key, reading in result.hormone_analysis.items():
        rows.append(
            {
                "hormone": HORMONE_LABELS[key],
                "normalized": min(100.0, reading.value / HORMONE_CHART_SCALES[key] * 100),
                "value": reading.value,
                "status": reading.status.value,
                "range": reading.range,
            }
        )
    df = pd.DataFrame(rows)

    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("hormone:N", sort=None, title=None),
            y=alt.Y("normalized:Q", scale=alt.Scale(domain=[0, 100]), title="Relative level"),
            color=alt.Color("status:N", scale=_status_scale(df["status"].tolist()), title="Status"),
            tooltip=["hormone", alt.Tooltip("value:Q", format=".2f"), "status", "range"],
        )
        .properties(title="Hormone Analysis")
    )


def score_history_chart(reports: list[StoredReport]) -> alt.Chart:
    """Score over time for stored reports (given newest first, drawn oldest first)."""
    df = pd.DataFrame(
        [
            {
                "date": pd.Timestamp(r.date),
                "score": r.result.score,
                "risk_level": r.result.risk_level.value,
            }
            for r in reversed(reports)
        ],
        columns=["date", "score", "risk_level"],
    )

    return (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("score:Q", scale=alt.Scale(domain=[0, 100]), title="Risk Score"),
            tooltip=[alt.Tooltip("date:T"), alt.Tooltip("score:Q", format=".1f"), "risk_level"],
        )
        .properties(title="Risk Score History")
    )


def save_chart(chart: alt.Chart, path: str | Path) -> Path:
    """Write ``chart`` to ``path``; the suffix picks the format (.html, .json)."""
    output_path = Path(path).expanduser().resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    chart.save(str(output_path))
    return output_path


@asset(deps=["score_pcos_intake"])
def scoring_visualizations(context, config: VisualizationConfig, duckdb: DuckDBResource) -> None:
    """
    Generate a score distribution chart for the latest successful scoring run.
    """
    con = duckdb.get_connection().connect()

    try:
        latest_run = con.execute("""
            SELECT run_id, run_description
            FROM main_runs.run_registry
            WHERE analysis_type = 'scoring' AND status = 'success'
            ORDER BY created_at DESC
            LIMIT 1
        """).fetchone()

        if latest_run is None:
            context.log.info("No successful scoring runs found.")
            return

        run_id, description = latest_run
        context.log.info(f"Generating visualization for run: {run_id} ({description})")

        df = con.execute(
            "SELECT score, risk_level FROM main_runs.pcos_scores WHERE run_id = ?",
            [run_id],
        ).fetch_df()

        chart = (
            alt.Chart(df)
            .mark_bar()
            .encode(
                alt.X("score", bin=alt.Bin(maxbins=20), title="Risk Score"),
                y="count()",
                color=alt.Color("risk_level:N", title="Risk Level"),
                tooltip=["count()"],
            )
            .properties(title=f"Risk Score Distribution: {description}")
        )

        output_path = save_chart(chart, Path(config.output_dir) / f"scoring_{run_id}.html")
        context.log.info(f"Chart saved to {output_path}")

    except DuckDBError as e:
        context.log.error(f"Failed to generate scoring visualization: {e}")
    finally:
        con.close()
