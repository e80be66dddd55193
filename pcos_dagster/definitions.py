from pathlib import Path

import yaml
from dagster import Definitions, define_asset_job

from pcos_dagster.assets.scoring import score_pcos_intake
from pcos_dagster.assets.visualizations import scoring_visualizations
from pcos_dagster.resources.duckdb_resource import DuckDBResource

CONFIG_DIR = Path(__file__).resolve().parent / "configs"

# Load default scoring config
with open(CONFIG_DIR / "scoring.yaml", encoding="utf-8") as f:
    default_scoring_config = yaml.safe_load(f)

scoring_job = define_asset_job(
    name="scoring_job",
    selection=["score_pcos_intake", "scoring_visualizations"],
    description="""
    # PCOS Risk Scoring Job

    Scores every profile in the intake table.

    **Steps:**
    1. Reads profiles from `main_intermediate.int_pcos_intake`
    2. Applies the weighted PCOS risk calculator
    3. Writes results to `main_runs.pcos_scores`
    4. Renders a score distribution chart
    """,
    config=default_scoring_config,
)


definitions = Definitions(
    assets=[score_pcos_intake, scoring_visualizations],
    resources={
        "duckdb": DuckDBResource(),
    },
    jobs=[scoring_job],
)
