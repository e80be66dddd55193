import random
from enum import Enum
from typing import Any, Optional

import polars as pl
from dagster import AssetExecutionContext, Config, asset

from pcos_calculators.pcos_risk_calculator import FACTOR_NAMES, PCOSCalculator
from pcos_calculators.pcos_risk_calculator.intake import PROFILE_COLUMNS, rows_to_profiles
from pcos_dagster.db.bootstrap import ensure_pcos_database, now_utc
from pcos_dagster.db.run_registry import RunRecord, insert_run, update_run_status
from pcos_dagster.resources.duckdb_resource import DuckDBResource
from pcos_dagster.utils.ids import generate_run_timestamp, json_dumps


class InvalidRowsOption(str, Enum):
    skip = "skip"
    error = "error"


class ScoringConfig(Config):
    run_description: str = "PCOS scoring run"
    seed: Optional[int] = None
    invalid_rows: InvalidRowsOption = InvalidRowsOption.skip
    trigger_source: str = "dagster"


# Columns must match main_runs.pcos_scores definition order
DB_COLUMNS = [
    "run_id",
    "profile_id",
    "score",
    "risk_level",
    "confidence",
    "bmi_score",
    "menstrual_score",
    "clinical_score",
    "hormonal_score",
    "family_history_score",
    "run_timestamp",
    "created_at",
    "profile",
    "factors",
    "hormone_analysis",
]

# Factor name -> score column, in FACTOR_NAMES order
FACTOR_COLUMNS = dict(zip(FACTOR_NAMES, DB_COLUMNS[5:10]))

BATCH_SIZE = 10000


@asset
def score_pcos_intake(
    context: AssetExecutionContext, config: ScoringConfig, duckdb: DuckDBResource
) -> None:
    """Score intake profiles with the PCOS calculator and write to main_runs.pcos_scores."""

    context.log.info(f"Connecting to DuckDB at: {duckdb.path}")
    con = duckdb.get_connection().connect()

    ensure_pcos_database(con)

    run_id = context.run_id
    run_ts = generate_run_timestamp()

    record = RunRecord(
        run_id=run_id,
        run_timestamp=run_ts,
        run_description=config.run_description,
        analysis_type="scoring",
        calculator="pcos_risk_calculator",
        config=config.model_dump(mode="json"),
        status="started",
        trigger_source=config.trigger_source,
        created_at=now_utc(),
        updated_at=now_utc(),
    )

    insert_run(con, record)

    try:
        rng = random.Random(config.seed) if config.seed is not None else None
        calculator = PCOSCalculator(rng=rng)

        rows = con.execute(
            f"""
            SELECT profile_id, {", ".join(PROFILE_COLUMNS)}
            FROM main_intermediate.int_pcos_intake
            ORDER BY profile_id
            """
        ).fetchall()

        profiles, stats = rows_to_profiles(rows, invalid_rows=config.invalid_rows.value)

        if stats["skipped"] > 0:
            context.log.warning(f"Skipped {stats['skipped']} profiles due to invalid data.")
        if stats["invalid_fields"]:
            context.log.info(f"Out-of-range fields encountered: {stats['invalid_fields']}")

        context.log.info(f"Starting scoring for {len(profiles)} profiles...")

        out_rows: list[dict[str, Any]] = []
        created_at = now_utc()
        total_written = 0

        def flush_batch(rows: list[dict[str, Any]]) -> None:
            if not rows:
                return
            df = pl.DataFrame(rows).select(DB_COLUMNS)
            con.execute("INSERT OR REPLACE INTO main_runs.pcos_scores SELECT * FROM df")

        for profile_id, profile in profiles:
            result = calculator.score(profile)

            row: dict[str, Any] = {
                "run_id": run_id,
                "profile_id": profile_id,
                "score": result.score,
                "risk_level": result.risk_level.value,
                "confidence": result.confidence,
                "run_timestamp": run_ts,
                "created_at": created_at,
                "profile": profile.model_dump_json(by_alias=True),
                "factors": json_dumps([f.model_dump(mode="json", by_alias=True) for f in result.factors]),
                "hormone_analysis": result.hormone_analysis.model_dump_json(by_alias=True),
            }
            for factor in result.factors:
                row[FACTOR_COLUMNS[factor.name]] = factor.contribution
            out_rows.append(row)

            if len(out_rows) >= BATCH_SIZE:
                flush_batch(out_rows)
                total_written += len(out_rows)
                out_rows = []
                context.log.info(f"Scored and wrote {total_written}/{len(profiles)} profiles")

        flush_batch(out_rows)
        total_written += len(out_rows)

        update_run_status(con, run_id=run_id, status="success")
        context.log.info(
            f"Wrote {total_written} rows to main_runs.pcos_scores for run_timestamp={run_ts}"
        )

    except Exception:
        update_run_status(con, run_id=run_id, status="failed")
        raise

    finally:
        con.close()
