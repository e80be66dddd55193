from __future__ import annotations

from datetime import UTC, datetime

import duckdb


def ensure_core_schemas(con: duckdb.DuckDBPyConnection) -> None:
    con.execute("CREATE SCHEMA IF NOT EXISTS main_app")
    con.execute("CREATE SCHEMA IF NOT EXISTS main_intermediate")
    con.execute("CREATE SCHEMA IF NOT EXISTS main_runs")


def ensure_kv_store(con: duckdb.DuckDBPyConnection) -> None:
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS main_app.kv_store (
            key VARCHAR PRIMARY KEY,
            value VARCHAR,
            updated_at TIMESTAMP
        )
        """
    )


def ensure_intake_table(con: duckdb.DuckDBPyConnection) -> None:
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS main_intermediate.int_pcos_intake (
            profile_id VARCHAR PRIMARY KEY,
            age INTEGER,
            height DOUBLE,
            weight DOUBLE,
            family_history BOOLEAN,
            cycle_length INTEGER,
            irregular_periods BOOLEAN,
            missed_periods BOOLEAN,
            acne_severity INTEGER,
            excess_hair_growth INTEGER,
            hair_fall BOOLEAN,
            dark_patches BOOLEAN,
            mood_swings BOOLEAN,
            testosterone DOUBLE,
            amh DOUBLE,
            lh DOUBLE,
            fsh DOUBLE,
            cortisol DOUBLE
        )
        """
    )


def ensure_run_registry(con: duckdb.DuckDBPyConnection) -> None:
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS main_runs.run_registry (
            run_id VARCHAR PRIMARY KEY,
            run_timestamp VARCHAR,
            run_description VARCHAR,
            analysis_type VARCHAR,
            calculator VARCHAR,
            config_json VARCHAR,
            status VARCHAR,
            trigger_source VARCHAR,
            created_at TIMESTAMP,
            updated_at TIMESTAMP
        )
        """
    )

    # Not unique: sub-second collisions are allowed
    con.execute(
        "CREATE INDEX IF NOT EXISTS idx_run_registry_timestamp ON main_runs.run_registry (run_timestamp)"
    )


def ensure_marts_tables(con: duckdb.DuckDBPyConnection) -> None:
    con.execute(
        """
        CREATE TABLE IF NOT EXISTS main_runs.pcos_scores (
            run_id VARCHAR,
            profile_id VARCHAR,
            score DOUBLE,
            risk_level VARCHAR,
            confidence DOUBLE,
            bmi_score DOUBLE,
            menstrual_score DOUBLE,
            clinical_score DOUBLE,
            hormonal_score DOUBLE,
            family_history_score DOUBLE,
            run_timestamp VARCHAR,
            created_at TIMESTAMP,
            profile JSON,
            factors JSON,
            hormone_analysis JSON,
            PRIMARY KEY (run_id, profile_id)
        )
        """
    )


def ensure_pcos_database(con: duckdb.DuckDBPyConnection) -> None:
    ensure_core_schemas(con)
    ensure_kv_store(con)
    ensure_intake_table(con)
    ensure_run_registry(con)
    ensure_marts_tables(con)


def now_utc() -> datetime:
    # Naive UTC, matching DuckDB TIMESTAMP columns
    return datetime.now(UTC).replace(tzinfo=None)
