from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import duckdb

from pcos_dagster.db.bootstrap import now_utc
from pcos_dagster.utils.ids import json_dumps


@dataclass(frozen=True)
class RunRecord:
    run_id: str
    run_timestamp: str
    run_description: str | None
    analysis_type: str
    calculator: str | None
    config: dict[str, Any]
    status: str
    trigger_source: str | None
    created_at: datetime
    updated_at: datetime


def insert_run(con: duckdb.DuckDBPyConnection, record: RunRecord) -> None:
    con.execute(
        """
        INSERT INTO main_runs.run_registry (
            run_id,
            run_timestamp,
            status,
            analysis_type,
            run_description,
            calculator,
            config_json,
            trigger_source,
            created_at,
            updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            record.run_id,
            record.run_timestamp,
            record.status,
            record.analysis_type,
            record.run_description,
            record.calculator,
            json_dumps(record.config),
            record.trigger_source,
            record.created_at,
            record.updated_at,
        ],
    )


def update_run_status(
    con: duckdb.DuckDBPyConnection,
    *,
    run_id: str,
    status: str,
) -> None:
    con.execute(
        """
        UPDATE main_runs.run_registry
        SET status = ?, updated_at = ?
        WHERE run_id = ?
        """,
        [status, now_utc(), run_id],
    )
