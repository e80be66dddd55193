from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import duckdb
from dagster import ConfigurableResource


def default_duckdb_path() -> str:
    env_path = os.environ.get("PCOS_DUCKDB_PATH")
    if env_path:
        return env_path
    return str((Path(__file__).resolve().parents[2] / "pcos.duckdb").resolve())


@dataclass(frozen=True)
class DuckDBConnection:
    path: Path

    def connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self.path))


class DuckDBResource(ConfigurableResource):
    """Dagster resource for connecting to the PCOS DuckDB database."""

    path: str = default_duckdb_path()

    def get_connection(self) -> DuckDBConnection:
        return DuckDBConnection(path=Path(self.path).expanduser().resolve())
