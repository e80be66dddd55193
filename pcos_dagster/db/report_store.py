from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import TypeAdapter

from pcos_calculators.pcos_risk_calculator import Profile, RiskResult, StoredReport
from pcos_dagster.db.kv_store import KeyValueStore
from pcos_dagster.utils.ids import generate_id, utc_isoformat

logger = logging.getLogger(__name__)

REPORTS_KEY = "pcos_reports"
MAX_REPORTS = 10

# Score moves smaller than this count as stable
TREND_TOLERANCE = 5

_reports_adapter = TypeAdapter(list[StoredReport])


class TrendDirection(str, Enum):
    stable = "stable"
    increasing = "increasing"
    decreasing = "decreasing"


@dataclass(frozen=True)
class ScoreTrend:
    direction: TrendDirection
    difference: float


class ReportStore:
    """Saved reports, newest first, capped at ``max_reports``.

    Reports are never edited in place: ``append`` prepends and truncates,
    ``delete`` removes by id.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = REPORTS_KEY,
        max_reports: int = MAX_REPORTS,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._kv = kv
        self._key = key
        self._max_reports = max_reports
        self._clock = clock
        self._id_factory = id_factory or generate_id

    def _write(self, reports: list[StoredReport]) -> None:
        blob = _reports_adapter.dump_json(reports, by_alias=True).decode("utf-8")
        self._kv.set(self._key, blob)

    def list(self) -> list[StoredReport]:
        stored = self._kv.get(self._key)
        if not stored:
            return []
        return _reports_adapter.validate_json(stored)

    def get(self, report_id: str) -> StoredReport | None:
        for report in self.list():
            if report.id == report_id:
                return report
        return None

    def append(self, profile: Profile, result: RiskResult) -> StoredReport:
        now = self._clock() if self._clock is not None else None
        report = StoredReport(
            id=self._id_factory(),
            date=utc_isoformat(now),
            profile=profile,
            result=result,
        )

        reports = [report, *self.list()]
        evicted = len(reports) - self._max_reports
        if evicted > 0:
            logger.debug("Evicting %d oldest report(s)", evicted)
        self._write(reports[: self._max_reports])

        logger.info("Saved report %s (%s, score=%.2f)", report.id, result.risk_level.value, result.score)
        return report

    def delete(self, report_id: str) -> bool:
        """Remove the report with ``report_id``; False when there was none."""
        reports = self.list()
        remaining = [r for r in reports if r.id != report_id]
        if len(remaining) == len(reports):
            logger.debug("No report with id %s", report_id)
            return False
        self._write(remaining)
        logger.info("Deleted report %s", report_id)
        return True

    def clear(self) -> None:
        self._kv.delete(self._key)


def score_trend(reports: list[StoredReport]) -> ScoreTrend | None:
    """Compare the two most recent scores (reports newest first).

    Returns:
        None with fewer than two reports
    """
    if len(reports) < 2:
        return None
    diff = reports[0].result.score - reports[1].result.score
    if abs(diff) < TREND_TOLERANCE:
        direction = TrendDirection.stable
    elif diff > 0:
        direction = TrendDirection.increasing
    else:
        direction = TrendDirection.decreasing
    return ScoreTrend(direction=direction, difference=diff)
