from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def generate_run_timestamp(now: datetime | None = None) -> str:
    """Return YYYYMMDDHHMMSSUUUU where UUUU is 1/10,000th of a second.

    UUUU truncates Python's microseconds (0-999999) to 4 digits.
    """

    now = now or datetime.now(UTC)
    uuuu = now.microsecond // 100  # 0-9999
    return now.strftime("%Y%m%d%H%M%S") + f"{uuuu:04d}"


def utc_isoformat(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing 'Z'."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), default=str)
