"""
Ingest Context for datamgr.

Request-scoped state for one submission: identification for log
correlation and per-stage timings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from .values import Record


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IngestContext:
    """
    Request-scoped context passed through the ingest pipeline.

    Created per request and never shared between requests.
    """

    execution_id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=_utc_now)

    method: str = "POST"
    route_path: str = ""

    stage_timings: dict[str, float] = field(default_factory=dict)

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the request started."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    @property
    def short_id(self) -> str:
        return str(self.execution_id)[:8]

    def record_timing(self, stage: str, duration_ms: float) -> None:
        """Record a stage's execution time."""
        self.stage_timings[stage] = duration_ms


@dataclass
class IngestResult:
    """Outcome of a successful submission."""

    context: IngestContext
    record: Record
    path: Path | None = None

    @property
    def execution_id(self) -> UUID:
        return self.context.execution_id

    @property
    def duration_ms(self) -> float:
        return self.context.elapsed_ms

    def to_dict(self) -> dict[str, Any]:
        """Serialize result for logging."""
        return {
            "execution_id": str(self.execution_id),
            "route": self.context.route_path,
            "duration_ms": self.duration_ms,
            "stage_timings": self.context.stage_timings,
            "fields": sorted(self.record),
            "path": str(self.path) if self.path else None,
        }
