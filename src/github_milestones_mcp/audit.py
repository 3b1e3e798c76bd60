"""Structured audit logging.

Exactly one event per tool call, written as a compact JSON line through the
``github_milestones_mcp.audit`` logger. Events never contain the GitHub token.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from .errors import INPUT_ERROR_CODES, SafeError

audit_logger = logging.getLogger("github_milestones_mcp.audit")


def new_correlation_id() -> str:
    """Generate a random correlation id for traceability."""
    return uuid.uuid4().hex


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single audit event."""

    timestamp: str
    correlation_id: str
    operation: str
    target_repo: str
    outcome: str
    reason: str | None = None
    code: str | None = None
    status_code: int | None = None
    duration_ms: int | None = None

    def to_json(self) -> str:
        payload: dict[str, object] = {
            "timestamp": self.timestamp,
            "correlation_id": self.correlation_id,
            "operation": self.operation,
            "target_repo": self.target_repo,
            "outcome": self.outcome,
        }
        for key in ("reason", "code", "status_code", "duration_ms"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class AuditLogger:
    """Writes audit events to the audit logger (stderr under the server's logging setup)."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    def write_event(self, event: AuditEvent) -> None:
        """Emit one event."""
        self._logger.info(event.to_json())

    def measure_start(self) -> float:
        """Return a monotonic start timestamp for duration measurement."""
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        """Convert a monotonic start timestamp into elapsed milliseconds."""
        return int((time.monotonic() - start) * 1000)


def outcome_for(err: SafeError) -> str:
    """``denied`` for problems with the caller's input, ``failed`` for everything else."""
    return "denied" if err.code in INPUT_ERROR_CODES else "failed"


def build_event(
    *,
    correlation_id: str,
    operation: str,
    target_repo: str,
    outcome: str,
    error: SafeError | None = None,
    duration_ms: int | None = None,
) -> AuditEvent:
    """Construct an audit event, copying category and status from ``error`` if given."""
    return AuditEvent(
        timestamp=_now_rfc3339(),
        correlation_id=correlation_id,
        operation=operation,
        target_repo=target_repo,
        outcome=outcome,
        reason=error.message if error is not None else None,
        code=error.code if error is not None else None,
        status_code=error.status_code if error is not None else None,
        duration_ms=duration_ms,
    )
