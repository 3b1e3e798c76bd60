"""Tagged error type shared by every layer.

Each failure carries a machine-readable category (``code``) next to the
human-readable message, plus the GitHub HTTP status when one exists.

Codes:
  Config | UserInput | UnknownTool | Forbidden | NotFound | Validation |
  RateLimited | GitHub | Network | Internal
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Codes produced by the caller's own input rather than by GitHub or the network.
INPUT_ERROR_CODES: frozenset[str] = frozenset({"UserInput", "UnknownTool"})


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An error safe to expose to agents.

    This must never include the GitHub token.
    """

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


def status_to_code(status_code: int) -> str:
    """Map a failing GitHub HTTP status onto an error category."""
    if status_code in (401, 403):
        return "Forbidden"
    if status_code == 404:
        return "NotFound"
    if status_code == 422:
        return "Validation"
    if status_code == 429:
        return "RateLimited"
    return "GitHub"


def cause_message(exc: BaseException) -> str:
    """Return the message of an underlying failure, or ``Unknown error``."""
    text = exc.message if isinstance(exc, SafeError) else str(exc)
    return text or "Unknown error"


def rewrap(exc: BaseException, prefix: str) -> SafeError:
    """Re-express ``exc`` under ``prefix`` while keeping its category and status."""
    if isinstance(exc, SafeError):
        return SafeError(
            code=exc.code,
            message=f"{prefix}: {cause_message(exc)}",
            hint=exc.hint,
            status_code=exc.status_code,
        )
    return SafeError(code="Internal", message=f"{prefix}: {cause_message(exc)}")


def to_error_result(err: SafeError) -> dict[str, Any]:
    """Build a structured error description (used for logs and self-tests)."""
    out: dict[str, Any] = {"ok": False, "code": err.code, "message": err.message}
    if err.hint:
        out["hint"] = err.hint
    if err.status_code is not None:
        out["status_code"] = err.status_code
    return out
