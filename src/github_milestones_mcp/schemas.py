"""Input contracts for the milestone tools.

The JSON schemas below are both advertised to MCP clients and enforced by
``validate_tool_arguments`` before a tool runs. ``parse_arguments`` turns a
validated argument dict into a typed, frozen parameter object.

Optional fields the caller left out hold ``UNSET`` (not ``None``), so that
"not provided" is never confused with an explicit value.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from .errors import SafeError


class Unset(enum.Enum):
    """Marker type for optional fields the caller did not supply."""

    UNSET = "UNSET"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.UNSET

LIST_DEFAULTS: dict[str, Any] = {
    "state": "open",
    "sort": "due_on",
    "direction": "asc",
    "per_page": 30,
    "page": 1,
}

# One GitHub name segment; "." and ".." alone are not names.
NAME_PATTERN = r"^(?!\.{1,2}$)[A-Za-z0-9._-]+$"

_OWNER = {
    "type": "string",
    "minLength": 1,
    "pattern": NAME_PATTERN,
    "description": "Repository owner (username or organization)",
}
_REPO = {"type": "string", "minLength": 1, "pattern": NAME_PATTERN, "description": "Repository name"}


def _milestone_number(description: str) -> dict[str, Any]:
    return {"type": "number", "minimum": 1, "description": description}


INPUT_SCHEMAS: dict[str, dict[str, Any]] = {
    "list_milestones": {
        "type": "object",
        "properties": {
            "owner": _OWNER,
            "repo": _REPO,
            "state": {
                "type": "string",
                "enum": ["open", "closed", "all"],
                "description": "Filter by milestone state",
                "default": LIST_DEFAULTS["state"],
            },
            "sort": {
                "type": "string",
                "enum": ["due_on", "completeness"],
                "description": "Sort milestones by",
                "default": LIST_DEFAULTS["sort"],
            },
            "direction": {
                "type": "string",
                "enum": ["asc", "desc"],
                "description": "Sort direction",
                "default": LIST_DEFAULTS["direction"],
            },
            "per_page": {
                "type": "number",
                "minimum": 1,
                "maximum": 100,
                "description": "Results per page",
                "default": LIST_DEFAULTS["per_page"],
            },
            "page": {
                "type": "number",
                "minimum": 1,
                "description": "Page number",
                "default": LIST_DEFAULTS["page"],
            },
        },
        "required": ["owner", "repo"],
        "additionalProperties": False,
    },
    "get_milestone": {
        "type": "object",
        "properties": {
            "owner": _OWNER,
            "repo": _REPO,
            "milestone_number": _milestone_number("Milestone number"),
        },
        "required": ["owner", "repo", "milestone_number"],
        "additionalProperties": False,
    },
    "create_milestone": {
        "type": "object",
        "properties": {
            "owner": _OWNER,
            "repo": _REPO,
            "title": {"type": "string", "minLength": 1, "description": "Milestone title"},
            "description": {"type": "string", "description": "Milestone description"},
            "due_on": {"type": "string", "format": "date-time", "description": "Due date (ISO 8601 format)"},
            "state": {
                "type": "string",
                "enum": ["open", "closed"],
                "description": "Milestone state",
                "default": "open",
            },
        },
        "required": ["owner", "repo", "title"],
        "additionalProperties": False,
    },
    "update_milestone": {
        "type": "object",
        "properties": {
            "owner": _OWNER,
            "repo": _REPO,
            "milestone_number": _milestone_number("Milestone number to update"),
            "title": {"type": "string", "minLength": 1, "description": "New milestone title"},
            "description": {"type": "string", "description": "New milestone description"},
            "due_on": {"type": "string", "format": "date-time", "description": "New due date (ISO 8601 format)"},
            "state": {"type": "string", "enum": ["open", "closed"], "description": "New milestone state"},
        },
        "required": ["owner", "repo", "milestone_number"],
        "additionalProperties": False,
    },
    "delete_milestone": {
        "type": "object",
        "properties": {
            "owner": _OWNER,
            "repo": _REPO,
            "milestone_number": _milestone_number("Milestone number to delete"),
        },
        "required": ["owner", "repo", "milestone_number"],
        "additionalProperties": False,
    },
}


# Offsets as well as "Z"; GitHub accepts both for due_on.
_DATE_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$")


def is_date_time(value: str) -> bool:
    """Return True for an ISO 8601 timestamp with a time and a UTC offset (or ``Z``)."""
    if not _DATE_TIME_RE.match(value):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_tool_arguments(tool_name: str, arguments: dict[str, Any]) -> None:
    """Validate tool arguments against the tool's declared input schema.

    This is intentionally a minimal validator that enforces:
    - required fields
    - no extra properties when additionalProperties=false
    - basic JSON types (string/number)
    - enum, minLength, pattern, minimum/maximum and the date-time format

    It does NOT implement full JSON Schema.
    """
    if tool_name not in INPUT_SCHEMAS:
        raise SafeError(code="UnknownTool", message=f"Unknown tool: {tool_name}")

    schema = INPUT_SCHEMAS[tool_name]
    props: dict[str, Any] = schema.get("properties", {})
    required: list[str] = schema.get("required", [])

    for k in required:
        if k not in arguments:
            raise SafeError(code="UserInput", message=f"Missing required field: {k}")

    if schema.get("additionalProperties", True) is False:
        extras = sorted(k for k in arguments if k not in props)
        if extras:
            raise SafeError(
                code="UserInput",
                message=f"Unexpected fields are not allowed: {', '.join(extras)}",
            )

    for k, spec in props.items():
        if k not in arguments:
            continue
        v = arguments[k]
        expected = spec.get("type")

        if expected == "string":
            if not isinstance(v, str):
                raise SafeError(code="UserInput", message=f"Field '{k}' must be a string")
            min_len = spec.get("minLength")
            if isinstance(min_len, int) and len(v) < min_len:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be at least {min_len} characters")
            pattern = spec.get("pattern")
            if pattern is not None and not re.fullmatch(pattern, v):
                raise SafeError(code="UserInput", message=f"Field '{k}' has an invalid format")
            if spec.get("format") == "date-time" and not is_date_time(v):
                raise SafeError(
                    code="UserInput",
                    message=f"Field '{k}' must be an ISO 8601 date-time (e.g. 2025-01-31T00:00:00Z)",
                )

        if expected == "number":
            if not _is_number(v):
                raise SafeError(code="UserInput", message=f"Field '{k}' must be a number")
            minimum = spec.get("minimum")
            maximum = spec.get("maximum")
            if minimum is not None and maximum is not None and not (minimum <= v <= maximum):
                raise SafeError(code="UserInput", message=f"Field '{k}' must be between {minimum} and {maximum}")
            if minimum is not None and v < minimum:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be >= {minimum}")
            if maximum is not None and v > maximum:
                raise SafeError(code="UserInput", message=f"Field '{k}' must be <= {maximum}")

        allowed = spec.get("enum")
        if allowed is not None and v not in allowed:
            raise SafeError(code="UserInput", message=f"Field '{k}' must be one of: {', '.join(allowed)}")


@dataclass(frozen=True, slots=True)
class ListMilestonesParams:
    owner: str
    repo: str
    state: str = LIST_DEFAULTS["state"]
    sort: str = LIST_DEFAULTS["sort"]
    direction: str = LIST_DEFAULTS["direction"]
    per_page: int = LIST_DEFAULTS["per_page"]
    page: int = LIST_DEFAULTS["page"]


@dataclass(frozen=True, slots=True)
class MilestoneRef:
    """Identifies one milestone; the parameters of get and delete."""

    owner: str
    repo: str
    milestone_number: int


GetMilestoneParams = MilestoneRef
DeleteMilestoneParams = MilestoneRef


@dataclass(frozen=True, slots=True)
class CreateMilestoneParams:
    owner: str
    repo: str
    title: str
    description: str | Unset = UNSET
    due_on: str | Unset = UNSET
    state: str | Unset = UNSET


@dataclass(frozen=True, slots=True)
class UpdateMilestoneParams:
    owner: str
    repo: str
    milestone_number: int
    title: str | Unset = UNSET
    description: str | Unset = UNSET
    due_on: str | Unset = UNSET
    state: str | Unset = UNSET


def supplied_fields(params: object, names: tuple[str, ...]) -> dict[str, Any]:
    """Return ``{name: value}`` for each of ``names`` that is not ``UNSET``."""
    out: dict[str, Any] = {}
    for name in names:
        value = getattr(params, name)
        if value is not UNSET:
            out[name] = value
    return out


def _whole_number(arguments: dict[str, Any], key: str) -> int:
    v = arguments[key]
    if isinstance(v, float):
        if not v.is_integer():
            raise SafeError(code="UserInput", message=f"Field '{key}' must be a whole number")
        return int(v)
    return v


def _optional(arguments: dict[str, Any], key: str) -> Any:
    return arguments[key] if key in arguments else UNSET


def _parse_list(arguments: dict[str, Any]) -> ListMilestonesParams:
    merged = {**LIST_DEFAULTS, **arguments}
    return ListMilestonesParams(
        owner=merged["owner"],
        repo=merged["repo"],
        state=merged["state"],
        sort=merged["sort"],
        direction=merged["direction"],
        per_page=_whole_number(merged, "per_page"),
        page=_whole_number(merged, "page"),
    )


def _parse_ref(arguments: dict[str, Any]) -> MilestoneRef:
    return MilestoneRef(
        owner=arguments["owner"],
        repo=arguments["repo"],
        milestone_number=_whole_number(arguments, "milestone_number"),
    )


def _parse_create(arguments: dict[str, Any]) -> CreateMilestoneParams:
    return CreateMilestoneParams(
        owner=arguments["owner"],
        repo=arguments["repo"],
        title=arguments["title"],
        description=_optional(arguments, "description"),
        due_on=_optional(arguments, "due_on"),
        state=_optional(arguments, "state"),
    )


def _parse_update(arguments: dict[str, Any]) -> UpdateMilestoneParams:
    return UpdateMilestoneParams(
        owner=arguments["owner"],
        repo=arguments["repo"],
        milestone_number=_whole_number(arguments, "milestone_number"),
        title=_optional(arguments, "title"),
        description=_optional(arguments, "description"),
        due_on=_optional(arguments, "due_on"),
        state=_optional(arguments, "state"),
    )


_PARSERS: dict[str, Callable[[dict[str, Any]], object]] = {
    "list_milestones": _parse_list,
    "get_milestone": _parse_ref,
    "create_milestone": _parse_create,
    "update_milestone": _parse_update,
    "delete_milestone": _parse_ref,
}


def parse_arguments(tool_name: str, arguments: dict[str, Any]) -> Any:
    """Validate ``arguments`` for ``tool_name`` and build its parameter object."""
    validate_tool_arguments(tool_name, arguments)
    return _PARSERS[tool_name](arguments)
