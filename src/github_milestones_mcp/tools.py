"""Tool registry and dispatch layer.

This module:
- defines the five milestone tools (public contract surface)
- validates arguments against the declared schemas before any GitHub call
- routes each call to the matching ``MilestonesClient`` method
- emits one audit event per call
"""

from __future__ import annotations

from typing import Any

from .audit import AuditLogger, build_event, new_correlation_id, outcome_for
from .config import ServerConfig, load_config_from_env
from .errors import SafeError, rewrap
from .github_client import GitHubClient
from .milestones import MilestonesClient
from .schemas import INPUT_SCHEMAS, parse_arguments

_DESCRIPTIONS: dict[str, str] = {
    "list_milestones": "List milestones for a GitHub repository",
    "get_milestone": "Get details of a specific milestone",
    "create_milestone": "Create a new milestone in a GitHub repository",
    "update_milestone": "Update an existing milestone",
    "delete_milestone": "Delete a milestone from a repository",
}

TOOL_METADATA: dict[str, dict[str, Any]] = {
    name: {"description": description, "inputSchema": INPUT_SCHEMAS[name]}
    for name, description in _DESCRIPTIONS.items()
}

# Tool name -> MilestonesClient method name.
_TOOL_METHODS: dict[str, str] = {
    "list_milestones": "list_milestones",
    "get_milestone": "get_milestone",
    "create_milestone": "create_milestone",
    "update_milestone": "update_milestone",
    "delete_milestone": "delete_milestone",
}


def _target_repo_from_args(arguments: object) -> str:
    if not isinstance(arguments, dict):
        return "<unknown>"
    owner = arguments.get("owner")
    repo = arguments.get("repo")
    if isinstance(owner, str) and isinstance(repo, str) and owner and repo:
        return f"{owner}/{repo}"
    return "<unknown>"


class ToolDispatcher:
    """Advertises the tool catalog and routes calls to the milestones client."""

    def __init__(self, milestones: MilestonesClient, audit: AuditLogger | None = None) -> None:
        self._milestones = milestones
        self._audit = audit or AuditLogger()

    def list_tools(self) -> list[dict[str, Any]]:
        """Return the static catalog of tool descriptors."""
        return [
            {"name": name, "description": meta["description"], "inputSchema": meta["inputSchema"]}
            for name, meta in TOOL_METADATA.items()
        ]

    def _record(self, *, correlation_id: str, name: str, target_repo: str, start: float,
                error: SafeError | None = None) -> None:
        self._audit.write_event(
            build_event(
                correlation_id=correlation_id,
                operation=name,
                target_repo=target_repo,
                outcome="succeeded" if error is None else outcome_for(error),
                error=error,
                duration_ms=self._audit.measure_duration_ms(start),
            )
        )

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Run tool ``name`` with ``arguments`` and return its result envelope.

        Raises:
            SafeError: ``Missing required arguments`` when no argument bundle was
                sent; otherwise any failure, prefixed with ``Tool execution failed:``.
        """
        correlation_id = new_correlation_id()
        target_repo = _target_repo_from_args(arguments)
        start = self._audit.measure_start()

        if not isinstance(arguments, dict):
            err = SafeError(
                code="UserInput",
                message="Missing required arguments" if arguments is None else "Arguments must be an object",
            )
            self._record(correlation_id=correlation_id, name=name, target_repo=target_repo, start=start, error=err)
            raise err

        try:
            if name not in TOOL_METADATA:
                raise SafeError(
                    code="UnknownTool",
                    message=f"Unknown tool: {name}",
                    hint=f"Available tools: {', '.join(sorted(TOOL_METADATA))}",
                )
            params = parse_arguments(name, arguments)
            method = getattr(self._milestones, _TOOL_METHODS[name])
            result = await method(params)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            err = rewrap(exc, "Tool execution failed")
            self._record(correlation_id=correlation_id, name=name, target_repo=target_repo, start=start, error=err)
            raise err from exc

        self._record(correlation_id=correlation_id, name=name, target_repo=target_repo, start=start)
        return result


def build_dispatcher(config: ServerConfig) -> ToolDispatcher:
    """Wire the GitHub client, milestones client and dispatcher for ``config``."""
    github = GitHubClient(
        token=config.token,
        limits=config.limits,
        user_agent=config.user_agent,
        api_base_url=config.api_base_url,
    )
    return ToolDispatcher(MilestonesClient(github))


def build_dispatcher_from_env() -> ToolDispatcher:
    """Load configuration from the environment and build the dispatcher.

    Called once at server startup; a missing token fails here.
    """
    return build_dispatcher(load_config_from_env())
