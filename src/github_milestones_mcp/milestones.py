"""Milestone operations on top of the GitHub REST client.

Each method turns typed parameters into a GitHub request, and the response
into the uniform tool envelope::

    {"content": [{"type": "text", "text": "..."}]}

Failures of any kind are re-raised as ``SafeError`` with the message
``Failed to <verb> milestone: <cause>``; the category and HTTP status of the
cause are kept.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

from .errors import rewrap
from .github_client import GitHubClient
from .schemas import (CreateMilestoneParams, ListMilestonesParams,
                      MilestoneRef, UpdateMilestoneParams, supplied_fields)

logger = logging.getLogger(__name__)

_CREATE_OPTIONAL_FIELDS = ("description", "due_on", "state")
_UPDATE_OPTIONAL_FIELDS = ("title", "description", "due_on", "state")

# Request bundle keys that travel in the URL path rather than the JSON body.
_PATH_FIELDS = frozenset({"owner", "repo", "milestone_number"})


def text_envelope(text: str) -> dict[str, Any]:
    """Wrap a text payload in the tool result envelope."""
    return {"content": [{"type": "text", "text": text}]}


def _to_json(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _segment(value: str) -> str:
    # Each value is exactly one path segment; "/", "#", "?" and "%" are escaped.
    return quote(value, safe="")


def _milestones_path(owner: str, repo: str) -> str:
    return f"/repos/{_segment(owner)}/{_segment(repo)}/milestones"


def _milestone_path(owner: str, repo: str, number: int) -> str:
    return f"{_milestones_path(owner, repo)}/{number}"


def build_create_request(params: CreateMilestoneParams) -> dict[str, Any]:
    """Request bundle for create: owner/repo/title plus only the supplied optionals."""
    request: dict[str, Any] = {"owner": params.owner, "repo": params.repo, "title": params.title}
    request.update(supplied_fields(params, _CREATE_OPTIONAL_FIELDS))
    return request


def build_update_request(params: UpdateMilestoneParams) -> dict[str, Any]:
    """Request bundle for update: owner/repo/number plus only the supplied optionals."""
    request: dict[str, Any] = {
        "owner": params.owner,
        "repo": params.repo,
        "milestone_number": params.milestone_number,
    }
    request.update(supplied_fields(params, _UPDATE_OPTIONAL_FIELDS))
    return request


def _body(request: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in request.items() if k not in _PATH_FIELDS}


class MilestonesClient:
    """One method per supported milestone operation."""

    def __init__(self, github: GitHubClient) -> None:
        self._github = github

    async def list_milestones(self, params: ListMilestonesParams) -> dict[str, Any]:
        """List milestones for a repository."""
        try:
            data = await self._github.request_json(
                method="GET",
                path=_milestones_path(params.owner, params.repo),
                params={
                    "state": params.state,
                    "sort": params.sort,
                    "direction": params.direction,
                    "per_page": params.per_page,
                    "page": params.page,
                },
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise rewrap(exc, "Failed to list milestones") from exc

        return text_envelope(_to_json(data))

    async def get_milestone(self, params: MilestoneRef) -> dict[str, Any]:
        """Get details of a specific milestone."""
        try:
            data = await self._github.request_json(
                method="GET",
                path=_milestone_path(params.owner, params.repo, params.milestone_number),
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise rewrap(exc, "Failed to get milestone") from exc

        return text_envelope(_to_json(data))

    async def create_milestone(self, params: CreateMilestoneParams) -> dict[str, Any]:
        """Create a new milestone.

        Optional fields the caller left out are not sent, so GitHub applies
        its own defaults.
        """
        request = build_create_request(params)
        try:
            data = await self._github.request_json(
                method="POST",
                path=_milestones_path(params.owner, params.repo),
                json_body=_body(request),
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise rewrap(exc, "Failed to create milestone") from exc

        logger.info("Created milestone %r in %s/%s", params.title, params.owner, params.repo)
        return text_envelope(f'Successfully created milestone "{params.title}". Details:\n{_to_json(data)}')

    async def update_milestone(self, params: UpdateMilestoneParams) -> dict[str, Any]:
        """Update an existing milestone with only the fields the caller supplied."""
        request = build_update_request(params)
        try:
            data = await self._github.request_json(
                method="PATCH",
                path=_milestone_path(params.owner, params.repo, params.milestone_number),
                json_body=_body(request),
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise rewrap(exc, "Failed to update milestone") from exc

        logger.info("Updated milestone #%s in %s/%s", params.milestone_number, params.owner, params.repo)
        return text_envelope(
            f"Successfully updated milestone #{params.milestone_number}. Details:\n{_to_json(data)}"
        )

    async def delete_milestone(self, params: MilestoneRef) -> dict[str, Any]:
        """Delete a milestone. GitHub answers with no content."""
        try:
            await self._github.request_json(
                method="DELETE",
                path=_milestone_path(params.owner, params.repo, params.milestone_number),
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise rewrap(exc, "Failed to delete milestone") from exc

        logger.info("Deleted milestone #%s from %s/%s", params.milestone_number, params.owner, params.repo)
        return text_envelope(
            f"Successfully deleted milestone #{params.milestone_number} from {params.owner}/{params.repo}"
        )
