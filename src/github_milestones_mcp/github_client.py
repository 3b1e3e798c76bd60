"""GitHub REST client wrapper.

Provides:
- strict host allowlist and no-redirect behavior
- finite timeouts
- safe error translation

Requests are sent once; failures are reported, never retried.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .config import GITHUB_API_BASE_URL, USER_AGENT, LimitsConfig
from .errors import SafeError, status_to_code

logger = logging.getLogger(__name__)


class GitHubClient:
    """Minimal token-authenticated GitHub REST client."""

    def __init__(
        self,
        *,
        token: str,
        limits: LimitsConfig,
        user_agent: str = USER_AGENT,
        api_base_url: str = GITHUB_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a GitHub REST client.

        Args:
            token: Personal access token forwarded as a bearer credential.
            limits: Timeouts.
            user_agent: Client identifier sent with every request.
            api_base_url: Must be https://api.github.com (enforced).
            transport: Optional httpx transport for tests.
        """
        if not token:
            raise SafeError(code="Config", message="GitHub token must not be empty")

        self._token = token
        self._limits = limits
        self._user_agent = user_agent
        self._api_base_url = api_base_url.rstrip("/")
        self._transport = transport

        if self._api_base_url != GITHUB_API_BASE_URL:
            raise SafeError(code="Config", message=f"Only {GITHUB_API_BASE_URL} is allowed")

    def __repr__(self) -> str:
        return f"GitHubClient(api_base_url={self._api_base_url!r}, user_agent={self._user_agent!r})"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self._user_agent,
        }

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            timeout=self._limits.total_timeout_s,
            connect=self._limits.connect_timeout_s,
            read=self._limits.read_timeout_s,
        )

    @staticmethod
    def _error_from_response(resp: httpx.Response) -> SafeError:
        message = None
        try:
            err_payload = resp.json()
            if isinstance(err_payload, dict) and isinstance(err_payload.get("message"), str):
                message = err_payload["message"]
        except Exception:  # pylint: disable=broad-exception-caught
            message = None

        return SafeError(
            code=status_to_code(resp.status_code),
            message=message or f"GitHub request failed (HTTP {resp.status_code})",
            status_code=resp.status_code,
        )

    async def request_json(
        self,
        *,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> object:
        """Make a request and return decoded JSON.

        GitHub APIs may return an object (dict), an array (list), or no content
        (``None``, e.g. for ``204`` responses to DELETE).
        """
        url = f"{self._api_base_url}{path}"

        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=self._timeout(),
            transport=self._transport,
        ) as client:
            try:
                resp = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    params=params,
                    json=json_body,
                )
            except httpx.HTTPError as exc:
                logger.warning("GitHub %s %s failed: %s", method, path, type(exc).__name__)
                raise SafeError(code="Network", message="Network request failed") from exc

        logger.debug("GitHub %s %s -> %s", method, path, resp.status_code)

        if resp.status_code >= 400:
            raise self._error_from_response(resp)

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except json.JSONDecodeError as exc:
            raise SafeError(code="GitHub", message="GitHub returned invalid JSON") from exc
