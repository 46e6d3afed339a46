# src/github/client.py — v2
"""Async GitHub GraphQL transport built on httpx.

Every call carries a fixed timeout. Failures are classified here, once, into
the ProfileFetchError taxonomy; nothing is retried at this layer.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from ghcard.github.errors import (
    AuthFailureError,
    ErrorKind,
    NotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
    classify_graphql_message,
    classify_http_error,
    error_for,
)
from ghcard.github.models import UserNode, UserQueryData

if TYPE_CHECKING:
    from ghcard.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT_S = 8.0
DEFAULT_AVATAR_TIMEOUT_S = 3.0


class GitHubClient:
    """Thin GraphQL client carrying the credential and the timeout policy.

    Args:
        token: GitHub token sent as a bearer credential.
        graphql_url: GraphQL endpoint.
        timeout_s: Timeout applied to every GraphQL request.
        avatar_timeout_s: Timeout for the avatar download.
        user_agent: User-Agent header value.
        http_client: Shared httpx client. Created (and owned) when omitted.
    """

    def __init__(
        self,
        token: str,
        graphql_url: str = DEFAULT_GRAPHQL_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        avatar_timeout_s: float = DEFAULT_AVATAR_TIMEOUT_S,
        user_agent: str = "ghcard",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = token.strip()
        self._graphql_url = graphql_url
        self._timeout = httpx.Timeout(timeout_s)
        self._avatar_timeout = httpx.Timeout(avatar_timeout_s)
        self._user_agent = user_agent
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> GitHubClient:
        return cls(
            token=settings.github_token,
            graphql_url=settings.github_graphql_url,
            timeout_s=settings.request_timeout_seconds,
            avatar_timeout_s=settings.avatar_timeout_seconds,
            user_agent=settings.github_user_agent,
            http_client=http_client,
        )

    def _headers(self) -> dict[str, str]:
        if not self._token:
            raise AuthFailureError("GITHUB_TOKEN is missing")
        return {
            "Authorization": f"bearer {self._token}",
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` object.

        Raises:
            ProfileFetchError: Classified transport or GraphQL failure.
        """
        headers = self._headers()
        try:
            response = await self._http.post(
                self._graphql_url,
                json={"query": query, "variables": variables},
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError() from exc
        except httpx.HTTPError as exc:
            raise UpstreamError() from exc

        if not response.is_success:
            kind = classify_http_error(response.status_code, response.text)
            logger.warning(
                "GraphQL request failed: status=%d kind=%s",
                response.status_code, kind.value,
            )
            message = (
                f"GitHub API error ({response.status_code})"
                if kind is ErrorKind.UPSTREAM_ERROR else None
            )
            raise error_for(kind, message)

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("GitHub API returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise UpstreamError("GitHub API returned an unexpected payload")

        errors = body.get("errors") or []
        if errors:
            message = " | ".join(
                str(e["message"]) for e in errors
                if isinstance(e, dict) and e.get("message")
            ) or "GitHub API error"
            kind = classify_graphql_message(message)
            logger.warning("GraphQL errors (%s): %s", kind.value, message)
            raise error_for(kind, message if kind is ErrorKind.UPSTREAM_ERROR else None)

        data = body.get("data")
        if not isinstance(data, dict) or not data:
            raise UpstreamError("GitHub API returned no data")
        return data

    async def query_user(self, query: str, variables: dict[str, Any]) -> UserNode:
        """Run a user-rooted query and return the parsed ``user`` node.

        Raises:
            NotFoundError: The query resolved to no user.
            UpstreamError: The payload does not match the expected shape.
        """
        data = await self.graphql(query, variables)
        try:
            parsed = UserQueryData.model_validate(data)
        except ValidationError as exc:
            raise UpstreamError("GitHub API returned a malformed response") from exc
        if parsed.user is None:
            raise NotFoundError()
        return parsed.user

    async def fetch_avatar_data_url(self, avatar_url: str, size: int | None = None) -> str:
        """Download an avatar and re-encode it as a base64 ``data:`` URI.

        Never raises: any failure returns ``avatar_url`` unchanged.
        """
        if not avatar_url:
            return avatar_url
        target = with_avatar_size(avatar_url, size) if size else avatar_url
        try:
            response = await self._http.get(
                target,
                headers={"User-Agent": self._user_agent},
                timeout=self._avatar_timeout,
                follow_redirects=True,
            )
            if not response.is_success:
                logger.debug("Avatar fetch returned %d, keeping URL", response.status_code)
                return avatar_url
            mime = response.headers.get("content-type", "image/png").split(";")[0].strip()
            encoded = base64.b64encode(response.content).decode("ascii")
        except Exception as exc:
            logger.debug("Avatar embedding failed (non-fatal): %s", exc)
            return avatar_url
        return f"data:{mime or 'image/png'};base64,{encoded}"

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()


def with_avatar_size(url: str, size: int) -> str:
    """Append an ``s=<size>`` hint to an avatar URL."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}s={size}"
