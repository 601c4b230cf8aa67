"""HTTP client for the MedMe GraphQL endpoint."""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from .config import Settings
from .queries import GraphQLRequest

LOGGER = structlog.get_logger(__name__)

GRAPHQL_PATH = "/graphql"

# The public booking site sends these; the API refuses requests without the tenant.
BROWSER_HEADERS = {
    "sec-ch-ua": '" Not A;Brand";v="99", "Chromium";v="96", "Google Chrome";v="96"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"macOS"',
    "authorization": "",
    "content-type": "application/json",
    "accept": "*/*",
    "user-agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
    ),
    "sec-fetch-site": "same-site",
    "sec-fetch-mode": "cors",
    "sec-fetch-dest": "empty",
    "accept-language": "en-US,en;q=0.9",
}


def default_headers(settings: Settings) -> dict[str, str]:
    """Static headers identifying the client and tenant."""
    headers = dict(BROWSER_HEADERS)
    headers.update(
        {
            "authority": httpx.URL(settings.graphql_url).host,
            "x-tenantid": settings.tenant_id,
            "origin": settings.booking_url,
            "referer": f"{settings.booking_url}/",
        }
    )
    return headers


class GraphQLClient:
    """Async wrapper that posts GraphQL requests with the fixed header set.

    Timeouts are not errors here: :meth:`execute` returns ``{}`` so the caller
    can treat the request as having produced no data. Anything else raised by
    httpx, including non-2xx responses, propagates.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GraphQLClient":
        self._client = httpx.AsyncClient(
            base_url=self._settings.graphql_url,
            headers=default_headers(self._settings),
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def execute(self, request: GraphQLRequest) -> dict[str, Any]:
        """POST ``request`` and return the decoded JSON body."""
        if not self._client:
            raise RuntimeError("GraphQLClient must be used as an async context manager")

        if self._settings.debug:
            LOGGER.debug(
                "graphql.request",
                operation=request.operation,
                variables=dict(request.variables),
            )

        try:
            response = await self._client.post(
                GRAPHQL_PATH,
                json=request.body(),
                headers=dict(request.headers),
            )
        except httpx.TimeoutException as exc:
            LOGGER.warning(
                "graphql.timeout",
                operation=request.operation,
                variables=dict(request.variables),
                error=str(exc) or type(exc).__name__,
            )
            return {}

        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError(f"Unexpected GraphQL response body: {type(body).__name__}")
        if body.get("errors"):
            LOGGER.warning(
                "graphql.errors",
                operation=request.operation,
                errors=body["errors"],
            )
        return body
