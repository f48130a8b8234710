"""Async HTTP transport for the Gladia API.

WHY: Operations only decide *what* to send; something has to attach the
API key, talk HTTP, and hand the reply back. Keeping that behind a small
Transport protocol lets the dispatcher run against a fake in tests and
against Gladia in production.

HOW: GladiaClient wraps httpx.AsyncClient with the x-gladia-key header
and the Gladia base URL. It is an async context manager: enter it to
open the connection pool, exit to close it. request() performs one
OutboundRequest and returns a TransportResponse.

RULES:
- Always use the async context manager (async with GladiaClient() as client:)
- Non-2xx replies are returned, never raised; the caller interprets status
- Connection-level failures (DNS, refused, timeouts) raise TransportFailure
- JSON replies are decoded; other replies are returned as text
- The multipart Content-Type is left to httpx so it carries the boundary
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from gladia_transcriber.api.models import OutboundRequest, TransportResponse
from gladia_transcriber.config import (
    API_KEY_HEADER,
    GLADIA_BASE_URL,
    GLADIA_CONNECT_TIMEOUT_S,
    GLADIA_TIMEOUT_S,
    load_api_key,
)

logger = logging.getLogger(__name__)


class TransportFailure(Exception):
    """Raised when an HTTP call could not complete at the network level.

    WHY: Callers need to tell "the API answered with an error" (a
    TransportResponse with non-2xx status) apart from "no answer at all".

    RULES:
    - message describes the underlying httpx error
    - the httpx exception is chained as __cause__
    """


class Transport(Protocol):
    """Anything that can perform an OutboundRequest."""

    async def request(self, outbound: OutboundRequest) -> TransportResponse:
        ...


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return ""
    content_type = resp.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return resp.json()
        except ValueError:
            logger.warning("Reply declared JSON but did not parse; returning text")
    return resp.text


class GladiaClient:
    """Authenticated async transport for the Gladia API.

    WHY: Every Gladia call needs the same base URL, API key header, and
    "return, don't raise" status handling. One class owns all of it.

    HOW: Wraps httpx.AsyncClient. Use as an async context manager so the
    HTTP connection pool is properly closed.

    RULES:
    - Use as: async with GladiaClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url defaults to GLADIA_BASE_URL from config
    - http_transport is for tests (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or GLADIA_BASE_URL).rstrip("/")
        self._http_transport = http_transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GladiaClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={API_KEY_HEADER: self._api_key},
            timeout=httpx.Timeout(GLADIA_TIMEOUT_S, connect=GLADIA_CONNECT_TIMEOUT_S),
            transport=self._http_transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GladiaClient must be used as an async context manager: "
                "async with GladiaClient() as client: ..."
            )
        return self._client

    async def request(self, outbound: OutboundRequest) -> TransportResponse:
        """Perform one call and return its status and decoded body.

        Args:
            outbound: The request an operation built.

        Returns:
            TransportResponse, whatever the HTTP status.

        Raises:
            TransportFailure: If no HTTP response was received.
        """
        client = self._ensure_client()

        headers = dict(outbound.headers)
        if outbound.files is not None:
            headers.pop("Content-Type", None)

        logger.info("%s %s", outbound.method, outbound.path)
        try:
            resp = await client.request(
                outbound.method,
                outbound.path,
                headers=headers,
                json=outbound.json_body,
                files=outbound.files,
            )
        except httpx.HTTPError as exc:
            raise TransportFailure(
                "{} {} failed: {}".format(outbound.method, outbound.path, exc)
            ) from exc

        if resp.is_error:
            logger.info("%s %s returned %d", outbound.method, outbound.path, resp.status_code)

        return TransportResponse(
            status_code=resp.status_code,
            body=_decode_body(resp),
            headers=dict(resp.headers),
        )
