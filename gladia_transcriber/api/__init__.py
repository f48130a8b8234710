"""Gladia API client package: async HTTP transport to the Gladia service.

WHY: Operations need an authenticated way to reach Gladia that never
raises on HTTP error statuses. This package encapsulates that behind
the Transport protocol.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GladiaClient attaches
the API key header; request/response shapes live in models.py.

RULES:
- All HTTP calls go through a Transport (no direct httpx usage elsewhere)
- Authentication is via the x-gladia-key header from config
"""

from gladia_transcriber.api.client import GladiaClient, Transport, TransportFailure
from gladia_transcriber.api.models import OutboundRequest, PreRecordedJob, TransportResponse

__all__ = [
    "GladiaClient",
    "OutboundRequest",
    "PreRecordedJob",
    "Transport",
    "TransportFailure",
    "TransportResponse",
]
