"""Gladia API request and response dataclasses.

WHY: Operations describe the HTTP call they need without performing it,
and the transport hands back status and body without judging them.
Typed dataclasses make both sides of that contract explicit.

HOW: OutboundRequest is what an operation builds; TransportResponse is
what a transport returns. PreRecordedJob parses the job-creation reply.

RULES:
- OutboundRequest.path is relative to the API base URL
- Exactly one of json_body / files is set for POST requests
- TransportResponse.body is decoded JSON when the reply is JSON, else text
- A non-2xx status is data, not an error
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class OutboundRequest:
    """One HTTP call as defined by an operation.

    RULES:
    - method: "GET" or "POST"
    - files: multipart fields as {name: (file_name, bytes, mime_type)}
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Optional[Dict[str, Any]] = None
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None


@dataclass
class TransportResponse:
    """Status code and body of a completed HTTP call."""

    status_code: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass
class PreRecordedJob:
    """Reply to POST /v2/pre-recorded.

    RULES:
    - id is the job UUID used by GET /v2/pre-recorded/{id}
    - result_url is the full URL of that same GET endpoint
    """

    id: str
    result_url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PreRecordedJob:
        return cls(id=data["id"], result_url=data["result_url"])
