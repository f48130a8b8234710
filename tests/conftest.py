"""Shared test fixtures for the gladia_transcriber test suite.

WHY: Operation, dispatcher, and CLI tests all need a transport that
records what would have been sent and answers with scripted replies,
without touching the network.

HOW: FakeTransport implements the Transport protocol in memory. Replies
are queued per test; a queued exception is raised instead of answered.

RULES:
- Every call is recorded in FakeTransport.requests, in order
- With an empty queue, FakeTransport answers 200 with a default body
"""

from typing import Any, Dict, List

import pytest

from gladia_transcriber.api.models import OutboundRequest, TransportResponse
from gladia_transcriber.core.items import WorkItem

SAMPLE_JOB_REPLY: Dict[str, Any] = {
    "id": "45463597-20b7-4af7-b3b3-f5fb778203ab",
    "result_url": "https://api.gladia.io/v2/pre-recorded/45463597-20b7-4af7-b3b3-f5fb778203ab",
}

SAMPLE_UPLOAD_REPLY: Dict[str, Any] = {
    "audio_url": "https://api.gladia.io/file/6c09400e-23d2-4bd2-be55-96a5ececfa3b",
    "audio_metadata": {
        "id": "6c09400e-23d2-4bd2-be55-96a5ececfa3b",
        "filename": "short.mp3",
        "extension": "mp3",
        "size": 99515,
        "audio_duration": 4.32,
        "number_of_channels": 1,
    },
}


class FakeTransport:
    """In-memory Transport: records requests, replays scripted replies."""

    def __init__(self) -> None:
        self.requests: List[OutboundRequest] = []
        self._replies: List[Any] = []

    def queue(self, *replies: Any) -> None:
        self._replies.extend(replies)

    async def request(self, outbound: OutboundRequest) -> TransportResponse:
        self.requests.append(outbound)
        if not self._replies:
            return TransportResponse(status_code=200, body={"ok": True})
        reply = self._replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def start_item():
    """Factory for starttranscription items with the given extra parameters."""

    def make(index: int = 0, **params: Any) -> WorkItem:
        parameters = {"operation": "starttranscription", "audio_url": "https://example.com/a.mp3"}
        parameters.update(params)
        return WorkItem(index=index, parameters=parameters)

    return make


@pytest.fixture
def job_reply():
    return dict(SAMPLE_JOB_REPLY)


@pytest.fixture
def upload_reply():
    return dict(SAMPLE_UPLOAD_REPLY)
