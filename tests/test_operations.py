"""Tests for operation request shapes and the batch dispatcher.

WHY: Each operation must hit the exact Gladia endpoint with the exact
payload shape, and a batch must yield one result per item in order,
whichever failure policy the run uses.

HOW: Operations run against FakeTransport from conftest, which records
outbound requests and replays scripted replies. Async code is driven
with asyncio.run().

RULES:
- Gladia is never called
- Item indices are 0-based positions in the batch
"""

import asyncio

import pytest

from gladia_transcriber.api.client import TransportFailure
from gladia_transcriber.api.models import TransportResponse
from gladia_transcriber.core.dispatcher import OperationError, run_batch
from gladia_transcriber.core.items import BinaryData, MissingBinaryDataError, WorkItem, make_items
from gladia_transcriber.core.operations import (
    as_json_object,
    build_get_request,
    build_upload_request,
    execute_operation,
    unwrap_body,
)


def _upload_item(index=0, with_binary=True, prop="data"):
    binary = {prop: BinaryData(b"RIFF....WAVE", file_name="short.wav", mime_type="audio/wav")}
    return WorkItem(
        index=index,
        parameters={"operation": "uploadfile", "file": prop},
        binary=binary if with_binary else {},
    )


class TestRequestShapes:

    def test_upload_request(self):
        outbound = build_upload_request(_upload_item())
        assert outbound.method == "POST"
        assert outbound.path == "/v2/upload"
        assert outbound.headers == {"Content-Type": "multipart/form-data"}
        assert outbound.files == {"audio": ("short.wav", b"RIFF....WAVE", "audio/wav")}
        assert outbound.json_body is None

    def test_upload_uses_named_property(self):
        outbound = build_upload_request(_upload_item(prop="recording"))
        assert outbound.files["audio"][1] == b"RIFF....WAVE"

    def test_upload_without_binary_raises(self):
        with pytest.raises(MissingBinaryDataError) as exc_info:
            build_upload_request(_upload_item(index=3, with_binary=False))
        assert exc_info.value.item_index == 3
        assert 'No binary data found under property "data"' in str(exc_info.value)

    def test_get_request(self):
        item = WorkItem(index=0, parameters={"operation": "gettranscription", "id": "abc-123"})
        outbound = build_get_request(item)
        assert outbound.method == "GET"
        assert outbound.path == "/v2/pre-recorded/abc-123"
        assert outbound.json_body is None

    def test_start_request(self, transport, start_item, job_reply):
        transport.queue(TransportResponse(201, job_reply))
        result = asyncio.run(execute_operation(start_item(moderation=True), transport))

        sent = transport.requests[0]
        assert sent.method == "POST"
        assert sent.path == "/v2/pre-recorded"
        assert sent.headers == {"Content-Type": "application/json"}
        assert sent.json_body == {"audio_url": "https://example.com/a.mp3", "moderation": True}
        assert result.json == job_reply
        assert result.status_code == 201
        assert result.is_error is False


class TestResultShaping:

    def test_unwrap_prefers_body(self):
        assert unwrap_body(TransportResponse(200, {"a": 1})) == {"a": 1}
        assert unwrap_body({"body": {"a": 1}, "headers": {}}) == {"a": 1}
        assert unwrap_body({"a": 1}) == {"a": 1}

    def test_non_object_bodies_wrapped(self):
        assert as_json_object("Not Found") == {"result": "Not Found"}
        assert as_json_object(None) == {"result": None}
        assert as_json_object([1, 2]) == {"result": [1, 2]}

    def test_error_status_is_a_result(self, transport):
        transport.queue(TransportResponse(404, {"statusCode": 404, "message": "not found"}))
        item = WorkItem(index=0, parameters={"operation": "gettranscription", "id": "missing"})
        result = asyncio.run(execute_operation(item, transport))
        assert result.is_error is False
        assert result.status_code == 404
        assert result.json == {"statusCode": 404, "message": "not found"}

    def test_text_body_wrapped(self, transport):
        transport.queue(TransportResponse(502, "Bad Gateway"))
        item = WorkItem(index=0, parameters={"operation": "gettranscription", "id": "x"})
        result = asyncio.run(execute_operation(item, transport))
        assert result.json == {"result": "Bad Gateway"}

    def test_unknown_operation_raises(self, transport):
        item = WorkItem(index=0, parameters={"operation": "deletetranscription"})
        with pytest.raises(ValueError):
            asyncio.run(execute_operation(item, transport))
        assert transport.requests == []


class TestRunBatch:

    def _get_items(self, count):
        return make_items([
            {"operation": "gettranscription", "id": "job-{}".format(i)} for i in range(count)
        ])

    def test_results_in_input_order(self, transport):
        transport.queue(
            TransportResponse(200, {"id": "job-0"}),
            TransportResponse(200, {"id": "job-1"}),
            TransportResponse(200, {"id": "job-2"}),
        )
        results = asyncio.run(run_batch(self._get_items(3), transport))
        assert [r.json["id"] for r in results] == ["job-0", "job-1", "job-2"]
        assert [r.item_index for r in results] == [0, 1, 2]
        assert [o.path for o in transport.requests] == [
            "/v2/pre-recorded/job-0",
            "/v2/pre-recorded/job-1",
            "/v2/pre-recorded/job-2",
        ]

    def test_continue_mode_records_middle_failure(self, transport):
        transport.queue(
            TransportResponse(200, {"id": "job-0"}),
            TransportFailure("GET /v2/pre-recorded/job-1 failed: connection refused"),
            TransportResponse(200, {"id": "job-2"}),
        )
        results = asyncio.run(run_batch(self._get_items(3), transport, continue_on_fail=True))

        assert len(results) == 3
        assert results[0].json == {"id": "job-0"}
        assert results[1].is_error is True
        assert results[1].item_index == 1
        assert results[1].json == {"error": "GET /v2/pre-recorded/job-1 failed: connection refused"}
        assert results[1].status_code is None
        assert results[2].json == {"id": "job-2"}

    def test_abort_mode_raises_with_index(self, transport):
        transport.queue(
            TransportResponse(200, {"id": "job-0"}),
            TransportFailure("connection refused"),
        )
        with pytest.raises(OperationError) as exc_info:
            asyncio.run(run_batch(self._get_items(3), transport, continue_on_fail=False))
        assert exc_info.value.item_index == 1
        assert exc_info.value.message == "connection refused"
        assert isinstance(exc_info.value.__cause__, TransportFailure)
        # item 2 never started
        assert len(transport.requests) == 2

    def test_upload_without_binary_aborts(self, transport, upload_reply):
        items = [_upload_item(index=0), _upload_item(index=1, with_binary=False)]
        transport.queue(TransportResponse(200, upload_reply))
        with pytest.raises(OperationError) as exc_info:
            asyncio.run(run_batch(items, transport, continue_on_fail=False))
        assert exc_info.value.item_index == 1
        assert isinstance(exc_info.value.__cause__, MissingBinaryDataError)

    def test_upload_without_binary_continues(self, transport, upload_reply):
        items = [_upload_item(index=0, with_binary=False), _upload_item(index=1)]
        transport.queue(TransportResponse(200, upload_reply))
        results = asyncio.run(run_batch(items, transport, continue_on_fail=True))
        assert results[0].json == {"error": 'No binary data found under property "data"'}
        assert results[1].json["audio_url"] == upload_reply["audio_url"]

    def test_missing_parameter_message(self, transport):
        items = [WorkItem(index=0, parameters={"operation": "gettranscription"})]
        results = asyncio.run(run_batch(items, transport, continue_on_fail=True))
        assert results[0].json == {"error": 'Missing parameter "id" on item 0'}
