"""The three Gladia operations: upload, start transcription, get transcription.

WHY: Each operation is one HTTP call whose shape depends only on the work
item. Building the call and interpreting the reply are kept apart from
performing it, so the request shapes can be checked without a network.

HOW: build_*_request() turn a WorkItem into an OutboundRequest.
execute_operation() picks the builder from the item's operation, sends
the request through the injected transport, and turns the reply into an
OperationResult.

RULES:
- POST /v2/upload: multipart, raw bytes under field "audio"
- POST /v2/pre-recorded: JSON body from build_transcription_request()
- GET /v2/pre-recorded/{id}
- Any completed call is a success, whatever its status code
- Result json is always a dict: non-dict bodies become {"result": body}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from gladia_transcriber.api.client import Transport
from gladia_transcriber.api.models import OutboundRequest, TransportResponse
from gladia_transcriber.config import DEFAULT_BINARY_PROPERTY
from gladia_transcriber.core.items import Operation, WorkItem
from gladia_transcriber.core.request import build_transcription_request

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/v2/upload"
PRE_RECORDED_PATH = "/v2/pre-recorded"


@dataclass
class OperationResult:
    """Outcome of one work item.

    RULES:
    - item_index pairs the result with its input entry
    - json is the reply body (always a dict) or {"error": message}
    - status_code is None when no HTTP reply was received
    """

    item_index: int
    json: Dict[str, Any]
    is_error: bool = False
    status_code: Optional[int] = None

    @classmethod
    def error(cls, item_index: int, message: str) -> OperationResult:
        return cls(item_index=item_index, json={"error": message}, is_error=True)


def build_upload_request(item: WorkItem) -> OutboundRequest:
    """Build the multipart upload call for the item's binary payload.

    Raises:
        MissingBinaryDataError: If the named binary property is absent.
    """
    property_name = item.get_parameter("file", DEFAULT_BINARY_PROPERTY) or DEFAULT_BINARY_PROPERTY
    binary = item.get_binary(property_name)
    return OutboundRequest(
        method="POST",
        path=UPLOAD_PATH,
        headers={"Content-Type": "multipart/form-data"},
        files={"audio": (binary.file_name, binary.data, binary.mime_type)},
    )


def build_start_request(item: WorkItem) -> OutboundRequest:
    return OutboundRequest(
        method="POST",
        path=PRE_RECORDED_PATH,
        headers={"Content-Type": "application/json"},
        json_body=build_transcription_request(item),
    )


def build_get_request(item: WorkItem) -> OutboundRequest:
    transcription_id = item.get_parameter("id")
    return OutboundRequest(
        method="GET",
        path="{}/{}".format(PRE_RECORDED_PATH, transcription_id),
    )


REQUEST_BUILDERS: Dict[Operation, Callable[[WorkItem], OutboundRequest]] = {
    Operation.UPLOAD_FILE: build_upload_request,
    Operation.START_TRANSCRIPTION: build_start_request,
    Operation.GET_TRANSCRIPTION: build_get_request,
}


def unwrap_body(response: Any) -> Any:
    """Return the reply body, preferring an envelope's body over the envelope."""
    if isinstance(response, TransportResponse):
        return response.body
    if isinstance(response, dict) and response.get("body") is not None:
        return response["body"]
    return response


def as_json_object(body: Any) -> Dict[str, Any]:
    """Guarantee a dict: dicts are copied, anything else is wrapped."""
    if isinstance(body, dict):
        return dict(body)
    return {"result": body}


async def execute_operation(item: WorkItem, transport: Transport) -> OperationResult:
    """Run the item's operation and return its result.

    Raises:
        ValueError: If the item names an unknown operation.
        MissingParameterError: If a required parameter is absent.
        MissingBinaryDataError: If an upload has no payload.
        TransportFailure: If the HTTP call did not complete.
    """
    operation = item.operation
    outbound = REQUEST_BUILDERS[operation](item)
    logger.debug("Item %d: %s -> %s %s", item.index, operation.value, outbound.method, outbound.path)

    response = await transport.request(outbound)
    return OperationResult(
        item_index=item.index,
        json=as_json_object(unwrap_body(response)),
        status_code=getattr(response, "status_code", None),
    )
