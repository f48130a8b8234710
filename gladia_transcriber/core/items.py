"""Work items: the per-entry input every operation consumes.

WHY: A batch run processes independent input entries, each carrying its
own resolved parameter values and (for uploads) named binary payloads.
Modelling the entry as a value object keeps operations testable without
any host application behind them.

HOW: WorkItem is a frozen dataclass. get_parameter() and get_binary()
mirror the host lookups (parameter by name with optional default, binary
payload by property name) and raise typed errors when nothing is there.

RULES:
- item index is the entry's position in the batch (0-based)
- get_parameter without a default raises MissingParameterError when absent
- get_binary raises MissingBinaryDataError when the property is absent
- Items are never mutated while a batch runs
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

_MISSING: Any = object()


class Operation(str, enum.Enum):
    """Operations a work item can request.

    Values match the operation names used by the workflow host, so
    parameter sets exported from it can be fed in unchanged.
    """

    UPLOAD_FILE = "uploadfile"
    START_TRANSCRIPTION = "starttranscription"
    GET_TRANSCRIPTION = "gettranscription"


class MissingParameterError(KeyError):
    """Raised when a required parameter is absent from a work item."""

    def __init__(self, name: str, item_index: int) -> None:
        self.name = name
        self.item_index = item_index
        super().__init__(name)

    def __str__(self) -> str:
        return 'Missing parameter "{}" on item {}'.format(self.name, self.item_index)


class MissingBinaryDataError(LookupError):
    """Raised when an upload item has no binary payload under the named property.

    RULES:
    - Message names the property, mirroring the host's wording
    - item_index identifies the offending entry
    """

    def __init__(self, property_name: str, item_index: int) -> None:
        self.property_name = property_name
        self.item_index = item_index
        super().__init__(
            'No binary data found under property "{}"'.format(property_name)
        )


@dataclass(frozen=True)
class BinaryData:
    """Raw bytes attached to a work item, with the metadata uploads need."""

    data: bytes
    file_name: str = "audio"
    mime_type: str = "application/octet-stream"


@dataclass(frozen=True)
class WorkItem:
    """One unit of input for an operation.

    RULES:
    - parameters holds already-resolved values (toggles, nested configs)
    - binary maps property names to BinaryData payloads
    """

    index: int
    parameters: Mapping[str, Any] = field(default_factory=dict)
    binary: Mapping[str, BinaryData] = field(default_factory=dict)

    def get_parameter(self, name: str, default: Any = _MISSING) -> Any:
        if name in self.parameters:
            return self.parameters[name]
        if default is _MISSING:
            raise MissingParameterError(name, self.index)
        return default

    def get_binary(self, property_name: str) -> BinaryData:
        payload = self.binary.get(property_name)
        if payload is None:
            raise MissingBinaryDataError(property_name, self.index)
        return payload

    @property
    def operation(self) -> Operation:
        """The requested operation; unknown names raise ValueError."""
        return Operation(self.get_parameter("operation", Operation.UPLOAD_FILE.value))


def make_items(parameter_sets: list, binaries: list | None = None) -> list:
    """Build indexed WorkItems from parallel lists of parameters and binaries."""
    binaries = binaries or []
    items = []
    for index, params in enumerate(parameter_sets):
        binary: Dict[str, BinaryData] = binaries[index] if index < len(binaries) else {}
        items.append(WorkItem(index=index, parameters=dict(params), binary=binary))
    return items
