"""Run a batch of work items through their operations, one at a time.

WHY: A run covers many independent items. Each must yield exactly one
result, in input order, and a failing item must either be recorded and
skipped or stop the run, as the caller chooses.

HOW: run_batch() awaits execute_operation() for each item in turn. On
failure it either appends an {"error": message} result tagged with the
item index (continue_on_fail) or raises OperationError for that index.

RULES:
- Strictly sequential: item N+1 starts after item N's call completes
- Output order matches input order, one result per item
- No state is shared between items
- Non-2xx replies are results, not failures
- OperationError chains the original exception as __cause__
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from gladia_transcriber.api.client import Transport
from gladia_transcriber.config import DEFAULT_CONTINUE_ON_FAIL
from gladia_transcriber.core.items import WorkItem
from gladia_transcriber.core.operations import OperationResult, execute_operation

logger = logging.getLogger(__name__)


class OperationError(Exception):
    """Raised when an item fails and the run does not continue on failure.

    RULES:
    - item_index identifies the failing item
    - message is the original error's message
    """

    def __init__(self, message: str, item_index: int) -> None:
        self.message = message
        self.item_index = item_index
        super().__init__(message)

    def __str__(self) -> str:
        return "Item {}: {}".format(self.item_index, self.message)


async def run_batch(
    items: Iterable[WorkItem],
    transport: Transport,
    continue_on_fail: bool = DEFAULT_CONTINUE_ON_FAIL,
) -> List[OperationResult]:
    """Execute every item's operation in order.

    Args:
        items: Work items, in batch order.
        transport: Authenticated transport performing the HTTP calls.
        continue_on_fail: Record failures and keep going instead of aborting.

    Returns:
        One OperationResult per item, in input order.

    Raises:
        OperationError: On the first failing item when continue_on_fail is off.
    """
    results: List[OperationResult] = []
    for item in items:
        try:
            result = await execute_operation(item, transport)
        except Exception as exc:
            message = str(exc)
            if continue_on_fail:
                logger.warning("Item %d failed, continuing: %s", item.index, message)
                results.append(OperationResult.error(item.index, message))
                continue
            raise OperationError(message, item.index) from exc
        results.append(result)

    logger.info(
        "Batch finished: %d item(s), %d error(s)",
        len(results),
        sum(1 for r in results if r.is_error),
    )
    return results
