from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol

from letor.data.record import Record
from letor.errors import OperationCancelled

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


def check_cancelled(cancel: Optional[CancelSignal]) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled("Operation cancelled")


def group_records(
    records: Iterable[Record],
    *,
    cancel: Optional[CancelSignal] = None,
) -> dict[int, list[Record]]:
    """
    Map each query id to its records.

    Query ids come out in the order they are first seen and records keep their
    input order inside a group. Nothing is sorted.
    """
    groups: dict[int, list[Record]] = {}
    for record in records:
        members = groups.get(record.group_id)
        if members is None:
            check_cancelled(cancel)
            members = groups[record.group_id] = []
        members.append(record)
    logger.debug(f"Grouped records into {len(groups)} query groups")
    return groups
