"""
Quote lifecycle - status values and transitions for stored quotes

Statuses: pending → approved / completed / cancelled, and back again.
Every status can move to every other status; cancelled and completed quotes
can be reopened.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Union

from ...errors import InvalidStatusError

if TYPE_CHECKING:
    from .repository import QuoteRepository
    from .schemas import QuoteRecord

logger = logging.getLogger(__name__)


class QuoteStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


INITIAL_STATUS = QuoteStatus.PENDING

# Fully connected: any status may move to any other, so nothing is ever rejected
VALID_TRANSITIONS: dict[QuoteStatus, frozenset[QuoteStatus]] = {
    status: frozenset(QuoteStatus) for status in QuoteStatus
}


def parse_status(value: Union[str, QuoteStatus]) -> QuoteStatus:
    try:
        return QuoteStatus(value)
    except ValueError as e:
        raise InvalidStatusError("Invalid status value") from e


def validate_status_transition(current_status: QuoteStatus, new_status: QuoteStatus) -> bool:
    """
    Validate if a quote status transition is allowed

    Args:
        current_status: Current quote status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    if current_status == new_status:
        return True

    return new_status in VALID_TRANSITIONS.get(current_status, frozenset())


def set_status(
    repository: "QuoteRepository", record_id: str, new_status: Union[str, QuoteStatus]
) -> "QuoteRecord":
    """
    Change the status of a stored quote. Only the status field is touched.

    Raises:
        InvalidStatusError: new_status is not one of the four lifecycle values
        NotFoundError: no stored quote with record_id
    """
    status = parse_status(new_status)
    record = repository.update_status(record_id, status)
    logger.info(f"✅ Quote {record_id} status set to {status.value}")
    return record
