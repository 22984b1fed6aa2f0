"""Quote service - Business logic for quote submission and administration"""

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Optional

from ...errors import InvalidInputError
from ..pricing.catalog import PricingCatalog
from ..pricing.engine import compute_quote
from . import lifecycle
from .repository import QuoteRepository
from .schemas import AdditionalInfo, CustomerDetails, QuoteRecord, QuoteSubmission

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "timestamp": lambda q: q.timestamp,
    "customerName": lambda q: q.customerDetails.name.casefold(),
    "serviceType": lambda q: q.serviceDetails.serviceType.casefold(),
    "finalPrice": lambda q: q.costDetails.finalPrice,
}
SORT_DIRECTIONS = ("asc", "desc")


def generate_quote_id() -> str:
    """
    KMI-<last 6 digits of the ms clock>-<8 random hex chars>.

    The random part comes from secrets, which keeps collisions negligible even
    for submissions in the same millisecond.
    """
    millis = str(int(time.time() * 1000))[-6:]
    return f"KMI-{millis}-{secrets.token_hex(4).upper()}"


def _matches_search(quote: QuoteRecord, search: str) -> bool:
    needle = search.lower()
    haystack = (
        quote.id,
        quote.customerDetails.name,
        quote.customerDetails.email,
        quote.customerDetails.phone,
        quote.serviceDetails.serviceType,
        quote.serviceDetails.propertySize,
    )
    return any(needle in value.lower() for value in haystack)


class QuoteService:
    """Service layer for quote business logic"""

    def __init__(self, repository: QuoteRepository):
        self.repo = repository

    def submit_quote(self, submission: QuoteSubmission, catalog: PricingCatalog) -> QuoteRecord:
        """
        Price the submitted selection server-side and store it as a pending quote.
        Prices computed by the client are never trusted.
        """
        selection = submission.selection
        breakdown = compute_quote(
            catalog,
            selection.serviceType,
            selection.propertySize,
            selection.soilingLevel,
            selection.extras,
        )

        form = submission.formData
        record = QuoteRecord.from_breakdown(
            quote_id=generate_quote_id(),
            timestamp=datetime.now(timezone.utc),
            customer=CustomerDetails(
                name=form.customerName,
                email=form.email,
                phone=form.phone,
                address=form.address,
                preferredDate=form.preferredDate,
                preferredTime=form.preferredTime,
                referralSource=form.referralSource,
                otherReferral=form.otherReferral if form.referralSource == "Other" else None,
            ),
            breakdown=breakdown,
            additional_info=AdditionalInfo(
                notes=form.additionalNotes,
                siteVisitRequired=form.siteVisitRequired,
            ),
            status=lifecycle.INITIAL_STATUS,
        )

        logger.info(
            f"📥 New quote {record.id} for {form.customerName}: "
            f"{breakdown.serviceType} / {breakdown.propertySize}"
        )
        return self.repo.append(record)

    def get_quotes(self) -> list[QuoteRecord]:
        return self.repo.list_quotes()

    def search_quotes(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        direction: str = "desc",
    ) -> tuple[list[QuoteRecord], int]:
        """
        Filter and sort quotes for the admin tracker.

        Returns (matching quotes, total number of stored quotes). Without a
        sort field the storage insertion order is kept.
        """
        if sort is not None and sort not in SORT_FIELDS:
            raise InvalidInputError(
                f"Invalid sort field '{sort}' (expected one of {', '.join(SORT_FIELDS)})"
            )
        if direction not in SORT_DIRECTIONS:
            raise InvalidInputError("Sort direction must be 'asc' or 'desc'")

        quotes = self.repo.list_quotes()
        total = len(quotes)

        if status and status != "all":
            wanted = lifecycle.parse_status(status)
            quotes = [q for q in quotes if q.status == wanted]

        if search:
            quotes = [q for q in quotes if _matches_search(q, search)]

        if sort:
            quotes = sorted(quotes, key=SORT_FIELDS[sort], reverse=direction == "desc")

        return quotes, total

    def get_quote(self, quote_id: str) -> QuoteRecord:
        return self.repo.find_by_id(quote_id)

    def update_status(self, quote_id: str, status: str) -> QuoteRecord:
        return lifecycle.set_status(self.repo, quote_id, status)
