"""Quote router - FastAPI endpoints for quote submission and the admin tracker"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from ...services.notification_service import dispatch_quote_notifications
from ..pricing.catalog import PricingCatalog, get_pricing_catalog
from .repository import QuoteRepository, get_quote_repository
from .schemas import (
    QuoteListResponse,
    QuoteRecord,
    QuoteStatusUpdateRequest,
    QuoteStatusUpdateResponse,
    QuoteSubmission,
    QuoteSubmitResponse,
    StatusUpdate,
)
from .service import QuoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quotes"])


def get_quote_service(repo: QuoteRepository = Depends(get_quote_repository)) -> QuoteService:
    """Dependency injection for QuoteService"""
    return QuoteService(repo)


# ============================================================================
# PUBLIC SUBMISSION
# ============================================================================


@router.post("/send-quote", response_model=QuoteSubmitResponse)
async def send_quote(
    data: QuoteSubmission,
    background_tasks: BackgroundTasks,
    service: QuoteService = Depends(get_quote_service),
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """
    Store the quote, then email the business and the customer in the background.
    Email failures never fail the submission.
    """
    record = service.submit_quote(data, catalog)
    background_tasks.add_task(dispatch_quote_notifications, record)
    return QuoteSubmitResponse(quoteId=record.id, quote=record)


@router.post("/store-quote", response_model=QuoteSubmitResponse)
async def store_quote(
    data: QuoteSubmission,
    service: QuoteService = Depends(get_quote_service),
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """Store the quote without sending any email"""
    record = service.submit_quote(data, catalog)
    return QuoteSubmitResponse(quoteId=record.id, quote=record)


# ============================================================================
# ADMIN TRACKER
# ============================================================================


@router.get("/quotes", response_model=QuoteListResponse)
async def get_quotes(
    service: QuoteService = Depends(get_quote_service),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: str = Query("desc"),
):
    quotes, total = service.search_quotes(status, search, sort, direction)
    return QuoteListResponse(quotes=quotes, total=total, filtered=len(quotes))


@router.get("/quotes/{quote_id}", response_model=QuoteRecord)
async def get_quote(quote_id: str, service: QuoteService = Depends(get_quote_service)):
    return service.get_quote(quote_id)


@router.post("/update-quote-status", response_model=QuoteStatusUpdateResponse)
async def update_quote_status(
    data: QuoteStatusUpdateRequest,
    service: QuoteService = Depends(get_quote_service),
):
    record = service.update_status(data.quoteId, data.status)
    return QuoteStatusUpdateResponse(quoteId=record.id, status=record.status, quote=record)


@router.patch("/quotes/{quote_id}/status", response_model=QuoteStatusUpdateResponse)
async def patch_quote_status(
    quote_id: str,
    data: StatusUpdate,
    service: QuoteService = Depends(get_quote_service),
):
    record = service.update_status(quote_id, data.status)
    return QuoteStatusUpdateResponse(quoteId=record.id, status=record.status, quote=record)
