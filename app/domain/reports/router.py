"""Report router - FastAPI endpoint for the reporting dashboard"""

from fastapi import APIRouter, Depends, Query

from ..quotes.repository import QuoteRepository, get_quote_repository
from .aggregator import build_report
from .schemas import ReportData

router = APIRouter(prefix="/api", tags=["Reports"])


@router.get("/reports", response_model=ReportData)
async def get_report(
    timeFrame: str = Query("month"),
    repo: QuoteRepository = Depends(get_quote_repository),
):
    return build_report(repo.list_quotes(), timeFrame)
