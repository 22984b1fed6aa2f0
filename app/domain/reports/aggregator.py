"""
Reporting aggregator - summary statistics over stored quotes

Everything is recomputed from the record list on each call. Time frames are
evaluated in the REPORT_TIMEZONE zone unless the caller passes an aware `now`,
in which case its zone is used.
"""

import logging
from collections import OrderedDict
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo

from ...config import REPORT_TIMEZONE
from ...errors import InvalidInputError
from ...shared.money import ZERO
from ..quotes.lifecycle import QuoteStatus
from ..quotes.schemas import QuoteRecord
from .schemas import CountItem, FinancialSummary, ReportData, TimeSeriesPoint

logger = logging.getLogger(__name__)

TIME_FRAMES = ("day", "week", "month", "quarter", "year", "all")

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Fails at import on an unknown zone name
REPORT_ZONE = ZoneInfo(REPORT_TIMEZONE)


def _local(ts: datetime, tz: tzinfo) -> datetime:
    # Naive timestamps are UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz)


def _week_start(now: datetime) -> datetime:
    """Local midnight of the most recent Sunday (today when now is a Sunday)"""
    days_since_sunday = (now.weekday() + 1) % 7
    sunday = now.date() - timedelta(days=days_since_sunday)
    # Built from the wall clock so the zone picks the offset in force on that Sunday
    return datetime.combine(sunday, time(0), tzinfo=now.tzinfo)


def _in_time_frame(local_ts: datetime, now: datetime, time_frame: str) -> bool:
    if time_frame == "day":
        return local_ts.date() == now.date()
    if time_frame == "week":
        return local_ts.astimezone(timezone.utc) >= _week_start(now).astimezone(timezone.utc)
    if time_frame == "month":
        return (local_ts.year, local_ts.month) == (now.year, now.month)
    if time_frame == "quarter":
        quarter_start = (now.month - 1) // 3 * 3 + 1
        return local_ts.year == now.year and quarter_start <= local_ts.month < quarter_start + 3
    if time_frame == "year":
        return local_ts.year == now.year
    return True


# (bucket label, chronological sort key) per time frame
BUCKETS: dict[str, Callable[[datetime], tuple[str, object]]] = {
    "day": lambda ts: (f"{ts.hour}:00", ts.hour),
    "week": lambda ts: (WEEKDAY_NAMES[(ts.weekday() + 1) % 7], (ts.weekday() + 1) % 7),
    "month": lambda ts: (str(ts.day), ts.day),
    "quarter": lambda ts: (MONTH_NAMES[ts.month - 1], ts.month),
    "year": lambda ts: (MONTH_NAMES[ts.month - 1], ts.month),
    "all": lambda ts: (ts.date().isoformat(), ts.date()),
}


def _status_counts(records: list[QuoteRecord]) -> list[CountItem]:
    counts = OrderedDict((status, 0) for status in QuoteStatus)
    for record in records:
        counts[record.status] += 1
    return [CountItem(name=status.value.capitalize(), value=n) for status, n in counts.items()]


def _service_type_counts(records: list[QuoteRecord]) -> list[CountItem]:
    counts: dict[str, int] = {}
    for record in records:
        service_type = record.serviceDetails.serviceType
        counts[service_type] = counts.get(service_type, 0) + 1
    return [CountItem(name=name, value=n) for name, n in counts.items()]


def _financial_summary(records: list[QuoteRecord]) -> FinancialSummary:
    completed = [r for r in records if r.status == QuoteStatus.COMPLETED]
    total_revenue = sum((r.costDetails.finalPrice for r in completed), ZERO)
    total_cost = sum((r.costDetails.contractorPrice for r in completed), ZERO)
    average = total_revenue / len(completed) if completed else ZERO

    return FinancialSummary(
        totalRevenue=total_revenue,
        totalCost=total_cost,
        totalProfit=total_revenue - total_cost,
        averageQuoteValue=average,
        completedQuotes=len(completed),
        totalQuotes=len(records),
    )


def _time_series(local_records: list[tuple[datetime, QuoteRecord]], time_frame: str) -> list[TimeSeriesPoint]:
    bucket_of = BUCKETS[time_frame]
    buckets: dict[str, dict] = {}
    for local_ts, record in local_records:
        label, order = bucket_of(local_ts)
        bucket = buckets.setdefault(label, {"order": order, "quotes": 0, "revenue": ZERO})
        bucket["quotes"] += 1
        if record.status == QuoteStatus.COMPLETED:
            bucket["revenue"] += record.costDetails.finalPrice

    ordered = sorted(buckets.items(), key=lambda item: item[1]["order"])
    return [
        TimeSeriesPoint(date=label, quotes=b["quotes"], revenue=b["revenue"])
        for label, b in ordered
    ]


def build_report(
    records: Iterable[QuoteRecord],
    time_frame: str = "month",
    now: Optional[datetime] = None,
) -> ReportData:
    """
    Aggregate quotes for the reporting dashboard.

    Args:
        records: all stored quotes
        time_frame: day, week, month, quarter, year or all
        now: reference time; defaults to the current time. A naive value is
            read as REPORT_TIMEZONE wall-clock time.

    Raises:
        InvalidInputError: unknown time frame
    """
    if time_frame not in TIME_FRAMES:
        raise InvalidInputError(
            f"Invalid time frame '{time_frame}' (expected one of {', '.join(TIME_FRAMES)})"
        )

    if now is None:
        now = datetime.now(REPORT_ZONE)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=REPORT_ZONE)
    tz = now.tzinfo

    local_records = []
    for record in records:
        local_ts = _local(record.timestamp, tz)
        if _in_time_frame(local_ts, now, time_frame):
            local_records.append((local_ts, record))

    filtered = [record for _, record in local_records]
    logger.debug(f"Building {time_frame} report over {len(filtered)} quotes")

    return ReportData(
        timeFrame=time_frame,
        statusCounts=_status_counts(filtered),
        serviceTypeCounts=_service_type_counts(filtered),
        financialSummary=_financial_summary(filtered),
        timeSeriesData=_time_series(local_records, time_frame),
    )
