"""Report schemas - Pydantic models for the reporting dashboard"""

from pydantic import BaseModel

from ...shared.money import Money


class CountItem(BaseModel):
    name: str
    value: int


class FinancialSummary(BaseModel):
    totalRevenue: Money
    totalCost: Money
    totalProfit: Money
    averageQuoteValue: Money
    completedQuotes: int
    totalQuotes: int


class TimeSeriesPoint(BaseModel):
    date: str
    quotes: int
    revenue: Money


class ReportData(BaseModel):
    timeFrame: str
    statusCounts: list[CountItem]
    serviceTypeCounts: list[CountItem]
    financialSummary: FinancialSummary
    timeSeriesData: list[TimeSeriesPoint]
