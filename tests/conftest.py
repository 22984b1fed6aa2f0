"""
Pytest configuration and fixtures for the quotes API tests.
"""
import json
import os
import tempfile
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Keep test runs away from the real data directory and mail servers
os.environ["QUOTES_DATA_DIR"] = tempfile.mkdtemp(prefix="kmi-quotes-")
os.environ["EMAIL_DELIVERY_ENABLED"] = "false"

from app.domain.pricing.catalog import PricingCatalog, get_pricing_catalog
from app.domain.pricing.engine import compute_quote
from app.domain.pricing.schemas import ExtrasSelection
from app.domain.quotes.lifecycle import QuoteStatus
from app.domain.quotes.repository import JsonDocumentStore, QuoteRepository, get_quote_repository
from app.domain.quotes.schemas import AdditionalInfo, CustomerDetails, QuoteRecord
from app.main import app


CATALOG_ROWS = [
    {
        "Service Type": "Regular Domestic Cleaning",
        "Property Size": "2-bed (flat)",
        "Estimated Time (hrs)": 3,
        "Cleaners Required": 1,
        "Labour Cost (£)": 60,
        "Material Cost (£)": 10,
        "Base Cost (£)": 70,
        "Final Price (£)": 91,
    },
    {
        "Service Type": "Deep Cleaning",
        "Property Size": "2-bed (flat)",
        "Estimated Time (hrs)": 6,
        "Cleaners Required": 2,
        "Labour Cost (£)": 120,
        "Material Cost (£)": 15,
    },
    {
        "Service Type": "Deep Cleaning",
        "Property Size": "3-bed (house w/ stairs)",
        "Estimated Time (hrs)": 9,
        "Cleaners Required": 2,
        "Labour Cost (£)": 180,
        "Material Cost (£)": 22.5,
    },
]


@pytest.fixture
def catalog_rows() -> list[dict]:
    return [dict(row) for row in CATALOG_ROWS]


@pytest.fixture
def catalog(catalog_rows) -> PricingCatalog:
    return PricingCatalog.from_rows(catalog_rows)


@pytest.fixture
def catalog_file(tmp_path, catalog_rows):
    """Catalog document written to disk"""
    path = tmp_path / "pricing_data.json"
    path.write_text(json.dumps(catalog_rows), encoding="utf-8")
    return path


@pytest.fixture
def quote_store(tmp_path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "quotes" / "quotes.json")


@pytest.fixture
def repository(quote_store) -> QuoteRepository:
    return QuoteRepository(quote_store)


@pytest.fixture
def make_record(catalog):
    """Build a QuoteRecord priced from the test catalog"""

    def _make(
        quote_id: str = "KMI-123456-0000ABCD",
        status: QuoteStatus = QuoteStatus.PENDING,
        timestamp: datetime = datetime(2026, 10, 14, 10, 30, tzinfo=timezone.utc),
        service_type: str = "Regular Domestic Cleaning",
        property_size: str = "2-bed (flat)",
        soiling_level: str = "Light",
        extras: ExtrasSelection = None,
        name: str = "Jane Smith",
        email: str = "jane@example.com",
        site_visit: bool = False,
        notes: str = None,
    ) -> QuoteRecord:
        breakdown = compute_quote(catalog, service_type, property_size, soiling_level, extras)
        return QuoteRecord.from_breakdown(
            quote_id=quote_id,
            timestamp=timestamp,
            customer=CustomerDetails(
                name=name,
                email=email,
                phone="+447700900123",
                address="1 High Street, London",
                preferredDate=date(2026, 11, 2),
                preferredTime="Morning",
                referralSource="Google",
            ),
            breakdown=breakdown,
            additional_info=AdditionalInfo(notes=notes, siteVisitRequired=site_visit),
            status=status,
        )

    return _make


@pytest.fixture
def priced_record():
    """Stored-shape record with explicit prices, for report arithmetic"""
    return _priced_record


def _priced_record(
    quote_id: str,
    status: QuoteStatus,
    final_price: str,
    contractor_price: str,
    timestamp: datetime,
    service_type: str = "Regular Domestic Cleaning",
) -> QuoteRecord:
    return QuoteRecord.model_validate(
        {
            "id": quote_id,
            "timestamp": timestamp.isoformat(),
            "status": status.value,
            "customerDetails": {
                "name": "Test Customer",
                "email": "customer@example.com",
                "phone": "+447700900123",
                "address": "1 High Street",
                "preferredDate": "2026-11-02",
                "preferredTime": "Morning",
                "referralSource": "Google",
            },
            "serviceDetails": {
                "serviceType": service_type,
                "propertySize": "2-bed (flat)",
                "soilingLevel": "Light",
                "estimatedTime": 3,
                "cleanersRequired": 1,
            },
            "costDetails": {
                "labourCost": "0.00",
                "materialCost": "0.00",
                "baseCost": contractor_price,
                "extrasBreakdown": [],
                "extrasCost": "0.00",
                "contractorPrice": contractor_price,
                "markup": str(Decimal(final_price) - Decimal(contractor_price)),
                "finalPrice": final_price,
            },
            "additionalInfo": {"notes": None, "siteVisitRequired": False},
        }
    )


@pytest.fixture
def form_data() -> dict:
    return {
        "customerName": "Jane Smith",
        "email": "Jane@Example.com",
        "phone": "07700 900123",
        "address": "1 High Street, London",
        "preferredDate": "2026-11-02",
        "preferredTime": "Morning",
        "referralSource": "Google",
        "additionalNotes": "Two cats, please keep doors closed",
        "siteVisitRequired": False,
    }


@pytest.fixture
def selection() -> dict:
    return {
        "serviceType": "Regular Domestic Cleaning",
        "propertySize": "2-bed (flat)",
        "soilingLevel": "Medium",
        "extras": {"ovenCleaning": True, "carpetCleaning": True, "carpetRooms": 2},
    }


@pytest.fixture
def sent_notifications(monkeypatch) -> list:
    """Capture dispatched notifications instead of rendering and sending email"""
    sent = []

    async def fake_dispatch(record):
        sent.append(record)
        return {"business_sent": True, "customer_sent": True}

    monkeypatch.setattr("app.domain.quotes.router.dispatch_quote_notifications", fake_dispatch)
    return sent


@pytest.fixture
def client(catalog, repository, sent_notifications) -> Generator:
    """Create test client with catalog and storage overrides."""
    app.dependency_overrides[get_pricing_catalog] = lambda: catalog
    app.dependency_overrides[get_quote_repository] = lambda: repository

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
