"""Pricing router - FastAPI endpoints for the catalog and live quote preview"""

import logging

from fastapi import APIRouter, Depends

from .catalog import PricingCatalog, get_pricing_catalog, reload_catalog
from .engine import compute_quote
from .schemas import (
    CatalogEntryResponse,
    PricingOptionsResponse,
    QuoteBreakdown,
    QuoteRequest,
    SoilingLevel,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Pricing"])


@router.post("/calculate-quote", response_model=QuoteBreakdown)
async def calculate_quote(
    data: QuoteRequest,
    catalog: PricingCatalog = Depends(get_pricing_catalog),
):
    """Live quote preview. Nothing is stored."""
    return compute_quote(
        catalog,
        data.serviceType,
        data.propertySize,
        data.soilingLevel,
        data.extras,
    )


@router.get("/pricing/options", response_model=PricingOptionsResponse)
async def get_pricing_options(catalog: PricingCatalog = Depends(get_pricing_catalog)):
    """Service types, property sizes per service type and soiling levels for the quote form"""
    service_types = catalog.service_types()
    return PricingOptionsResponse(
        serviceTypes=service_types,
        propertySizes={st: catalog.property_sizes(st) for st in service_types},
        soilingLevels=[level.value for level in SoilingLevel],
    )


@router.get("/pricing/catalog", response_model=list[CatalogEntryResponse])
async def get_pricing_catalog_entries(catalog: PricingCatalog = Depends(get_pricing_catalog)):
    return [
        CatalogEntryResponse(
            serviceType=e.serviceType,
            propertySize=e.propertySize,
            estimatedHours=float(e.estimatedHours),
            cleanersRequired=e.cleanersRequired,
            labourCost=e.labourCost,
            materialCost=e.materialCost,
        )
        for e in catalog.entries
    ]


@router.post("/pricing/reload")
async def reload_pricing_catalog():
    """Force a re-read of the pricing data file"""
    catalog = reload_catalog()
    logger.info(f"🔄 Pricing catalog reloaded ({len(catalog)} entries)")
    return {"success": True, "entries": len(catalog)}
