#!/usr/bin/env python3
"""
Script to verify the pricing catalog and show a sample quote per entry
Usage: python verify_pricing_data.py [path/to/pricing_data.json]
"""

import sys
import logging

from app.config import PRICING_DATA_PATH
from app.domain.pricing.catalog import load_catalog
from app.domain.pricing.engine import compute_quote
from app.errors import QuoteAppError
from app.shared.money import format_gbp

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def verify_pricing_data(path=None):
    """Load the catalog and price every entry at the lightest soiling level"""
    path = path or PRICING_DATA_PATH
    try:
        catalog = load_catalog(path)
    except QuoteAppError as e:
        logger.error(f"\n❌ {e.message}")
        return False

    service_types = catalog.service_types()
    logger.info(f"\n📋 {len(catalog)} entries, {len(service_types)} service types in {path}")

    for service_type in service_types:
        logger.info(f"\n{'='*80}")
        logger.info(f"{service_type}")
        for property_size in catalog.property_sizes(service_type):
            entry = catalog.lookup(service_type, property_size)
            quote = compute_quote(catalog, service_type, property_size, "Light")
            logger.info(
                f"  - {property_size:<40} {entry.estimatedHours:>5}h x{entry.cleanersRequired}"
                f"  base {format_gbp(quote.baseCost):>9}  final {format_gbp(quote.finalPrice):>9}"
            )

    # Every service type should price the same set of property sizes
    all_sizes = set(catalog.property_sizes())
    missing = False
    for service_type in service_types:
        gaps = all_sizes - set(catalog.property_sizes(service_type))
        if gaps:
            missing = True
            logger.warning(f"\n⚠️  {service_type} has no price for: {', '.join(sorted(gaps))}")

    if not missing:
        logger.info("\n✅ Every service type covers every property size")
    return True


if __name__ == "__main__":
    ok = verify_pricing_data(sys.argv[1] if len(sys.argv) > 1 else None)
    sys.exit(0 if ok else 1)
