"""
Pricing engine - turns a catalog entry plus the submitted options into an
itemized quote breakdown.

Pure and side-effect free. The preview endpoint and the submission path both
call compute_quote, so the customer sees exactly the price that gets stored.
"""

from decimal import Decimal
from typing import Optional, Union

from ...errors import InvalidInputError
from ...shared.money import ZERO
from .catalog import PricingCatalog
from .schemas import ExtraLineItem, ExtrasSelection, QuoteBreakdown, SoilingLevel

# Labour multiplier per soiling level
SOILING_FACTORS: dict[SoilingLevel, Decimal] = {
    SoilingLevel.LIGHT: Decimal("1.00"),
    SoilingLevel.MEDIUM: Decimal("1.15"),
    SoilingLevel.HEAVY: Decimal("1.30"),
}

MARKUP_RATE = Decimal("0.30")

# Flat-rate extras
OVEN_CLEANING_COST = Decimal("20")
FRIDGE_CLEANING_COST = Decimal("10")
MICROWAVE_CLEANING_COST = Decimal("5")
STAIRS_CARPET_CLEANING_COST = Decimal("10")

# Per-unit extras
CARPET_COST_PER_ROOM = Decimal("15")
WINDOW_COST_PER_WINDOW = Decimal("3")
MOULD_COST_PER_ROOM = Decimal("25")


def parse_soiling_level(value: Union[str, SoilingLevel]) -> SoilingLevel:
    try:
        return SoilingLevel(value)
    except ValueError as e:
        raise InvalidInputError(
            f"Invalid soiling level '{value}' (expected Light, Medium or Heavy)"
        ) from e


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def build_extras(extras: ExtrasSelection) -> list[ExtraLineItem]:
    """
    Itemize the selected extras in display order.
    Items whose condition is false are left out entirely.
    """
    for field in ("carpetRooms", "windowCount", "mouldRooms"):
        if getattr(extras, field) < 0:
            raise InvalidInputError(f"{field} cannot be negative")

    items: list[ExtraLineItem] = []

    if extras.ovenCleaning:
        items.append(ExtraLineItem(name="Oven Cleaning", cost=OVEN_CLEANING_COST))

    if extras.fridgeCleaning:
        items.append(ExtraLineItem(name="Fridge Cleaning", cost=FRIDGE_CLEANING_COST))

    if extras.microwaveCleaning:
        items.append(ExtraLineItem(name="Microwave Cleaning", cost=MICROWAVE_CLEANING_COST))

    if extras.carpetCleaning and extras.carpetRooms > 0:
        items.append(
            ExtraLineItem(
                name=f"Carpet Cleaning ({_plural(extras.carpetRooms, 'room', 'rooms')})",
                cost=CARPET_COST_PER_ROOM * extras.carpetRooms,
            )
        )

    if extras.stairsCarpetCleaning:
        items.append(
            ExtraLineItem(name="Stairs Carpet Cleaning", cost=STAIRS_CARPET_CLEANING_COST)
        )

    if extras.windowCleaning and extras.windowCount > 0:
        items.append(
            ExtraLineItem(
                name=f"Window Cleaning ({_plural(extras.windowCount, 'window', 'windows')})",
                cost=WINDOW_COST_PER_WINDOW * extras.windowCount,
            )
        )

    if extras.mouldCleaning and extras.mouldRooms > 0:
        items.append(
            ExtraLineItem(
                name=f"Mould Cleaning ({_plural(extras.mouldRooms, 'room', 'rooms')})",
                cost=MOULD_COST_PER_ROOM * extras.mouldRooms,
            )
        )

    return items


def compute_quote(
    catalog: PricingCatalog,
    service_type: str,
    property_size: str,
    soiling_level: Union[str, SoilingLevel],
    extras: Optional[ExtrasSelection] = None,
) -> QuoteBreakdown:
    """
    Compute the itemized quote for one (service type, property size) pair.

    Raises:
        NotFoundError: no catalog entry for the pair
        InvalidInputError: unknown soiling level or a negative extras count
    """
    level = parse_soiling_level(soiling_level)
    entry = catalog.lookup(service_type, property_size)
    extras = extras or ExtrasSelection()

    labour_cost = entry.labourCost * SOILING_FACTORS[level]
    material_cost = entry.materialCost

    extras_breakdown = build_extras(extras)
    extras_cost = sum((item.cost for item in extras_breakdown), ZERO)

    # Rounding happens only at serialization, on every field independently
    base_cost = labour_cost + material_cost
    contractor_price = base_cost + extras_cost
    markup = contractor_price * MARKUP_RATE
    final_price = contractor_price + markup

    return QuoteBreakdown(
        serviceType=entry.serviceType,
        propertySize=entry.propertySize,
        soilingLevel=level,
        estimatedTime=float(entry.estimatedHours),
        cleanersRequired=entry.cleanersRequired,
        labourCost=labour_cost,
        materialCost=material_cost,
        baseCost=base_cost,
        extrasBreakdown=extras_breakdown,
        extrasCost=extras_cost,
        contractorPrice=contractor_price,
        markup=markup,
        finalPrice=final_price,
    )
