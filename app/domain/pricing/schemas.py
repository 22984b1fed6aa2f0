"""Pricing domain schemas - Pydantic models for quote calculation"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ...shared.money import Money


class SoilingLevel(str, Enum):
    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"


class ExtrasSelection(BaseModel):
    """Independently toggleable add-on services"""

    ovenCleaning: bool = False
    fridgeCleaning: bool = False
    microwaveCleaning: bool = False
    carpetCleaning: bool = False
    carpetRooms: int = 0
    stairsCarpetCleaning: bool = False
    windowCleaning: bool = False
    windowCount: int = 0
    mouldCleaning: bool = False
    mouldRooms: int = 0


class QuoteRequest(BaseModel):
    """Schema for a quote calculation (live preview or submission)"""

    serviceType: str
    propertySize: str
    # Kept as a plain string so unknown levels surface as InvalidInputError
    soilingLevel: str
    extras: ExtrasSelection = Field(default_factory=ExtrasSelection)


class ExtraLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cost: Money


class QuoteBreakdown(BaseModel):
    """Fully itemized quote. Currency fields are unrounded Decimals until serialized."""

    model_config = ConfigDict(frozen=True)

    serviceType: str
    propertySize: str
    soilingLevel: SoilingLevel
    estimatedTime: float
    cleanersRequired: int
    labourCost: Money
    materialCost: Money
    baseCost: Money
    extrasBreakdown: list[ExtraLineItem]
    extrasCost: Money
    contractorPrice: Money
    markup: Money
    finalPrice: Money


class CatalogEntryResponse(BaseModel):
    serviceType: str
    propertySize: str
    estimatedHours: float
    cleanersRequired: int
    labourCost: Money
    materialCost: Money


class PricingOptionsResponse(BaseModel):
    serviceTypes: list[str]
    propertySizes: dict[str, list[str]]
    soilingLevels: list[str]
