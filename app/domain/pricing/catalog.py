"""Pricing catalog - loader, cache and lookup"""

import json
import logging
import os
from decimal import Decimal
from threading import Lock
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import PRICING_CACHE_MODE, PRICING_DATA_PATH
from ...errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

CACHE_MODES = ("cached", "fresh")


class CatalogEntry(BaseModel):
    """One pricing row keyed by (service type, property size)"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    serviceType: str = Field(alias="Service Type")
    propertySize: str = Field(alias="Property Size")
    estimatedHours: Decimal = Field(alias="Estimated Time (hrs)", ge=0)
    cleanersRequired: int = Field(alias="Cleaners Required", ge=1)
    labourCost: Decimal = Field(alias="Labour Cost (£)", ge=0)
    materialCost: Decimal = Field(alias="Material Cost (£)", ge=0)


class PricingCatalog:
    """Read-only, ordered collection of catalog entries"""

    def __init__(self, entries: list[CatalogEntry]):
        self._entries = tuple(entries)
        self._index: dict[tuple[str, str], CatalogEntry] = {}
        for entry in self._entries:
            key = (entry.serviceType, entry.propertySize)
            if key in self._index:
                raise StorageError(
                    f"Duplicate pricing entry for {entry.serviceType} / {entry.propertySize}"
                )
            self._index[key] = entry

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        return self._entries

    def lookup(self, service_type: str, property_size: str) -> CatalogEntry:
        entry = self._index.get((service_type, property_size))
        if entry is None:
            raise NotFoundError("No matching pricing data found")
        return entry

    def service_types(self) -> list[str]:
        return list(dict.fromkeys(e.serviceType for e in self._entries))

    def property_sizes(self, service_type: Optional[str] = None) -> list[str]:
        return list(
            dict.fromkeys(
                e.propertySize
                for e in self._entries
                if service_type is None or e.serviceType == service_type
            )
        )

    @classmethod
    def from_rows(cls, rows: list[dict]) -> "PricingCatalog":
        if not isinstance(rows, list):
            raise StorageError("Pricing data must be a list of catalog rows")
        try:
            entries = [CatalogEntry.model_validate(row) for row in rows]
        except ValidationError as e:
            raise StorageError(f"Invalid pricing data: {e.error_count()} error(s)") from e
        return cls(entries)


def load_catalog(path: Optional[str] = None) -> PricingCatalog:
    """Read and validate the catalog document from disk"""
    path = path or PRICING_DATA_PATH
    if not os.path.exists(path):
        logger.error(f"❌ Pricing data file not found: {path}")
        raise NotFoundError("Pricing data not available")
    try:
        with open(path, encoding="utf-8") as f:
            rows = json.load(f, parse_float=Decimal)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ Failed to read pricing data from {path}: {e}")
        raise StorageError("Failed to read pricing data") from e

    catalog = PricingCatalog.from_rows(rows)
    logger.info(f"📊 Loaded {len(catalog)} pricing entries from {path}")
    return catalog


class CatalogProvider:
    """
    Hands out the catalog used by each request.

    In "cached" mode the catalog is loaded once and reused until the file's
    mtime changes. In "fresh" mode every call re-reads the file.
    """

    def __init__(self, path: str, mode: str = "cached"):
        if mode not in CACHE_MODES:
            raise ValueError(f"Unknown pricing cache mode '{mode}' (expected one of {CACHE_MODES})")
        self.path = path
        self.mode = mode
        self._catalog: Optional[PricingCatalog] = None
        self._mtime: Optional[float] = None
        self._lock = Lock()

    def get(self) -> PricingCatalog:
        if self.mode == "fresh":
            return load_catalog(self.path)

        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            mtime = None

        with self._lock:
            if self._catalog is None or self._mtime != mtime:
                self._catalog = load_catalog(self.path)
                self._mtime = mtime
            return self._catalog

    def reload(self) -> PricingCatalog:
        """Force cache invalidation + re-read from disk"""
        with self._lock:
            self._catalog = None
            self._mtime = None
        return self.get()


catalog_provider = CatalogProvider(PRICING_DATA_PATH, PRICING_CACHE_MODE)


def get_pricing_catalog() -> PricingCatalog:
    """Dependency injection for the pricing catalog"""
    return catalog_provider.get()


def reload_catalog() -> PricingCatalog:
    return catalog_provider.reload()
