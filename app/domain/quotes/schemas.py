"""Quote domain schemas - Pydantic models for stored quotes and submissions"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ...shared.money import Money
from ...shared.validators import validate_email, validate_uk_phone
from ...utils.sanitization import validate_and_sanitize_input
from ..pricing.schemas import ExtraLineItem, QuoteBreakdown, QuoteRequest, SoilingLevel
from .lifecycle import QuoteStatus

REFERRAL_SOURCES = ("Google", "Facebook", "Friend/Family", "Previous Customer", "Other")


class CustomerDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
    address: str
    preferredDate: date
    preferredTime: str
    referralSource: str
    otherReferral: Optional[str] = None


class ServiceDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    serviceType: str
    propertySize: str
    soilingLevel: SoilingLevel
    estimatedTime: float
    cleanersRequired: int


class CostDetails(BaseModel):
    """Currency values are stored as fixed 2-decimal strings"""

    model_config = ConfigDict(frozen=True)

    labourCost: Money
    materialCost: Money
    baseCost: Money
    extrasBreakdown: list[ExtraLineItem]
    extrasCost: Money
    contractorPrice: Money
    markup: Money
    finalPrice: Money


class AdditionalInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    notes: Optional[str] = None
    siteVisitRequired: bool = False


class QuoteRecord(BaseModel):
    """A stored quote. Only status changes after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    status: QuoteStatus
    customerDetails: CustomerDetails
    serviceDetails: ServiceDetails
    costDetails: CostDetails
    additionalInfo: AdditionalInfo

    @classmethod
    def from_breakdown(
        cls,
        quote_id: str,
        timestamp: datetime,
        customer: CustomerDetails,
        breakdown: QuoteBreakdown,
        additional_info: AdditionalInfo,
        status: QuoteStatus = QuoteStatus.PENDING,
    ) -> "QuoteRecord":
        return cls(
            id=quote_id,
            timestamp=timestamp,
            status=status,
            customerDetails=customer,
            serviceDetails=ServiceDetails(
                serviceType=breakdown.serviceType,
                propertySize=breakdown.propertySize,
                soilingLevel=breakdown.soilingLevel,
                estimatedTime=breakdown.estimatedTime,
                cleanersRequired=breakdown.cleanersRequired,
            ),
            costDetails=CostDetails(
                labourCost=breakdown.labourCost,
                materialCost=breakdown.materialCost,
                baseCost=breakdown.baseCost,
                extrasBreakdown=breakdown.extrasBreakdown,
                extrasCost=breakdown.extrasCost,
                contractorPrice=breakdown.contractorPrice,
                markup=breakdown.markup,
                finalPrice=breakdown.finalPrice,
            ),
            additionalInfo=additional_info,
        )


class CustomerForm(BaseModel):
    """Customer section of the public quote form"""

    customerName: str
    email: str
    phone: str
    address: str
    preferredDate: date
    preferredTime: str
    referralSource: str
    otherReferral: Optional[str] = None
    additionalNotes: Optional[str] = None
    siteVisitRequired: bool = False

    @field_validator("customerName", "address", "preferredTime", "referralSource")
    @classmethod
    def validate_required_text(cls, v):
        v = validate_and_sanitize_input(v)
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("otherReferral")
    @classmethod
    def validate_other_referral(cls, v):
        if v is None:
            return v
        return validate_and_sanitize_input(v) or None

    @field_validator("additionalNotes")
    @classmethod
    def validate_notes(cls, v):
        if v is None:
            return v
        return validate_and_sanitize_input(v, max_length=2000) or None

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if not v:
            raise ValueError("Phone number is required")
        return validate_uk_phone(v)

    @field_validator("referralSource")
    @classmethod
    def validate_referral_source(cls, v):
        if v not in REFERRAL_SOURCES:
            raise ValueError(f"Referral source must be one of: {', '.join(REFERRAL_SOURCES)}")
        return v

    @model_validator(mode="after")
    def require_other_referral(self):
        if self.referralSource == "Other" and not self.otherReferral:
            raise ValueError("Please specify how you heard about us")
        return self


class QuoteSubmission(BaseModel):
    """Body of the public submission: customer details plus the pricing selection"""

    formData: CustomerForm
    selection: QuoteRequest


class QuoteSubmitResponse(BaseModel):
    success: bool = True
    quoteId: str
    quote: QuoteRecord


class QuoteListResponse(BaseModel):
    quotes: list[QuoteRecord]
    total: int
    filtered: int


class StatusUpdate(BaseModel):
    # Plain string so unknown values surface as InvalidStatusError (400)
    status: str


class QuoteStatusUpdateRequest(BaseModel):
    quoteId: str
    status: str


class QuoteStatusUpdateResponse(BaseModel):
    success: bool = True
    quoteId: str
    status: QuoteStatus
    quote: QuoteRecord
