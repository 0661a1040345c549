from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from core.settings import settings
from models.enums import OfferStatus, PaymentStatus, PropertyStatus, UserType
from models.utils import utcnow

NO_CONSTRAINT_SENTINELS = {"all", "any"}


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StrictCamelModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="forbid",
    )


def _validate_half_step(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    if not float(value * 2).is_integer():
        raise ValueError("Bathrooms must be a whole or half number (e.g. 2 or 2.5)")
    return value


def _validate_year_built(value: Optional[int]) -> Optional[int]:
    if value is None:
        return value
    if value < 1600 or value > utcnow().year + 5:
        raise ValueError("Year built is out of range")
    return value


# Users


class UserOut(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    user_type: UserType
    stripe_customer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserTypeUpdateSchema(StrictCamelModel):
    user_type: UserType

    @field_validator("user_type", mode="before")
    @classmethod
    def normalize_user_type(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


# Properties


class PropertyCreateSchema(StrictCamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=120)
    state: str = Field(..., min_length=1, max_length=120)
    zip_code: str = Field(..., min_length=1, max_length=20)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0, allow_inf_nan=False)
    square_feet: int = Field(..., gt=0)
    property_type: str = Field(..., min_length=1, max_length=60)
    year_built: Optional[int] = None
    status: PropertyStatus = PropertyStatus.ACTIVE
    featured_image: Optional[str] = None

    @field_validator("title", "address", "city", "state", "zip_code", "property_type")
    @classmethod
    def strip_text(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("bathrooms")
    @classmethod
    def validate_bathrooms(cls, v: float):
        return _validate_half_step(v)

    @field_validator("year_built")
    @classmethod
    def validate_year_built(cls, v: Optional[int]):
        return _validate_year_built(v)


class PropertyUpdateSchema(StrictCamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    city: Optional[str] = Field(default=None, min_length=1, max_length=120)
    state: Optional[str] = Field(default=None, min_length=1, max_length=120)
    zip_code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    square_feet: Optional[int] = Field(default=None, gt=0)
    property_type: Optional[str] = Field(default=None, min_length=1, max_length=60)
    year_built: Optional[int] = None
    status: Optional[PropertyStatus] = None
    featured_image: Optional[str] = None

    @field_validator("bathrooms")
    @classmethod
    def validate_bathrooms(cls, v: Optional[float]):
        return _validate_half_step(v)

    @field_validator("year_built")
    @classmethod
    def validate_year_built(cls, v: Optional[int]):
        return _validate_year_built(v)

    @model_validator(mode="after")
    def reject_null_required(self):
        required = {
            "title",
            "description",
            "price",
            "address",
            "city",
            "state",
            "zip_code",
            "bedrooms",
            "bathrooms",
            "square_feet",
            "property_type",
            "status",
        }
        nulled = sorted(
            name for name in self.model_fields_set & required if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"These fields cannot be null: {', '.join(nulled)}")
        return self


class PropertyOut(CamelModel):
    id: int
    user_id: str
    title: str
    description: str
    price: int
    address: str
    city: str
    state: str
    zip_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    bedrooms: int
    bathrooms: float
    square_feet: int
    property_type: str
    year_built: Optional[int] = None
    is_premium: bool
    premium_until: Optional[datetime] = None
    status: PropertyStatus
    featured_image: Optional[str] = None
    view_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertySearchFilters(StrictCamelModel):
    """Recognised query parameters of the public property search.

    Blank values mean "no constraint"; so do the client sentinels "All"
    (property type) and "any" (bedrooms/bathrooms). Anything else that does
    not parse fails the whole search.
    """

    location: Optional[str] = Field(default=None, max_length=255)
    min_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    max_price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    property_type: Optional[str] = Field(default=None, max_length=60)
    min_beds: Optional[int] = Field(default=None, ge=0)
    min_baths: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    status: Optional[PropertyStatus] = None
    premium_only: bool = False
    limit: int = Field(
        default=settings.SEARCH_DEFAULT_LIMIT, ge=1, le=settings.SEARCH_MAX_LIMIT
    )

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any):
        if not isinstance(data, dict):
            return data

        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
                if key in {"propertyType", "property_type"} and value.lower() == "all":
                    continue
                if key in {"minBeds", "min_beds", "minBaths", "min_baths"} and (
                    value.lower() in NO_CONSTRAINT_SENTINELS
                ):
                    continue
                if key == "status":
                    value = value.lower()
            elif value is None:
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="after")
    def check_price_range(self):
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("minPrice cannot be greater than maxPrice")
        return self

    def cache_params(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# Images and features


class PropertyImageCreateSchema(StrictCamelModel):
    image_url: str = Field(..., min_length=1)
    caption: Optional[str] = None
    sort_order: int = 0


class PropertyImageOut(CamelModel):
    id: int
    property_id: int
    image_url: str
    caption: Optional[str] = None
    sort_order: int
    created_at: Optional[datetime] = None


class PropertyFeatureCreateSchema(StrictCamelModel):
    feature: str = Field(..., min_length=1, max_length=255)

    @field_validator("feature")
    @classmethod
    def strip_feature(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("Feature cannot be blank")
        return v


class PropertyFeatureOut(CamelModel):
    id: int
    property_id: int
    feature: str
    created_at: Optional[datetime] = None


# Messages


class MessageCreateSchema(StrictCamelModel):
    to_user_id: str = Field(..., min_length=1)
    property_id: int
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("Message cannot be blank")
        return v


class MessageOut(CamelModel):
    id: int
    from_user_id: str
    to_user_id: str
    property_id: int
    message: str
    is_read: bool
    created_at: Optional[datetime] = None


class ReadReceiptOut(CamelModel):
    success: bool
    id: int
    is_read: bool


# Offers


class OfferCreateSchema(StrictCamelModel):
    property_id: int
    amount: int = Field(..., gt=0)
    message: Optional[str] = Field(default=None, max_length=5000)


class OfferStatusUpdateSchema(StrictCamelModel):
    status: OfferStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class OfferOut(CamelModel):
    id: int
    property_id: int
    buyer_id: str
    amount: int
    message: Optional[str] = None
    status: OfferStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Payments


class PaymentIntentCreateSchema(StrictCamelModel):
    property_id: int


class PaymentIntentOut(CamelModel):
    client_secret: Optional[str]
    payment_intent_id: str
    amount: int
    currency: str


class PremiumVerifySchema(StrictCamelModel):
    payment_intent_id: str = Field(..., min_length=1)
    property_id: int


class PremiumVerifyOut(CamelModel):
    success: bool
    message: str
    property: Optional[PropertyOut] = None


class PremiumTransactionOut(CamelModel):
    id: int
    user_id: str
    property_id: Optional[int] = None
    amount: int
    stripe_payment_id: str
    status: PaymentStatus
    created_at: Optional[datetime] = None


# Admin


class AdminPropertyStatusSchema(StrictCamelModel):
    status: PropertyStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class AdminPremiumSchema(StrictCamelModel):
    is_premium: bool
    premium_until: Optional[datetime] = None


class AdminUserRoleSchema(UserTypeUpdateSchema):
    pass


class AdminStatsOut(CamelModel):
    total_properties: int
    active_properties: int
    premium_properties: int
    premium_percentage: int
    total_users: int
    buyer_users: int
    seller_users: int
    admin_users: int
    total_offers: int
    total_revenue: int
