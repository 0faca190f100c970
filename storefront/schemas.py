# schemas.py

"""Pydantic models for stored orders and the invoice issuer profile.

Orders reach the invoice pipeline as the JSON documents the storefront
persists (camelCase keys, Mongo-style ``_id``). Historical orders may
reference products whose snapshot predates newer fields, so every field
has a default and unknown keys are ignored.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _StoredDocument(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class ProductSnapshot(_StoredDocument):
    """Product fields as captured on an order item."""

    id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("_id", "id")
    )
    name: Optional[str] = None
    price: Optional[Decimal] = None
    offer_price: Optional[Decimal] = None
    gst_percentage: Optional[Decimal] = None
    shipping_charges: Optional[Decimal] = None
    image: list[str] = []
    category: Optional[str] = None
    sub_category: Optional[str] = None
    weight_value: Optional[Decimal] = None
    weight_unit: Optional[str] = None

    @field_validator("image", mode="before")
    @classmethod
    def _image_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class OrderItem(_StoredDocument):
    """One ``{quantity, product}`` entry of an order."""

    quantity: Optional[int] = None
    product: Optional[ProductSnapshot] = None
    product_snapshot: Optional[ProductSnapshot] = None

    @field_validator("product", "product_snapshot", mode="before")
    @classmethod
    def _unpopulated_ref(cls, value):
        # An unpopulated reference is stored as the bare product id.
        if isinstance(value, str):
            return {"_id": value}
        return value

    @property
    def resolved_product(self) -> ProductSnapshot:
        """Snapshot taken at order time, else the live product, else empty."""

        return self.product_snapshot or self.product or ProductSnapshot()


class Address(_StoredDocument):
    """Shipping address attached to an order."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.firstname, self.lastname) if p)


class Order(_StoredDocument):
    """Stored order as consumed by the pricing and invoice pipeline."""

    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"))
    created_at: Optional[datetime] = None
    transaction_id: Optional[str] = None
    is_paid: bool = False
    payment_type: Optional[str] = None
    amount: Optional[Decimal] = None
    address: Optional[Address] = None
    items: list[OrderItem] = []

    @field_validator("id", mode="before")
    @classmethod
    def _null_id(cls, value):
        return "" if value is None else value

    @field_validator("is_paid", mode="before")
    @classmethod
    def _null_is_paid(cls, value):
        return False if value is None else value

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, value):
        return value or []


class IssuerProfile(BaseModel):
    """Business details printed on every invoice."""

    name: str = "Storefront"
    tagline: str = ""
    gstin: str = ""
    pan: str = ""
    phone: str = ""
    email: str = ""
    terms: list[str] = [
        "Computer generated invoice - E. & O. E.",
    ]
    jurisdiction: str = ""
    thank_you: str = "Thank you!"
