"""Catalog entities: laundry pricing and add-on home services."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from laundry_app.core.cart import SERVICE_IRON, SERVICE_WASH, SERVICE_WASH_IRON

DEFAULT_FEATURE_CATEGORY = "clothing"
DEFAULT_SERVICE_CATEGORY = "home"
DEFAULT_BOOKING_CHARGE = 30.0
DEFAULT_ICON = "wrench"

SERVICE_LABELS = {
    SERVICE_WASH: "Wash",
    SERVICE_IRON: "Iron",
    SERVICE_WASH_IRON: "Wash+Iron",
}


class LaundryFeature(BaseModel):
    """Priced garment category with per-service pricing."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    category: str = DEFAULT_FEATURE_CATEGORY
    price_wash: Optional[float] = Field(None, ge=0)
    price_iron: Optional[float] = Field(None, ge=0)
    price_wash_iron: Optional[float] = Field(None, ge=0)
    is_active: bool = True
    sort_order: int = 0

    def price_for(self, service_type: str) -> float | None:
        """Price of one garment for the given service, None when not offered."""
        prices = {
            SERVICE_WASH: self.price_wash,
            SERVICE_IRON: self.price_iron,
            SERVICE_WASH_IRON: self.price_wash_iron,
        }
        return prices.get(service_type)

    @property
    def offered_services(self) -> list[str]:
        # zero is treated as "not offered", same as the pricing cards
        return [
            service
            for service in (SERVICE_WASH, SERVICE_IRON, SERVICE_WASH_IRON)
            if self.price_for(service)
        ]


class AddonService(BaseModel):
    """Bookable home service with a flat booking charge."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = DEFAULT_SERVICE_CATEGORY
    booking_charge: float = Field(DEFAULT_BOOKING_CHARGE, ge=0)
    icon_name: Optional[str] = DEFAULT_ICON
    is_active: bool = True
    sort_order: int = 0
