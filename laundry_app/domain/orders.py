"""Order and booking rows written by checkout."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

BOOKING_STATUS_PENDING = "pending"


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    order_id: str
    item_type: str
    item_name: str
    service_type: Optional[str] = None
    quantity: int
    unit_price: float
    total_price: float
    laundry_feature_id: Optional[str] = None
    addon_service_id: Optional[str] = None


class Order(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    total_amount: float
    notes: Optional[str] = None
    items: list[OrderItem] = []


class ServiceBooking(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    addon_service_id: str
    booking_charge: float
    notes: Optional[str] = None
    status: str = BOOKING_STATUS_PENDING
