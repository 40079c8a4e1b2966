"""In-memory cart ledger with de-duplication by composite line key."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

ITEM_TYPE_LAUNDRY = "laundry"
ITEM_TYPE_ADDON = "addon"

SERVICE_WASH = "wash"
SERVICE_IRON = "iron"
SERVICE_WASH_IRON = "wash_iron"
SERVICE_TYPES = (SERVICE_WASH, SERVICE_IRON, SERVICE_WASH_IRON)

LineKey = tuple[str, str, Optional[str], Optional[str], Optional[str]]


@dataclass
class CartLine:
    """Single line in the cart."""

    type: str
    name: str
    unit_price: float
    quantity: int
    service_type: str | None = None
    laundry_feature_id: str | None = None
    addon_service_id: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def key(self) -> LineKey:
        return (
            self.type,
            self.name,
            self.service_type,
            self.laundry_feature_id,
            self.addon_service_id,
        )

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "service_type": self.service_type,
            "unit_price": self.unit_price,
            "quantity": int(self.quantity),
            "laundry_feature_id": self.laundry_feature_id,
            "addon_service_id": self.addon_service_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartLine:
        return cls(
            id=str(data.get("id") or uuid.uuid4().hex),
            type=str(data.get("type", ITEM_TYPE_LAUNDRY)),
            name=str(data.get("name", "")),
            service_type=data.get("service_type"),
            unit_price=float(data.get("unit_price", 0) or 0),
            quantity=int(data.get("quantity", 0) or 0),
            laundry_feature_id=data.get("laundry_feature_id"),
            addon_service_id=data.get("addon_service_id"),
        )


class CartLedger:
    """Ordered cart lines for one session.

    Lines are indexed by ``(type, name, service_type, laundry_feature_id,
    addon_service_id)``; adding an equivalent line bumps its quantity.
    Dicts keep insertion order, so ``lines`` comes back in the order the
    customer added them.
    """

    def __init__(self, lines: list[CartLine] | None = None) -> None:
        self._by_key: dict[LineKey, CartLine] = {}
        for line in lines or []:
            self._by_key[line.key] = line

    @property
    def lines(self) -> list[CartLine]:
        return list(self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def is_empty(self) -> bool:
        return not self._by_key

    def get(self, line_id: str) -> CartLine | None:
        for line in self._by_key.values():
            if line.id == line_id:
                return line
        return None

    def add(
        self,
        type: str,
        name: str,
        unit_price: float,
        quantity: int = 1,
        service_type: str | None = None,
        laundry_feature_id: str | None = None,
        addon_service_id: str | None = None,
    ) -> CartLine:
        line = CartLine(
            type=type,
            name=name,
            unit_price=unit_price,
            quantity=quantity,
            service_type=service_type,
            laundry_feature_id=laundry_feature_id,
            addon_service_id=addon_service_id,
        )
        existing = self._by_key.get(line.key)
        if existing is not None:
            existing.quantity = existing.quantity + quantity
            return existing
        self._by_key[line.key] = line
        return line

    def remove(self, line_id: str) -> bool:
        line = self.get(line_id)
        if line is None:
            return False
        del self._by_key[line.key]
        return True

    def update_quantity(self, line_id: str, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove(line_id)
        line = self.get(line_id)
        if line is None:
            return False
        line.quantity = quantity
        return True

    def clear(self) -> None:
        self._by_key.clear()

    def total(self) -> float:
        return sum(line.unit_price * line.quantity for line in self._by_key.values())

    def item_count(self) -> int:
        return sum(line.quantity for line in self._by_key.values())

    def to_dict(self) -> dict[str, Any]:
        return {"items": [line.to_dict() for line in self._by_key.values()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CartLedger:
        raw_items = (data or {}).get("items") or []
        return cls([CartLine.from_dict(item) for item in raw_items if isinstance(item, dict)])
