"""Shared helpers for order totals and order line payloads."""
from __future__ import annotations

from typing import Any, Iterable

from laundry_app.core.cart import CartLine


def calc_line_total(unit_price: float, quantity: int) -> float:
    return float(unit_price) * int(quantity)


def calc_items_total(lines: Iterable[CartLine]) -> float:
    return sum(calc_line_total(line.unit_price, line.quantity) for line in lines)


def calc_quantity(lines: Iterable[CartLine]) -> int:
    return sum(int(line.quantity) for line in lines)


def build_order_header(user_id: str, total_amount: float, notes: str | None) -> dict[str, Any]:
    cleaned = (notes or "").strip()
    return {
        "user_id": user_id,
        "total_amount": float(total_amount),
        "notes": cleaned or None,
    }


def build_order_items(lines: Iterable[CartLine]) -> list[dict[str, Any]]:
    """Order line rows without ``order_id``; the backend fills it in."""
    return [
        {
            "item_type": line.type,
            "item_name": line.name,
            "service_type": line.service_type or None,
            "quantity": int(line.quantity),
            "unit_price": float(line.unit_price),
            "total_price": calc_line_total(line.unit_price, line.quantity),
            "laundry_feature_id": line.laundry_feature_id or None,
            "addon_service_id": line.addon_service_id or None,
        }
        for line in lines
    ]
