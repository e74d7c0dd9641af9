# dao/lines.py
"""Normalisation of the line lists posted to the issuance and LAR workflows."""
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, List, Optional

from dao.errors import ValidationError


def to_quantity(x, field: str = "quantity") -> int:
    """Whole-number quantity from form/JSON input ("5", 5, 5.0)."""
    if isinstance(x, bool):
        raise ValidationError(f"{field} must be a whole number.", field=field)
    if isinstance(x, int):
        return x
    if isinstance(x, float) and x.is_integer():
        return int(x)
    if isinstance(x, str) and x.strip().lstrip("-").isdigit():
        return int(x.strip())
    raise ValidationError(f"{field} must be a whole number.", field=field)


def to_id(x, field: str) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        raise ValidationError(f"Missing or invalid {field}.", field=field)


def _to_bool(v) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)


def normalize_issue_lines(lines: List[Dict]) -> "OrderedDict[int, Dict]":
    """
    -> {item_id: {"item_id", "quantity", "is_returnable"}}
    Lines for the same item are merged; each voucher carries one movement per item.
    """
    if not lines:
        raise ValidationError("Please add at least one item to issue.", field="lines")

    merged: "OrderedDict[int, Dict]" = OrderedDict()
    for idx, ln in enumerate(lines, 1):
        item_id = to_id(ln.get("item_id"), f"lines[{idx}].item_id")
        qty = to_quantity(ln.get("quantity"), f"lines[{idx}].quantity")
        if qty <= 0:
            raise ValidationError(
                f"Line {idx}: quantity must be greater than zero.",
                field=f"lines[{idx}].quantity",
            )
        returnable = _to_bool(ln.get("is_returnable", True))

        if item_id in merged:
            if merged[item_id]["is_returnable"] != returnable:
                raise ValidationError(
                    f"Line {idx}: item #{item_id} is listed both as returnable and consumable.",
                    field=f"lines[{idx}].is_returnable",
                )
            merged[item_id]["quantity"] += qty
        else:
            merged[item_id] = {
                "item_id": item_id,
                "quantity": qty,
                "is_returnable": returnable,
            }
    return merged


def normalize_return_lines(lines: List[Dict]) -> "OrderedDict[int, int]":
    """
    -> {movement_id: total quantity}
    Zero lines are dropped (unticked rows of the return form); at least one
    positive line must remain.
    """
    totals: "OrderedDict[int, int]" = OrderedDict()
    for idx, ln in enumerate(lines or [], 1):
        movement_id = to_id(ln.get("movement_id"), f"lines[{idx}].movement_id")
        qty = to_quantity(ln.get("quantity"), f"lines[{idx}].quantity")
        if qty < 0:
            raise ValidationError(
                f"Line {idx}: return quantity cannot be negative.",
                field=f"lines[{idx}].quantity",
            )
        if qty == 0:
            continue
        totals[movement_id] = totals.get(movement_id, 0) + qty
    if not totals:
        raise ValidationError(
            "Please select at least one item to return.", field="lines"
        )
    return totals


def to_date(value, field: str, required: bool = True) -> Optional[date]:
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required.", field=field)
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD).", field=field)


def to_datetime(value, field: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date/time.", field=field)
