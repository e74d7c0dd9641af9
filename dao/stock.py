# dao/stock.py
"""Stock ledger for both tiers. Nothing else writes stock quantities."""
import logging
from typing import Iterable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.stock import HQStock, DistrictStock
from dao.errors import ValidationError, NotFoundError, InvariantViolation
from dao.lines import to_quantity as _qty
from dao import master as master_dao

log = logging.getLogger(__name__)


# ---------- lookups / locking ----------
def get_hq_stock(item_id: int) -> Optional[HQStock]:
    return HQStock.query.filter_by(item_id=item_id).one_or_none()


def get_district_stock(district_id: int, item_id: int) -> Optional[DistrictStock]:
    return DistrictStock.query.filter_by(
        district_id=district_id, item_id=item_id
    ).one_or_none()


def lock_hq_rows(item_ids: Iterable[int]) -> Dict[int, HQStock]:
    """SELECT ... FOR UPDATE the HQ rows, ascending item id to avoid deadlocks."""
    ids = sorted(set(int(x) for x in item_ids))
    if not ids:
        return {}
    rows = (
        HQStock.query.filter(HQStock.item_id.in_(ids))
        .order_by(HQStock.item_id.asc())
        .with_for_update()
        .all()
    )
    return {r.item_id: r for r in rows}


def lock_district_rows(district_id: int, item_ids: Iterable[int]) -> Dict[int, DistrictStock]:
    ids = sorted(set(int(x) for x in item_ids))
    if not ids:
        return {}
    rows = (
        DistrictStock.query.filter(
            DistrictStock.district_id == district_id,
            DistrictStock.item_id.in_(ids),
        )
        .order_by(DistrictStock.item_id.asc())
        .with_for_update()
        .all()
    )
    return {r.item_id: r for r in rows}


# ---------- adjustments (used inside workflows, no commit) ----------
def apply_delta(row, delta: int, label: str):
    """Move a locked balance row by delta; never below zero."""
    new_qty = (row.quantity or 0) + int(delta)
    if new_qty < 0:
        raise InvariantViolation(
            f"{label}: stock of item #{row.item_id} would drop to {new_qty}."
        )
    row.quantity = new_qty
    return row


def adjust_hq(item_id: int, delta: int) -> HQStock:
    row = lock_hq_rows([item_id]).get(int(item_id))
    if row is None:
        raise NotFoundError("HQ stock for item", item_id)
    return apply_delta(row, delta, "HQ")


def adjust_district(district_id: int, item_id: int, delta: int) -> DistrictStock:
    row = lock_district_rows(district_id, [item_id]).get(int(item_id))
    if row is None:
        raise NotFoundError(f"District #{district_id} stock for item", item_id)
    return apply_delta(row, delta, f"District #{district_id}")


def receive_into_district(
    district_id: int,
    item_id: int,
    metric_id: int,
    quantity: int,
    is_returnable: bool,
) -> DistrictStock:
    """Increment (or open) the district row; the latest issue decides Ledger-I/II."""
    row = lock_district_rows(district_id, [item_id]).get(int(item_id))
    if row is None:
        row = DistrictStock(
            district_id=district_id,
            item_id=item_id,
            metric_id=metric_id,
            quantity=0,
            is_returnable=bool(is_returnable),
        )
        db.session.add(row)
    row.is_returnable = bool(is_returnable)
    return apply_delta(row, quantity, f"District #{district_id}")


def merge_hq_stock(
    item_id: int,
    metric_id: int,
    quantity,
    low_stock_threshold=None,
    default_threshold=None,
) -> HQStock:
    """
    Add quantity to the item's HQ row, creating it on first receipt. No commit.
    default_threshold only applies to a newly opened row.
    """
    q = _qty(quantity)
    if q <= 0:
        raise ValidationError("Quantity must be greater than zero.", field="quantity")
    item_id = master_dao.require_item(item_id).id
    metric_id = master_dao.require_metric(metric_id).id

    row = lock_hq_rows([item_id]).get(item_id)
    if row is None:
        if low_stock_threshold is None:
            low_stock_threshold = default_threshold
        row = HQStock(
            item_id=item_id,
            metric_id=metric_id,
            quantity=0,
            low_stock_threshold=_threshold(low_stock_threshold),
        )
        db.session.add(row)
    elif row.metric_id != metric_id:
        raise ValidationError(
            f"Item #{item_id} is stocked in metric #{row.metric_id}, not #{metric_id}.",
            field="metric_id",
        )
    elif low_stock_threshold is not None:
        row.low_stock_threshold = _threshold(low_stock_threshold)
    return apply_delta(row, q, "HQ")


def _threshold(v) -> Optional[int]:
    if v is None or v == "":
        return None
    t = _qty(v, "low_stock_threshold")
    if t < 0:
        raise ValidationError(
            "Low stock threshold cannot be negative.", field="low_stock_threshold"
        )
    return t


# ========================= public APIs =========================
def list_hq_stock():
    return HQStock.query.order_by(HQStock.item_id.asc()).all()


def add_hq_stock(
    item_id: int,
    metric_id: int,
    quantity,
    low_stock_threshold=None,
    default_threshold=None,
) -> HQStock:
    try:
        row = merge_hq_stock(
            item_id, metric_id, quantity, low_stock_threshold, default_threshold
        )
        _commit()
    except Exception:
        db.session.rollback()
        raise
    log.info("HQ stock item #%s +%s -> %s", item_id, quantity, row.quantity)
    return row


def add_district_stock(
    district_id: int, item_id: int, metric_id: int, quantity, is_returnable: bool = True
) -> DistrictStock:
    """Opening balance for a district store (stock not received through an IV)."""
    try:
        q = _qty(quantity)
        if q <= 0:
            raise ValidationError(
                "Quantity must be greater than zero.", field="quantity"
            )
        district_id = master_dao.require_district(district_id).id
        item_id = master_dao.require_item(item_id).id
        metric_id = master_dao.require_metric(metric_id).id
        existing = get_district_stock(district_id, item_id)
        if existing is not None and existing.metric_id != metric_id:
            raise ValidationError(
                f"Item #{item_id} is stocked in metric #{existing.metric_id}, not #{metric_id}.",
                field="metric_id",
            )
        row = receive_into_district(
            district_id, item_id, metric_id, q, is_returnable
        )
        _commit()
    except Exception:
        db.session.rollback()
        raise
    return row


def set_low_stock_threshold(item_id: int, threshold) -> HQStock:
    row = get_hq_stock(item_id)
    if row is None:
        raise NotFoundError("HQ stock for item", item_id)
    row.low_stock_threshold = _threshold(threshold)
    _commit()
    return row


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
