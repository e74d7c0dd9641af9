# dao/projection.py
"""Read side of the ledger: outstanding returns, balances, low stock, reports."""
from typing import Dict, List, Optional, Iterable

from configs import db
from db.models.stock import HQStock, DistrictStock
from db.models.hq_issuance import HQIssuanceVoucher, HQItemMovement, HQMovementType
from db.models.district_issuance import (
    DistrictIssuanceVoucher,
    DistrictItemMovement,
    DistrictMovementType,
)
from dao.errors import NotFoundError


# ----- movement status -----
NOT_RETURNED = "not_returned"
PARTIAL = "partial"
RETURNED = "returned"
CONSUMABLE = "consumable"


def movement_status(m) -> str:
    if not m.is_returnable:
        return CONSUMABLE
    returned = m.returned_quantity or 0
    if returned <= 0:
        return NOT_RETURNED
    if returned < m.quantity:
        return PARTIAL
    return RETURNED


# ----- issue movements under a voucher -----
def hq_issue_movements(
    iv_id: int, movement_ids: Optional[Iterable[int]] = None, lock: bool = False
) -> List[HQItemMovement]:
    q = HQItemMovement.query.filter(
        HQItemMovement.iv_id == iv_id,
        HQItemMovement.movement_type == HQMovementType.ISSUE_TO_DISTRICT,
    )
    if movement_ids is not None:
        q = q.filter(HQItemMovement.id.in_(list(movement_ids)))
    q = q.order_by(HQItemMovement.id.asc())
    if lock:
        q = q.with_for_update()
    return q.all()


def district_issue_movements(
    district_iv_id: int, movement_ids: Optional[Iterable[int]] = None, lock: bool = False
) -> List[DistrictItemMovement]:
    q = DistrictItemMovement.query.filter(
        DistrictItemMovement.district_iv_id == district_iv_id,
        DistrictItemMovement.movement_type == DistrictMovementType.ISSUE_TO_INTERNAL,
    )
    if movement_ids is not None:
        q = q.filter(DistrictItemMovement.id.in_(list(movement_ids)))
    q = q.order_by(DistrictItemMovement.id.asc())
    if lock:
        q = q.with_for_update()
    return q.all()


def _outstanding_rows(movements) -> List[Dict]:
    rows = []
    for m in movements:
        if not m.is_returnable:
            continue
        remaining = m.quantity - (m.returned_quantity or 0)
        if remaining <= 0:
            continue
        rows.append(
            {
                "movement_id": m.id,
                "item_id": m.item_id,
                "item_code": m.item.code if m.item else None,
                "item_name": m.item.name if m.item else None,
                "metric_id": m.metric_id,
                "quantity": m.quantity,
                "returned_quantity": m.returned_quantity or 0,
                "remaining_quantity": remaining,
                "status": movement_status(m),
            }
        )
    return rows


def outstanding_returnable(iv_id: int) -> List[Dict]:
    """Returnable issue lines of an HQ IV that still have something to come back."""
    if db.session.get(HQIssuanceVoucher, iv_id) is None:
        raise NotFoundError("IV", iv_id)
    return _outstanding_rows(hq_issue_movements(iv_id))


def outstanding_returnable_district(district_iv_id: int) -> List[Dict]:
    if db.session.get(DistrictIssuanceVoucher, district_iv_id) is None:
        raise NotFoundError("District IV", district_iv_id)
    return _outstanding_rows(district_issue_movements(district_iv_id))


def ivs_with_outstanding_returns(district_id: int | None = None) -> List[HQIssuanceVoucher]:
    """HQ IVs that can still be selected on the LAR form."""
    q = (
        HQIssuanceVoucher.query.join(
            HQItemMovement, HQItemMovement.iv_id == HQIssuanceVoucher.id
        )
        .filter(
            HQItemMovement.is_returnable.is_(True),
            HQItemMovement.quantity > HQItemMovement.returned_quantity,
        )
        .distinct()
    )
    if district_id:
        q = q.filter(HQIssuanceVoucher.receiving_district_id == int(district_id))
    return q.order_by(HQIssuanceVoucher.id.desc()).all()


# ----- balances -----
def current_stock(item_id: int, district_id: int | None = None) -> int:
    if district_id is None:
        row = HQStock.query.filter_by(item_id=item_id).one_or_none()
    else:
        row = DistrictStock.query.filter_by(
            district_id=district_id, item_id=item_id
        ).one_or_none()
    return row.quantity if row else 0


def low_stock(threshold: int | None = None) -> List[HQStock]:
    """
    threshold given: HQ rows strictly below it.
    Otherwise: rows at or below their own low_stock_threshold.
    """
    q = HQStock.query
    if threshold is not None:
        q = q.filter(HQStock.quantity < int(threshold))
    else:
        q = q.filter(
            HQStock.low_stock_threshold.isnot(None),
            HQStock.quantity <= HQStock.low_stock_threshold,
        )
    return q.order_by(HQStock.quantity.asc(), HQStock.item_id.asc()).all()


def district_inventory(district_id: int) -> Dict[str, List[DistrictStock]]:
    """District stock split into Ledger-I (returnable) and Ledger-II (consumable)."""
    rows = (
        DistrictStock.query.filter_by(district_id=district_id)
        .order_by(DistrictStock.item_id.asc())
        .all()
    )
    return {
        "ledger_i": [r for r in rows if r.is_returnable],
        "ledger_ii": [r for r in rows if not r.is_returnable],
    }


def voucher_summary(iv_id: int) -> Dict:
    iv = db.session.get(HQIssuanceVoucher, iv_id)
    if iv is None:
        raise NotFoundError("IV", iv_id)
    return {
        "voucher": iv,
        "movements": hq_issue_movements(iv.id),
        "lars": sorted(iv.lars, key=lambda lar: lar.id),
    }
