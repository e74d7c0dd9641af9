# dao/hq_issuance.py
"""HQ -> District issuance (IV) and District -> HQ returns (LAR)."""
import logging
import time
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.hq_issuance import (
    HQIssuanceVoucher,
    HQItemMovement,
    HQLARVoucher,
    HQMovementType,
)
from dao import master as master_dao
from dao import numbering
from dao import projection
from dao import stock as stock_dao
from dao.errors import ValidationError, NotFoundError, InvariantViolation
from dao.lines import (
    normalize_issue_lines,
    normalize_return_lines,
    to_date,
    to_datetime,
    to_id,
)

log = logging.getLogger(__name__)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _default_ref_no() -> str:
    return f"Ref-{int(time.time() * 1000) % 1_000_000:06d}"


# ========================= reads =========================
def list_ivs(district_id: int | None = None) -> List[HQIssuanceVoucher]:
    q = HQIssuanceVoucher.query
    if district_id:
        q = q.filter(HQIssuanceVoucher.receiving_district_id == int(district_id))
    return q.order_by(HQIssuanceVoucher.id.desc()).all()


def get_iv(iv_id: int) -> Optional[HQIssuanceVoucher]:
    return db.session.get(HQIssuanceVoucher, iv_id)


def get_iv_by_number(iv_number: str) -> Optional[HQIssuanceVoucher]:
    return HQIssuanceVoucher.query.filter_by(iv_number=iv_number).one_or_none()


def list_lars(iv_id: int | None = None) -> List[HQLARVoucher]:
    q = HQLARVoucher.query
    if iv_id:
        q = q.filter(HQLARVoucher.iv_id_ref == int(iv_id))
    return q.order_by(HQLARVoucher.id.desc()).all()


def get_lar(lar_id: int) -> Optional[HQLARVoucher]:
    return db.session.get(HQLARVoucher, lar_id)


# ========================= issue =========================
def issue_to_district(
    issued_by_user_id: int,
    receiving_staff_g_no: str,
    receiving_district_id: int,
    approval_authority: str,
    approval_date,
    lines: List[Dict],
    approval_ref_no: str | None = None,
    issue_date=None,
) -> HQIssuanceVoucher:
    """
    Create one IV and one Issue_To_District movement per item.
    Everything is validated against locked HQ rows before the first write;
    a bad line rejects the whole batch.
    """
    try:
        user_id = to_id(issued_by_user_id, "issued_by_user_id")
        staff = master_dao.require_staff(receiving_staff_g_no, "receiving_staff_g_no")
        district = master_dao.require_district(
            receiving_district_id, "receiving_district_id"
        )
        authority = (approval_authority or "").strip()
        if not authority:
            raise ValidationError(
                "Approval authority is required.", field="approval_authority"
            )
        approved_on = to_date(approval_date, "approval_date")
        issued_at = to_datetime(issue_date, "issue_date") or datetime.utcnow()
        wanted = normalize_issue_lines(lines)

        for item_id in wanted:
            master_dao.require_item(item_id)
        hq_rows = stock_dao.lock_hq_rows(wanted.keys())
        _validate_against_hq(wanted, hq_rows)

        iv = HQIssuanceVoucher(
            iv_number=numbering.generate_iv_number(on=issued_at.date()),
            issue_date=issued_at,
            issued_by_user_id=user_id,
            receiving_staff_g_no=staff.g_no,
            receiving_district_id=district.id,
            approval_authority=authority,
            approval_date=approved_on,
            approval_ref_no=(approval_ref_no or "").strip() or _default_ref_no(),
        )
        db.session.add(iv)
        db.session.flush()

        for item_id, ln in wanted.items():
            src = hq_rows[item_id]
            db.session.add(
                HQItemMovement(
                    iv_id=iv.id,
                    item_id=item_id,
                    metric_id=src.metric_id,
                    quantity=ln["quantity"],
                    movement_type=HQMovementType.ISSUE_TO_DISTRICT,
                    is_returnable=ln["is_returnable"],
                    returned_quantity=0,
                )
            )
            stock_dao.apply_delta(src, -ln["quantity"], "HQ")
            stock_dao.receive_into_district(
                district.id,
                item_id,
                src.metric_id,
                ln["quantity"],
                ln["is_returnable"],
            )
        _commit()
    except (ValidationError, NotFoundError) as ex:
        db.session.rollback()
        log.warning("IV to district #%s rejected: %s", receiving_district_id, ex)
        raise
    except Exception:
        db.session.rollback()
        raise

    log.info(
        "IV %s issued to district #%s (%d lines)",
        iv.iv_number,
        iv.receiving_district_id,
        len(wanted),
    )
    return iv


def _validate_against_hq(wanted: Dict[int, Dict], hq_rows: Dict) -> None:
    for item_id, ln in wanted.items():
        row = hq_rows.get(item_id)
        available = row.quantity if row else 0
        if ln["quantity"] > available:
            raise ValidationError(
                f"Item #{item_id}: requested {ln['quantity']} but only {available} available at HQ.",
                field="quantity",
            )


# ========================= return (LAR) =========================
def return_from_district(
    iv_id: int,
    returned_by_user_id: int,
    lines: List[Dict],
    return_date=None,
    remarks: str | None = None,
) -> HQLARVoucher:
    """
    lines: [{movement_id, quantity}] against the Issue_To_District movements of iv_id.
    Stock goes back to HQ, leaves the receiving district, and the original
    movement's returned_quantity grows by the same amount.
    """
    try:
        iv = get_iv(to_id(iv_id, "iv_id"))
        if iv is None:
            raise NotFoundError("IV", iv_id)
        user_id = to_id(returned_by_user_id, "returned_by_user_id")
        returned_at = to_datetime(return_date, "return_date") or datetime.utcnow()
        totals = normalize_return_lines(lines)

        originals = {
            m.id: m
            for m in projection.hq_issue_movements(iv.id, totals.keys(), lock=True)
        }
        _validate_returns(iv, totals, originals)

        by_item: Dict[int, int] = {}
        for movement_id, qty in totals.items():
            item_id = originals[movement_id].item_id
            by_item[item_id] = by_item.get(item_id, 0) + qty

        district_rows = stock_dao.lock_district_rows(
            iv.receiving_district_id, by_item.keys()
        )
        for item_id, qty in by_item.items():
            row = district_rows.get(item_id)
            held = row.quantity if row else 0
            if qty > held:
                raise ValidationError(
                    f"Item #{item_id}: district #{iv.receiving_district_id} holds only {held}, cannot return {qty}.",
                    field="quantity",
                )
        hq_rows = stock_dao.lock_hq_rows(by_item.keys())

        lar = HQLARVoucher(
            lar_number=numbering.generate_lar_number(on=returned_at.date()),
            return_date=returned_at,
            returned_by_user_id=user_id,
            iv_id_ref=iv.id,
            remarks=remarks,
        )
        db.session.add(lar)
        db.session.flush()

        for movement_id, qty in totals.items():
            orig = originals[movement_id]
            db.session.add(
                HQItemMovement(
                    lar_id=lar.id,
                    item_id=orig.item_id,
                    metric_id=orig.metric_id,
                    quantity=qty,
                    movement_type=HQMovementType.RETURN_FROM_DISTRICT,
                    is_returnable=True,
                    returned_quantity=0,
                    original_movement_id=orig.id,
                )
            )
            hq_row = hq_rows.get(orig.item_id)
            if hq_row is None:
                raise NotFoundError("HQ stock for item", orig.item_id)
            stock_dao.apply_delta(hq_row, qty, "HQ")
            stock_dao.apply_delta(
                district_rows[orig.item_id],
                -qty,
                f"District #{iv.receiving_district_id}",
            )
            settle_returned_quantity(orig, qty)
        _commit()
    except (ValidationError, NotFoundError) as ex:
        db.session.rollback()
        log.warning("LAR against IV #%s rejected: %s", iv_id, ex)
        raise
    except Exception:
        db.session.rollback()
        raise

    log.info("LAR %s recorded against IV #%s", lar.lar_number, lar.iv_id_ref)
    return lar


def _validate_returns(iv, totals: Dict[int, int], originals: Dict) -> None:
    for movement_id, qty in totals.items():
        m = originals.get(movement_id)
        if m is None:
            raise ValidationError(
                f"Movement #{movement_id} is not an issue line of IV {iv.iv_number}.",
                field="movement_id",
            )
        if not m.is_returnable:
            raise ValidationError(
                f"Item #{m.item_id} was issued as consumable and cannot be returned.",
                field="movement_id",
            )
        remaining = m.quantity - (m.returned_quantity or 0)
        if qty > remaining:
            raise ValidationError(
                f"Return quantity ({qty}) exceeds the outstanding quantity ({remaining}) of movement #{m.id}.",
                field="quantity",
            )


def settle_returned_quantity(movement, qty: int) -> None:
    """Grow an issue movement's returned_quantity; never past its quantity."""
    new_total = (movement.returned_quantity or 0) + int(qty)
    if new_total > movement.quantity:
        raise InvariantViolation(
            f"Movement #{movement.id}: returned {new_total} of {movement.quantity}."
        )
    movement.returned_quantity = new_total
