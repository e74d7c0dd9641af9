# dao/district_issuance.py
"""District -> Office issuance and Office -> District returns.

Offices are not stock tracked: an issue only takes stock out of the district
store, a return only puts it back.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.district_issuance import (
    DistrictIssuanceVoucher,
    DistrictItemMovement,
    DistrictLARVoucher,
    DistrictMovementType,
)
from dao import master as master_dao
from dao import numbering
from dao import projection
from dao import stock as stock_dao
from dao.errors import ValidationError, NotFoundError
from dao.hq_issuance import settle_returned_quantity
from dao.lines import normalize_issue_lines, normalize_return_lines, to_datetime, to_id

log = logging.getLogger(__name__)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def list_ivs(district_id: int) -> List[DistrictIssuanceVoucher]:
    return (
        DistrictIssuanceVoucher.query.filter_by(district_id=district_id)
        .order_by(DistrictIssuanceVoucher.id.desc())
        .all()
    )


def get_iv(district_iv_id: int) -> Optional[DistrictIssuanceVoucher]:
    return db.session.get(DistrictIssuanceVoucher, district_iv_id)


def list_lars(district_id: int) -> List[DistrictLARVoucher]:
    return (
        DistrictLARVoucher.query.join(
            DistrictIssuanceVoucher,
            DistrictIssuanceVoucher.id == DistrictLARVoucher.district_iv_id_ref,
        )
        .filter(DistrictIssuanceVoucher.district_id == district_id)
        .order_by(DistrictLARVoucher.id.desc())
        .all()
    )


def get_lar(district_lar_id: int) -> Optional[DistrictLARVoucher]:
    return db.session.get(DistrictLARVoucher, district_lar_id)


def issue_to_office(
    district_id: int,
    issued_by_user_id: int,
    receiving_staff_g_no: str,
    receiving_office_name: str,
    lines: List[Dict],
    issue_date=None,
) -> DistrictIssuanceVoucher:
    try:
        district = master_dao.require_district(district_id)
        user_id = to_id(issued_by_user_id, "issued_by_user_id")
        staff = master_dao.require_staff(receiving_staff_g_no, "receiving_staff_g_no")
        office = (receiving_office_name or "").strip()
        if not office:
            raise ValidationError(
                "Please enter an office name.", field="receiving_office_name"
            )
        issued_at = to_datetime(issue_date, "issue_date") or datetime.utcnow()
        wanted = normalize_issue_lines(lines)

        for item_id in wanted:
            master_dao.require_item(item_id)
        rows = stock_dao.lock_district_rows(district.id, wanted.keys())
        for item_id, ln in wanted.items():
            row = rows.get(item_id)
            available = row.quantity if row else 0
            if ln["quantity"] > available:
                raise ValidationError(
                    f"Item #{item_id}: requested {ln['quantity']} but only {available} available in district #{district.id}.",
                    field="quantity",
                )

        iv = DistrictIssuanceVoucher(
            iv_number=numbering.generate_iv_number(
                on=issued_at.date(), prefix=numbering.DISTRICT_IV_PREFIX
            ),
            district_id=district.id,
            issue_date=issued_at,
            issued_by_user_id=user_id,
            receiving_staff_g_no=staff.g_no,
            receiving_office_name=office,
        )
        db.session.add(iv)
        db.session.flush()

        for item_id, ln in wanted.items():
            src = rows[item_id]
            db.session.add(
                DistrictItemMovement(
                    district_id=district.id,
                    district_iv_id=iv.id,
                    item_id=item_id,
                    metric_id=src.metric_id,
                    quantity=ln["quantity"],
                    movement_type=DistrictMovementType.ISSUE_TO_INTERNAL,
                    is_returnable=ln["is_returnable"],
                    returned_quantity=0,
                )
            )
            stock_dao.apply_delta(src, -ln["quantity"], f"District #{district.id}")
        _commit()
    except (ValidationError, NotFoundError) as ex:
        db.session.rollback()
        log.warning("District #%s IV to office rejected: %s", district_id, ex)
        raise
    except Exception:
        db.session.rollback()
        raise

    log.info("District IV %s issued to %s", iv.iv_number, iv.receiving_office_name)
    return iv


def return_from_office(
    district_iv_id: int,
    returned_by_user_id: int,
    lines: List[Dict],
    return_date=None,
    remarks: str | None = None,
) -> DistrictLARVoucher:
    try:
        iv = get_iv(to_id(district_iv_id, "district_iv_id"))
        if iv is None:
            raise NotFoundError("District IV", district_iv_id)
        user_id = to_id(returned_by_user_id, "returned_by_user_id")
        returned_at = to_datetime(return_date, "return_date") or datetime.utcnow()
        totals = normalize_return_lines(lines)

        originals = {
            m.id: m
            for m in projection.district_issue_movements(
                iv.id, totals.keys(), lock=True
            )
        }
        for movement_id, qty in totals.items():
            m = originals.get(movement_id)
            if m is None:
                raise ValidationError(
                    f"Movement #{movement_id} is not an issue line of {iv.iv_number}.",
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

        rows = stock_dao.lock_district_rows(
            iv.district_id, {originals[mid].item_id for mid in totals}
        )

        lar = DistrictLARVoucher(
            lar_number=numbering.generate_lar_number(
                on=returned_at.date(), prefix=numbering.DISTRICT_LAR_PREFIX
            ),
            return_date=returned_at,
            returned_by_user_id=user_id,
            district_iv_id_ref=iv.id,
            remarks=remarks,
        )
        db.session.add(lar)
        db.session.flush()

        for movement_id, qty in totals.items():
            orig = originals[movement_id]
            db.session.add(
                DistrictItemMovement(
                    district_id=iv.district_id,
                    district_lar_id=lar.id,
                    item_id=orig.item_id,
                    metric_id=orig.metric_id,
                    quantity=qty,
                    movement_type=DistrictMovementType.RETURN_FROM_INTERNAL,
                    is_returnable=True,
                    returned_quantity=0,
                    original_movement_id=orig.id,
                )
            )
            row = rows.get(orig.item_id)
            if row is None:
                raise NotFoundError(
                    f"District #{iv.district_id} stock for item", orig.item_id
                )
            stock_dao.apply_delta(row, qty, f"District #{iv.district_id}")
            settle_returned_quantity(orig, qty)
        _commit()
    except (ValidationError, NotFoundError) as ex:
        db.session.rollback()
        log.warning("District LAR against #%s rejected: %s", district_iv_id, ex)
        raise
    except Exception:
        db.session.rollback()
        raise

    log.info("District LAR %s recorded against %s", lar.lar_number, iv.iv_number)
    return lar
