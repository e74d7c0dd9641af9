# utils/serialize.py
"""Model -> JSON-ready dicts for the API blueprints."""
import enum
from datetime import date, datetime


def _v(x):
    if isinstance(x, enum.Enum):
        return x.value
    if isinstance(x, (datetime, date)):
        return x.isoformat()
    return x


def _cols(obj, names):
    return {n: _v(getattr(obj, n)) for n in names}


def dump_ledger(x):
    return _cols(x, ("id", "name", "current_sequence_number"))


def dump_metric(x):
    return _cols(x, ("id", "name"))


def dump_district(x):
    return _cols(x, ("id", "name", "is_commissionerate_or_wing"))


def dump_staff(x):
    return _cols(
        x, ("id", "g_no", "name", "rank", "place_of_posting", "mobile_number")
    )


def dump_item(x):
    d = _cols(x, ("id", "name", "code", "description", "ledger_id", "created_at"))
    d["ledger_name"] = x.ledger.name if x.ledger else None
    return d


def dump_hq_stock(x):
    d = _cols(
        x, ("id", "item_id", "quantity", "metric_id", "low_stock_threshold", "updated_at")
    )
    d["item_code"] = x.item.code if x.item else None
    d["item_name"] = x.item.name if x.item else None
    d["metric_name"] = x.metric.name if x.metric else None
    return d


def dump_district_stock(x):
    d = _cols(
        x,
        ("id", "district_id", "item_id", "quantity", "metric_id", "is_returnable", "updated_at"),
    )
    d["item_code"] = x.item.code if x.item else None
    d["item_name"] = x.item.name if x.item else None
    d["metric_name"] = x.metric.name if x.metric else None
    d["ledger"] = "Ledger-I" if x.is_returnable else "Ledger-II"
    return d


def dump_movement(x):
    names = [
        "id",
        "item_id",
        "metric_id",
        "quantity",
        "movement_type",
        "is_returnable",
        "returned_quantity",
        "original_movement_id",
        "created_at",
    ]
    for fk in ("iv_id", "lar_id", "district_id", "district_iv_id", "district_lar_id"):
        if hasattr(x, fk):
            names.append(fk)
    d = _cols(x, names)
    d["item_code"] = x.item.code if x.item else None
    return d


def dump_hq_iv(x, with_movements: bool = True):
    d = _cols(
        x,
        (
            "id",
            "iv_number",
            "issue_date",
            "issued_by_user_id",
            "receiving_staff_g_no",
            "receiving_district_id",
            "approval_authority",
            "approval_date",
            "approval_ref_no",
            "created_at",
        ),
    )
    d["receiving_district_name"] = (
        x.receiving_district.name if x.receiving_district else None
    )
    if with_movements:
        d["movements"] = [dump_movement(m) for m in x.movements]
    return d


def dump_hq_lar(x, with_movements: bool = True):
    d = _cols(
        x,
        ("id", "lar_number", "return_date", "returned_by_user_id", "iv_id_ref", "remarks", "created_at"),
    )
    d["iv_number"] = x.iv.iv_number if x.iv else None
    if with_movements:
        d["movements"] = [dump_movement(m) for m in x.movements]
    return d


def dump_district_iv(x, with_movements: bool = True):
    d = _cols(
        x,
        (
            "id",
            "iv_number",
            "district_id",
            "issue_date",
            "issued_by_user_id",
            "receiving_staff_g_no",
            "receiving_office_name",
            "created_at",
        ),
    )
    if with_movements:
        d["movements"] = [dump_movement(m) for m in x.movements]
    return d


def dump_district_lar(x, with_movements: bool = True):
    d = _cols(
        x,
        ("id", "lar_number", "return_date", "returned_by_user_id", "district_iv_id_ref", "remarks", "created_at"),
    )
    if with_movements:
        d["movements"] = [dump_movement(m) for m in x.movements]
    return d


def dump_procurement(x):
    d = _cols(
        x,
        (
            "id",
            "item_id",
            "quantity",
            "metric_id",
            "invoice_number",
            "purchase_date",
            "budget_id",
            "seller_id",
            "warranty_period_till",
            "procurement_type",
            "procured_by_user_id",
            "created_at",
        ),
    )
    d["seller_name"] = x.seller.name if x.seller else None
    return d


def dump_budget(x):
    return _cols(x, ("id", "name", "financial_year"))


def dump_loan(x):
    d = _cols(
        x,
        (
            "id",
            "item_id",
            "quantity",
            "metric_id",
            "source_wing",
            "event_name",
            "expected_return_date",
            "actual_return_date",
            "status",
            "returned_to",
            "return_notes",
            "created_at",
        ),
    )
    d["item_name"] = x.item.name if x.item else None
    return d


def dump_user(x):
    return _cols(x, ("id", "username", "full_name", "role", "district_id", "is_active"))
