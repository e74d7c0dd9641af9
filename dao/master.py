# dao/master.py
from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.item import Item
from db.models.ledger import Ledger
from db.models.metric import QuantityMetric
from db.models.district import District, CommunicationStaff
from db.models.user import User
from dao.errors import NotFoundError, ValidationError
from dao.lines import to_id


def _required(value, field: str) -> str:
    v = value.strip() if isinstance(value, str) else value
    if not v:
        raise ValidationError(f"{field} is required.", field=field)
    return v


# ---------- lookups ----------
def get_item_by_id(item_id) -> Optional[Item]:
    return db.session.get(Item, int(item_id)) if item_id is not None else None


def get_ledger_by_id(ledger_id) -> Optional[Ledger]:
    return db.session.get(Ledger, int(ledger_id)) if ledger_id is not None else None


def get_metric_by_id(metric_id) -> Optional[QuantityMetric]:
    return (
        db.session.get(QuantityMetric, int(metric_id)) if metric_id is not None else None
    )


def get_district_by_id(district_id) -> Optional[District]:
    return db.session.get(District, int(district_id)) if district_id is not None else None


def get_user_by_id(user_id) -> Optional[User]:
    return db.session.get(User, int(user_id)) if user_id is not None else None


def get_staff_by_g_no(g_no: str) -> Optional[CommunicationStaff]:
    if not g_no:
        return None
    return CommunicationStaff.query.filter_by(g_no=g_no.strip()).one_or_none()


def require_item(item_id, field: str = "item_id") -> Item:
    obj = get_item_by_id(to_id(item_id, field))
    if not obj:
        raise NotFoundError("Item", item_id)
    return obj


def require_ledger(ledger_id, field: str = "ledger_id") -> Ledger:
    obj = get_ledger_by_id(to_id(ledger_id, field))
    if not obj:
        raise NotFoundError("Ledger", ledger_id)
    return obj


def require_metric(metric_id, field: str = "metric_id") -> QuantityMetric:
    obj = get_metric_by_id(to_id(metric_id, field))
    if not obj:
        raise NotFoundError("Metric", metric_id)
    return obj


def require_district(district_id, field: str = "district_id") -> District:
    obj = get_district_by_id(to_id(district_id, field))
    if not obj:
        raise NotFoundError("District", district_id)
    return obj


def require_staff(g_no: str, field: str = "g_no") -> CommunicationStaff:
    if not isinstance(g_no, str) or not g_no.strip():
        raise ValidationError(f"{field} is required.", field=field)
    obj = get_staff_by_g_no(g_no)
    if not obj:
        raise NotFoundError("Staff G No", g_no)
    return obj


# ---------- master data CRUD ----------
def list_ledgers() -> List[Ledger]:
    return Ledger.query.order_by(Ledger.id.asc()).all()


def create_ledger(name: str) -> Ledger:
    ledger = Ledger(name=_required(name, "name"), current_sequence_number=0)
    db.session.add(ledger)
    _commit()
    return ledger


def list_metrics() -> List[QuantityMetric]:
    return QuantityMetric.query.order_by(QuantityMetric.name.asc()).all()


def create_metric(name: str) -> QuantityMetric:
    m = QuantityMetric(name=_required(name, "name"))
    db.session.add(m)
    _commit()
    return m


def list_districts() -> List[District]:
    return District.query.order_by(District.name.asc()).all()


def create_district(name: str, is_commissionerate_or_wing: bool = False) -> District:
    d = District(
        name=_required(name, "name"),
        is_commissionerate_or_wing=bool(is_commissionerate_or_wing),
    )
    db.session.add(d)
    _commit()
    return d


def list_staff() -> List[CommunicationStaff]:
    return CommunicationStaff.query.order_by(CommunicationStaff.g_no.asc()).all()


def create_staff(
    g_no: str,
    name: str,
    rank: str | None = None,
    place_of_posting: str | None = None,
    mobile_number: str | None = None,
) -> CommunicationStaff:
    g_no = _required(g_no, "g_no")
    if get_staff_by_g_no(g_no):
        raise ValidationError(f"G No {g_no} already exists.", field="g_no")
    s = CommunicationStaff(
        g_no=g_no,
        name=_required(name, "name"),
        rank=rank,
        place_of_posting=place_of_posting,
        mobile_number=mobile_number,
    )
    db.session.add(s)
    _commit()
    return s


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
