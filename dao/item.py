# dao/item.py
import logging
from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.item import Item
from db.models.stock import HQStock, DistrictStock
from db.models.hq_issuance import HQItemMovement
from db.models.district_issuance import DistrictItemMovement
from db.models.procurement import Procurement
from db.models.loan import LoanItem
from dao import master as master_dao
from dao import numbering
from dao.errors import ValidationError, ItemInUseError
from dao.lines import to_id

log = logging.getLogger(__name__)

_EDITABLE = {"name", "description"}


def _is_item_in_use(item_id: int) -> bool:
    for model in (
        HQStock,
        DistrictStock,
        HQItemMovement,
        DistrictItemMovement,
        Procurement,
        LoanItem,
    ):
        if (
            db.session.query(model.id).filter_by(item_id=item_id).limit(1).first()
            is not None
        ):
            return True
    return False


def list_items(ledger_id: int | None = None, q: str | None = None) -> List[Item]:
    query = Item.query
    if ledger_id:
        query = query.filter(Item.ledger_id == int(ledger_id))
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(db.or_(Item.name.ilike(like), Item.code.ilike(like)))
    return query.order_by(Item.code.asc()).all()


def get_item(item_id: int) -> Optional[Item]:
    return master_dao.get_item_by_id(item_id)


def create_item(name: str, ledger_id: int, description: str | None = None) -> Item:
    """Create an item; the code comes from the ledger sequence in the same transaction."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Item name is required.", field="name")
    ledger_id = to_id(ledger_id, "ledger_id")
    try:
        master_dao.require_ledger(ledger_id)
        code = numbering.allocate_item_code(ledger_id)
        it = Item(
            name=name,
            code=code,
            description=(description or "").strip(),
            ledger_id=ledger_id,
        )
        db.session.add(it)
        _commit()
    except Exception:
        db.session.rollback()
        raise
    log.info("Item %s created on ledger #%s", it.code, it.ledger_id)
    return it


def update_item(item_id: int, **fields) -> Item:
    it = master_dao.require_item(item_id)
    for k in ("code", "ledger_id"):
        if k in fields and fields[k] is not None and str(fields[k]) != str(getattr(it, k)):
            raise ValidationError(f"Item {k} cannot be changed once assigned.", field=k)
    for k, v in fields.items():
        if k not in _EDITABLE:
            continue
        if k == "name":
            v = (v or "").strip()
            if not v:
                raise ValidationError("Item name is required.", field="name")
        setattr(it, k, v)
    _commit()
    return it


def delete_item(item_id: int) -> None:
    it = master_dao.require_item(item_id)
    if _is_item_in_use(it.id):
        raise ItemInUseError(
            "Item already has stock or movements, it cannot be deleted."
        )
    db.session.delete(it)
    _commit()


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
