# dao/procurement.py
import logging
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.procurement import Budget, Seller, Procurement, ProcurementType
from dao import master as master_dao
from dao import stock as stock_dao
from dao.errors import ValidationError, NotFoundError
from dao.lines import to_date, to_id, to_quantity

log = logging.getLogger(__name__)

_FORM_TO_TYPE = {
    "new": ProcurementType.NEW,
    "existing": ProcurementType.EXISTING,
}


def _to_type(value: str | None) -> ProcurementType:
    if not value:
        return ProcurementType.NEW
    t = _FORM_TO_TYPE.get(value.strip().lower())
    if t is None:
        raise ValidationError(
            "Procurement type must be New or Existing.", field="procurement_type"
        )
    return t


def list_budgets() -> List[Budget]:
    return Budget.query.order_by(Budget.financial_year.desc(), Budget.name.asc()).all()


def create_budget(name: str, financial_year: str) -> Budget:
    if not (name or "").strip() or not (financial_year or "").strip():
        raise ValidationError("Budget name and financial year are required.")
    b = Budget(name=name.strip(), financial_year=financial_year.strip())
    db.session.add(b)
    _commit()
    return b


def list_procurements(item_id: int | None = None) -> List[Procurement]:
    q = Procurement.query
    if item_id:
        q = q.filter(Procurement.item_id == int(item_id))
    return q.order_by(Procurement.id.desc()).all()


def record_procurement(
    item_id: int,
    metric_id: int,
    quantity,
    budget_id: int,
    purchase_date,
    invoice_number: str | None = None,
    seller_name: str | None = None,
    seller_mobile: str | None = None,
    seller_address: str | None = None,
    warranty_period_till=None,
    procurement_type: str | None = None,
    procured_by_user_id: int | None = None,
    low_stock_threshold=None,
) -> Procurement:
    """Store the purchase and merge its quantity into HQ stock, one transaction."""
    try:
        if item_id in (None, "") or metric_id in (None, "") or budget_id in (None, ""):
            raise ValidationError("Please fill in all required fields.")
        qty = to_quantity(quantity)
        if qty <= 0:
            raise ValidationError(
                "Quantity must be greater than zero.", field="quantity"
            )
        budget = db.session.get(Budget, to_id(budget_id, "budget_id"))
        if budget is None:
            raise NotFoundError("Budget", budget_id)
        item = master_dao.require_item(item_id)
        metric = master_dao.require_metric(metric_id)

        seller = None
        if (seller_name or "").strip():
            seller = Seller(
                name=seller_name.strip(),
                mobile_number=seller_mobile,
                address=seller_address,
            )
            db.session.add(seller)

        p = Procurement(
            item_id=item.id,
            quantity=qty,
            metric_id=metric.id,
            invoice_number=(invoice_number or "").strip() or None,
            purchase_date=to_date(purchase_date, "purchase_date"),
            budget_id=budget.id,
            seller=seller,
            warranty_period_till=to_date(
                warranty_period_till, "warranty_period_till", required=False
            ),
            procurement_type=_to_type(procurement_type),
            procured_by_user_id=procured_by_user_id,
        )
        db.session.add(p)
        stock_dao.merge_hq_stock(item.id, metric.id, qty, low_stock_threshold)
        _commit()
    except Exception:
        db.session.rollback()
        raise
    log.info("Procurement #%s: item #%s +%s", p.id, p.item_id, p.quantity)
    return p


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
