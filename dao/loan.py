# dao/loan.py
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.loan import LoanItem, LoanStatus
from dao import master as master_dao
from dao.errors import ValidationError, NotFoundError
from dao.lines import to_date, to_datetime, to_quantity

_FORM_TO_STATUS = {
    "loaned": LoanStatus.LOANED,
    "returned": LoanStatus.RETURNED,
}


def list_loans(status: str | None = None) -> List[LoanItem]:
    q = LoanItem.query
    if status:
        st = _FORM_TO_STATUS.get(status.strip().lower())
        if st is None:
            raise ValidationError("Status must be Loaned or Returned.", field="status")
        q = q.filter(LoanItem.status == st)
    return q.order_by(LoanItem.id.desc()).all()


def get_loan(loan_id: int) -> Optional[LoanItem]:
    return db.session.get(LoanItem, loan_id)


def overdue_loans(today: date | None = None) -> List[LoanItem]:
    today = today or date.today()
    return (
        LoanItem.query.filter(
            LoanItem.status == LoanStatus.LOANED,
            LoanItem.expected_return_date < today,
        )
        .order_by(LoanItem.expected_return_date.asc())
        .all()
    )


def create_loan(
    item_id: int,
    metric_id: int,
    quantity,
    source_wing: str,
    event_name: str,
    expected_return_date,
) -> LoanItem:
    if item_id in (None, "") or metric_id in (None, ""):
        raise ValidationError("Please select an item and quantity metric.")
    qty = to_quantity(quantity)
    if qty <= 0:
        raise ValidationError("Quantity must be greater than zero.", field="quantity")
    if not (source_wing or "").strip():
        raise ValidationError("Source wing is required.", field="source_wing")
    if not (event_name or "").strip():
        raise ValidationError("Event name is required.", field="event_name")
    expected = to_date(expected_return_date, "expected_return_date")
    item = master_dao.require_item(item_id)
    metric = master_dao.require_metric(metric_id)

    loan = LoanItem(
        item_id=item.id,
        metric_id=metric.id,
        quantity=qty,
        source_wing=source_wing.strip(),
        event_name=event_name.strip(),
        expected_return_date=expected,
        status=LoanStatus.LOANED,
    )
    db.session.add(loan)
    _commit()
    return loan


def mark_loan_returned(
    loan_id: int,
    returned_to: str,
    return_notes: str | None = None,
    returned_at=None,
) -> LoanItem:
    loan = get_loan(loan_id)
    if loan is None:
        raise NotFoundError("Loan item", loan_id)
    if loan.status == LoanStatus.RETURNED:
        raise ValidationError("Loan item is already returned.", field="status")
    if not (returned_to or "").strip():
        raise ValidationError("Returned to is required.", field="returned_to")

    loan.status = LoanStatus.RETURNED
    loan.returned_to = returned_to.strip()
    loan.return_notes = return_notes
    loan.actual_return_date = (
        to_datetime(returned_at, "returned_at") or datetime.utcnow()
    )
    _commit()
    return loan


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
