from configs import db
from datetime import datetime
import enum


class LoanStatus(enum.Enum):
    LOANED = "Loaned"
    RETURNED = "Returned"


class LoanItem(db.Model):
    """Item lent out for an event; kept apart from stock reconciliation."""

    __tablename__ = "loan_item"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    source_wing = db.Column(db.String(120), nullable=False)
    event_name = db.Column(db.String(255), nullable=False)
    expected_return_date = db.Column(db.Date, nullable=False)
    actual_return_date = db.Column(db.DateTime)
    status = db.Column(
        db.Enum(LoanStatus, name="loanstatus"), default=LoanStatus.LOANED, nullable=False
    )
    returned_to = db.Column(db.String(120))
    return_notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")
