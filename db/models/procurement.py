from configs import db
from datetime import datetime
import enum


class ProcurementType(enum.Enum):
    NEW = "New"
    EXISTING = "Existing"


class Budget(db.Model):
    __tablename__ = "budget"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), nullable=False)
    financial_year = db.Column(db.String(9), nullable=False)  # 2023-2024


class Seller(db.Model):
    __tablename__ = "seller"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    mobile_number = db.Column(db.String(20))
    address = db.Column(db.Text)


class Procurement(db.Model):
    __tablename__ = "procurement"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    invoice_number = db.Column(db.String(60))
    purchase_date = db.Column(db.Date, nullable=False)
    budget_id = db.Column(db.Integer, db.ForeignKey("budget.id"), nullable=False)
    seller_id = db.Column(db.Integer, db.ForeignKey("seller.id"))
    warranty_period_till = db.Column(db.Date)
    procurement_type = db.Column(
        db.Enum(ProcurementType, name="procurementtype"),
        default=ProcurementType.NEW,
        nullable=False,
    )
    procured_by_user_id = db.Column(db.Integer, db.ForeignKey("user_account.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")
    budget = db.relationship("Budget")
    seller = db.relationship("Seller")
