from configs import db
from datetime import datetime


class HQStock(db.Model):
    __tablename__ = "hq_stock"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), unique=True, nullable=False)
    quantity = db.Column(db.Integer, default=0, nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    low_stock_threshold = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_hq_stock_quantity_non_negative"),
    )

    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")


class DistrictStock(db.Model):
    __tablename__ = "district_stock"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    district_id = db.Column(db.Integer, db.ForeignKey("district.id"), nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    quantity = db.Column(db.Integer, default=0, nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    # Ledger-I (returnable) / Ledger-II (consumable)
    is_returnable = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("district_id", "item_id", name="uq_district_stock_item"),
        db.CheckConstraint(
            "quantity >= 0", name="ck_district_stock_quantity_non_negative"
        ),
    )

    district = db.relationship("District")
    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")
