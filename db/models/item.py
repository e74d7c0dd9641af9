from configs import db
from datetime import datetime


class Item(db.Model):
    __tablename__ = "item"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    # L<ledger>-<seq3>, assigned once at creation
    code = db.Column(db.String(30), unique=True, nullable=False)
    description = db.Column(db.Text, default="")
    ledger_id = db.Column(db.Integer, db.ForeignKey("ledger.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ledger = db.relationship("Ledger", backref="items")
