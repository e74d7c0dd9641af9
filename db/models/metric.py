from configs import db
from datetime import datetime


class QuantityMetric(db.Model):
    __tablename__ = "quantity_metric"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(50), unique=True, nullable=False)  # Nos., KGs, Litres
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
