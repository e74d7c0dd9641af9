from configs import db
from datetime import datetime


class District(db.Model):
    __tablename__ = "district"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    is_commissionerate_or_wing = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class CommunicationStaff(db.Model):
    __tablename__ = "communication_staff"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    g_no = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    rank = db.Column(db.String(60))
    place_of_posting = db.Column(db.String(120))
    mobile_number = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
