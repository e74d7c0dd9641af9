# db/models/user.py
import enum
from datetime import datetime
from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    HQ_ADMIN = "HQ_ADMIN"  # HQ store keeper
    DISTRICT_ADMIN = "DISTRICT_ADMIN"  # district/wing store keeper


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(120))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(
        db.Enum(UserRole, name="userrole"), default=UserRole.DISTRICT_ADMIN, nullable=False
    )
    # only for DISTRICT_ADMIN
    district_id = db.Column(db.Integer, db.ForeignKey("district.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    district = db.relationship("District")

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        return self.role in roles
