# db/models/hq_issuance.py
from configs import db
from datetime import datetime
import enum


class HQMovementType(enum.Enum):
    ISSUE_TO_DISTRICT = "Issue_To_District"
    RETURN_FROM_DISTRICT = "Return_From_District"


class HQIssuanceVoucher(db.Model):
    __tablename__ = "hq_issuance_voucher"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    iv_number = db.Column(db.String(40), unique=True, nullable=False)
    issue_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    issued_by_user_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    receiving_staff_g_no = db.Column(
        db.String(20), db.ForeignKey("communication_staff.g_no"), nullable=False
    )
    receiving_district_id = db.Column(
        db.Integer, db.ForeignKey("district.id"), nullable=False
    )
    approval_authority = db.Column(db.String(120), nullable=False)
    approval_date = db.Column(db.Date, nullable=False)
    approval_ref_no = db.Column(db.String(60))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    issued_by = db.relationship("User")
    receiving_district = db.relationship("District")
    receiving_staff = db.relationship("CommunicationStaff")
    movements = db.relationship(
        "HQItemMovement",
        backref="iv",
        foreign_keys="HQItemMovement.iv_id",
        order_by="HQItemMovement.id",
    )


class HQLARVoucher(db.Model):
    __tablename__ = "hq_lar_voucher"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    lar_number = db.Column(db.String(40), unique=True, nullable=False)
    return_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    returned_by_user_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    iv_id_ref = db.Column(
        db.Integer, db.ForeignKey("hq_issuance_voucher.id"), nullable=False
    )
    remarks = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    iv = db.relationship("HQIssuanceVoucher", backref="lars")
    returned_by = db.relationship("User")
    movements = db.relationship(
        "HQItemMovement",
        backref="lar",
        foreign_keys="HQItemMovement.lar_id",
        order_by="HQItemMovement.id",
    )


class HQItemMovement(db.Model):
    __tablename__ = "hq_item_movement"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    iv_id = db.Column(db.Integer, db.ForeignKey("hq_issuance_voucher.id"))
    lar_id = db.Column(db.Integer, db.ForeignKey("hq_lar_voucher.id"))
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    quantity = db.Column(db.Integer, nullable=False)
    movement_type = db.Column(
        db.Enum(HQMovementType, name="hqmovementtype"), nullable=False
    )
    is_returnable = db.Column(db.Boolean, default=True, nullable=False)
    # only issue rows accumulate this; return rows stay at 0
    returned_quantity = db.Column(db.Integer, default=0, nullable=False)
    # return rows point at the issue row they settle
    original_movement_id = db.Column(db.Integer, db.ForeignKey("hq_item_movement.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("iv_id", "item_id", name="uq_hq_movement_iv_item"),
        db.CheckConstraint(
            "(iv_id IS NULL) <> (lar_id IS NULL)", name="ck_hq_movement_one_voucher"
        ),
        db.CheckConstraint("quantity > 0", name="ck_hq_movement_quantity_positive"),
        db.CheckConstraint(
            "returned_quantity >= 0 AND returned_quantity <= quantity",
            name="ck_hq_movement_returned_within_quantity",
        ),
    )

    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")
    original_movement = db.relationship("HQItemMovement", remote_side=[id])

    @property
    def remaining_quantity(self) -> int:
        return (self.quantity or 0) - (self.returned_quantity or 0)
