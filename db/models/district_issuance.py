# db/models/district_issuance.py
from configs import db
from datetime import datetime
import enum


class DistrictMovementType(enum.Enum):
    ISSUE_TO_INTERNAL = "Issue_To_Internal"
    RETURN_FROM_INTERNAL = "Return_From_Internal"


class DistrictIssuanceVoucher(db.Model):
    __tablename__ = "district_issuance_voucher"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    iv_number = db.Column(db.String(40), unique=True, nullable=False)
    district_id = db.Column(db.Integer, db.ForeignKey("district.id"), nullable=False)
    issue_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    issued_by_user_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    receiving_staff_g_no = db.Column(
        db.String(20), db.ForeignKey("communication_staff.g_no"), nullable=False
    )
    # offices are not stock tracked, only named
    receiving_office_name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    district = db.relationship("District")
    issued_by = db.relationship("User")
    receiving_staff = db.relationship("CommunicationStaff")
    movements = db.relationship(
        "DistrictItemMovement",
        backref="district_iv",
        foreign_keys="DistrictItemMovement.district_iv_id",
        order_by="DistrictItemMovement.id",
    )


class DistrictLARVoucher(db.Model):
    __tablename__ = "district_lar_voucher"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    lar_number = db.Column(db.String(40), unique=True, nullable=False)
    return_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    returned_by_user_id = db.Column(
        db.Integer, db.ForeignKey("user_account.id"), nullable=False
    )
    district_iv_id_ref = db.Column(
        db.Integer, db.ForeignKey("district_issuance_voucher.id"), nullable=False
    )
    remarks = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    district_iv = db.relationship("DistrictIssuanceVoucher", backref="lars")
    returned_by = db.relationship("User")
    movements = db.relationship(
        "DistrictItemMovement",
        backref="district_lar",
        foreign_keys="DistrictItemMovement.district_lar_id",
        order_by="DistrictItemMovement.id",
    )


class DistrictItemMovement(db.Model):
    __tablename__ = "district_item_movement"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    district_id = db.Column(db.Integer, db.ForeignKey("district.id"), nullable=False)
    district_iv_id = db.Column(
        db.Integer, db.ForeignKey("district_issuance_voucher.id")
    )
    district_lar_id = db.Column(db.Integer, db.ForeignKey("district_lar_voucher.id"))
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    metric_id = db.Column(
        db.Integer, db.ForeignKey("quantity_metric.id"), nullable=False
    )
    quantity = db.Column(db.Integer, nullable=False)
    movement_type = db.Column(
        db.Enum(DistrictMovementType, name="districtmovementtype"), nullable=False
    )
    is_returnable = db.Column(db.Boolean, default=True, nullable=False)
    returned_quantity = db.Column(db.Integer, default=0, nullable=False)
    original_movement_id = db.Column(
        db.Integer, db.ForeignKey("district_item_movement.id")
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint(
            "district_iv_id", "item_id", name="uq_district_movement_iv_item"
        ),
        db.CheckConstraint(
            "(district_iv_id IS NULL) <> (district_lar_id IS NULL)",
            name="ck_district_movement_one_voucher",
        ),
        db.CheckConstraint(
            "quantity > 0", name="ck_district_movement_quantity_positive"
        ),
        db.CheckConstraint(
            "returned_quantity >= 0 AND returned_quantity <= quantity",
            name="ck_district_movement_returned_within_quantity",
        ),
    )

    district = db.relationship("District")
    item = db.relationship("Item")
    metric = db.relationship("QuantityMetric")
    original_movement = db.relationship("DistrictItemMovement", remote_side=[id])

    @property
    def remaining_quantity(self) -> int:
        return (self.quantity or 0) - (self.returned_quantity or 0)
