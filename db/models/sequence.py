from configs import db


class VoucherSequence(db.Model):
    """Per-day counter behind IV/LAR numbers (one row per prefix and day)."""

    __tablename__ = "voucher_sequence"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    prefix = db.Column(db.String(20), nullable=False)
    seq_date = db.Column(db.Date, nullable=False)
    last_value = db.Column(db.Integer, default=0, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("prefix", "seq_date", name="uq_voucher_sequence_day"),
    )
