# dao/numbering.py
"""Item codes and voucher numbers.

Item codes are ``L<ledger>-<seq>``, the sequence living on the ledger row.
Voucher numbers are ``<PREFIX>/DD/MM/YYYY/<nnn>`` where ``nnn`` is a per-day
counter stored in ``voucher_sequence``; paperwork refers to these numbers so
the format must not change.
"""
from datetime import date, datetime
from typing import Optional

from sqlalchemy import update

from configs import db
from db.models.ledger import Ledger
from db.models.sequence import VoucherSequence
from dao.errors import InvariantViolation, NotFoundError

IV_PREFIX = "IV"
LAR_PREFIX = "LAR"
DISTRICT_IV_PREFIX = "DIST-IV"
DISTRICT_LAR_PREFIX = "DIST-LAR"
# nnn is three digits wide
MAX_VOUCHERS_PER_DAY = 999


def format_item_code(ledger_id: int, seq: int) -> str:
    return f"L{ledger_id}-{seq:03d}"


def generate_item_code(ledger_id: int) -> str:
    """Preview the code the next item on this ledger would get ('' if unknown)."""
    ledger = db.session.get(Ledger, ledger_id)
    if not ledger:
        return ""
    return format_item_code(ledger.id, (ledger.current_sequence_number or 0) + 1)


def allocate_item_code(ledger_id: int) -> str:
    """
    Bump the ledger sequence and return the matching code.
    Single UPDATE ... SET n = n + 1, so the row stays locked until the
    caller's transaction ends.
    """
    result = db.session.execute(
        update(Ledger)
        .where(Ledger.id == ledger_id)
        .values(
            current_sequence_number=Ledger.current_sequence_number + 1,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Ledger", ledger_id)
    ledger = db.session.get(Ledger, ledger_id, populate_existing=True)
    return format_item_code(ledger.id, ledger.current_sequence_number)


def format_voucher_number(prefix: str, on: date, seq: int) -> str:
    return f"{prefix}/{on:%d}/{on:%m}/{on:%Y}/{seq:03d}"


def _next_sequence(prefix: str, on: date) -> int:
    row = (
        VoucherSequence.query.filter_by(prefix=prefix, seq_date=on)
        .with_for_update()
        .one_or_none()
    )
    if row is None:
        # first voucher of the day; a concurrent first insert fails on
        # uq_voucher_sequence_day and the caller's transaction rolls back
        row = VoucherSequence(prefix=prefix, seq_date=on, last_value=0)
        db.session.add(row)
    if (row.last_value or 0) >= MAX_VOUCHERS_PER_DAY:
        raise InvariantViolation(
            f"{prefix} voucher numbers for {on:%d/%m/%Y} are exhausted "
            f"({MAX_VOUCHERS_PER_DAY} per day)."
        )
    row.last_value = (row.last_value or 0) + 1
    db.session.flush()
    return row.last_value


def next_voucher_number(prefix: str, on: Optional[date] = None) -> str:
    on = on or date.today()
    return format_voucher_number(prefix, on, _next_sequence(prefix, on))


def generate_iv_number(on: Optional[date] = None, prefix: str = IV_PREFIX) -> str:
    return next_voucher_number(prefix, on)


def generate_lar_number(on: Optional[date] = None, prefix: str = LAR_PREFIX) -> str:
    return next_voucher_number(prefix, on)
