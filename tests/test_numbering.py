from datetime import date

import pytest

from configs import db
from db.models import Ledger, VoucherSequence
from dao import numbering
from dao.errors import InvariantViolation, NotFoundError


def test_three_items_on_fresh_ledger_get_consecutive_codes(ledger, make_item):
    codes = [make_item(name=f"Item {i}").code for i in range(3)]

    assert codes == ["L2-001", "L2-002", "L2-003"]
    assert db.session.get(Ledger, 2).current_sequence_number == 3


def test_codes_are_per_ledger(ledger, make_item):
    make_item(name="Radio set")
    other = make_item(name="Battery", ledger_id=1)

    assert other.code == "L1-001"
    assert db.session.get(Ledger, 2).current_sequence_number == 1


def test_preview_does_not_consume_the_sequence(ledger, make_item):
    make_item()

    assert numbering.generate_item_code(2) == "L2-002"
    assert numbering.generate_item_code(2) == "L2-002"
    assert db.session.get(Ledger, 2).current_sequence_number == 1


def test_preview_for_unknown_ledger_is_empty(app):
    assert numbering.generate_item_code(999) == ""


def test_allocate_on_unknown_ledger(app):
    with pytest.raises(NotFoundError):
        numbering.allocate_item_code(999)


def test_sequence_pads_to_three_digits_then_grows():
    assert numbering.format_item_code(2, 7) == "L2-007"
    assert numbering.format_item_code(2, 1234) == "L2-1234"


def test_voucher_number_format():
    assert numbering.format_voucher_number("IV", date(2024, 3, 5), 1) == "IV/05/03/2024/001"
    assert (
        numbering.format_voucher_number("DIST-LAR", date(2024, 12, 31), 42)
        == "DIST-LAR/31/12/2024/042"
    )


def test_voucher_counter_is_per_prefix_and_day(app):
    day = date(2024, 3, 5)

    assert numbering.generate_iv_number(on=day) == "IV/05/03/2024/001"
    assert numbering.generate_iv_number(on=day) == "IV/05/03/2024/002"
    assert numbering.generate_lar_number(on=day) == "LAR/05/03/2024/001"
    assert numbering.generate_iv_number(on=date(2024, 3, 6)) == "IV/06/03/2024/001"
    assert (
        numbering.generate_iv_number(on=day, prefix=numbering.DISTRICT_IV_PREFIX)
        == "DIST-IV/05/03/2024/001"
    )

    row = VoucherSequence.query.filter_by(prefix="IV", seq_date=day).one()
    assert row.last_value == 2


def test_voucher_counter_stops_at_three_digits(app):
    day = date(2024, 3, 5)
    db.session.add(VoucherSequence(prefix="IV", seq_date=day, last_value=998))
    db.session.commit()

    assert numbering.generate_iv_number(on=day) == "IV/05/03/2024/999"
    with pytest.raises(InvariantViolation, match="exhausted"):
        numbering.generate_iv_number(on=day)

    assert VoucherSequence.query.filter_by(prefix="IV", seq_date=day).one().last_value == 999
    assert numbering.generate_lar_number(on=day) == "LAR/05/03/2024/001"
