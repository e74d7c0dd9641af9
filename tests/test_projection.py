import pytest

from dao import hq_issuance as hq_dao
from dao import projection
from dao.errors import NotFoundError


def test_outstanding_lists_only_returnable_lines_with_a_balance(stocked_item, issue, hq_user):
    radio = stocked_item(10, name="Radio")
    soap = stocked_item(10, name="Soap")
    torch = stocked_item(10, name="Torch")
    iv = issue((radio, 5), (soap, 5, False), (torch, 2))
    torch_mv = next(m for m in iv.movements if m.item_id == torch.id)
    hq_dao.return_from_district(iv.id, hq_user.id, [{"movement_id": torch_mv.id, "quantity": 2}])

    rows = projection.outstanding_returnable(iv.id)

    assert [r["item_id"] for r in rows] == [radio.id]
    assert rows[0]["remaining_quantity"] == 5
    assert rows[0]["status"] == projection.NOT_RETURNED
    assert rows[0]["item_code"] == radio.code


def test_movement_status():
    class M:
        def __init__(self, quantity, returned, returnable=True):
            self.quantity = quantity
            self.returned_quantity = returned
            self.is_returnable = returnable

    assert projection.movement_status(M(5, 0)) == projection.NOT_RETURNED
    assert projection.movement_status(M(5, 2)) == projection.PARTIAL
    assert projection.movement_status(M(5, 5)) == projection.RETURNED
    assert projection.movement_status(M(5, 0, False)) == projection.CONSUMABLE


def test_outstanding_unknown_voucher(app):
    with pytest.raises(NotFoundError):
        projection.outstanding_returnable(12345)


def test_ivs_with_outstanding_returns(stocked_item, issue, hq_user, other_district):
    radio = stocked_item(10)
    soap = stocked_item(10, name="Soap")
    open_iv = issue((radio, 2))
    settled_iv = issue((radio, 1))
    issue((soap, 3, False))
    other_iv = issue((radio, 1), to_district=other_district)
    hq_dao.return_from_district(
        settled_iv.id, hq_user.id, [{"movement_id": settled_iv.movements[0].id, "quantity": 1}]
    )

    assert {iv.id for iv in projection.ivs_with_outstanding_returns()} == {open_iv.id, other_iv.id}
    assert [iv.id for iv in projection.ivs_with_outstanding_returns(other_district.id)] == [other_iv.id]


def test_current_stock_defaults_to_zero(app, district):
    assert projection.current_stock(1) == 0
    assert projection.current_stock(1, district.id) == 0


def test_low_stock(stocked_item):
    low = stocked_item(3, name="Radio", low_stock_threshold=5)
    edge = stocked_item(5, name="Battery", low_stock_threshold=5)
    stocked_item(10, name="Torch", low_stock_threshold=5)
    siren = stocked_item(1, name="Siren")

    # own thresholds are inclusive; an item without one never alerts
    assert [r.item_id for r in projection.low_stock()] == [low.id, edge.id]
    # an explicit threshold is strict
    assert len(projection.low_stock(threshold=11)) == 4
    assert [r.item_id for r in projection.low_stock(threshold=3)] == [siren.id]
    assert projection.low_stock(threshold=1) == []


def test_voucher_summary(stocked_item, issue, hq_user):
    radio = stocked_item(10)
    iv = issue((radio, 4))
    hq_dao.return_from_district(iv.id, hq_user.id, [{"movement_id": iv.movements[0].id, "quantity": 1}])
    hq_dao.return_from_district(iv.id, hq_user.id, [{"movement_id": iv.movements[0].id, "quantity": 1}])

    summary = projection.voucher_summary(iv.id)

    assert summary["voucher"].id == iv.id
    assert len(summary["movements"]) == 1
    assert [lar.lar_number[-3:] for lar in summary["lars"]] == ["001", "002"]
