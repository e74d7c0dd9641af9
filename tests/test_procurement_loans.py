from datetime import date, timedelta

import pytest

from configs import db
from db.models import Procurement, QuantityMetric, Seller
from db.models.loan import LoanStatus
from db.models.procurement import ProcurementType
from dao import loan as loan_dao
from dao import procurement as proc_dao
from dao import projection
from dao.errors import NotFoundError, ValidationError


def _procure(item, metric, budget, quantity, **kw):
    return proc_dao.record_procurement(
        item_id=item.id,
        metric_id=metric.id,
        quantity=quantity,
        budget_id=budget.id,
        purchase_date="2024-02-01",
        **kw,
    )


# ---------- procurement ----------
def test_procurement_merges_into_hq_stock(make_item, metric, budget, hq_user):
    radio = make_item()

    p = _procure(
        radio,
        metric,
        budget,
        6,
        invoice_number="INV-77",
        seller_name="Andhra Radios",
        seller_mobile="9000000000",
        procurement_type="existing",
        procured_by_user_id=hq_user.id,
    )
    _procure(radio, metric, budget, "4")

    assert p.procurement_type == ProcurementType.EXISTING
    assert p.seller.name == "Andhra Radios"
    assert projection.current_stock(radio.id) == 10
    assert len(proc_dao.list_procurements(item_id=radio.id)) == 2


def test_failed_procurement_leaves_nothing_behind(make_item, metric, budget):
    radio = make_item()
    _procure(radio, metric, budget, 5)
    kgs = QuantityMetric(name="KGs")
    db.session.add(kgs)
    db.session.commit()

    with pytest.raises(ValidationError):
        _procure(radio, kgs, budget, 1, seller_name="Someone")

    assert Procurement.query.count() == 1
    assert Seller.query.count() == 0
    assert projection.current_stock(radio.id) == 5


def test_procurement_validation(make_item, metric, budget):
    radio = make_item()

    with pytest.raises(ValidationError, match="New or Existing"):
        _procure(radio, metric, budget, 1, procurement_type="donated")
    with pytest.raises(ValidationError):
        _procure(radio, metric, budget, 0)
    with pytest.raises(NotFoundError):
        proc_dao.record_procurement(radio.id, metric.id, 1, 999, "2024-02-01")
    with pytest.raises(ValidationError, match="required fields"):
        proc_dao.record_procurement(radio.id, metric.id, 1, None, "2024-02-01")


def test_budget_needs_name_and_year(app):
    with pytest.raises(ValidationError):
        proc_dao.create_budget("State Plan", "")
    b = proc_dao.create_budget(" State Plan ", "2024-2025")
    assert (b.name, b.financial_year) == ("State Plan", "2024-2025")


# ---------- loans ----------
def test_loan_lifecycle(make_item, metric):
    radio = make_item()

    loan = loan_dao.create_loan(
        radio.id, metric.id, 3, "SIB Wing", "Republic Day parade", "2024-01-30"
    )
    assert loan.status == LoanStatus.LOANED
    assert loan_dao.overdue_loans(today=date(2024, 2, 1)) == [loan]
    assert loan_dao.overdue_loans(today=date(2024, 1, 30)) == []

    loan_dao.mark_loan_returned(loan.id, returned_to="HQ Store", return_notes="All working")
    assert loan.status == LoanStatus.RETURNED
    assert loan.actual_return_date is not None
    assert loan_dao.overdue_loans(today=date(2024, 2, 1)) == []
    assert loan_dao.list_loans("returned") == [loan]
    assert loan_dao.list_loans("Loaned") == []

    with pytest.raises(ValidationError, match="already returned"):
        loan_dao.mark_loan_returned(loan.id, returned_to="HQ Store")


def test_loans_do_not_touch_stock(stocked_item, metric):
    radio = stocked_item(5)

    loan_dao.create_loan(
        radio.id, metric.id, 2, "SIB Wing", "VIP visit", date.today() + timedelta(days=3)
    )

    assert projection.current_stock(radio.id) == 5


def test_loan_validation(make_item, metric):
    radio = make_item()

    with pytest.raises(ValidationError, match="select an item"):
        loan_dao.create_loan(None, metric.id, 1, "SIB", "Event", "2024-01-01")
    with pytest.raises(ValidationError) as ei:
        loan_dao.create_loan(radio.id, metric.id, 1, " ", "Event", "2024-01-01")
    assert ei.value.field == "source_wing"
    with pytest.raises(ValidationError) as ei:
        loan_dao.create_loan(radio.id, metric.id, 1, "SIB", "Event", None)
    assert ei.value.field == "expected_return_date"
    with pytest.raises(ValidationError):
        loan_dao.list_loans("lost")
    with pytest.raises(NotFoundError):
        loan_dao.mark_loan_returned(999, returned_to="HQ")


def test_return_needs_receiver(make_item, metric):
    loan = loan_dao.create_loan(make_item().id, metric.id, 1, "SIB", "Event", "2024-01-01")

    with pytest.raises(ValidationError) as ei:
        loan_dao.mark_loan_returned(loan.id, returned_to="")
    assert ei.value.field == "returned_to"
