"""
Pytest fixtures for the store inventory tests.

Provides:
- a Flask app built with TestConfig (in-memory SQLite) and a pushed app context
- master data: ledgers, metric, districts, communication staff, budget, users
- helpers to create items and opening HQ stock through the DAO layer
"""
from datetime import date

import pytest
from flask import g

from app import create_app
from configs import db, TestConfig
from db.models import (
    Budget,
    CommunicationStaff,
    District,
    Ledger,
    QuantityMetric,
    User,
)
from db.models.user import UserRole
from dao import hq_issuance as hq_dao
from dao import item as item_dao
from dao import stock as stock_dao


ISSUE_DAY = date(2024, 3, 5)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    @app.before_request
    def _fresh_identity():
        # requests share the fixture app context; drop the cached user
        g.pop("_login_user", None)

    return app.test_client()


@pytest.fixture
def ledger(app):
    """Volume II; item codes on it start at L2-001."""
    db.session.add(Ledger(id=1, name="Volume I", current_sequence_number=0))
    vol2 = Ledger(id=2, name="Volume II", current_sequence_number=0)
    db.session.add(vol2)
    db.session.commit()
    return vol2


@pytest.fixture
def metric(app):
    m = QuantityMetric(name="Nos.")
    db.session.add(m)
    db.session.commit()
    return m


@pytest.fixture
def district(app):
    d = District(name="Guntur District", is_commissionerate_or_wing=False)
    db.session.add(d)
    db.session.commit()
    return d


@pytest.fixture
def other_district(app):
    d = District(name="SIB Wing", is_commissionerate_or_wing=True)
    db.session.add(d)
    db.session.commit()
    return d


@pytest.fixture
def staff(app):
    s = CommunicationStaff(
        g_no="G12345",
        name="Rajesh Kumar",
        rank="Inspector",
        place_of_posting="Guntur",
        mobile_number="9876543210",
    )
    db.session.add(s)
    db.session.commit()
    return s


@pytest.fixture
def budget(app):
    b = Budget(name="Modernisation of Police Forces", financial_year="2023-2024")
    db.session.add(b)
    db.session.commit()
    return b


@pytest.fixture
def hq_user(app):
    u = User(username="hqadmin", full_name="HQ Store", role=UserRole.HQ_ADMIN)
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def district_user(app, district):
    u = User(
        username="districtadmin",
        full_name="Guntur Store",
        role=UserRole.DISTRICT_ADMIN,
        district_id=district.id,
    )
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def hq_headers(hq_user):
    return {"X-User-Id": str(hq_user.id)}


@pytest.fixture
def district_headers(district_user):
    return {"X-User-Id": str(district_user.id)}


@pytest.fixture
def make_item(ledger):
    def _make(name="VHF Handset", ledger_id=None):
        return item_dao.create_item(name=name, ledger_id=ledger_id or ledger.id)

    return _make


@pytest.fixture
def stocked_item(make_item, metric):
    """Item with an opening HQ balance; call with the quantity wanted."""

    def _make(quantity, name="VHF Handset", low_stock_threshold=None):
        it = make_item(name=name)
        stock_dao.add_hq_stock(it.id, metric.id, quantity, low_stock_threshold)
        return it

    return _make


@pytest.fixture
def issue(hq_user, staff, district):
    """Issue from HQ to `district` on ISSUE_DAY; lines are (item, qty[, returnable])."""

    def _issue(*lines, to_district=None):
        return hq_dao.issue_to_district(
            issued_by_user_id=hq_user.id,
            receiving_staff_g_no=staff.g_no,
            receiving_district_id=(to_district or district).id,
            approval_authority="Addl. DGP",
            approval_date=ISSUE_DAY,
            issue_date=ISSUE_DAY,
            lines=[
                {
                    "item_id": ln[0].id,
                    "quantity": ln[1],
                    "is_returnable": ln[2] if len(ln) > 2 else True,
                }
                for ln in lines
            ],
        )

    return _issue
