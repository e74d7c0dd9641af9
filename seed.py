# seed.py
from sqlalchemy import text
from configs import db
from db.models.ledger import Ledger
from db.models.metric import QuantityMetric
from db.models.district import District, CommunicationStaff
from db.models.procurement import Budget
from db.models.user import User, UserRole
from app import create_app


# -------- Ledgers --------
def seed_ledgers():
    # item codes use the ledger id, so Volume N must get id N
    names = ["Volume I", "Volume II", "Volume III", "Volume IV", "Volume V", "Volume VI"]
    for idx, name in enumerate(names, 1):
        if not db.session.get(Ledger, idx):
            db.session.add(Ledger(id=idx, name=name, current_sequence_number=0))
    db.session.commit()
    if db.engine.dialect.name == "postgresql":
        # explicit ids do not advance the serial
        db.session.execute(
            text("SELECT setval(pg_get_serial_sequence('ledger', 'id'), (SELECT MAX(id) FROM ledger))")
        )
        db.session.commit()
    print("✓ Ledgers seeded")


# -------- Metrics --------
def seed_metrics():
    for name in ("Nos.", "KGs", "Litres"):
        if not QuantityMetric.query.filter_by(name=name).first():
            db.session.add(QuantityMetric(name=name))
    db.session.commit()
    print("✓ Metrics seeded")


# -------- Districts & staff --------
def seed_districts():
    districts = [
        ("Vijayawada Commissionerate", True),
        ("Guntur District", False),
        ("SIB Wing", True),
    ]
    for name, is_wing in districts:
        d = District.query.filter_by(name=name).first()
        if not d:
            db.session.add(District(name=name, is_commissionerate_or_wing=is_wing))
        else:
            d.is_commissionerate_or_wing = is_wing
    db.session.commit()
    print("✓ Districts seeded/updated")


def seed_staff():
    staff = [
        ("G12345", "Rajesh Kumar", "Inspector", "Vijayawada Commissionerate", "9876543210"),
        ("G67890", "Srinivas Rao", "Sub-Inspector", "Guntur District", "9876543211"),
    ]
    for g_no, name, rank, posting, mobile in staff:
        if not CommunicationStaff.query.filter_by(g_no=g_no).first():
            db.session.add(
                CommunicationStaff(
                    g_no=g_no,
                    name=name,
                    rank=rank,
                    place_of_posting=posting,
                    mobile_number=mobile,
                )
            )
    db.session.commit()
    print("✓ Staff seeded")


# -------- Budgets --------
def seed_budgets():
    for name in ("Regular Budget (520-521)", "MOPF Budget"):
        if not Budget.query.filter_by(name=name, financial_year="2023-2024").first():
            db.session.add(Budget(name=name, financial_year="2023-2024"))
    db.session.commit()
    print("✓ Budgets seeded")


# -------- Users --------
def seed_users():
    guntur = District.query.filter_by(name="Guntur District").first()
    users = [
        ("hqadmin", "HQ Store Admin", UserRole.HQ_ADMIN, None),
        ("districtadmin", "Guntur Store Admin", UserRole.DISTRICT_ADMIN, guntur),
    ]
    for username, full_name, role, district in users:
        if not User.query.filter_by(username=username).first():
            db.session.add(
                User(
                    username=username,
                    full_name=full_name,
                    role=role,
                    district_id=district.id if district else None,
                    is_active=True,
                )
            )
    db.session.commit()
    print("✓ Users seeded")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_ledgers()
        seed_metrics()
        seed_districts()
        seed_staff()
        seed_budgets()
        seed_users()
        print("✅ Seed data ready")
