# admin/setup.py
from flask import abort
from flask_login import current_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from configs import db
from db.models.user import UserRole


def _is_hq_admin() -> bool:
    return current_user.is_authenticated and current_user.has_role(UserRole.HQ_ADMIN)


class StoreAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not current_user.is_authenticated:
            abort(401)
        if not current_user.has_role(UserRole.HQ_ADMIN):
            abort(403)
        return super().index()

    def is_accessible(self):
        return _is_hq_admin()

    def inaccessible_callback(self, name, **kwargs):
        abort(401 if not current_user.is_authenticated else 403)


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return _is_hq_admin()

    def inaccessible_callback(self, name, **kwargs):
        abort(401 if not current_user.is_authenticated else 403)


class ReadOnlyModelView(SecureModelView):
    """Vouchers, movements and balances only change through the ledger workflows."""

    can_create = False
    can_edit = False
    can_delete = False


class ItemView(SecureModelView):
    column_searchable_list = ["name", "code"]
    column_filters = ["ledger_id"]
    column_list = ["id", "code", "name", "ledger", "description"]
    # code comes from the ledger sequence
    can_create = False
    form_columns = ["name", "description"]


class LedgerView(SecureModelView):
    # the sequence only moves when an item is created
    form_excluded_columns = ["current_sequence_number", "items", "created_at", "updated_at"]
    can_delete = False


class HQIssuanceVoucherView(ReadOnlyModelView):
    column_searchable_list = ["iv_number", "receiving_staff_g_no"]
    column_filters = ["receiving_district_id", "issue_date"]
    column_list = [
        "id",
        "iv_number",
        "issue_date",
        "receiving_district",
        "receiving_staff_g_no",
        "approval_authority",
    ]


def init_admin(app):
    admin = Admin(
        app,
        name="Store Admin",
        index_view=StoreAdminIndex(url="/manage"),
        url="/manage",
    )
    # imported here to keep models out of module import order
    from db.models.user import User
    from db.models.ledger import Ledger
    from db.models.metric import QuantityMetric
    from db.models.district import District, CommunicationStaff
    from db.models.item import Item
    from db.models.stock import HQStock, DistrictStock
    from db.models.procurement import Budget, Procurement
    from db.models.hq_issuance import HQIssuanceVoucher, HQItemMovement, HQLARVoucher
    from db.models.district_issuance import (
        DistrictIssuanceVoucher,
        DistrictItemMovement,
        DistrictLARVoucher,
    )
    from db.models.loan import LoanItem

    admin.add_view(
        SecureModelView(
            User, db.session, category="System", endpoint="admin_user", name="Users"
        )
    )
    for model, endpoint, name in (
        (QuantityMetric, "admin_metric", "Metrics"),
        (District, "admin_district", "Districts / Wings"),
        (CommunicationStaff, "admin_staff", "Communication Staff"),
        (Budget, "admin_budget", "Budgets"),
    ):
        admin.add_view(
            SecureModelView(
                model, db.session, category="Master Data", endpoint=endpoint, name=name
            )
        )
    admin.add_view(
        LedgerView(
            Ledger,
            db.session,
            category="Master Data",
            endpoint="admin_ledger",
            name="Ledgers",
        )
    )
    admin.add_view(
        ItemView(
            Item, db.session, category="Master Data", endpoint="admin_item", name="Items"
        )
    )

    for model, endpoint, name in (
        (HQStock, "admin_hq_stock", "HQ Stock"),
        (DistrictStock, "admin_district_stock", "District Stock"),
        (Procurement, "admin_procurement", "Procurements"),
        (LoanItem, "admin_loan", "Loan Items"),
    ):
        admin.add_view(
            ReadOnlyModelView(
                model, db.session, category="Stock", endpoint=endpoint, name=name
            )
        )

    admin.add_view(
        HQIssuanceVoucherView(
            HQIssuanceVoucher,
            db.session,
            category="Movements",
            endpoint="admin_hq_iv",
            name="HQ IVs",
        )
    )
    for model, endpoint, name in (
        (HQLARVoucher, "admin_hq_lar", "HQ LARs"),
        (HQItemMovement, "admin_hq_movement", "HQ Movements"),
        (DistrictIssuanceVoucher, "admin_district_iv", "District IVs"),
        (DistrictLARVoucher, "admin_district_lar", "District LARs"),
        (DistrictItemMovement, "admin_district_movement", "District Movements"),
    ):
        admin.add_view(
            ReadOnlyModelView(
                model, db.session, category="Movements", endpoint=endpoint, name=name
            )
        )
    return admin
