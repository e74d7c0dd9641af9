from flask import Blueprint, jsonify
from flask_login import login_required
from dao import master as master_dao
from dao import numbering
from dao import procurement as proc_dao
from utils.auth import hq_required
from utils.forms import payload
from utils.serialize import (
    dump_ledger,
    dump_metric,
    dump_district,
    dump_staff,
    dump_budget,
)

master_bp = Blueprint("master_api", __name__)


@master_bp.route("/ledgers")
@login_required
def ledger_list():
    return jsonify([dump_ledger(x) for x in master_dao.list_ledgers()])


@master_bp.route("/ledgers", methods=["POST"])
@login_required
@hq_required
def ledger_add():
    data = payload()
    ledger = master_dao.create_ledger(name=data.get("name", ""))
    return jsonify(dump_ledger(ledger)), 201


@master_bp.route("/ledgers/<int:ledger_id>/next-code")
@login_required
def ledger_next_code(ledger_id: int):
    master_dao.require_ledger(ledger_id)
    return jsonify({"ledger_id": ledger_id, "code": numbering.generate_item_code(ledger_id)})


@master_bp.route("/metrics")
@login_required
def metric_list():
    return jsonify([dump_metric(x) for x in master_dao.list_metrics()])


@master_bp.route("/metrics", methods=["POST"])
@login_required
@hq_required
def metric_add():
    m = master_dao.create_metric(name=payload().get("name", ""))
    return jsonify(dump_metric(m)), 201


@master_bp.route("/districts")
@login_required
def district_list():
    return jsonify([dump_district(x) for x in master_dao.list_districts()])


@master_bp.route("/districts", methods=["POST"])
@login_required
@hq_required
def district_add():
    data = payload()
    d = master_dao.create_district(
        name=data.get("name", ""),
        is_commissionerate_or_wing=bool(data.get("is_commissionerate_or_wing")),
    )
    return jsonify(dump_district(d)), 201


@master_bp.route("/staff")
@login_required
def staff_list():
    return jsonify([dump_staff(x) for x in master_dao.list_staff()])


@master_bp.route("/staff/<g_no>")
@login_required
def staff_lookup(g_no: str):
    return jsonify(dump_staff(master_dao.require_staff(g_no)))


@master_bp.route("/staff", methods=["POST"])
@login_required
@hq_required
def staff_add():
    data = payload()
    s = master_dao.create_staff(
        g_no=data.get("g_no", ""),
        name=data.get("name", ""),
        rank=data.get("rank"),
        place_of_posting=data.get("place_of_posting"),
        mobile_number=data.get("mobile_number"),
    )
    return jsonify(dump_staff(s)), 201


@master_bp.route("/budgets")
@login_required
def budget_list():
    return jsonify([dump_budget(x) for x in proc_dao.list_budgets()])


@master_bp.route("/budgets", methods=["POST"])
@login_required
@hq_required
def budget_add():
    data = payload()
    b = proc_dao.create_budget(
        name=data.get("name", ""), financial_year=data.get("financial_year", "")
    )
    return jsonify(dump_budget(b)), 201
