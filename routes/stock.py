from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from dao import stock as stock_dao
from dao import projection
from dao import procurement as proc_dao
from dao import master as master_dao
from dao.errors import NotFoundError
from utils.auth import hq_required, district_access_required
from utils.forms import payload
from utils.serialize import dump_hq_stock, dump_district_stock, dump_procurement

stock_bp = Blueprint("stock_api", __name__)


@stock_bp.route("/stock/hq")
@login_required
def hq_stock_list():
    return jsonify([dump_hq_stock(x) for x in stock_dao.list_hq_stock()])


@stock_bp.route("/stock/hq/<int:item_id>")
@login_required
def hq_stock_detail(item_id: int):
    row = stock_dao.get_hq_stock(item_id)
    if row is None:
        raise NotFoundError("HQ stock for item", item_id)
    return jsonify(dump_hq_stock(row))


@stock_bp.route("/stock/hq", methods=["POST"])
@login_required
@hq_required
def hq_stock_add():
    data = payload()
    row = stock_dao.add_hq_stock(
        item_id=data.get("item_id"),
        metric_id=data.get("metric_id"),
        quantity=data.get("quantity"),
        low_stock_threshold=data.get("low_stock_threshold"),
        default_threshold=current_app.config["DEFAULT_ITEM_LOW_STOCK_THRESHOLD"],
    )
    return jsonify(dump_hq_stock(row)), 201


@stock_bp.route("/stock/hq/<int:item_id>/threshold", methods=["PUT"])
@login_required
@hq_required
def hq_stock_threshold(item_id: int):
    row = stock_dao.set_low_stock_threshold(
        item_id, payload().get("low_stock_threshold")
    )
    return jsonify(dump_hq_stock(row))


@stock_bp.route("/stock/low")
@login_required
def low_stock():
    threshold = request.args.get("threshold", type=int)
    if threshold is None and request.args.get("mode") == "global":
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    return jsonify([dump_hq_stock(x) for x in projection.low_stock(threshold)])


@stock_bp.route("/stock/districts/<int:district_id>")
@login_required
@district_access_required
def district_stock(district_id: int):
    master_dao.require_district(district_id)
    inv = projection.district_inventory(district_id)
    return jsonify(
        {
            "district_id": district_id,
            "ledger_i": [dump_district_stock(x) for x in inv["ledger_i"]],
            "ledger_ii": [dump_district_stock(x) for x in inv["ledger_ii"]],
        }
    )


@stock_bp.route("/stock/districts/<int:district_id>", methods=["POST"])
@login_required
@district_access_required
def district_stock_add(district_id: int):
    data = payload()
    row = stock_dao.add_district_stock(
        district_id=district_id,
        item_id=data.get("item_id"),
        metric_id=data.get("metric_id"),
        quantity=data.get("quantity"),
        is_returnable=data.get("is_returnable", True),
    )
    return jsonify(dump_district_stock(row)), 201


@stock_bp.route("/stock/current/<int:item_id>")
@login_required
def current_stock(item_id: int):
    district_id = request.args.get("district_id", type=int)
    return jsonify(
        {
            "item_id": item_id,
            "district_id": district_id,
            "quantity": projection.current_stock(item_id, district_id),
        }
    )


@stock_bp.route("/procurements")
@login_required
def procurement_list():
    rows = proc_dao.list_procurements(item_id=request.args.get("item_id", type=int))
    return jsonify([dump_procurement(x) for x in rows])


@stock_bp.route("/procurements", methods=["POST"])
@login_required
@hq_required
def procurement_add():
    data = payload()
    p = proc_dao.record_procurement(
        item_id=data.get("item_id"),
        metric_id=data.get("metric_id"),
        quantity=data.get("quantity"),
        budget_id=data.get("budget_id"),
        purchase_date=data.get("purchase_date"),
        invoice_number=data.get("invoice_number"),
        seller_name=data.get("seller_name"),
        seller_mobile=data.get("seller_mobile"),
        seller_address=data.get("seller_address"),
        warranty_period_till=data.get("warranty_period_till"),
        procurement_type=data.get("procurement_type"),
        procured_by_user_id=current_user.id,
        low_stock_threshold=data.get("low_stock_threshold"),
    )
    return jsonify(dump_procurement(p)), 201
