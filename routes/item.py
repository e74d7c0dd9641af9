from flask import Blueprint, jsonify, request
from flask_login import login_required
from dao import item as item_dao
from dao.errors import NotFoundError
from utils.auth import hq_required
from utils.forms import payload
from utils.serialize import dump_item

item_bp = Blueprint("item_api", __name__)


@item_bp.route("/items")
@login_required
def item_list():
    items = item_dao.list_items(
        ledger_id=request.args.get("ledger_id", type=int),
        q=request.args.get("q"),
    )
    return jsonify([dump_item(x) for x in items])


@item_bp.route("/items/<int:item_id>")
@login_required
def item_detail(item_id: int):
    it = item_dao.get_item(item_id)
    if not it:
        raise NotFoundError("Item", item_id)
    return jsonify(dump_item(it))


@item_bp.route("/items", methods=["POST"])
@login_required
@hq_required
def item_add():
    data = payload()
    it = item_dao.create_item(
        name=data.get("name", ""),
        ledger_id=data.get("ledger_id"),
        description=data.get("description"),
    )
    return jsonify(dump_item(it)), 201


@item_bp.route("/items/<int:item_id>", methods=["PATCH"])
@login_required
@hq_required
def item_edit(item_id: int):
    it = item_dao.update_item(item_id, **payload())
    return jsonify(dump_item(it))


@item_bp.route("/items/<int:item_id>", methods=["DELETE"])
@login_required
@hq_required
def item_delete(item_id: int):
    item_dao.delete_item(item_id)
    return "", 204
