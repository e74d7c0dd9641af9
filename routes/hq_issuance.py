from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from dao import hq_issuance as hq_dao
from dao import projection
from dao.errors import NotFoundError
from utils.auth import hq_required
from utils.forms import payload
from utils.serialize import dump_hq_iv, dump_hq_lar

hq_bp = Blueprint("hq_api", __name__, url_prefix="/hq")


@hq_bp.route("/ivs")
@login_required
def iv_list():
    district_id = request.args.get("district_id", type=int)
    if request.args.get("outstanding"):
        ivs = projection.ivs_with_outstanding_returns(district_id)
    else:
        ivs = hq_dao.list_ivs(district_id)
    return jsonify([dump_hq_iv(x, with_movements=False) for x in ivs])


@hq_bp.route("/ivs/<int:iv_id>")
@login_required
def iv_detail(iv_id: int):
    summary = projection.voucher_summary(iv_id)
    body = dump_hq_iv(summary["voucher"])
    body["lars"] = [dump_hq_lar(x, with_movements=False) for x in summary["lars"]]
    return jsonify(body)


@hq_bp.route("/ivs/<int:iv_id>/returnable")
@login_required
def iv_returnable(iv_id: int):
    return jsonify(projection.outstanding_returnable(iv_id))


@hq_bp.route("/ivs", methods=["POST"])
@login_required
@hq_required
def iv_add():
    data = payload()
    iv = hq_dao.issue_to_district(
        issued_by_user_id=current_user.id,
        receiving_staff_g_no=data.get("receiving_staff_g_no", ""),
        receiving_district_id=data.get("receiving_district_id"),
        approval_authority=data.get("approval_authority", ""),
        approval_date=data.get("approval_date"),
        approval_ref_no=data.get("approval_ref_no"),
        lines=data.get("lines") or [],
    )
    return jsonify(dump_hq_iv(iv)), 201


@hq_bp.route("/lars")
@login_required
def lar_list():
    lars = hq_dao.list_lars(iv_id=request.args.get("iv_id", type=int))
    return jsonify([dump_hq_lar(x, with_movements=False) for x in lars])


@hq_bp.route("/lars/<int:lar_id>")
@login_required
def lar_detail(lar_id: int):
    lar = hq_dao.get_lar(lar_id)
    if lar is None:
        raise NotFoundError("LAR", lar_id)
    return jsonify(dump_hq_lar(lar))


@hq_bp.route("/lars", methods=["POST"])
@login_required
@hq_required
def lar_add():
    data = payload()
    lar = hq_dao.return_from_district(
        iv_id=data.get("iv_id"),
        returned_by_user_id=current_user.id,
        lines=data.get("lines") or [],
        remarks=data.get("remarks"),
    )
    return jsonify(dump_hq_lar(lar)), 201
