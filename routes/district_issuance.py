from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from dao import district_issuance as dist_dao
from dao import master as master_dao
from dao import projection
from dao.errors import NotFoundError
from dao.lines import to_id
from utils.auth import district_access_required
from utils.forms import payload
from utils.serialize import dump_district_iv, dump_district_lar

district_bp = Blueprint("district_api", __name__)


@district_bp.route("/districts/<int:district_id>/ivs")
@login_required
@district_access_required
def iv_list(district_id: int):
    master_dao.require_district(district_id)
    ivs = dist_dao.list_ivs(district_id)
    return jsonify([dump_district_iv(x, with_movements=False) for x in ivs])


@district_bp.route("/districts/<int:district_id>/ivs", methods=["POST"])
@login_required
@district_access_required
def iv_add(district_id: int):
    data = payload()
    iv = dist_dao.issue_to_office(
        district_id=district_id,
        issued_by_user_id=current_user.id,
        receiving_staff_g_no=data.get("receiving_staff_g_no", ""),
        receiving_office_name=data.get("receiving_office_name", ""),
        lines=data.get("lines") or [],
    )
    return jsonify(dump_district_iv(iv)), 201


@district_bp.route("/district-ivs/<int:district_iv_id>")
@login_required
def iv_detail(district_iv_id: int):
    iv = dist_dao.get_iv(district_iv_id)
    if iv is None:
        raise NotFoundError("District IV", district_iv_id)
    body = dump_district_iv(iv)
    body["lars"] = [dump_district_lar(x, with_movements=False) for x in iv.lars]
    return jsonify(body)


@district_bp.route("/district-ivs/<int:district_iv_id>/returnable")
@login_required
def iv_returnable(district_iv_id: int):
    return jsonify(projection.outstanding_returnable_district(district_iv_id))


@district_bp.route("/districts/<int:district_id>/lars")
@login_required
@district_access_required
def lar_list(district_id: int):
    master_dao.require_district(district_id)
    lars = dist_dao.list_lars(district_id)
    return jsonify([dump_district_lar(x, with_movements=False) for x in lars])


@district_bp.route("/districts/<int:district_id>/lars", methods=["POST"])
@login_required
@district_access_required
def lar_add(district_id: int):
    data = payload()
    iv = dist_dao.get_iv(to_id(data.get("district_iv_id"), "district_iv_id"))
    if iv is None or iv.district_id != district_id:
        raise NotFoundError("District IV", data.get("district_iv_id"))
    lar = dist_dao.return_from_office(
        district_iv_id=iv.id,
        returned_by_user_id=current_user.id,
        lines=data.get("lines") or [],
        remarks=data.get("remarks"),
    )
    return jsonify(dump_district_lar(lar)), 201
