from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from utils.serialize import dump_user

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(dump_user(current_user))
