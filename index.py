# index.py
from datetime import datetime
from flask import Blueprint, jsonify
from sqlalchemy import text
from configs import db

main_bp = Blueprint("main", __name__)


@main_bp.route("/health")
def health():
    db.session.execute(text("SELECT 1"))
    return jsonify({"status": "ok", "time": datetime.utcnow().isoformat()})
