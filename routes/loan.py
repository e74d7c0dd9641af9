from datetime import date, timedelta
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from dao import loan as loan_dao
from dao.errors import NotFoundError
from utils.forms import payload
from utils.serialize import dump_loan

loan_bp = Blueprint("loan_api", __name__)


@loan_bp.route("/loans")
@login_required
def loan_list():
    loans = loan_dao.list_loans(status=request.args.get("status"))
    return jsonify([dump_loan(x) for x in loans])


@loan_bp.route("/loans/overdue")
@login_required
def loan_overdue():
    return jsonify([dump_loan(x) for x in loan_dao.overdue_loans()])


@loan_bp.route("/loans/<int:loan_id>")
@login_required
def loan_detail(loan_id: int):
    loan = loan_dao.get_loan(loan_id)
    if loan is None:
        raise NotFoundError("Loan item", loan_id)
    return jsonify(dump_loan(loan))


@loan_bp.route("/loans", methods=["POST"])
@login_required
def loan_add():
    data = payload()
    expected = data.get("expected_return_date") or (
        date.today() + timedelta(days=current_app.config["LOAN_PERIOD_DAYS"])
    )
    loan = loan_dao.create_loan(
        item_id=data.get("item_id"),
        metric_id=data.get("metric_id"),
        quantity=data.get("quantity"),
        source_wing=data.get("source_wing", ""),
        event_name=data.get("event_name", ""),
        expected_return_date=expected,
    )
    return jsonify(dump_loan(loan)), 201


@loan_bp.route("/loans/<int:loan_id>/return", methods=["POST"])
@login_required
def loan_return(loan_id: int):
    data = payload()
    loan = loan_dao.mark_loan_returned(
        loan_id,
        returned_to=data.get("returned_to", ""),
        return_notes=data.get("return_notes"),
    )
    return jsonify(dump_loan(loan))
