# routes/errors.py
import logging
from flask import jsonify
from sqlalchemy.exc import IntegrityError
from configs import db
from dao.errors import ValidationError, NotFoundError, InvariantViolation, ItemInUseError

log = logging.getLogger(__name__)


def _body(kind: str, ex: Exception, field: str | None = None):
    return jsonify({"error": kind, "message": str(ex), "field": field})


def register_error_handlers(app):
    @app.errorhandler(ItemInUseError)
    def _in_use(ex):
        return _body("item_in_use", ex, ex.field), 409

    @app.errorhandler(ValidationError)
    def _validation(ex):
        return _body("validation_error", ex, ex.field), 400

    @app.errorhandler(NotFoundError)
    def _not_found(ex):
        return _body("not_found", ex), 404

    @app.errorhandler(InvariantViolation)
    def _invariant(ex):
        log.error("Ledger invariant violated: %s", ex)
        return _body("invariant_violation", ex), 409

    @app.errorhandler(401)
    def _unauthorized(ex):
        return _body("unauthorized", ex.description), 401

    @app.errorhandler(403)
    def _forbidden(ex):
        return _body("forbidden", ex.description), 403

    @app.errorhandler(IntegrityError)
    def _integrity(ex):
        db.session.rollback()
        log.warning("Integrity error: %s", ex.orig)
        return (
            jsonify(
                {
                    "error": "conflict",
                    "message": "The record conflicts with existing data, please retry.",
                    "field": None,
                }
            ),
            409,
        )
