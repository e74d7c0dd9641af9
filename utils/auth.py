# utils/auth.py
from functools import wraps
from flask import abort
from flask_login import current_user
from db.models.user import UserRole


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                abort(403)
            return fn(*a, **kw)

        return inner

    return deco


hq_required = roles_required(UserRole.HQ_ADMIN)


def district_access_required(fn):
    """HQ admins reach every district; district admins only their own."""

    @wraps(fn)
    def inner(*a, **kw):
        if not current_user.is_authenticated:
            abort(401)
        if current_user.has_role(UserRole.HQ_ADMIN):
            return fn(*a, **kw)
        if (
            current_user.has_role(UserRole.DISTRICT_ADMIN)
            and current_user.district_id == kw.get("district_id")
        ):
            return fn(*a, **kw)
        abort(403)

    return inner
