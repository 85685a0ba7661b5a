from __future__ import annotations

from functools import wraps

from flask import session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError


def current_employee_id() -> str:
    employee_id = session.get("employee_id")
    if not employee_id:
        raise AuthenticationError("Not authorized, please log in")
    return str(employee_id)


def is_admin() -> bool:
    return session.get("role") == Role.ADMIN.value


def require_self_or_admin(employee_id: str) -> None:
    if not is_admin() and current_employee_id() != str(employee_id):
        raise AuthorizationError("Not authorized for this employee")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_employee_id()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_employee_id()
        if not is_admin():
            raise AuthorizationError("Not authorized as an admin")
        return view(*args, **kwargs)

    return wrapper
