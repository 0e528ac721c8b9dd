"""Helpers shared by the Flask controllers: JSON envelopes and session guards."""

from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, session

from ..core.enums import Role


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def error(message: str, status: int, **extra: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def current_user_id() -> str:
    return str(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Access denied. Please log in.", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error("Access denied. Please log in.", 401)
            if session.get("role") != role.value:
                return error(f"Access denied. {role.value.capitalize()} privileges required.", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(Role.ADMIN)
doctor_required = role_required(Role.DOCTOR)
