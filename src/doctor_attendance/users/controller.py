from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.web import admin_required, current_user_id, error, login_required, ok
from ..container import Container
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    doctors = container.doctor_service

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = _json_body()
        user_id = str(body.get("id") or "")
        password = str(body.get("password") or "")
        if not user_id.strip() or not password:
            return error("ID and password are required", 400)

        try:
            s_user = auth.authenticate(user_id, password)
        except AuthenticationError as e:
            return error(str(e), 401)
        except Exception:
            logger.exception("Login error")
            return error("Internal server error", 500)

        session.clear()
        session.permanent = bool(body.get("remember"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return ok({"user": s_user.to_dict()}, message="Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logout successful")

    @app.route("/api/auth/verify", methods=["GET"], endpoint="verify")
    @login_required
    def verify():
        s_user = auth.current_user(current_user_id())
        if s_user is None:
            session.clear()
            return error("Session is no longer valid. Please login again.", 401)
        return ok({"user": s_user.to_dict()})

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        body = _json_body()
        try:
            auth.change_password(
                current_user_id(),
                current_password=str(body.get("currentPassword") or ""),
                new_password=str(body.get("newPassword") or ""),
            )
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            return error(str(e), 400)
        except NotFoundError as e:
            return error(str(e), 404)
        except Exception:
            logger.exception("Change password error")
            return error("Internal server error", 500)
        return ok(message="Password changed successfully")

    @app.route("/api/admin/doctors", methods=["GET"], endpoint="admin_doctors")
    @admin_required
    def admin_doctors():
        try:
            rows = doctors.list_doctors()
        except Exception:
            logger.exception("Get doctors error")
            return error("Internal server error", 500)
        return ok([d.to_public_dict() for d in rows])

    @app.route("/api/admin/create-doctor", methods=["POST"], endpoint="admin_create_doctor")
    @admin_required
    def admin_create_doctor():
        body = _json_body()
        try:
            doctors.create_doctor(
                user_id=str(body.get("id") or ""),
                name=str(body.get("name") or ""),
                password=str(body.get("password") or ""),
            )
        except ValidationError as e:
            return error(str(e), 400)
        except ConflictError as e:
            return error(str(e), 409)
        except Exception:
            logger.exception("Create doctor error")
            return error("Internal server error", 500)
        return ok(message="Doctor created successfully")

    @app.route("/api/admin/update-password", methods=["PUT"], endpoint="admin_update_password")
    @admin_required
    def admin_update_password():
        body = _json_body()
        try:
            doctors.update_password(
                doctor_id=str(body.get("doctorId") or ""),
                new_password=str(body.get("newPassword") or ""),
            )
        except ValidationError as e:
            return error(str(e), 400)
        except NotFoundError as e:
            return error(str(e), 404)
        except Exception:
            logger.exception("Update password error")
            return error("Internal server error", 500)
        return ok(message="Password updated successfully")

    @app.route("/api/admin/delete-doctor/<doctor_id>", methods=["DELETE"], endpoint="admin_delete_doctor")
    @admin_required
    def admin_delete_doctor(doctor_id: str):
        try:
            doctors.delete_doctor(doctor_id)
        except NotFoundError as e:
            return error(str(e), 404)
        except Exception:
            logger.exception("Delete doctor error")
            return error("Internal server error", 500)
        return ok(message="Doctor deleted successfully")
