from __future__ import annotations

import logging

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_positive_int
from ..common.web import admin_required, current_user_id, doctor_required, error, ok
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, RECENT_ACTIVITY_LIMIT
from ..core.errors import ErrorKind, Failure
from ..core.exceptions import DomainError, NotFoundError

logger = logging.getLogger(__name__)

# Only the HTTP layer knows about status codes.
FAILURE_STATUS = {
    ErrorKind.INVALID_FORMAT: 400,
    ErrorKind.LATITUDE_OUT_OF_RANGE: 400,
    ErrorKind.LONGITUDE_OUT_OF_RANGE: 400,
    ErrorKind.INVALID_COORDINATES: 400,
    ErrorKind.PHOTO_REQUIRED: 400,
    ErrorKind.INVALID_PHOTO: 400,
    ErrorKind.NOT_CHECKED_IN: 400,
    ErrorKind.OUTSIDE_GEOFENCE: 403,
    ErrorKind.ALREADY_CHECKED_IN: 409,
    ErrorKind.ALREADY_CHECKED_OUT: 409,
}


def failure_response(failure: Failure):
    extra = {"code": failure.kind.value}
    if failure.geofence is not None:
        extra["geofence"] = failure.geofence.to_dict()
    return error(failure.message, FAILURE_STATUS.get(failure.kind, 400), **extra)


def _page_args() -> tuple[int, int]:
    page = parse_positive_int(request.args.get("page"), default=1)
    limit = parse_positive_int(request.args.get("limit"), default=DEFAULT_PAGE_SIZE, maximum=MAX_PAGE_SIZE)
    return page, limit


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _check(action: str):
        check = service.check_in if action == "checkin" else service.check_out
        label = "Check-in" if action == "checkin" else "Check-out"
        # read outside the try so RequestEntityTooLarge reaches the app error handler
        form, files = request.form, request.files
        try:
            outcome = check(
                current_user_id(),
                latitude=form.get("latitude"),
                longitude=form.get("longitude"),
                photo=files.get("photo"),
            )
        except NotFoundError as e:
            return error(str(e), 404)
        except Exception:
            logger.exception("%s error", label)
            return error("Internal server error", 500)

        if not outcome.ok:
            return failure_response(outcome.failure)
        return ok(outcome.value.to_dict(), message=f"{label} successful")

    @app.route("/api/doctor/status", methods=["GET"], endpoint="doctor_status")
    @doctor_required
    def doctor_status():
        try:
            status = service.today_status(current_user_id())
        except Exception:
            logger.exception("Get status error")
            return error("Internal server error", 500)
        return ok(status.to_dict())

    @app.route("/api/doctor/checkin", methods=["POST"], endpoint="doctor_checkin")
    @doctor_required
    def doctor_checkin():
        return _check("checkin")

    @app.route("/api/doctor/checkout", methods=["POST"], endpoint="doctor_checkout")
    @doctor_required
    def doctor_checkout():
        return _check("checkout")

    @app.route("/api/doctor/history", methods=["GET"], endpoint="doctor_history")
    @doctor_required
    def doctor_history():
        page, limit = _page_args()
        try:
            data = service.history(current_user_id(), page=page, limit=limit)
        except Exception:
            logger.exception("Get history error")
            return error("Internal server error", 500)
        return ok(data.to_dict())

    @app.route("/api/admin/activity", methods=["GET"], endpoint="admin_activity")
    @admin_required
    def admin_activity():
        try:
            rows = service.recent_activity(RECENT_ACTIVITY_LIMIT)
        except Exception:
            logger.exception("Get activity error")
            return error("Internal server error", 500)
        return ok([r.to_dict() for r in rows])

    @app.route("/api/admin/attendance-history", methods=["GET"], endpoint="admin_attendance_history")
    @admin_required
    def admin_attendance_history():
        page, limit = _page_args()
        try:
            start = parse_iso_date(request.args["startDate"]) if request.args.get("startDate") else None
            end = parse_iso_date(request.args["endDate"]) if request.args.get("endDate") else None
        except ValueError:
            return error("Dates must use the YYYY-MM-DD format", 400)

        try:
            data = service.search_history(
                page=page,
                limit=limit,
                search=request.args.get("search", ""),
                start_date=start,
                end_date=end,
            )
        except Exception:
            logger.exception("Get attendance history error")
            return error("Internal server error", 500)
        return ok(data.to_dict())

    @app.route("/api/admin/delete-attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_delete_attendance")
    @admin_required
    def admin_delete_attendance(attendance_id: int):
        try:
            service.delete_record(attendance_id)
        except NotFoundError as e:
            return error(str(e), 404)
        except DomainError as e:
            return error(str(e), 400)
        except Exception:
            logger.exception("Delete attendance error")
            return error("Internal server error", 500)
        return ok(message="Attendance record deleted successfully")
