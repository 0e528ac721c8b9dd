from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from doctor_attendance.container import build_services
from doctor_attendance.core.enums import Role
from doctor_attendance.geofence.model import AuthorizedLocation
from doctor_attendance.main import create_app
from doctor_attendance.users.model import User

from support import ADMIN_PASSWORD, AUTHORIZED, DOCTOR_ID, DOCTOR_PASSWORD, InMemoryAttendance, InMemoryUsers


@pytest.fixture
def location() -> AuthorizedLocation:
    return AuthorizedLocation(latitude=AUTHORIZED.latitude, longitude=AUTHORIZED.longitude, radius_meters=500)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id="admin", name="Administrator", role=Role.ADMIN, password_hash=generate_password_hash(ADMIN_PASSWORD)),
            User(user_id=DOCTOR_ID, name="Dr. John Doe", role=Role.DOCTOR, password_hash=generate_password_hash(DOCTOR_PASSWORD)),
            User(user_id="19850615", name="Dr. Jane Smith", role=Role.DOCTOR, password_hash=generate_password_hash(DOCTOR_PASSWORD)),
        ]
    )


@pytest.fixture
def attendance_repo(users_repo) -> InMemoryAttendance:
    return InMemoryAttendance(users_repo)


@pytest.fixture
def container(users_repo, attendance_repo, location, tmp_path):
    return build_services(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        location=location,
        upload_root=str(tmp_path / "uploads"),
        timezone="UTC",
    )


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="doctor_attendance.config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()
