from datetime import datetime, timezone

import pytest
from werkzeug.security import check_password_hash

from doctor_attendance.core.enums import Role
from doctor_attendance.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from doctor_attendance.users.service import AuthService, DoctorService

from support import ADMIN_PASSWORD, AUTHORIZED, DOCTOR_ID, DOCTOR_PASSWORD, make_photo


@pytest.fixture
def auth(users_repo) -> AuthService:
    return AuthService(users_repo)


@pytest.fixture
def doctors(users_repo) -> DoctorService:
    return DoctorService(users_repo)


def test_authenticate_doctor(auth):
    user = auth.authenticate(DOCTOR_ID, DOCTOR_PASSWORD)
    assert user.role == Role.DOCTOR
    assert user.to_dict() == {"id": DOCTOR_ID, "name": "Dr. John Doe", "role": "doctor"}


def test_authenticate_admin(auth):
    assert auth.authenticate(" admin ", ADMIN_PASSWORD).role == Role.ADMIN


@pytest.mark.parametrize("user_id, password", [(DOCTOR_ID, "wrong"), ("nobody", DOCTOR_PASSWORD), ("", ""), (DOCTOR_ID, "")])
def test_authenticate_rejects(auth, user_id, password):
    with pytest.raises(AuthenticationError, match="Invalid ID or password"):
        auth.authenticate(user_id, password)


def test_placeholder_hash_never_matches(auth, users_repo):
    users_repo.update_password(DOCTOR_ID, "not-a-real-hash")
    with pytest.raises(AuthenticationError):
        auth.authenticate(DOCTOR_ID, DOCTOR_PASSWORD)


def test_change_password(auth, users_repo):
    auth.change_password(DOCTOR_ID, current_password=DOCTOR_PASSWORD, new_password="newpass1")

    assert check_password_hash(users_repo.get_by_id(DOCTOR_ID).password_hash, "newpass1")
    assert auth.authenticate(DOCTOR_ID, "newpass1").user_id == DOCTOR_ID


def test_change_password_checks_current(auth):
    with pytest.raises(AuthenticationError, match="Current password is incorrect"):
        auth.change_password(DOCTOR_ID, current_password="wrong", new_password="newpass1")


@pytest.mark.parametrize("current, new", [("", "newpass1"), (DOCTOR_PASSWORD, ""), (DOCTOR_PASSWORD, "short")])
def test_change_password_validation(auth, current, new):
    with pytest.raises(ValidationError):
        auth.change_password(DOCTOR_ID, current_password=current, new_password=new)


def test_create_doctor(doctors, auth):
    doctor = doctors.create_doctor(user_id=" 20000101 ", name=" Dr. New ", password="secret1")

    assert doctor.user_id == "20000101"
    assert doctor.name == "Dr. New"
    assert doctor.role == Role.DOCTOR
    assert auth.authenticate("20000101", "secret1").name == "Dr. New"


def test_create_doctor_duplicate_id(doctors):
    with pytest.raises(ConflictError, match="Doctor ID already exists"):
        doctors.create_doctor(user_id=DOCTOR_ID, name="Someone", password="secret1")


@pytest.mark.parametrize(
    "user_id, name, password",
    [
        ("", "Dr. New", "secret1"),
        ("20000101", "", "secret1"),
        ("20000101", "Dr. New", "123"),
        ("x" * 21, "Dr. New", "secret1"),
        ("20000101", "   ", "secret1"),
    ],
)
def test_create_doctor_validation(doctors, user_id, name, password):
    with pytest.raises(ValidationError):
        doctors.create_doctor(user_id=user_id, name=name, password=password)


def test_update_password(doctors, auth):
    doctors.update_password(doctor_id=DOCTOR_ID, new_password="reset99")
    assert auth.authenticate(DOCTOR_ID, "reset99").user_id == DOCTOR_ID


def test_update_password_only_for_doctors(doctors):
    with pytest.raises(NotFoundError):
        doctors.update_password(doctor_id="admin", new_password="reset99")


def test_admin_cannot_be_deleted_as_doctor(doctors, users_repo):
    with pytest.raises(NotFoundError, match="Doctor not found"):
        doctors.delete_doctor("admin")
    assert users_repo.get_by_id("admin") is not None


def test_delete_doctor_cascades_attendance(doctors, container, attendance_repo):
    outcome = container.attendance_service.check_in(
        DOCTOR_ID,
        latitude=AUTHORIZED.latitude,
        longitude=AUTHORIZED.longitude,
        photo=make_photo(),
        now=datetime(2024, 1, 15, 1, 0, tzinfo=timezone.utc),
    )
    assert outcome.ok

    doctors.delete_doctor(DOCTOR_ID)

    assert attendance_repo.count_for_user(DOCTOR_ID) == 0
    with pytest.raises(NotFoundError):
        doctors.delete_doctor(DOCTOR_ID)


def test_list_doctors_sorted_by_name(doctors):
    assert [d.name for d in doctors.list_doctors()] == ["Dr. Jane Smith", "Dr. John Doe"]


def test_delete_doctor_removes_their_photos(container):
    service = container.attendance_service
    at = datetime(2024, 1, 15, 1, 0, tzinfo=timezone.utc)
    for user_id in (DOCTOR_ID, "19850615"):
        outcome = service.check_in(
            user_id, latitude=AUTHORIZED.latitude, longitude=AUTHORIZED.longitude, photo=make_photo(), now=at
        )
        assert outcome.ok

    container.doctor_service.delete_doctor(DOCTOR_ID)

    remaining = sorted(p.name for p in (container.photos.root / "attendance").iterdir())
    assert remaining == ["19850615_checkin_2024-01-15T01-00-00-000000Z.jpg"]


def test_create_doctor_losing_a_race_is_a_conflict(doctors, users_repo):
    users_repo.race_on_create = True

    with pytest.raises(ConflictError, match="Doctor ID already exists"):
        doctors.create_doctor(user_id="20000101", name="Dr. New", password="secret1")
