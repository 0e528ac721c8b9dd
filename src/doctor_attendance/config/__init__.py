import os


def get_settings_module() -> str:
    """Settings module for the current ``APP_ENV`` (default: development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "doctor_attendance.config.production"

    if env in {"test", "testing"}:
        return "doctor_attendance.config.testing"

    return "doctor_attendance.config.development"
