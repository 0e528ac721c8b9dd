"""Settings shared by every environment; each value can be overridden from the environment."""

import os
from pathlib import Path

from ..core.constants import (
    DEFAULT_AUTHORIZED_LAT,
    DEFAULT_AUTHORIZED_LNG,
    DEFAULT_GEOFENCE_RADIUS,
    DEFAULT_MAX_PHOTO_BYTES,
    DEFAULT_TIMEZONE,
)

REPO_ROOT = Path(__file__).resolve().parents[3]

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "absendokter"),
}

# Authorized site; read once when the container is built.
AUTHORIZED_LAT = float(os.getenv("AUTHORIZED_LAT", DEFAULT_AUTHORIZED_LAT))
AUTHORIZED_LNG = float(os.getenv("AUTHORIZED_LNG", DEFAULT_AUTHORIZED_LNG))
GEOFENCE_RADIUS = int(os.getenv("GEOFENCE_RADIUS", DEFAULT_GEOFENCE_RADIUS))

# Reference timezone for the "already checked in today" day boundary.
ATTENDANCE_TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", DEFAULT_TIMEZONE)

UPLOAD_ROOT = os.getenv("UPLOAD_ROOT", str(REPO_ROOT / "uploads"))
MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", DEFAULT_MAX_PHOTO_BYTES))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"
SEED_PATH = REPO_ROOT / "database" / "seed.sql"

DEBUG = False
TESTING = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
