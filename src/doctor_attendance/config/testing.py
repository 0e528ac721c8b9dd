import os
import tempfile

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

UPLOAD_ROOT = os.getenv("UPLOAD_ROOT", tempfile.mkdtemp(prefix="doctor-attendance-uploads-"))

AUTO_INIT_DB = False
AUTO_SEED_DB = False
