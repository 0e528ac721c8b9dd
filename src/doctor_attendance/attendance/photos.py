from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.datetime_utils import as_utc
from ..core.constants import PHOTO_SUBDIR
from ..core.enums import AttendanceType

logger = logging.getLogger(__name__)

URL_PREFIX = "uploads/"


class PhotoStorage:
    """Stores check-in/out photos on local disk under ``upload_root``.

    Stored references look like ``uploads/attendance/<user>_<type>_<ts>.jpg``;
    the ``uploads/`` prefix maps to ``upload_root``.
    """

    def __init__(self, upload_root: str | Path):
        self._root = Path(upload_root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    @staticmethod
    def is_present(photo: Optional[FileStorage]) -> bool:
        return photo is not None and bool(photo.filename)

    @staticmethod
    def is_image(photo: FileStorage) -> bool:
        return (photo.mimetype or "").startswith("image/")

    def reference_for(self, user_id: str, attendance_type: AttendanceType, when: datetime) -> str:
        stamp = as_utc(when).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        name = secure_filename(f"{user_id}_{attendance_type.value}_{stamp}.jpg")
        return f"{URL_PREFIX}{PHOTO_SUBDIR}/{name}"

    def resolve(self, reference: str) -> Path:
        relative = reference[len(URL_PREFIX):] if reference.startswith(URL_PREFIX) else reference
        path = (self._root / relative).resolve()
        if self._root not in path.parents:
            raise ValueError(f"Photo reference escapes upload root: {reference!r}")
        return path

    def save(self, photo: FileStorage, reference: str) -> Path:
        path = self.resolve(reference)
        path.parent.mkdir(parents=True, exist_ok=True)
        photo.save(str(path))
        logger.info("Stored attendance photo %s", reference)
        return path

    def delete(self, reference: str) -> bool:
        try:
            path = self.resolve(reference)
        except ValueError:
            logger.warning("Refusing to delete photo outside upload root: %s", reference)
            return False
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError:
            logger.exception("Could not delete photo %s", reference)
            return False
        return True
