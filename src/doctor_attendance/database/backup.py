"""Database and photo backups for the maintenance scripts."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from .connection import DBConfig

logger = logging.getLogger(__name__)


def mysqldump_command(config: DBConfig) -> list[str]:
    # the password goes through MYSQL_PWD so it never shows up in `ps`
    return [
        "mysqldump",
        f"--host={config.host}",
        f"--port={config.port}",
        f"--user={config.user}",
        "--single-transaction",
        "--routines",
        config.database,
    ]


def dump_database(config: DBConfig, out_dir: str | Path, *, stamp: str) -> Path:
    """Write ``<database>_backup_<stamp>.sql`` into ``out_dir``."""

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"{config.database}_backup_{stamp}.sql"

    env = {**os.environ, "MYSQL_PWD": config.password}
    try:
        with out_file.open("wb") as f:
            subprocess.run(mysqldump_command(config), stdout=f, stderr=subprocess.PIPE, check=True, env=env)
    except Exception:
        out_file.unlink(missing_ok=True)
        raise

    logger.info("Database dumped to %s", out_file)
    return out_file


def archive_photos(upload_root: str | Path, out_dir: str | Path, *, stamp: str) -> Optional[Path]:
    """Zip the upload directory; returns ``None`` when there is nothing to archive."""

    upload_root = Path(upload_root)
    if not upload_root.is_dir() or not any(upload_root.iterdir()):
        return None

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    archive = shutil.make_archive(str(out_dir / f"photos_backup_{stamp}"), "zip", root_dir=upload_root)
    logger.info("Photos archived to %s", archive)
    return Path(archive)


def backup_stamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
