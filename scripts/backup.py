"""Back up the database with ``mysqldump`` and, optionally, the stored photos.

Note: requires the MySQL client tools on PATH.
"""

from __future__ import annotations

import argparse
import importlib
import subprocess
from pathlib import Path

from doctor_attendance.config import get_settings_module
from doctor_attendance.database.backup import archive_photos, backup_stamp, dump_database
from doctor_attendance.database.connection import DBConfig


def main() -> None:
    parser = argparse.ArgumentParser(description="Back up the attendance database.")
    parser.add_argument(
        "--out-dir",
        default=str(Path(__file__).resolve().parents[1] / "backups"),
        help="Directory receiving the backup files (default: ./backups).",
    )
    parser.add_argument(
        "--with-photos",
        action="store_true",
        help="Also zip UPLOAD_ROOT next to the SQL dump.",
    )
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(settings.DB_CONFIG)
    stamp = backup_stamp()

    try:
        out_file = dump_database(config, args.out_dir, stamp=stamp)
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools first.")
    except subprocess.CalledProcessError as e:
        raise SystemExit(f"mysqldump failed: {e.stderr.decode(errors='replace').strip()}")
    print(f"OK: Database backup: {out_file}")

    if args.with_photos:
        archive = archive_photos(settings.UPLOAD_ROOT, args.out_dir, stamp=stamp)
        print(f"OK: Photo archive: {archive}" if archive else "No photos to archive")


if __name__ == "__main__":
    main()
