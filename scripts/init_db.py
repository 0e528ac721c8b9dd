"""Create the database, apply database/schema.sql and ensure the default admin exists."""

from __future__ import annotations

import importlib

from doctor_attendance.config import get_settings_module
from doctor_attendance.database.bootstrap import apply_schema, ensure_default_users, list_tables


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=settings.SCHEMA_PATH)
    ensure_default_users(db_config)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
