"""Create demo doctor accounts and a few attendance rows for local development."""

from __future__ import annotations

import importlib

from doctor_attendance.config import get_settings_module
from doctor_attendance.database.bootstrap import apply_seed_sql, ensure_default_users


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_default_users(db_config, demo_doctors=True)
    apply_seed_sql(db_config, seed_path=settings.SEED_PATH)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
