from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.employee_tracker.employee_tracker.database.bootstrap import (
    apply_migrations,
    apply_schema,
    ensure_admin_user,
    list_tables,
)


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    applied = apply_migrations(db_config)
    created = ensure_admin_user(
        db_config,
        username=getattr(settings, "ADMIN_USERNAME", None),
        password=getattr(settings, "ADMIN_PASSWORD", None),
        strict=bool(getattr(settings, "STRICT_ADMIN_PASSWORD", False)),
    )
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)}, migrations={len(applied)}, admin_created={created})"
    )


if __name__ == "__main__":
    main()
