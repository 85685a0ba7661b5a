from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_payroll.attendance_payroll.database.bootstrap import apply_schema, ensure_admin, list_tables

logger = logging.getLogger("init_db")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the database schema and the first admin account.")
    parser.add_argument("--admin-email", help="create this admin when no admin exists yet")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-name", default="Administrator")
    args = parser.parse_args()

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )

    email = args.admin_email or getattr(settings, "ADMIN_EMAIL", None)
    password = args.admin_password or getattr(settings, "ADMIN_PASSWORD", None)
    if email and password:
        created = ensure_admin(db_config, email=email, password=password, name=args.admin_name)
        if created:
            logger.info("Created admin %s (%s)", created, email)
        else:
            logger.info("An admin account already exists")


if __name__ == "__main__":
    main()
