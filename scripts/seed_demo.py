from __future__ import annotations

import importlib
from datetime import date

from dotenv import load_dotenv

from qr_attendance.config import get_settings_module
from qr_attendance.storage.bootstrap import ensure_demo_data, migrate_legacy_passwords
from qr_attendance.storage.connection import StoreConfig, open_store


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    if not settings.STORE_PATH:
        raise SystemExit("STORE_PATH is not set; nothing to seed")

    store = open_store(StoreConfig(path=settings.STORE_PATH))
    migrate_legacy_passwords(store)
    seeded = ensure_demo_data(store, today=date.today(), student_password=settings.DEMO_STUDENT_PASSWORD)

    print(f"{'OK: Seeded' if seeded else 'Already seeded'} -> {settings.STORE_PATH}")


if __name__ == "__main__":
    main()
