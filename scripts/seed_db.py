from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.patrons_checkin.patrons_checkin.database.bootstrap import apply_seed_sql, ensure_demo_manager


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the demo venue and demo manager.")
    parser.add_argument("--username", default="demo")
    parser.add_argument("--password", default="demo-password!")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="store the password as a one-time plaintext password (manager must change it on first login)",
    )
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_manager(db_config, username=args.username, password=args.password, reset=args.reset)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
