import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from warehouse_api.core.logging import setup_logging
from warehouse_api.database import SessionLocal, engine, init_db
from warehouse_api.services import ImportService


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import products from an external SQL database."
    )
    parser.add_argument(
        "--source-url",
        required=True,
        help="SQLAlchemy URL, e.g. mysql+pymysql://host/db or postgresql+psycopg2://host/db.",
    )
    parser.add_argument("--username", default=None, help="Overrides the user in the URL.")
    parser.add_argument("--password", default=None, help="Overrides the password in the URL.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    init_db(engine)

    db = SessionLocal()
    try:
        result = ImportService(db).import_products(
            args.source_url, username=args.username, password=args.password
        )
    finally:
        db.close()

    print(result.message)
    for error in result.errors:
        print(f"  {error}")
    if not result.success:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
