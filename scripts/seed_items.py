#!/usr/bin/env python3
"""
Load an item catalogue into the SQL item store.

Items already present (same id) are left untouched, so the script can be
re-run safely against a live database.

Usage:
    python3 scripts/seed_items.py [catalogue.json]
"""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from bidding.catalogue import load_catalogue, seed_store  # noqa: E402
from database import SqlItemStore, init_db, make_engine, make_session_factory  # noqa: E402

DEFAULT_CATALOGUE = Path(__file__).resolve().parent / "sample_items.json"


def main():
    catalogue_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CATALOGUE
    database_url = os.getenv("DATABASE_URL", "sqlite:///./auction_hub.db")

    if not catalogue_path.exists():
        print(f"❌ Catalogue not found: {catalogue_path}")
        sys.exit(1)

    try:
        items = load_catalogue(catalogue_path)
    except ValueError as e:
        print(f"❌ Invalid catalogue: {e}")
        sys.exit(1)

    engine = make_engine(database_url)
    init_db(engine)
    store = SqlItemStore(make_session_factory(engine))
    inserted = seed_store(store, items)

    print(f"✅ Inserted {inserted} of {len(items)} item(s) into {database_url}")


if __name__ == "__main__":
    main()
