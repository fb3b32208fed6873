#!/usr/bin/env python3
"""
Create the streamTV schema and optionally load the demo catalog.
"""
import argparse
import sqlite3
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from streamtv.config import load_config
from streamtv.db import connect
from streamtv.models import init_db, seed_catalog, set_default_timezone


def main() -> int:
    parser = argparse.ArgumentParser(description="Initialise the streamTV database")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("--seed", action="store_true", help="Load the demo catalog (shows, episodes, actors)")
    args = parser.parse_args()

    config = load_config(args.config)
    set_default_timezone(config["app"].get("timezone", "America/New_York"))
    db_path = config["database"]["path"]
    print(f"Database: {db_path}")

    conn = connect(db_path, enable_wal=config["database"].get("enable_wal", False))
    try:
        init_db(conn)
        print("[OK] Schema ready")
        if args.seed:
            inserted = seed_catalog(conn)
            print(f"[OK] Demo catalog loaded ({inserted} new rows)")
    except sqlite3.Error as e:
        print(f"✗ Error initialising database: {e}")
        return 1
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
