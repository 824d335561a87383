"""SouqLink database management CLI.

Creates and drops the tables backing the souqlink domain on SQL providers.
Set PROTEAN_ENV=production to target the PostgreSQL database in DATABASE_URL.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from souqlink.domain import souqlink
    from souqlink.utils.db import setup_db

    print("Initializing souqlink domain...")
    souqlink.init()
    print("Creating database schema...")
    setup_db(souqlink)
    print("Done.")


def drop_database():
    from souqlink.domain import souqlink
    from souqlink.utils.db import drop_db

    print("Initializing souqlink domain...")
    souqlink.init()
    print("Dropping database schema...")
    drop_db(souqlink)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="SouqLink database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
