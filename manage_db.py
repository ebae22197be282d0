#!/usr/bin/env python3
"""
Database management script for the invoicing service.
Creates and drops the schema on the configured database.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from invoicing.config import settings
from invoicing.infrastructure.db.database import engine, create_all_tables, drop_all_tables


def create_tables():
    """Create all tables that do not exist yet."""
    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}...")
    create_all_tables(engine)
    print("Tables created.")


def drop_tables():
    """Drop all tables - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() != 'yes':
        print("Drop cancelled.")
        return False
    drop_all_tables(engine)
    print("Tables dropped.")
    return True


def reset_database():
    """Drop and recreate all tables."""
    if settings.is_production:
        print("Refusing to reset a production database.")
        return
    if drop_tables():
        create_tables()


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create         - Create all tables")
        print("  drop           - Drop all tables (WARNING: drops all data)")
        print("  reset          - Drop and recreate all tables")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_tables()
    elif command_name == "drop":
        drop_tables()
    elif command_name == "reset":
        reset_database()
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
