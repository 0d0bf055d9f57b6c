#!/usr/bin/env python3
"""
Script to inject the sample campus directory into the database.
Uses the configured database (DATABASE_URL_OVERRIDE or the POSTGRES_* settings).

Usage: python3 inject_sample_data.py
"""

import sys

from sqlalchemy.exc import OperationalError

from app import models  # noqa: F401
from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.errors import DirectoryError
from app.services.sample_data import SAMPLE_DIRECTORY, seed_directory


def inject_sample_directory():
    """Create the tables if needed and seed the sample directory."""
    print("🔌 Connecting to database...")
    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    db = SessionLocal()
    try:
        if not seed_directory(db):
            print("⊘ Directory already has categories, nothing to do")
            return

        for root in SAMPLE_DIRECTORY:
            sections = root.get("sections", [])
            print(f"✓ Added {root['type']}: {root['name']} ({len(sections)} section(s))")

        print()
        print("Next steps:")
        print("1. Start the API: uvicorn app.main:app --app-dir backend")
        print(f"2. Browse the directory: {settings.DIRECTORY_API_URL}/api/browse")

    except DirectoryError as e:
        print(f"❌ Error: {e.message}")
        raise

    finally:
        db.close()
        print()
        print("✓ Database connection closed")


if __name__ == "__main__":
    print("=" * 60)
    print("  Campus Directory Sample Data")
    print("=" * 60)
    print()

    inject_sample_directory()
