"""
Add the optimistic-concurrency `version` column to users and content_items.
For a NEW database: not needed; the models define it (create_all creates it).
Run once on an EXISTING DB: python scripts/migrate_version_columns.py (from project root)
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import inspect, text
from arivelab.database import engine

TABLES = ["users", "content_items"]


def main():
    insp = inspect(engine)
    with engine.begin() as conn:
        for table in TABLES:
            if not insp.has_table(table):
                print(f"  skip (no table): {table}")
                continue
            existing = {c["name"] for c in insp.get_columns(table)}
            if "version" in existing:
                print(f"  skip (exists): {table}.version")
                continue
            conn.execute(text(f'ALTER TABLE {table} ADD COLUMN "version" INTEGER NOT NULL DEFAULT 1'))
            print(f"  added: {table}.version")
    print("Done.")


if __name__ == "__main__":
    main()
