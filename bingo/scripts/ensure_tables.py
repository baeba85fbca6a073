"""
Create any missing tables.
Usage: python -m bingo.scripts.ensure_tables
"""
from bingo.database import ensure_tables_exist
from bingo.logging_config import setup_logging


def main():
    setup_logging()
    created = ensure_tables_exist()
    if created:
        print(f"Created {len(created)} table(s): {', '.join(created)}")
    else:
        print("Schema check complete: nothing to create.")


if __name__ == "__main__":
    main()
