#!/usr/bin/env python3
"""
Create the document tables (products, bestsellers, users, orders, order_items)

Existing tables are left untouched.

Usage:
    export DATABASE_URL="postgresql://..."
    python -m gleaming_admin.scripts.init_db
"""
import sys

from sqlalchemy import inspect

from gleaming_admin import models  # noqa: F401  (registers the tables)
from gleaming_admin.core.database import Base, get_engine


def main() -> int:
    engine = get_engine()
    existing = set(inspect(engine).get_table_names())

    Base.metadata.create_all(engine)

    for table in Base.metadata.sorted_tables:
        state = "exists" if table.name in existing else "created"
        print(f"  {table.name}: {state}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
