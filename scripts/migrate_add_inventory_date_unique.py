"""
Migration script to make egg_inventories.date unique.
Databases created before the unique index may hold several rows for one day;
those must be merged or removed by hand before this runs.
"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text
from farmledger.database import engine


async def migrate():
    """Replace the plain date index with a unique one."""
    old_index = "ix_egg_inventories_date"
    index_name = "uq_egg_inventories_date"

    async with engine.begin() as conn:
        result = await conn.execute(text("""
            SELECT date, COUNT(*) AS copies
            FROM egg_inventories
            GROUP BY date
            HAVING COUNT(*) > 1
            ORDER BY date
        """))
        duplicates = result.fetchall()

        if duplicates:
            print("Cannot add unique index, these dates have more than one inventory:")
            for row in duplicates:
                print(f"  - {row.date}: {row.copies} rows")
            print("Merge or delete the extra rows and run the migration again.")
            sys.exit(1)

        # Check if index already exists
        result = await conn.execute(text("""
            SELECT indexname, indexdef
            FROM pg_indexes
            WHERE tablename = 'egg_inventories'
            AND indexname IN (:old_index, :index_name)
        """), {"old_index": old_index, "index_name": index_name})
        existing = {row.indexname: row.indexdef for row in result.fetchall()}

        if "UNIQUE" in existing.get(old_index, "") or index_name in existing:
            print("Unique index on egg_inventories.date already exists")
        else:
            if old_index in existing:
                print(f"Dropping non-unique index {old_index}...")
                await conn.execute(text(f"DROP INDEX {old_index}"))
            print(f"Creating index {old_index}...")
            await conn.execute(text(f"""
                CREATE UNIQUE INDEX {old_index}
                ON egg_inventories (date)
            """))
            print(f"Created unique index {old_index}")

        print("Migration completed successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(migrate())
