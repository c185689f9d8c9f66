#!/usr/bin/env python3
"""
Database Initialization Script
Creates tables and optionally seeds sample data.
"""
import asyncio
import datetime as dt
import os
import sys
from decimal import Decimal

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, inspect, select, text
from farmledger.database import engine, Base, async_session_maker
from farmledger.models import EggInventory, Employee, Gender, MaritalStatus


SAMPLE_EMPLOYEES = [
    {
        "full_name": "Asha Rao",
        "age": 30,
        "gender": Gender.FEMALE,
        "marital_status": MaritalStatus.MARRIED,
        "phone_number": "9876543210",
        "aadhar_number": "123412341234",
        "salary": Decimal("15000.50"),
        "work_employed_to_do": "Feeding and egg collection",
    },
    {
        "full_name": "Ravi Kumar",
        "age": 42,
        "gender": Gender.MALE,
        "marital_status": MaritalStatus.HAS_FAMILY,
        "phone_number": "9123456780",
        "aadhar_number": "567856785678",
        "salary": Decimal("18500.00"),
        "work_employed_to_do": "Shed cleaning and maintenance",
    },
]


async def seed_sample_data():
    """Insert sample employees and a week of egg counts into empty tables."""
    async with async_session_maker() as session:
        employee_count = (await session.execute(
            select(func.count()).select_from(Employee)
        )).scalar_one()

        if employee_count == 0:
            for data in SAMPLE_EMPLOYEES:
                session.add(Employee(**data))
            print(f"      Added {len(SAMPLE_EMPLOYEES)} employees")
        else:
            print("      Employees already exist, skipping.")

        inventory_count = (await session.execute(
            select(func.count()).select_from(EggInventory)
        )).scalar_one()

        if inventory_count == 0:
            today = dt.date.today()
            for offset in range(7):
                inventory = EggInventory(
                    date=today - dt.timedelta(days=offset),
                    crack_eggs=5 + offset,
                    jumbo_eggs=40 + offset * 2,
                    normal_eggs=300 - offset * 3,
                )
                inventory.recompute_total()
                session.add(inventory)
            print("      Added 7 days of egg inventory")
        else:
            print("      Egg inventory already exists, skipping.")

        await session.commit()


async def init_database(seed: bool = False):
    """Initialize the database tables."""
    print("=" * 50)
    print("FarmLedger Database Initialization")
    print("=" * 50)

    # Create all tables
    print("\n[1/3] Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("      Tables created successfully!")

    print("\n[2/3] Seeding sample data...")
    if seed:
        await seed_sample_data()
    else:
        print("      Skipped (pass --seed to add sample rows).")

    # Verify tables
    print("\n[3/3] Verifying database structure...")
    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

        print(f"      Found {len(tables)} tables:")
        for table in sorted(tables):
            # Count rows
            count_result = await conn.execute(text(f'SELECT COUNT(*) FROM "{table}"'))
            row_count = count_result.scalar()
            print(f"        - {table}: {row_count} rows")

    await engine.dispose()

    print("\n" + "=" * 50)
    print("Database initialization complete!")
    print("=" * 50)


async def reset_database(seed: bool = False):
    """Drop all tables and recreate them (USE WITH CAUTION!)."""
    print("WARNING: This will delete all data!")
    confirm = input("Type 'RESET' to confirm: ")

    if confirm != "RESET":
        print("Aborted.")
        return

    print("\nDropping all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    print("Recreating tables...")
    await init_database(seed=seed)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Database initialization script")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables (destructive!)"
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Insert sample employees and egg counts into empty tables"
    )
    args = parser.parse_args()

    if args.reset:
        asyncio.run(reset_database(seed=args.seed))
    else:
        asyncio.run(init_database(seed=args.seed))
