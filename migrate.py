#!/usr/bin/env python3
"""
Database management commands: create or drop the schema, seed reference
data and check connectivity.
"""

import asyncio
import sys
import argparse
import logging

from marketplace.config import settings
from marketplace.database import (
    AsyncSessionLocal,
    create_tables,
    drop_tables,
    close_db_connection,
    test_database_connection
)
from marketplace.services.seed import seed_categories, seed_admin

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Schema and seed operations against the configured database."""

    async def create(self) -> None:
        await create_tables()

    async def drop(self) -> None:
        if settings.is_production:
            raise RuntimeError("Dropping tables is not allowed in production")
        await drop_tables()

    async def seed(self) -> None:
        async with AsyncSessionLocal() as session:
            written = await seed_categories(session)
            created = await seed_admin(session)

        logger.info(f"Seed finished: {written} categories, admin created: {created}")

    async def reset(self) -> None:
        """Drop, recreate and seed. Development and testing only."""
        if not (settings.is_development or settings.is_testing):
            raise RuntimeError("Database reset is only allowed in development or testing")

        logger.warning("Resetting database - all data will be lost!")
        await drop_tables()
        await create_tables()
        await self.seed()
        logger.info("Database reset completed")

    async def check(self) -> bool:
        return await test_database_connection()


async def run(command: str) -> int:
    manager = MigrationManager()
    try:
        if command == "check":
            return 0 if await manager.check() else 1
        await getattr(manager, command)()
        return 0
    finally:
        await close_db_connection()


def main():
    parser = argparse.ArgumentParser(description="Database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("drop", help="Drop all tables (not in production)")
    subparsers.add_parser("seed", help="Upsert the category tree and the admin account")
    reset_parser = subparsers.add_parser("reset", help="Drop, create and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")
    subparsers.add_parser("check", help="Check database connectivity")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return

    try:
        sys.exit(asyncio.run(run(args.command)))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
