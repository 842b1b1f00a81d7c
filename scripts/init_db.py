#!/usr/bin/env python3
"""
Database Initialization Script
Create tables and the bootstrap administrator
"""

import asyncio
import sys

from vetclinic.core.config import settings
from vetclinic.core.logging import get_logger, setup_logging
from vetclinic.db import session as db_session
from vetclinic.db.base import Base
from vetclinic.services.users import UserService

setup_logging()
logger = get_logger(__name__)


async def main():
    """Main initialization function"""
    logger.info("Initializing database...")

    try:
        await db_session.init_db()
        async with db_session.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully!")

        if settings.ADMIN_PASSWORD:
            async with db_session.async_session_maker() as session:
                admin = await UserService(session).ensure_admin(
                    settings.ADMIN_USERNAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD
                )
            logger.info(f"Admin account ready: {admin.username}")
        else:
            logger.warning("ADMIN_PASSWORD not set, skipping admin account")

        return 0
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        return 1
    finally:
        await db_session.close_db()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
