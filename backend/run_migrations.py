#!/usr/bin/env python3
"""
Database migration runner for StudyDocs.
Waits for the database, then upgrades the schema to the latest Alembic revision.
"""

import sys
import os
import logging
import time
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

# Add the backend directory to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def wait_for_database(database_url: str, max_retries: int = 30, retry_interval: int = 2):
    """Wait for database to be available"""
    logger.info("Waiting for database connection...")

    for attempt in range(max_retries):
        try:
            engine = create_engine(database_url)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection successful!")
            engine.dispose()
            return True
        except OperationalError as e:
            logger.warning(f"Database connection attempt {attempt + 1}/{max_retries} failed: {e}")
            if attempt < max_retries - 1:
                time.sleep(retry_interval)
        except Exception as e:
            logger.error(f"Unexpected error connecting to database: {e}")
            return False

    logger.error("Maximum database connection retries exceeded")
    return False

def run_alembic_migration():
    """Run Alembic migrations with proper error handling"""
    from alembic.config import Config
    from alembic import command
    from studydocs.core.config import settings

    try:
        logger.info("Starting Alembic migration...")

        if not wait_for_database(settings.DATABASE_URL):
            logger.error("Database is not available")
            return False

        alembic_cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        logger.info("Running Alembic upgrade to head...")
        command.upgrade(alembic_cfg, "head")

        logger.info("Migration completed successfully!")
        return True

    except Exception as e:
        logger.error(f"Migration failed with error: {e}")
        return False

def main():
    """Main execution function"""
    logger.info("=== StudyDocs Database Migration Runner ===")

    if run_alembic_migration():
        logger.info("=== Migration completed successfully ===")
        sys.exit(0)
    else:
        logger.error("=== Migration failed ===")
        sys.exit(1)

if __name__ == "__main__":
    main()
