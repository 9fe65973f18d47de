#!/usr/bin/env python3
"""
Database migration runner for Floodwatch.
"""
import logging
import subprocess
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.append(str(Path(__file__).parent.parent))

from floodwatch.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _alembic(*args: str) -> bool:
    try:
        result = subprocess.run(
            ["alembic", *args], check=True, capture_output=True, text=True
        )
        logger.info(f"Output: {result.stdout}")
        return True
    except subprocess.CalledProcessError as e:
        logger.error(f"alembic {' '.join(args)} failed: {e.stderr}")
        return False
    except OSError as e:
        logger.error(f"Could not run alembic: {e}")
        return False


def run_migrations() -> bool:
    logger.info("Running database migrations...")
    ok = _alembic("upgrade", "head")
    if ok:
        logger.info("Migrations completed successfully.")
    return ok


def create_migration(message: str) -> bool:
    logger.info(f"Creating migration: {message}")
    return _alembic("revision", "--autogenerate", "-m", message)


def main():
    setup_logging()

    if len(sys.argv) < 2:
        print("Usage: python run_migrations.py [upgrade|create] [message]")
        sys.exit(1)

    command = sys.argv[1]

    if command == "upgrade":
        success = run_migrations()
    elif command == "create":
        if len(sys.argv) < 3:
            print("Usage: python run_migrations.py create 'migration message'")
            sys.exit(1)
        success = create_migration(sys.argv[2])
    else:
        print("Unknown command. Use 'upgrade' or 'create'")
        sys.exit(1)

    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
