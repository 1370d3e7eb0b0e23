"""
Initialize the database: create the storage table
if it does not exist yet.

Usage: python -m core.init_db
"""
import sys
from core.db import create_db_and_tables
from core.exceptions import SchemaError
from core.logger import logger


def main() -> int:
  logger.info("Create tables...")
  try:
    create_db_and_tables()
  except SchemaError as e:
    logger.error("Could not initialize database: %s", e)
    return 1
  logger.info("Tables ready")
  return 0


if __name__ == "__main__":
  sys.exit(main())
