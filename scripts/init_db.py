#!/usr/bin/env python3
"""
Database initialization script.
Run this script to create the policy rule table.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger

from core.logging import setup_logging
from database.init_db import init_database


def main():
    """Create the policy rule table."""
    setup_logging()
    try:
        init_database()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
