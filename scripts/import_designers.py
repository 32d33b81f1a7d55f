#!/usr/bin/env python
"""Bulk import designers from a JSON file.

The file holds a list of objects with ``name``, ``slug`` and optional
``about``. Designers are upserted by slug; entries without a name or slug
are skipped.

Usage:
    python scripts/import_designers.py --file designers.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from storefront.infra.database import close_db_engine, get_db_session
from storefront.infra.logging import get_logger, setup_logging
from storefront.schemas.admin import DesignerImportRequest
from storefront.services.admin_service import AdminService
from storefront.store.sql_store import SqlCatalogStore

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Bulk import designers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--file",
        type=Path,
        required=True,
        help="JSON file with a list of designers",
    )
    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging()

    if not args.file.exists():
        print(f"Error: File not found: {args.file}")
        return 1

    try:
        request = DesignerImportRequest(designers=json.loads(args.file.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"Error reading designers: {e}")
        return 1

    try:
        async with get_db_session() as session:
            result = await AdminService(SqlCatalogStore(session)).import_designers(request.designers)
    finally:
        await close_db_engine()

    print(result.message)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
