#!/usr/bin/env python
"""Release product holds whose expiry has passed.

Each expired hold is deleted and its product goes back to available (unless
it has left on_hold in the meantime, e.g. sold). Meant to run on a schedule
(Cloud Scheduler, cron).

Usage:
    python scripts/release_expired_holds.py

    # Report what would be released without changing anything
    python scripts/release_expired_holds.py --dry-run
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone

from storefront.infra.database import close_db_engine, get_db_session
from storefront.infra.logging import get_logger, setup_logging
from storefront.services.inquiry_service import InquiryService
from storefront.store.sql_store import SqlCatalogStore

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Release expired product holds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List expired holds without releasing them",
    )
    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging()
    now = datetime.now(timezone.utc)

    try:
        async with get_db_session() as session:
            store = SqlCatalogStore(session)
            if args.dry_run:
                expired = await store.expired_holds(now)
                for hold in expired:
                    print(f"  {hold['id']}  product={hold['product_id']}  expired={hold['expires_at']}")
                print(f"\n{len(expired)} expired holds")
                return 0

            released = await InquiryService(store).release_expired_holds(now)
            print(f"Released {released} expired holds")
    finally:
        await close_db_engine()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
