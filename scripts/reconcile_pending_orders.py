#!/usr/bin/env python
"""Script to reconcile pending orders with Printful.

This script:
1. Lists orders still 'pending' without a Printful order id
2. Looks each one up in Printful by external id (our order number)
3. Attaches the Printful order id and marks the order paid when found

Usage:
    python scripts/reconcile_pending_orders.py [--older-than-minutes 30] [--dry-run]

Requirements:
    - SUPABASE_URL / SUPABASE_SECRET_KEY environment variables must be set
    - PRINTFUL_ACCESS_TOKEN / PRINTFUL_STORE_ID environment variables must be set

Note:
    - Never creates Printful orders. Orders reported as missing still need
      to be created by hand in the Printful dashboard.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core.config import get_settings
from src.core.errors import OrderStoreError, PrintfulAPIError
from src.core.printful import PrintfulClient
from src.core.supabase import get_supabase_client
from src.services.order_store import OrderStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def reconcile_pending_orders(
    store: OrderStore,
    printful: PrintfulClient,
    older_than: datetime,
    dry_run: bool = False,
) -> dict[str, int]:
    """Match pending orders to existing Printful orders.

    Args:
        store: Order store.
        printful: Printful client.
        older_than: Only orders created before this instant are checked.
        dry_run: Report matches without writing them.

    Returns:
        dict: Counts of checked, matched, missing and failed orders.
    """
    orders = await store.list_unfulfilled_orders(older_than)
    logger.info("Found %d pending orders without a Printful order", len(orders))

    matched = missing = failed = 0
    for order in orders:
        order_number = order["order_number"]
        try:
            existing = await printful.get_order_by_external_id(order_number)
            if existing is None:
                missing += 1
                logger.warning("%s has no Printful order; create it manually", order_number)
                continue

            matched += 1
            if dry_run:
                logger.info("[dry-run] %s matches Printful order %s", order_number, existing["id"])
                continue

            await store.mark_fulfilled(str(order["id"]), int(existing["id"]))
            logger.info("%s linked to Printful order %s", order_number, existing["id"])

        except (PrintfulAPIError, httpx.HTTPError, OrderStoreError) as e:
            failed += 1
            logger.error("Failed to reconcile %s: %s", order_number, e, exc_info=True)

    return {"checked": len(orders), "matched": matched, "missing": missing, "failed": failed}


async def main() -> None:
    """Main entry point for the reconciliation script."""
    parser = argparse.ArgumentParser(description="Reconcile pending orders with Printful")
    parser.add_argument("--older-than-minutes", type=int, default=30)
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    settings = get_settings()
    if not settings.is_printful_configured:
        logger.error("PRINTFUL_ACCESS_TOKEN and PRINTFUL_STORE_ID must be set")
        sys.exit(1)

    store = OrderStore(get_supabase_client(), timeout_seconds=settings.store_timeout_seconds)
    printful = PrintfulClient(settings)
    older_than = datetime.now(timezone.utc) - timedelta(minutes=args.older_than_minutes)

    try:
        results = await reconcile_pending_orders(store, printful, older_than, dry_run=args.dry_run)
    finally:
        await printful.aclose()

    logger.info("=" * 60)
    logger.info("Reconciliation complete!")
    logger.info("Orders checked: %d", results["checked"])
    logger.info("Matched to Printful: %d", results["matched"])
    logger.info("Missing in Printful: %d", results["missing"])
    logger.info("Failed: %d", results["failed"])
    logger.info("=" * 60)

    if results["failed"] > 0:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
