"""Scrape entrypoint - Standalone script for running a scrape batch.

Usage:
    python -m eventfeed.scrape_entrypoint          # Run every registered source
    python -m eventfeed.scrape_entrypoint 1        # Run batch 1 only
"""

import asyncio
import sys
from typing import Optional

from eventfeed.classification import init_classifiers
from eventfeed.core.db import SessionLocal
from eventfeed.core.logging import get_logger
from eventfeed.ingestion.registry import BATCHES
from eventfeed.services.scrape_service import ScrapeService, ScrapeSummary

logger = get_logger("scrape_entrypoint")


async def run_scrape_job(batch: Optional[int]) -> ScrapeSummary:
    logger.info(f"Starting scrape job | batch={batch}")
    with SessionLocal() as db:
        service = ScrapeService(db)
        return await service.run(batch)


def main(argv: Optional[list] = None) -> ScrapeSummary:
    """Main entry point for the scrape pipeline."""
    args = sys.argv[1:] if argv is None else argv
    logger.info("Scrape pipeline starting...")

    batch: Optional[int] = None
    if args:
        try:
            batch = int(args[0])
        except ValueError:
            logger.error(f"Invalid batch: {args[0]}. Must be one of: {', '.join(str(b) for b in BATCHES)}")
            sys.exit(1)

    init_classifiers()
    summary = asyncio.run(run_scrape_job(batch))

    logger.info(f"Scrape pipeline completed: {summary.as_response()}")

    # Exit with error code if any source failed
    if summary.failed:
        logger.error(f"Failed sources: {', '.join(summary.failed)}")
        sys.exit(1)

    return summary


if __name__ == "__main__":
    main()
