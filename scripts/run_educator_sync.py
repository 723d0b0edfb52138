#!/usr/bin/env python3
"""Run one educator video sync invocation, for external cron.

Uses the same settings as the app (environment / .env). Exits non-zero
only when the batch could not be selected; per-educator failures are
recorded in the store and reported in the summary.

Usage:
    python scripts/run_educator_sync.py
    python scripts/run_educator_sync.py --batch-size 10
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from edusync.config import SyncConfig, get_settings
from edusync.db import session_maker_for
from edusync.services.educators import EducatorSyncService
from edusync.utils.http_client import close_all_clients
from edusync.utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def run_sync(batch_size: int | None = None) -> int:
    """Run one batch and print a per-educator summary."""
    config = SyncConfig.from_settings(get_settings())
    if batch_size is not None:
        config = dataclasses.replace(config, batch_size=batch_size)

    if not config.platform_api_key:
        logger.error("YOUTUBE_API_KEY is not set")
        return 1

    service = EducatorSyncService(config, session_maker_for(config))
    try:
        result = await service.run()
    except Exception as e:
        logger.error(f"Educator sync failed: {e}")
        return 1
    finally:
        await close_all_clients()

    print(f"\n{result.message}")
    for outcome in result.outcomes:
        line = f"  {outcome.name}: {outcome.status.value}, {outcome.videos_synced} videos, quota {outcome.quota_used}"
        if outcome.error:
            line += f" ({outcome.error})"
        print(line)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sync the next batch of educators from YouTube")
    parser.add_argument("--batch-size", type=int, help="Override SYNC_BATCH_SIZE for this run")
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(run_sync(batch_size=args.batch_size)))
