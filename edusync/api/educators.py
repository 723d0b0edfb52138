"""Operator endpoints for inspecting and re-queueing educator syncs."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edusync.constants import SYNC_HISTORY_DEFAULT_LIMIT
from edusync.db import get_db
from edusync.db.crud import get_educator, get_sync_history, list_educators, reset_educator_sync
from edusync.models.schemas import EducatorRead, SyncHistoryRead

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[EducatorRead])
async def list_all_educators(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[EducatorRead]:
    """List educators with their sync bookkeeping."""
    educators = await list_educators(db)
    return [EducatorRead.model_validate(e) for e in educators]


@router.get("/{educator_id}/sync-history", response_model=list[SyncHistoryRead])
async def get_educator_sync_history(
    educator_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(SYNC_HISTORY_DEFAULT_LIMIT, ge=1, le=100),
) -> list[SyncHistoryRead]:
    """Recent sync attempts of one educator, newest first."""
    if await get_educator(db, educator_id) is None:
        raise HTTPException(status_code=404, detail="Educator not found")

    history = await get_sync_history(db, educator_id, limit=limit)
    return [SyncHistoryRead.model_validate(h) for h in history]


@router.post("/{educator_id}/resync", response_model=EducatorRead)
async def resync_educator(
    educator_id: uuid.UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EducatorRead:
    """Mark an educator pending so the next run picks it up."""
    educator = await get_educator(db, educator_id)
    if educator is None:
        raise HTTPException(status_code=404, detail="Educator not found")

    educator = await reset_educator_sync(db, educator)
    logger.info(f"Educator {educator.name} queued for resync")
    return EducatorRead.model_validate(educator)
