"""Function endpoints invoked by the scheduler and the partner frontend.

Both functions answer with ``{success, message?, error?}`` and carry the
permissive CORS headers browsers need to call them directly.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from edusync.config import SyncConfig, get_settings
from edusync.constants import FUNCTION_CORS_HEADERS
from edusync.db import session_maker_for
from edusync.models.schemas import EmailNotificationRequest, FunctionResponse
from edusync.services.educators import EducatorSyncService
from edusync.services.notifications import EmailNotificationService, NotificationError

router = APIRouter()
logger = logging.getLogger(__name__)


def get_sync_service() -> EducatorSyncService:
    """Build the orchestrator from application settings."""
    config = SyncConfig.from_settings(get_settings())
    return EducatorSyncService(config, session_maker_for(config))


def get_notification_service() -> EmailNotificationService:
    return EmailNotificationService(get_settings())


def function_response(body: FunctionResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=body.model_dump(exclude_none=True),
        status_code=status_code,
        headers=FUNCTION_CORS_HEADERS,
    )


def preflight_response() -> Response:
    return Response(content="ok", headers=FUNCTION_CORS_HEADERS)


# ==================== Educator video sync ====================


@router.options("/sync-educator-videos", include_in_schema=False)
async def sync_educator_videos_preflight() -> Response:
    return preflight_response()


@router.post("/sync-educator-videos", response_model=FunctionResponse)
async def sync_educator_videos(
    service: Annotated[EducatorSyncService, Depends(get_sync_service)],
) -> JSONResponse:
    """Sync the next batch of educators.

    Per-educator failures are recorded on the educator and its history row and
    still yield 200; only a failure to select the batch answers 500.
    """
    try:
        result = await service.run()
    except Exception as e:
        logger.exception(f"Error in sync-educator-videos: {e}")
        return function_response(FunctionResponse(success=False, error=str(e) or type(e).__name__), 500)

    return function_response(FunctionResponse(success=True, message=result.message))


# ==================== Partner notifications ====================


@router.options("/partner-application-notification", include_in_schema=False)
async def partner_application_notification_preflight() -> Response:
    return preflight_response()


@router.post("/partner-application-notification", response_model=FunctionResponse)
async def partner_application_notification(
    request: EmailNotificationRequest,
    service: Annotated[EmailNotificationService, Depends(get_notification_service)],
) -> JSONResponse:
    """Render a partner program email and deliver it."""
    try:
        await service.send(request.to, request.template, request.data)
    except NotificationError as e:
        logger.error(f"Error sending email notification: {e}")
        return function_response(FunctionResponse(success=False, error=str(e)), 500)

    return function_response(
        FunctionResponse(success=True, message="Email notification sent successfully")
    )
