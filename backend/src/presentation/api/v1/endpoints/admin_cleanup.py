"""
Admin Cleanup Endpoints
Manual sweep, on-demand scheduler run, preview and diagnostics
"""
from fastapi import APIRouter, Depends

from domain.value_objects import Actor
from application.services.cleanup.engine import CleanupEngine
from application.services.cleanup.scheduler import CleanupScheduler
from presentation.api.v1.container import get_cleanup_engine, get_cleanup_scheduler
from presentation.api.v1.dependencies import require_admin
from presentation.api.v1.schemas.cleanup import (
    CleanupCandidateResponse,
    CleanupPreviewResponse,
    CleanupStatusResponse,
    CleanupSummaryResponse,
)
from presentation.api.v1.schemas.common import success_response
from core.logging_config import logger


router = APIRouter()


@router.post("/applications")
async def cleanup_applications(
    actor: Actor = Depends(require_admin),
    engine: CleanupEngine = Depends(get_cleanup_engine),
):
    """Run the sweep synchronously in the request transaction"""
    logger.info(f"Manual cleanup requested by admin {actor.user_id}")
    summary = await engine.run()
    return success_response(
        f"Cleanup completed: {summary.deleted_applications} applications and "
        f"{summary.deleted_files} files deleted",
        CleanupSummaryResponse.from_summary(summary),
    )


@router.post("/run-now")
async def run_cleanup_now(
    actor: Actor = Depends(require_admin),
    scheduler: CleanupScheduler = Depends(get_cleanup_scheduler),
):
    """Trigger the scheduler's runner immediately"""
    logger.info(f"Scheduler run-now requested by admin {actor.user_id}")
    summary = await scheduler.run_now(trigger="admin")
    return success_response(
        "Cleanup job executed",
        CleanupSummaryResponse.from_summary(summary),
    )


@router.get("/preview")
async def preview_cleanup(
    actor: Actor = Depends(require_admin),
    engine: CleanupEngine = Depends(get_cleanup_engine),
):
    candidates = await engine.preview()
    return success_response(
        f"{len(candidates)} applications would be deleted",
        CleanupPreviewResponse(
            count=len(candidates),
            candidates=[CleanupCandidateResponse.from_candidate(c) for c in candidates],
        ),
    )


@router.get("/status")
async def cleanup_status(
    actor: Actor = Depends(require_admin),
    engine: CleanupEngine = Depends(get_cleanup_engine),
    scheduler: CleanupScheduler = Depends(get_cleanup_scheduler),
):
    status = await engine.status(scheduler=scheduler.describe(), timezone=scheduler.timezone.key)
    return success_response(
        "Cleanup status retrieved",
        CleanupStatusResponse.from_status(status),
    )
