"""
Application Endpoints
Apply, list, detail, status changes, withdrawal, chat and resume download
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse

from domain.value_objects import Actor
from application.services.applications.lifecycle import (
    ApplicationLifecycleService,
    ApplyCommand,
)
from presentation.api.v1.container import get_lifecycle_service
from presentation.api.v1.dependencies import get_actor, require_talent
from presentation.api.v1.schemas.applications import (
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplyRequest,
    ApplyResponse,
    StatusUpdateRequest,
)
from presentation.api.v1.schemas.chat import ChatResponse
from presentation.api.v1.schemas.common import success_response


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def apply_for_job(
    body: ApplyRequest,
    actor: Actor = Depends(require_talent),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    """Submit an application; a rejected or cancelled one for the same job is replaced"""
    result = await service.apply(
        actor,
        ApplyCommand(
            job_id=body.job_id,
            full_name=body.full_name,
            email=body.email,
            phone=body.phone,
            cover_letter=body.cover_letter,
            experience_years=body.experience_years,
            skills=body.skills,
            resume_url=body.resume_url,
        ),
    )
    application = result.application
    data = ApplyResponse(
        id=application.id,
        job_id=application.job_id,
        status=application.status.value,
        has_resume=application.has_resume(),
        applied_at=application.applied_at,
        chat_id=result.chat.value.id if result.chat.ok else None,
        replaced_application_id=result.superseded_id,
    )
    return success_response("Application submitted successfully", data)


@router.get("/me")
async def get_my_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: Actor = Depends(require_talent),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    listing = await service.list_for_talent(actor, status_filter)
    return success_response(
        "Applications retrieved successfully",
        ApplicationListResponse.from_listing(listing),
    )


@router.get("/company")
async def get_company_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    job_id: Optional[UUID] = Query(None, alias="jobId"),
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    listing = await service.list_for_company(actor, status_filter, job_id)
    return success_response(
        "Company applications retrieved successfully",
        ApplicationListResponse.from_listing(listing),
    )


@router.get("/{application_id}")
async def get_application(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    view = await service.get_detail(actor, application_id)
    return success_response(
        "Application retrieved successfully",
        ApplicationDetailResponse.from_view(view),
    )


@router.put("/{application_id}/status")
async def update_application_status(
    application_id: UUID,
    body: StatusUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    application = await service.update_status(
        actor,
        application_id,
        body.status,
        notes=body.notes,
        feedback=body.feedback,
        interview_scheduled_at=body.interview_scheduled_at,
    )
    return success_response(
        f"Application status updated to {application.status.value}",
        ApplicationResponse.from_entity(application),
    )


@router.delete("/{application_id}")
async def delete_application(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    """Talent owner withdraws; admin deletes the record outright"""
    result = await service.remove(actor, application_id)
    if result.hard_deleted:
        return success_response("Application deleted successfully", {"id": str(application_id)})
    return success_response(
        "Application cancelled successfully",
        ApplicationResponse.from_entity(result.application),
    )


@router.get("/{application_id}/chat")
async def get_application_chat(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    """Chat for the application, created here when apply could not create it"""
    chat = await service.get_chat(actor, application_id)
    return success_response("Chat retrieved successfully", ChatResponse.from_entity(chat))


@router.get("/{application_id}/cv")
async def download_application_cv(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationLifecycleService = Depends(get_lifecycle_service),
):
    path, download_name, media_type = await service.get_resume(actor, application_id)
    return FileResponse(path, media_type=media_type, filename=download_name)
