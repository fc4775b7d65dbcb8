"""
File Upload Endpoints
"""
from fastapi import APIRouter, Depends, File, UploadFile, status

from domain.value_objects import Actor
from application.services.storage.interfaces import IFileStore
from core.config import settings
from core.exceptions import ValidationException
from presentation.api.v1.container import get_file_store
from presentation.api.v1.dependencies import require_talent
from presentation.api.v1.schemas.applications import UploadedFileResponse
from presentation.api.v1.schemas.common import success_response


router = APIRouter()


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_cv(
    cv: UploadFile = File(...),
    actor: Actor = Depends(require_talent),
    file_store: IFileStore = Depends(get_file_store),
):
    """Store a resume and return the url to submit with an application"""
    if not cv.filename:
        raise ValidationException("cv", "No file uploaded")

    # Read one byte past the limit so oversize uploads are detected without loading them whole
    content = await cv.read(settings.max_resume_size_bytes + 1)
    stored = await file_store.save(cv.filename, content, cv.content_type)

    return success_response(
        "File uploaded successfully",
        UploadedFileResponse(
            file_name=stored.file_name,
            original_name=stored.original_name,
            size=stored.size,
            type=stored.content_type,
            url=stored.url,
        ),
    )
