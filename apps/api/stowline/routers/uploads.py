"""File upload routes."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from stowline.core.config import settings
from stowline.core.deps import get_current_account, require_csrf_header
from stowline.schemas.auth import AccountSession
from stowline.schemas.upload import UploadResponse
from stowline.services import upload_service

router = APIRouter()

MULTIPART_OVERHEAD_BYTES = 64 * 1024


@router.post(
    "/photos",
    response_model=UploadResponse,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
async def upload_photo(
    request: Request,
    file: UploadFile = File(...),
    folder: str = Form("general"),
    session: AccountSession = Depends(get_current_account),
):
    """Upload an image and return its hosted URL."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > settings.UPLOAD_MAX_BYTES + MULTIPART_OVERHEAD_BYTES:
            raise HTTPException(status_code=413, detail="File too large")

    size = await run_in_threadpool(upload_service.get_file_size, file.file)
    try:
        upload_service.validate_photo(file.content_type, size)
        storage_key = upload_service.build_storage_key(folder, file.content_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        url = await run_in_threadpool(
            upload_service.store_photo, storage_key, file.file, file.content_type
        )
    except upload_service.UploadError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return UploadResponse(url=url, content_type=file.content_type, size=size)
