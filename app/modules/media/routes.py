from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from app.database.supabase_client import get_supabase
from app.modules.media.schemas import MediaResponse, MediaCountResponse
from app.modules.media.service import MediaService
from app.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/media", tags=["media"])


def get_media_service(supabase: Client = Depends(get_supabase)) -> MediaService:
    return MediaService(supabase)


@router.post("", response_model=MediaResponse, status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: MediaService = Depends(get_media_service)
):
    """Upload a file to the current student's media library"""
    if not file.filename:
        raise HTTPException(status_code=400, detail="File name is required")
    content = await file.read()
    return service.upload_file(content, file.filename, file.content_type, user_data["id"])


@router.get("", response_model=List[MediaResponse])
async def list_media(
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: MediaService = Depends(get_media_service)
):
    """List the current student's uploads, newest first"""
    return service.list_media(user_data["id"], limit=limit, offset=offset)


@router.get("/count", response_model=MediaCountResponse)
async def count_media(
    user_data: Dict = Depends(get_current_user),
    service: MediaService = Depends(get_media_service)
):
    return MediaCountResponse(count=service.count_media(user_data["id"]))
