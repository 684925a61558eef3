from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, PublicProfileResponse, ProfileListResponse,
    FeaturedProfileResponse, ProfileCountResponse, ProfileViewCountResponse
)
from app.modules.profiles.service import ProfileService
from app.modules.pages.schemas import PublishedPageResponse
from app.modules.media.service import MediaService
from app.core.dependencies import get_current_user, get_current_profile, get_optional_user
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    q: Optional[str] = None,
    skill: Optional[str] = None,
    service: ProfileService = Depends(get_profile_service)
):
    """Browse public profiles; q searches name, bio and skills, skill filters exactly"""
    return service.list_public_profiles(search=q, skill=skill)


@router.get("/featured", response_model=List[FeaturedProfileResponse])
async def featured_profiles(
    limit: int = 3,
    service: ProfileService = Depends(get_profile_service)
):
    return service.featured_profiles(limit=limit)


@router.get("/count", response_model=ProfileCountResponse)
async def count_profiles(service: ProfileService = Depends(get_profile_service)):
    """Number of public profiles"""
    return ProfileCountResponse(count=service.count_public_profiles())


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(profile: Dict = Depends(get_current_profile)):
    return ProfileResponse(**profile)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the current student's profile"""
    return service.update_profile(user_data["id"], profile_data)


@router.post("/me/picture", response_model=ProfileResponse)
async def upload_profile_picture(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
    supabase: Client = Depends(get_supabase)
):
    """Upload an image (max 5MB) and make it the profile picture"""
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select an image file")
    content = await file.read()
    if len(content) > settings.max_profile_picture_bytes:
        raise HTTPException(status_code=400, detail="Image must be less than 5MB")

    media = MediaService(supabase).upload_file(
        content,
        file.filename or "picture",
        file.content_type,
        user_data["id"],
        bucket=settings.profile_pictures_bucket
    )
    return service.set_profile_picture(user_data["id"], media.file_url)


@router.get("/{student_id}", response_model=PublicProfileResponse)
async def get_profile(
    student_id: str,
    visitor: Optional[Dict] = Depends(get_optional_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get a public profile by student ID; each call is logged as a profile view"""
    return service.get_public_profile(student_id, visitor_id=visitor["id"] if visitor else None)


@router.get("/{student_id}/views", response_model=ProfileViewCountResponse)
async def get_profile_views(
    student_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    return ProfileViewCountResponse(student_id=student_id, view_count=service.get_view_count(student_id))


@router.get("/{student_id}/pages", response_model=List[PublishedPageResponse])
async def list_student_pages(
    student_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    """Published pages of a student"""
    return service.list_published_pages(student_id)


@router.get("/{student_id}/pages/{page_id}", response_model=PublishedPageResponse)
async def get_student_page(
    student_id: str,
    page_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    """A single published page of a student"""
    return service.get_published_page(student_id, page_id)
