from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.pages.schemas import (
    PageCreate, PageUpdate, PageResponse, PageListResponse
)
from app.modules.pages.service import PageService
from app.core.dependencies import get_current_user
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/pages", tags=["pages"])


def get_page_service(supabase: Client = Depends(get_supabase)) -> PageService:
    return PageService(supabase)


@router.get("", response_model=PageListResponse)
async def list_my_pages(
    q: Optional[str] = None,
    status: str = Query("all", pattern="^(all|published|draft)$"),
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """List the current student's pages, optionally searched and filtered by status"""
    return service.list_my_pages(user_data["id"], search=q, status=status)


@router.post("", response_model=PageResponse, status_code=201)
async def create_page(
    page_data: PageCreate,
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """Create a new markdown page"""
    return service.create_page(page_data, user_data["id"])


@router.get("/{page_id}", response_model=PageResponse)
async def get_my_page(
    page_id: str,
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """Get one of the current student's pages (drafts included)"""
    return service.get_my_page(page_id, user_data["id"])


@router.put("/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: str,
    page_data: PageUpdate,
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """Update page (owner only)"""
    return service.update_page(page_id, page_data, user_data["id"])


@router.post("/{page_id}/toggle-publish", response_model=PageResponse)
async def toggle_published(
    page_id: str,
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """Publish a draft or unpublish a published page"""
    return service.toggle_published(page_id, user_data["id"])


@router.delete("/{page_id}", status_code=204)
async def delete_page(
    page_id: str,
    user_data: Dict = Depends(get_current_user),
    service: PageService = Depends(get_page_service)
):
    """Delete page (owner only)"""
    service.delete_page(page_id, user_data["id"])
    return None
