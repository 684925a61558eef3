from supabase import Client
from app.core.display import filter_pages, page_excerpt, PAGE_STATUS_ALL
from app.modules.pages.schemas import (
    PageCreate, PageUpdate, PageResponse, PageListResponse
)
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def to_page_response(row: Dict[str, Any]) -> PageResponse:
    return PageResponse(**row, excerpt=page_excerpt(row.get("content")))


class PageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_owned_row(self, page_id: str, user_id: str) -> Dict[str, Any]:
        result = self.supabase.table("pages")\
            .select("*")\
            .eq("id", page_id)\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Page not found")
        return result.data

    def list_my_pages(
        self,
        user_id: str,
        search: Optional[str] = None,
        status: str = PAGE_STATUS_ALL
    ) -> PageListResponse:
        """List the owner's pages, newest edit first, filtered by search term and status"""
        try:
            result = self.supabase.table("pages")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("updated_at", desc=True)\
                .execute()
            rows = result.data or []
            filtered = filter_pages(rows, search=search, status=status)
            return PageListResponse(
                pages=[to_page_response(p) for p in filtered],
                total=len(rows)
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_my_page(self, page_id: str, user_id: str) -> PageResponse:
        try:
            return to_page_response(self._get_owned_row(page_id, user_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_page(self, page_data: PageCreate, user_id: str) -> PageResponse:
        """Create a new page"""
        try:
            result = self.supabase.table("pages").insert({
                "user_id": user_id,
                "title": page_data.title,
                "content": page_data.content,
                "published": page_data.published
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create page")

            logger.info(f"Page {result.data[0]['id']} created by {user_id}")
            return to_page_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_page(self, page_id: str, page_data: PageUpdate, user_id: str) -> PageResponse:
        """Update title, content and published flag of an owned page"""
        try:
            self._get_owned_row(page_id, user_id)
            result = self.supabase.table("pages")\
                .update({
                    "title": page_data.title,
                    "content": page_data.content,
                    "published": page_data.published,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", page_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Page not found")

            return to_page_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def toggle_published(self, page_id: str, user_id: str) -> PageResponse:
        try:
            page = self._get_owned_row(page_id, user_id)
            result = self.supabase.table("pages")\
                .update({
                    "published": not page.get("published", False),
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", page_id)\
                .eq("user_id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Page not found")

            return to_page_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_page(self, page_id: str, user_id: str) -> bool:
        """Delete an owned page"""
        try:
            self._get_owned_row(page_id, user_id)
            result = self.supabase.table("pages")\
                .delete()\
                .eq("id", page_id)\
                .eq("user_id", user_id)\
                .execute()
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_published_rows(self, user_id: str) -> List[Dict[str, Any]]:
        result = self.supabase.table("pages")\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("published", True)\
            .order("updated_at", desc=True)\
            .execute()
        return result.data or []

    def get_published_row(self, page_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("pages")\
            .select("*")\
            .eq("id", page_id)\
            .eq("user_id", user_id)\
            .eq("published", True)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data

    def count_pages(self, user_id: str, published: Optional[bool] = None) -> int:
        query = self.supabase.table("pages")\
            .select("*", count="exact", head=True)\
            .eq("user_id", user_id)
        if published is not None:
            query = query.eq("published", published)
        return query.execute().count or 0

    def recent_pages(self, user_id: str, limit: int = 5) -> List[PageResponse]:
        result = self.supabase.table("pages")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("updated_at", desc=True)\
            .limit(limit)\
            .execute()
        return [to_page_response(p) for p in result.data or []]
