from supabase import Client
from app.core.display import collect_skills, filter_profiles, get_initials, page_excerpt
from app.modules.profiles.schemas import (
    ProfileCreate, ProfileUpdate, ProfileResponse, PublicProfileResponse,
    ProfileListResponse, FeaturedProfileResponse,
    STUDENT_ID_PATTERN, STUDENT_ID_MESSAGE
)
from app.modules.pages.schemas import PageAuthor, PublishedPageResponse
from app.modules.pages.service import PageService
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def to_public_profile(row: Dict[str, Any]) -> PublicProfileResponse:
    return PublicProfileResponse(**row, initials=get_initials(row.get("full_name")))


def to_published_page(row: Dict[str, Any], author: Optional[PageAuthor] = None) -> PublishedPageResponse:
    return PublishedPageResponse(**row, excerpt=page_excerpt(row.get("content")), author=author)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_profile(self, profile_data: ProfileCreate) -> ProfileResponse:
        """Create the profile row for a freshly registered student"""
        student_id = profile_data.student_id.strip()
        if not STUDENT_ID_PATTERN.match(student_id):
            raise HTTPException(status_code=400, detail=STUDENT_ID_MESSAGE)
        full_name = profile_data.full_name.strip()
        if len(full_name) < 2:
            raise HTTPException(status_code=400, detail="Name must be at least 2 characters long")

        try:
            result = self.supabase.table("profiles").insert({
                "user_id": profile_data.user_id,
                "student_id": student_id,
                "full_name": full_name,
                "bio": profile_data.bio,
                "skills": profile_data.skills,
                "social_links": profile_data.social_links,
                "public": profile_data.public,
                "first_login": profile_data.first_login
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def student_id_exists(self, student_id: str) -> bool:
        result = self.supabase.table("profiles")\
            .select("student_id")\
            .eq("student_id", student_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def get_profile_row(self, student_id: str, public_only: bool = False) -> Optional[Dict[str, Any]]:
        query = self.supabase.table("profiles")\
            .select("*")\
            .eq("student_id", student_id)
        if public_only:
            query = query.eq("public", True)
        result = query.maybe_single().execute()
        if not result or not result.data:
            return None
        return result.data

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the profile owned by user_id; only fields present in the request change"""
        try:
            fields = profile_data.model_dump(exclude_unset=True)
            update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if fields.get("full_name") is not None:
                update_data["full_name"] = profile_data.full_name
            if "bio" in fields:
                update_data["bio"] = profile_data.bio or None
            if "quote" in fields:
                update_data["quote"] = profile_data.quote or None
            if "skills" in fields:
                update_data["skills"] = profile_data.skills or []
            if "social_links" in fields:
                update_data["social_links"] = {
                    link.platform: link.url for link in profile_data.social_links or []
                }
            if fields.get("public") is not None:
                update_data["public"] = profile_data.public

            return self._update_by_user(user_id, update_data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_profile_picture(self, user_id: str, picture_url: str) -> ProfileResponse:
        try:
            return self._update_by_user(user_id, {
                "profile_pic": picture_url,
                "updated_at": datetime.now(timezone.utc).isoformat()
            })
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def clear_first_login(self, user_id: str) -> None:
        self.supabase.table("profiles")\
            .update({"first_login": False})\
            .eq("user_id", user_id)\
            .execute()

    def _update_by_user(self, user_id: str, update_data: Dict[str, Any]) -> ProfileResponse:
        result = self.supabase.table("profiles")\
            .update(update_data)\
            .eq("user_id", user_id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")

        return ProfileResponse(**result.data[0])

    def list_public_profiles(
        self,
        search: Optional[str] = None,
        skill: Optional[str] = None
    ) -> ProfileListResponse:
        """Public profiles by name, narrowed by search term and skill"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("public", True)\
                .order("full_name")\
                .execute()
            rows = result.data or []
            filtered = filter_profiles(rows, search=search, skill=skill)
            return ProfileListResponse(
                profiles=[to_public_profile(p) for p in filtered],
                total=len(rows),
                all_skills=collect_skills(rows)
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def featured_profiles(self, limit: int = 3) -> List[FeaturedProfileResponse]:
        try:
            result = self.supabase.table("profiles")\
                .select("id, full_name, bio, student_id, profile_pic, skills")\
                .eq("public", True)\
                .limit(limit)\
                .execute()
            return [
                FeaturedProfileResponse(**p, initials=get_initials(p.get("full_name")))
                for p in result.data or []
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def count_public_profiles(self) -> int:
        try:
            result = self.supabase.table("profiles")\
                .select("*", count="exact", head=True)\
                .eq("public", True)\
                .execute()
            return result.count or 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_public_profile(self, student_id: str, visitor_id: Optional[str] = None) -> PublicProfileResponse:
        """Get a public profile and log the visit"""
        try:
            row = self.get_profile_row(student_id, public_only=True)
        except Exception as e:
            logger.error(f"Error fetching profile {student_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")
        if not row:
            raise HTTPException(status_code=404, detail="Student profile not found")

        self.track_view(row["id"], visitor_id)
        return to_public_profile(row)

    def track_view(self, profile_id: str, visitor_id: Optional[str] = None) -> bool:
        """Append a profile_views row; failures only affect the counter and are not raised"""
        try:
            self.supabase.table("profile_views").insert({
                "profile_id": profile_id,
                "visitor_id": visitor_id
            }).execute()
            return True
        except Exception as e:
            logger.warning(f"Failed to track view of profile {profile_id}: {e}")
            return False

    def count_views(self, profile_id: str) -> int:
        result = self.supabase.table("profile_views")\
            .select("*", count="exact", head=True)\
            .eq("profile_id", profile_id)\
            .execute()
        return result.count or 0

    def get_view_count(self, student_id: str) -> int:
        try:
            row = self.get_profile_row(student_id)
            if not row:
                raise HTTPException(status_code=404, detail="Student profile not found")
            return self.count_views(row["id"])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_published_pages(self, student_id: str) -> List[PublishedPageResponse]:
        """Published pages of a public student, newest edit first"""
        try:
            row = self.get_profile_row(student_id, public_only=True)
            if not row:
                raise HTTPException(status_code=404, detail="Student not found")
            pages = PageService(self.supabase).list_published_rows(row["user_id"])
            return [to_published_page(p) for p in pages]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_published_page(self, student_id: str, page_id: str) -> PublishedPageResponse:
        """One published page with its author, as shown on the public page viewer"""
        try:
            row = self.get_profile_row(student_id, public_only=True)
            if not row:
                raise HTTPException(status_code=404, detail="Student not found")
            page = PageService(self.supabase).get_published_row(page_id, row["user_id"])
            if not page:
                raise HTTPException(status_code=404, detail="Page not found or not published")
            return to_published_page(page, author=PageAuthor(
                full_name=row["full_name"],
                student_id=row["student_id"],
                profile_pic=row.get("profile_pic"),
                initials=get_initials(row["full_name"])
            ))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
