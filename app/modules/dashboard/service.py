from supabase import Client
from app.modules.dashboard.schemas import DashboardResponse, DashboardStats, ProfileCompleteness
from app.modules.media.service import MediaService
from app.modules.pages.service import PageService
from app.modules.profiles.schemas import ProfileResponse
from app.modules.profiles.service import ProfileService
from typing import Dict, Any
from fastapi import HTTPException

RECENT_PAGES_LIMIT = 5


def profile_completeness(profile: Dict[str, Any]) -> ProfileCompleteness:
    return ProfileCompleteness(
        profile_pic=bool(profile.get("profile_pic")),
        bio=bool(profile.get("bio")),
        skills=bool(profile.get("skills"))
    )


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.pages = PageService(supabase)
        self.media = MediaService(supabase)
        self.profiles = ProfileService(supabase)

    def get_dashboard(self, profile: Dict[str, Any]) -> DashboardResponse:
        """Stats, recent pages and profile checklist for the signed-in student"""
        user_id = profile["user_id"]
        try:
            stats = DashboardStats(
                total_pages=self.pages.count_pages(user_id),
                published_pages=self.pages.count_pages(user_id, published=True),
                total_media=self.media.count_media(user_id),
                profile_views=self.profiles.count_views(profile["id"])
            )
            recent = self.pages.recent_pages(user_id, limit=RECENT_PAGES_LIMIT)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        completeness = profile_completeness(profile)
        return DashboardResponse(
            profile=ProfileResponse(**profile),
            stats=stats,
            recent_pages=recent,
            completeness=completeness,
            profile_complete=completeness.complete
        )
