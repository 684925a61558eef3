from pydantic import BaseModel
from typing import List
from app.modules.pages.schemas import PageResponse
from app.modules.profiles.schemas import ProfileResponse


class DashboardStats(BaseModel):
    total_pages: int = 0
    published_pages: int = 0
    total_media: int = 0
    profile_views: int = 0


class ProfileCompleteness(BaseModel):
    profile_pic: bool = False
    bio: bool = False
    skills: bool = False

    @property
    def complete(self) -> bool:
        return self.profile_pic and self.bio and self.skills


class DashboardResponse(BaseModel):
    profile: ProfileResponse
    stats: DashboardStats
    recent_pages: List[PageResponse]
    completeness: ProfileCompleteness
    profile_complete: bool
