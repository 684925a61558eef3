from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime


class PageCreate(BaseModel):
    title: str = Field(max_length=100)
    content: str = Field(max_length=10000)
    published: bool = False

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("content")
    @classmethod
    def content_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v


class PageUpdate(PageCreate):
    pass


class PageResponse(BaseModel):
    id: str
    user_id: str
    title: str
    content: str = ""
    published: bool = False
    excerpt: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PageListResponse(BaseModel):
    pages: List[PageResponse]
    total: int  # owner's pages before search/status filtering


class PageAuthor(BaseModel):
    full_name: str
    student_id: str
    profile_pic: Optional[str] = None
    initials: str = ""


class PublishedPageResponse(BaseModel):
    id: str
    title: str
    content: str = ""
    excerpt: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None
    author: Optional[PageAuthor] = None
