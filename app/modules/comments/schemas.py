from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

TargetType = Literal["profile", "page"]


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Comment cannot be empty")
    return value


class CommentCreate(BaseModel):
    target_type: TargetType
    target_id: str
    content: str = Field(max_length=2000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _require_text(v)


class CommentUpdate(BaseModel):
    content: str = Field(max_length=2000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _require_text(v)


class CommentAuthor(BaseModel):
    full_name: str
    student_id: str
    profile_pic: Optional[str] = None


class CommentResponse(BaseModel):
    id: str
    user_id: str
    target_type: TargetType
    target_id: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    author: Optional[CommentAuthor] = None
    author_initials: str = "U"
    created_ago: str = ""

    class Config:
        from_attributes = True


class CommentThreadResponse(BaseModel):
    target_type: TargetType
    target_id: str
    count: int
    comments: List[CommentResponse]
