import re
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from typing import Optional, List, Dict
from datetime import datetime

STUDENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")
FULL_NAME_PATTERN = re.compile(r"^[A-Za-z\s]{2,50}$")

STUDENT_ID_MESSAGE = "Student ID must be 3-20 characters (letters and numbers only)"
FULL_NAME_MESSAGE = "Name must be 2-50 characters (letters and spaces only)"

_HTTP_URL = TypeAdapter(HttpUrl)


def validate_student_id(value: str) -> str:
    value = value.strip()
    if not STUDENT_ID_PATTERN.match(value):
        raise ValueError(STUDENT_ID_MESSAGE)
    return value


def validate_full_name(value: str) -> str:
    value = value.strip()
    if not FULL_NAME_PATTERN.match(value):
        raise ValueError(FULL_NAME_MESSAGE)
    return value


class ProfileCreate(BaseModel):
    user_id: str
    student_id: str
    full_name: str
    bio: Optional[str] = ""
    skills: List[str] = []
    social_links: Dict[str, str] = {}
    public: bool = True
    first_login: bool = True


class SocialLink(BaseModel):
    platform: str = Field(min_length=1)
    url: str

    @field_validator("platform")
    @classmethod
    def platform_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Platform is required")
        return v

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        # Validated as a URL, stored as typed
        v = v.strip()
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError:
            raise ValueError("Please enter a valid URL")
        return v


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    quote: Optional[str] = Field(default=None, max_length=200)
    skills: Optional[List[str]] = Field(default=None, max_length=20)
    social_links: Optional[List[SocialLink]] = Field(default=None, max_length=10)
    public: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return validate_full_name(v)

    @field_validator("skills")
    @classmethod
    def check_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = []
        for skill in v:
            skill = skill.strip()
            if not skill:
                raise ValueError("Skill is required")
            if len(skill) > 50:
                raise ValueError("Skill name too long")
            cleaned.append(skill)
        return cleaned


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    student_id: str
    full_name: str
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    social_links: Optional[Dict[str, str]] = None
    profile_pic: Optional[str] = None
    quote: Optional[str] = None
    public: bool = True
    first_login: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    id: str
    user_id: str
    student_id: str
    full_name: str
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    social_links: Optional[Dict[str, str]] = None
    profile_pic: Optional[str] = None
    quote: Optional[str] = None
    initials: str = ""
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileListResponse(BaseModel):
    profiles: List[PublicProfileResponse]
    total: int  # public profiles before search/skill filtering
    all_skills: List[str]


class FeaturedProfileResponse(BaseModel):
    id: str
    student_id: str
    full_name: str
    bio: Optional[str] = None
    profile_pic: Optional[str] = None
    skills: Optional[List[str]] = None
    initials: str = ""


class ProfileCountResponse(BaseModel):
    count: int


class ProfileViewCountResponse(BaseModel):
    student_id: str
    view_count: int
