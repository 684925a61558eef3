from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from app.modules.profiles.schemas import ProfileResponse, validate_full_name, validate_student_id
from typing import Optional, Dict, Any

MIN_PASSWORD_LENGTH = 6
PASSWORD_MESSAGE = "Password must be at least 6 characters long"


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: str
    student_id: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(PASSWORD_MESSAGE)
        return v

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return validate_full_name(v)

    @field_validator("student_id")
    @classmethod
    def check_student_id(cls, v: str) -> str:
        return validate_student_id(v)


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    student_id: str
    message: str


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(PASSWORD_MESSAGE)
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class MeResponse(BaseModel):
    user: Dict[str, Any]
    profile: Optional[ProfileResponse] = None
    is_admin: bool = False
