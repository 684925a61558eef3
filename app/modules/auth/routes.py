from fastapi import APIRouter, Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    ChangePasswordRequest, MeResponse
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_user, get_user_profile, is_admin
from app.core.rate_limit import limiter
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new student account"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service),
    admin_client: Client = Depends(get_service_supabase)
):
    """Logout and revoke the token's session"""
    service.logout(token, admin_client)
    return {"message": "Signed out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Current user, their profile and admin flag (for frontend route guards)."""
    profile = get_user_profile(current_user["id"], supabase)
    return MeResponse(user=current_user, profile=profile, is_admin=is_admin(profile))


@router.post("/change-password", status_code=200)
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
    admin_client: Client = Depends(get_service_supabase)
):
    """Change the current user's password"""
    service.change_password(current_user, password_data, admin_client)
    return {"message": "Password updated successfully"}
