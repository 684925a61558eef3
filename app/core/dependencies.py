"""
Core dependencies for route protection and ownership checks
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Current user for public routes; anonymous visitors and bad tokens yield None"""
    if credentials is None:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def get_user_profile(user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    """Return the profile row owned by user_id, or None"""
    result = supabase.table("profiles")\
        .select("*")\
        .eq("user_id", user_id)\
        .maybe_single()\
        .execute()
    if not result or not result.data:
        return None
    return result.data


def get_current_profile(
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Profile of the signed-in student; 404 if sign-up never created one"""
    try:
        profile = get_user_profile(user_data["id"], supabase)
    except Exception as e:
        logger.error(f"Error fetching profile for user {user_data['id']}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile


def is_admin(profile: Optional[Dict[str, Any]]) -> bool:
    """Admins are identified by student id"""
    if not profile:
        return False
    return profile.get("student_id") in settings.get_admin_student_ids()


def check_comment_author(comment_id: str, user_data: dict, supabase: Client) -> dict:
    """Return the comment if the current user wrote it"""
    result = supabase.table("comments")\
        .select("*")\
        .eq("id", comment_id)\
        .maybe_single()\
        .execute()
    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )
    comment = result.data
    if comment.get("user_id") != user_data["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own comments"
        )
    return comment
