import hashlib
import time
import logging
from supabase import AuthError, Client
from app.config.settings import settings
from app.database.supabase_client import SupabaseClient
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, ChangePasswordRequest
)
from app.modules.profiles.schemas import ProfileCreate
from app.modules.profiles.service import ProfileService
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

# Message GoTrue returns for a wrong email/password pair
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a student with Supabase Auth and create their profile"""
        try:
            if self.profiles.student_id_exists(register_data.student_id):
                raise HTTPException(
                    status_code=400,
                    detail="Student ID already exists. Please choose a different one."
                )

            # Fresh client: signing up must not rebind the shared client to the new user
            auth_response = SupabaseClient.new_client().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {"full_name": register_data.full_name}
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")
        except HTTPException:
            raise
        except AuthError as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(
                    status_code=400,
                    detail="An account with this email already exists. Please sign in instead."
                )
            raise HTTPException(status_code=400, detail=error_message)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")

        user = auth_response.user
        try:
            self.profiles.create_profile(ProfileCreate(
                user_id=user.id,
                student_id=register_data.student_id,
                full_name=register_data.full_name
            ))
        except HTTPException as e:
            logger.error(f"Error creating profile for user {user.id}: {e.detail}")
            raise HTTPException(
                status_code=500,
                detail="Account created but profile setup failed. Please contact support."
            )

        logger.info(f"Registered student {register_data.student_id} ({user.id})")
        return RegisterResponse(
            user_id=user.id,
            email=user.email or register_data.email,
            student_id=register_data.student_id,
            message="Account created successfully! Welcome to BatchBoard!"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate a student with email and password"""
        try:
            # Fresh client: the session must not leak into the shared client's headers
            auth_response = SupabaseClient.new_client().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except AuthError as e:
            error_message = str(e)
            if error_message == INVALID_CREDENTIALS_MESSAGE:
                raise HTTPException(
                    status_code=401,
                    detail="Invalid email or password. Please check your credentials and try again."
                )
            raise HTTPException(status_code=400, detail=error_message)
        except Exception as e:
            logger.error(f"Login failed for {login_data.email}: {e}")
            raise HTTPException(status_code=500, detail=f"Login failed: {str(e)}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str, admin_client: Client) -> bool:
        """Revoke the session behind token through the Auth admin API"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            admin_client.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False

    def change_password(self, user_data: Dict[str, Any], request: ChangePasswordRequest, admin_client: Client) -> bool:
        """Verify the current password, set the new one and clear the first-login flag"""
        if not settings.supabase_service_role_key:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot update password."
            )

        try:
            # Separate client so the check does not replace the shared client's session
            SupabaseClient.new_client().auth.sign_in_with_password({
                "email": user_data["email"],
                "password": request.current_password
            })
        except Exception:
            raise HTTPException(status_code=400, detail="Current password is incorrect")

        try:
            response = admin_client.auth.admin.update_user_by_id(
                user_data["id"],
                {"password": request.new_password}
            )
            if not response.user:
                raise HTTPException(status_code=404, detail="User not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to update password: {str(e)}")

        try:
            profile = self.supabase.table("profiles")\
                .select("first_login")\
                .eq("user_id", user_data["id"])\
                .maybe_single()\
                .execute()
            if profile and profile.data and profile.data.get("first_login"):
                self.profiles.clear_first_login(user_data["id"])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        logger.info(f"Password changed for user {user_data['id']}")
        return True
