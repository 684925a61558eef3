from supabase import Client
from app.core.display import format_relative, get_initials
from app.modules.comments.schemas import (
    CommentCreate, CommentUpdate, CommentResponse, CommentAuthor, CommentThreadResponse
)
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def to_comment_response(
    row: Dict[str, Any],
    author: Optional[Dict[str, Any]] = None,
    now: Optional[datetime] = None
) -> CommentResponse:
    return CommentResponse(
        **row,
        author=CommentAuthor(**author) if author else None,
        author_initials=get_initials(author.get("full_name")) if author else "U",
        created_ago=format_relative(row["created_at"], now=now)
    )


class CommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_authors(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Return map user_id -> profile fields shown next to a comment."""
        if not user_ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("user_id, full_name, profile_pic, student_id")\
            .in_("user_id", user_ids)\
            .execute()
        return {
            p["user_id"]: {
                "full_name": p["full_name"],
                "profile_pic": p.get("profile_pic"),
                "student_id": p["student_id"]
            }
            for p in result.data or []
        }

    def list_comments(self, target_type: str, target_id: str) -> CommentThreadResponse:
        """All comments on a profile or page, oldest first, with their authors"""
        try:
            result = self.supabase.table("comments")\
                .select("*")\
                .eq("target_type", target_type)\
                .eq("target_id", target_id)\
                .order("created_at")\
                .execute()
            rows = result.data or []
            authors = self._get_authors(list({r["user_id"] for r in rows}))
            now = datetime.now(timezone.utc)
            comments = [to_comment_response(r, authors.get(r["user_id"]), now) for r in rows]
            return CommentThreadResponse(
                target_type=target_type,
                target_id=target_id,
                count=len(comments),
                comments=comments
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _verify_target(self, target_type: str, target_id: str) -> None:
        query = self.supabase.table("profiles" if target_type == "profile" else "pages")\
            .select("id")\
            .eq("id", target_id)
        if target_type == "page":
            query = query.eq("published", True)
        result = query.limit(1).execute()
        if not result.data:
            raise HTTPException(status_code=404, detail=f"{target_type.capitalize()} not found")

    def create_comment(self, comment_data: CommentCreate, user_id: str) -> CommentResponse:
        """Post a comment on a profile or published page"""
        try:
            self._verify_target(comment_data.target_type, comment_data.target_id)
            result = self.supabase.table("comments").insert({
                "user_id": user_id,
                "target_type": comment_data.target_type,
                "target_id": comment_data.target_id,
                "content": comment_data.content
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to post comment")

            row = result.data[0]
            return to_comment_response(row, self._get_authors([user_id]).get(user_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_comment(self, comment_id: str, comment_data: CommentUpdate) -> CommentResponse:
        """Replace the text of a comment"""
        try:
            result = self.supabase.table("comments")\
                .update({
                    "content": comment_data.content,
                    "updated_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", comment_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Comment not found")

            row = result.data[0]
            return to_comment_response(row, self._get_authors([row["user_id"]]).get(row["user_id"]))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_comment(self, comment_id: str) -> bool:
        try:
            result = self.supabase.table("comments")\
                .delete()\
                .eq("id", comment_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
