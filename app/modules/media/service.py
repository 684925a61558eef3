from supabase import Client
from app.config import settings
from app.modules.media.schemas import MediaResponse
from app.modules.media.s3_storage import S3Storage
from typing import List, Optional
from fastapi import HTTPException
import time
import logging

logger = logging.getLogger(__name__)


def classify_media_type(content_type: Optional[str]) -> str:
    """Media type by MIME prefix; anything not image or video is a document"""
    content_type = content_type or ""
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return "document"


def build_object_key(user_id: str, filename: str, now_ms: Optional[int] = None) -> str:
    """'{user_id}/{epoch_ms}.{ext}', ext being whatever follows the last dot"""
    ext = filename.rsplit(".", 1)[-1]
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{user_id}/{now_ms}.{ext}"


class MediaService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

        # Initialize S3 storage if credentials are available
        self.s3_storage = None
        if all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.s3_bucket_name]):
            try:
                self.s3_storage = S3Storage()
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    def _store(self, content: bytes, key: str, content_type: str, bucket: str) -> str:
        """Put the object in S3 or Supabase Storage and return its public URL"""
        if self.s3_storage:
            s3_key = f"{bucket}/{key}"
            logger.info(f"Uploading to S3: {s3_key}")
            try:
                return self.s3_storage.upload_file(content, s3_key, content_type=content_type)
            except Exception as e:
                logger.error(f"S3 upload failed: {str(e)}")
                raise HTTPException(status_code=500, detail=f"Failed to upload to S3: {str(e)}")

        try:
            self.supabase.storage.from_(bucket).upload(
                key,
                content,
                {"content-type": content_type}
            )
            return self.supabase.storage.from_(bucket).get_public_url(key)
        except Exception as e:
            logger.error(f"Supabase Storage upload failed: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to upload file: {str(e)}")

    def upload_file(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str],
        user_id: str,
        bucket: Optional[str] = None
    ) -> MediaResponse:
        """Store an uploaded file and record it in the media table"""
        bucket = bucket or settings.media_bucket
        content_type = content_type or "application/octet-stream"
        if len(content) > settings.max_media_upload_bytes:
            raise HTTPException(status_code=413, detail="File is too large")

        key = build_object_key(user_id, filename)
        file_url = self._store(content, key, content_type, bucket)

        try:
            result = self.supabase.table("media").insert({
                "user_id": user_id,
                "file_url": file_url,
                "file_name": filename,
                "file_type": classify_media_type(content_type),
                "file_size": len(content)
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save media record")

            return MediaResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_media(self, user_id: str, limit: int = 50, offset: int = 0) -> List[MediaResponse]:
        try:
            result = self.supabase.table("media")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("uploaded_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [MediaResponse(**m) for m in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def count_media(self, user_id: str) -> int:
        result = self.supabase.table("media")\
            .select("*", count="exact", head=True)\
            .eq("user_id", user_id)\
            .execute()
        return result.count or 0
