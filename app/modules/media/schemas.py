from pydantic import BaseModel
from typing import Literal
from datetime import datetime

MediaType = Literal["image", "video", "document"]


class MediaResponse(BaseModel):
    id: str
    user_id: str
    file_url: str
    file_name: str
    file_type: MediaType
    file_size: int
    uploaded_at: datetime

    class Config:
        from_attributes = True


class MediaCountResponse(BaseModel):
    count: int
