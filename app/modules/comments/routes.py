import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from app.database.supabase_client import get_supabase
from app.modules.comments.schemas import (
    CommentCreate, CommentUpdate, CommentResponse, CommentThreadResponse, TargetType
)
from app.modules.comments.service import CommentService
from app.modules.comments.realtime import comment_broadcaster, channel_name
from app.core.dependencies import get_current_user, check_comment_author
from supabase import Client
from typing import Dict, Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])

TARGET_TYPES = ("profile", "page")


def get_comment_service(supabase: Client = Depends(get_supabase)) -> CommentService:
    return CommentService(supabase)


async def notify_change(target_type: str, target_id: str, event_type: str, comment_id: str) -> None:
    await comment_broadcaster.publish(channel_name(target_type, target_id), {
        "type": event_type,
        "comment_id": comment_id
    })


@router.get("", response_model=CommentThreadResponse)
async def list_comments(
    target_type: TargetType,
    target_id: str,
    service: CommentService = Depends(get_comment_service)
):
    """List comments on a profile or page, oldest first"""
    return service.list_comments(target_type, target_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(
    comment_data: CommentCreate,
    user_data: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    """Post a comment (signed-in users only)"""
    comment = service.create_comment(comment_data, user_data["id"])
    await notify_change(comment.target_type, comment.target_id, "INSERT", comment.id)
    return comment


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    user_data: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    """Edit a comment (author only)"""
    check_comment_author(comment_id, user_data, supabase)
    comment = service.update_comment(comment_id, comment_data)
    await notify_change(comment.target_type, comment.target_id, "UPDATE", comment.id)
    return comment


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: str,
    user_data: Dict = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete a comment (author only)"""
    comment = check_comment_author(comment_id, user_data, supabase)
    service.delete_comment(comment_id)
    await notify_change(comment["target_type"], comment["target_id"], "DELETE", comment_id)
    return None


def _snapshot(service: CommentService, target_type: str, target_id: str, event_type: Optional[str]) -> dict:
    try:
        thread = service.list_comments(target_type, target_id)
    except HTTPException as e:
        return {"type": "error", "detail": e.detail}
    return {"type": "snapshot", "event": event_type, **thread.model_dump(mode="json")}


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    """Consume client frames (pings etc.) until the socket closes"""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws/{target_type}/{target_id}")
async def comment_feed(
    websocket: WebSocket,
    target_type: str,
    target_id: str,
    supabase: Client = Depends(get_supabase)
):
    """Push a fresh snapshot of the thread on connect and after every change to it"""
    if target_type not in TARGET_TYPES:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    service = CommentService(supabase)
    channel = channel_name(target_type, target_id)
    queue = comment_broadcaster.subscribe(channel)
    receiver = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        await websocket.send_json(_snapshot(service, target_type, target_id, None))
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                getter.cancel()
                break
            event = getter.result()
            await websocket.send_json(_snapshot(service, target_type, target_id, event.get("type")))
    except WebSocketDisconnect:
        pass
    finally:
        receiver.cancel()
        comment_broadcaster.unsubscribe(channel, queue)
        logger.debug(f"Comment feed closed for {channel}")
