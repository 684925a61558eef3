"""
In-process change feed for comment threads.

Every insert, update or delete on a thread is published as a wildcard change
notification on the channel "comments-{target_type}-{target_id}". Subscribers
(one per WebSocket) react by refetching the whole thread, so notifications
carry no row data and are neither ordered nor deduplicated.
"""

import asyncio
import logging
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 16


def channel_name(target_type: str, target_id: str) -> str:
    return f"comments-{target_type}-{target_id}"


class CommentBroadcaster:
    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._channels: Dict[str, Set[asyncio.Queue]] = {}

    def subscribe(self, channel: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._channels.setdefault(channel, set()).add(queue)
        logger.debug(f"Subscribed to {channel} ({len(self._channels[channel])} listeners)")
        return queue

    def unsubscribe(self, channel: str, queue: asyncio.Queue) -> None:
        listeners = self._channels.get(channel)
        if not listeners:
            return
        listeners.discard(queue)
        if not listeners:
            del self._channels[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    async def publish(self, channel: str, event: Dict[str, Any]) -> int:
        """Notify every listener of a channel; returns how many were notified"""
        delivered = 0
        for queue in list(self._channels.get(channel, ())):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                # A full queue already holds a pending refetch trigger
                logger.debug(f"Dropped {event.get('type')} notification on {channel}: listener queue full")
        return delivered


comment_broadcaster = CommentBroadcaster()
