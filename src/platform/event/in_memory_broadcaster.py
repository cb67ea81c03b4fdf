from typing import Dict, List

from anyio import WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class InMemoryEventBroadcasterImpl:
    """
    Per-venue pub/sub on anyio memory object streams.

    - Use case → broadcast() → every subscribed stream for that venue
    - Slow subscribers lose events instead of back-pressuring the door
    - Empty subscriber lists are removed on unsubscribe
    """

    def __init__(self, *, buffer_size: int | None = None) -> None:
        self._buffer_size = buffer_size or settings.VENUE_STREAM_BUFFER_SIZE
        self._subscribers: Dict[
            int, List[tuple[MemoryObjectSendStream[dict], MemoryObjectReceiveStream[dict]]]
        ] = {}

    def subscriber_count(self, *, venue_id: int) -> int:
        return len(self._subscribers.get(venue_id, []))

    async def subscribe(self, *, venue_id: int) -> MemoryObjectReceiveStream[dict]:
        send_stream, receive_stream = create_memory_object_stream[dict](
            max_buffer_size=self._buffer_size
        )
        self._subscribers.setdefault(venue_id, []).append((send_stream, receive_stream))

        Logger.base.debug(
            f'📡 [BROADCASTER] Subscribed to venue {venue_id} '
            f'(total subscribers: {self.subscriber_count(venue_id=venue_id)})'
        )
        return receive_stream

    async def broadcast(self, *, venue_id: int, event_data: dict) -> None:
        subscribers = self._subscribers.get(venue_id)
        if not subscribers:
            Logger.base.debug(f'📡 [BROADCASTER] No subscribers for venue {venue_id}')
            return

        delivered = dropped = 0
        for send_stream, _ in subscribers:
            try:
                send_stream.send_nowait(event_data)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [BROADCASTER] Stream full for venue {venue_id}, '
                    f'dropping event (type={event_data.get("event_type")})'
                )

        Logger.base.info(
            f'📡 [BROADCASTER] {event_data.get("event_type")} → venue {venue_id}: '
            f'delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(self, *, venue_id: int, stream: MemoryObjectReceiveStream[dict]) -> None:
        subscribers = self._subscribers.get(venue_id)
        if subscribers is None:
            return

        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                break

        if not subscribers:
            del self._subscribers[venue_id]
            Logger.base.debug(f'📡 [BROADCASTER] Cleaned up empty list for venue {venue_id}')
