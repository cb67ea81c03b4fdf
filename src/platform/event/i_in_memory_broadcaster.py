"""
In-memory Domain Event Broadcaster Interface

Fans venue-scoped domain events (tier unlocked, ticket/guest checked in)
out to subscribers in the same process, e.g. the venue SSE stream.
"""

from typing import Protocol

from anyio.streams.memory import MemoryObjectReceiveStream


class IInMemoryEventBroadcaster(Protocol):
    async def subscribe(self, *, venue_id: int) -> MemoryObjectReceiveStream[dict]:
        """Open a receive stream for every event published on this venue."""
        ...

    async def broadcast(self, *, venue_id: int, event_data: dict) -> None:
        """
        Deliver to every subscriber of the venue.

        Never blocks the publisher: a full subscriber buffer drops the event.
        """
        ...

    async def unsubscribe(self, *, venue_id: int, stream: MemoryObjectReceiveStream[dict]) -> None:
        ...
