"""
Venue Event Stream

Server-Sent Events feed of venue-scoped domain events for door staff
screens: tier_unlocked, ticket_checked_in and guest_checked_in.
"""

from collections.abc import AsyncIterator

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
import orjson
from sse_starlette.sse import EventSourceResponse

from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.shared_kernel.driving_adapter.auth.role_auth import require_staff


router = APIRouter()


@router.get('/{venue_id}/stream')
@inject
async def stream_venue_events(
    venue_id: int,
    staff: Principal = Depends(require_staff),
    event_broadcaster: IInMemoryEventBroadcaster = Depends(Provide[Container.event_broadcaster]),
) -> EventSourceResponse:
    staff.ensure_can_manage_venue(venue_id)

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        stream = await event_broadcaster.subscribe(venue_id=venue_id)
        Logger.base.info(f'🔌 [SSE] Staff {staff.id} connected to venue {venue_id} stream')
        try:
            yield {
                'event': 'connected',
                'data': orjson.dumps({'venue_id': venue_id}).decode(),
            }
            async for event_data in stream:
                yield {
                    'event': str(event_data.get('event_type', 'message')),
                    'data': orjson.dumps(event_data).decode(),
                }
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Staff {staff.id} disconnected from venue {venue_id}')
            raise
        finally:
            await event_broadcaster.unsubscribe(venue_id=venue_id, stream=stream)

    return EventSourceResponse(event_generator(), ping=15)
