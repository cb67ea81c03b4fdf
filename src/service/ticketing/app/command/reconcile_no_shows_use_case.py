from typing import Optional

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo


class ReconcileNoShowsUseCase:
    """
    CONFIRMED guests of an ended event who never checked in become NO_SHOW.

    One UPDATE per event, so re-running is harmless and returns 0.
    """

    def __init__(
        self, *, event_repo: IEventRepo, guest_list_repo: IGuestListRepo, clock: IClock
    ) -> None:
        self.event_repo = event_repo
        self.guest_list_repo = guest_list_repo
        self.clock = clock

    @Logger.io
    async def execute(self, *, event_id: int, principal: Optional[Principal] = None) -> int:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError(f'Event {event_id} not found')
        if principal is not None:
            principal.ensure_can_manage_venue(event.venue_id)
        if not event.has_ended(now=self.clock.now()):
            raise DomainError(f'Event {event_id} has not ended yet')

        marked = await self.guest_list_repo.mark_no_shows(
            event_id=event_id, venue_id=event.venue_id
        )
        if marked:
            metrics.no_shows_reconciled.labels(venue_id=str(event.venue_id)).inc(marked)
        Logger.base.info(f'👻 [NO_SHOW] Event {event_id}: {marked} guests marked no-show')
        return marked

    @Logger.io
    async def reconcile_ended_events(self) -> int:
        """Periodic job entry point."""
        event_ids = await self.guest_list_repo.list_event_ids_pending_reconciliation(
            now=self.clock.now()
        )
        total = 0
        for event_id in event_ids:
            total += await self.execute(event_id=event_id)
        return total
