from datetime import timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import OperationalError

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.platform.resilience.retry_with_backoff import retry_with_backoff
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.ticketing.app.dto.reservation_outcome import (
    ReservationOutcome,
    ReservationRejected,
    Reserved,
)
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.domain.entity.reservation_entity import Reservation
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.rejection_reason import ReservationRejectReason


_SELLABLE_EVENT_STATUSES = frozenset({EventStatus.UPCOMING, EventStatus.LIVE})


class ReserveTicketsUseCase:
    """
    Hold ``quantity`` units of a tier for a user.

    Flow:
    1. Load tier + event (unknown tier → NotFoundError)
    2. Sales window and event status checked against the server clock
    3. Ledger compare-and-increments ``sold`` and inserts the HELD reservation atomically
    4. Lock timeouts are retried with backoff; a full tier is a SOLD_OUT outcome, not an error
    """

    def __init__(
        self,
        *,
        inventory_ledger_repo: IInventoryLedgerRepo,
        event_repo: IEventRepo,
        clock: IClock,
    ) -> None:
        self.inventory_ledger_repo = inventory_ledger_repo
        self.event_repo = event_repo
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        inventory_ledger_repo: IInventoryLedgerRepo = Depends(
            Provide[Container.inventory_ledger_repo]
        ),
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(inventory_ledger_repo=inventory_ledger_repo, event_repo=event_repo, clock=clock)

    @Logger.io
    async def execute(self, *, user_id: int, tier_id: int, quantity: int = 1) -> ReservationOutcome:
        with self.tracer.start_as_current_span(
            'use_case.reserve_tickets',
            attributes={'tier.id': tier_id, 'reservation.quantity': quantity},
        ) as span:
            tier = await self.inventory_ledger_repo.get_tier(tier_id=tier_id)
            if tier is None or tier.event_id is None:
                raise NotFoundError(f'Ticket tier {tier_id} not found')

            event = await self.event_repo.get_by_id(event_id=tier.event_id)
            if event is None:
                raise NotFoundError(f'Event {tier.event_id} not found')

            now = self.clock.now()
            if event.status not in _SELLABLE_EVENT_STATUSES or not tier.is_on_sale(now=now):
                Logger.base.info(
                    f'🎟️ [RESERVE] Tier {tier_id} not on sale (event={event.status}, now={now})'
                )
                metrics.reservation_attempts.labels(outcome='window_closed').inc()
                span.set_attribute('reservation.outcome', 'window_closed')
                return ReservationRejected(reason=ReservationRejectReason.WINDOW_CLOSED)

            reservation = Reservation.create(
                tier_id=tier_id,
                event_id=tier.event_id,
                user_id=user_id,
                quantity=quantity,
                now=now,
                hold=timedelta(seconds=settings.RESERVATION_HOLD_SECONDS),
            )

            reserved = await retry_with_backoff(
                lambda: self.inventory_ledger_repo.reserve(reservation=reservation),
                label='RESERVE',
                retry_on=(OperationalError,),
                max_attempts=settings.RESERVE_MAX_RETRIES,
                base_delay=settings.RESERVE_RETRY_BASE_DELAY_SECONDS,
            )

            if not reserved:
                Logger.base.info(f'🈵 [RESERVE] Tier {tier_id} cannot fit {quantity} more')
                metrics.reservation_attempts.labels(outcome='sold_out').inc()
                span.set_attribute('reservation.outcome', 'sold_out')
                return ReservationRejected(reason=ReservationRejectReason.SOLD_OUT)

            Logger.base.info(
                f'🎟️ [RESERVE] Held {quantity} × tier {tier_id} for user {user_id} '
                f'until {reservation.expires_at:%H:%M:%S} (reservation={reservation.id})'
            )
            metrics.reservation_attempts.labels(outcome='reserved').inc()
            span.set_attribute('reservation.outcome', 'reserved')
            return Reserved(reservation=reservation)
