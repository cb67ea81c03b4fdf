"""
Check-in Ticket Use Case

Door scan of a QR token. At-most-once: the validity check and the
REDEEMED write are the same guarded UPDATE, so of N concurrent scans of one
token exactly one succeeds and the others get ALREADY_REDEEMED with the
winning record (time + staff), never a generic error.
"""

import time
from datetime import timedelta
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.dto.check_in_outcome import (
    CheckedIn,
    CheckInOutcome,
    CheckInRejected,
)
from src.service.ticketing.app.interface.i_check_in_repo import ICheckInRepo
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.domain_event.check_in_domain_event import (
    TicketCheckedInEvent,
)
from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.domain.enum.check_in_method import CheckInMethod
from src.service.ticketing.domain.enum.rejection_reason import CheckInRejectReason
from src.service.ticketing.domain.value_object.ticket_ref import TicketRef


class CheckInTicketUseCase:
    def __init__(
        self,
        *,
        ticket_repo: ITicketRepo,
        event_repo: IEventRepo,
        check_in_repo: ICheckInRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
        clock: IClock,
    ) -> None:
        self.ticket_repo = ticket_repo
        self.event_repo = event_repo
        self.check_in_repo = check_in_repo
        self.event_broadcaster = event_broadcaster
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        ticket_repo: ITicketRepo = Depends(Provide[Container.ticket_repo]),
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
        check_in_repo: ICheckInRepo = Depends(Provide[Container.check_in_repo]),
        event_broadcaster: IInMemoryEventBroadcaster = Depends(
            Provide[Container.event_broadcaster]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            ticket_repo=ticket_repo,
            event_repo=event_repo,
            check_in_repo=check_in_repo,
            event_broadcaster=event_broadcaster,
            clock=clock,
        )

    @Logger.io
    async def execute(
        self,
        *,
        qr_token: str,
        venue_id: int,
        staff: Principal,
        method: CheckInMethod = CheckInMethod.QR_CODE,
    ) -> CheckInOutcome:
        staff.ensure_can_manage_venue(venue_id)

        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.check_in_ticket',
            attributes={'venue.id': venue_id, 'staff.id': staff.id, 'check_in.method': method},
        ) as span:
            outcome = await self._check_in(
                qr_token=qr_token, venue_id=venue_id, staff_id=staff.id, method=method
            )
            outcome_label = 'admitted' if isinstance(outcome, CheckedIn) else outcome.reason.lower()
            span.set_attribute('check_in.outcome', outcome_label)

        metrics.check_ins.labels(
            venue_id=str(venue_id), method=method.value, outcome=outcome_label
        ).inc()
        metrics.check_in_duration.labels(method=method.value).observe(
            time.perf_counter() - started
        )
        return outcome

    async def _check_in(
        self, *, qr_token: str, venue_id: int, staff_id: int, method: CheckInMethod
    ) -> CheckInOutcome:
        ref = await self.ticket_repo.get_ref_by_token(qr_token=qr_token)
        if ref is None:
            Logger.base.info(f'🚪 [CHECK_IN] Unknown token at venue {venue_id}')
            return CheckInRejected(reason=CheckInRejectReason.NOT_FOUND)

        if ref.venue_id != venue_id:
            Logger.base.warning(
                f'🚪 [CHECK_IN] Ticket {ref.ticket_id} is for venue {ref.venue_id}, '
                f'scanned at {venue_id}'
            )
            return CheckInRejected(
                reason=CheckInRejectReason.WRONG_VENUE, context={'event_id': ref.event_id}
            )

        now = self.clock.now()
        if settings.CHECK_IN_ENFORCE_EVENT_WINDOW:
            event = await self.event_repo.get_by_id(event_id=ref.event_id)
            early_entry = timedelta(minutes=settings.CHECK_IN_EARLY_ENTRY_MINUTES)
            if event is None or not event.is_accepting_check_ins(now=now, early_entry=early_entry):
                return CheckInRejected(
                    reason=CheckInRejectReason.EVENT_NOT_LIVE,
                    context={
                        'event_id': ref.event_id,
                        'event_status': event.status.value if event else None,
                    },
                )

        rejection = await self._rejection_for(ref=ref)
        if rejection is not None:
            return rejection

        record = await self.check_in_repo.redeem_ticket(
            record=CheckInRecord.for_ticket(
                ticket_id=ref.ticket_id,
                venue_id=venue_id,
                event_id=ref.event_id,
                staff_id=staff_id,
                now=now,
                method=method,
            )
        )
        if record is None:
            # Another scanner committed first, or the ticket was cancelled meanwhile
            current = await self.ticket_repo.get_ref_by_token(qr_token=qr_token)
            lost = await self._rejection_for(ref=current) if current else None
            return lost or CheckInRejected(reason=CheckInRejectReason.ALREADY_REDEEMED)

        await self.event_broadcaster.broadcast(
            venue_id=venue_id, event_data=TicketCheckedInEvent.from_record(record=record).to_dict()
        )
        Logger.base.info(
            f'🚪 [CHECK_IN] Ticket {ref.ticket_id} ({ref.tier_name}) admitted by staff {staff_id}'
        )
        return CheckedIn(record=record)

    async def _rejection_for(self, *, ref: TicketRef) -> Optional[CheckInRejected]:
        reason = ref.redemption_rejection()
        if reason is None:
            return None

        if reason == CheckInRejectReason.ALREADY_REDEEMED:
            existing = await self.check_in_repo.get_by_ticket_id(ticket_id=ref.ticket_id)
            Logger.base.info(
                f'🚪 [CHECK_IN] Ticket {ref.ticket_id} '
                f'{existing.describe() if existing else "already redeemed"}'
            )
            return CheckInRejected(
                reason=reason,
                existing_record=existing,
                context=(
                    {
                        'checked_in_at': existing.checked_in_at.isoformat(),
                        'staff_id': existing.staff_id,
                    }
                    if existing
                    else {}
                ),
            )

        return CheckInRejected(reason=reason, context={'ticket_status': ref.status.value})
