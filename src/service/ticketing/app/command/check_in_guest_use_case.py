import time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.dto.check_in_outcome import (
    CheckedIn,
    GuestCheckInOutcome,
    GuestCheckInRejected,
)
from src.service.ticketing.app.interface.i_check_in_repo import ICheckInRepo
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.domain.domain_event.check_in_domain_event import GuestCheckedInEvent
from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.check_in_method import CheckInMethod
from src.service.ticketing.domain.enum.rejection_reason import GuestCheckInRejectReason


class CheckInGuestUseCase:
    """Admit a guest-list entry (PENDING or CONFIRMED) exactly once."""

    def __init__(
        self,
        *,
        guest_list_repo: IGuestListRepo,
        check_in_repo: ICheckInRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
        clock: IClock,
    ) -> None:
        self.guest_list_repo = guest_list_repo
        self.check_in_repo = check_in_repo
        self.event_broadcaster = event_broadcaster
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        guest_list_repo: IGuestListRepo = Depends(Provide[Container.guest_list_repo]),
        check_in_repo: ICheckInRepo = Depends(Provide[Container.check_in_repo]),
        event_broadcaster: IInMemoryEventBroadcaster = Depends(
            Provide[Container.event_broadcaster]
        ),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            guest_list_repo=guest_list_repo,
            check_in_repo=check_in_repo,
            event_broadcaster=event_broadcaster,
            clock=clock,
        )

    @Logger.io
    async def execute(
        self, *, entry_id: int, venue_id: int, staff: Principal
    ) -> GuestCheckInOutcome:
        staff.ensure_can_manage_venue(venue_id)

        started = time.perf_counter()
        outcome = await self._check_in(entry_id=entry_id, venue_id=venue_id, staff_id=staff.id)

        outcome_label = 'admitted' if isinstance(outcome, CheckedIn) else outcome.reason.lower()
        metrics.check_ins.labels(
            venue_id=str(venue_id), method=CheckInMethod.GUEST_LIST.value, outcome=outcome_label
        ).inc()
        metrics.check_in_duration.labels(method=CheckInMethod.GUEST_LIST.value).observe(
            time.perf_counter() - started
        )
        return outcome

    async def _check_in(
        self, *, entry_id: int, venue_id: int, staff_id: int
    ) -> GuestCheckInOutcome:
        entry = await self.guest_list_repo.get_by_id(entry_id=entry_id)
        if entry is None:
            return GuestCheckInRejected(reason=GuestCheckInRejectReason.NOT_FOUND)
        if entry.venue_id != venue_id:
            return GuestCheckInRejected(reason=GuestCheckInRejectReason.WRONG_VENUE)

        rejection = await self._rejection_for(entry=entry)
        if rejection is not None:
            return rejection

        record = await self.check_in_repo.check_in_guest(
            record=CheckInRecord.for_guest(
                guest_list_entry_id=entry_id,
                venue_id=venue_id,
                event_id=entry.event_id,
                staff_id=staff_id,
                now=self.clock.now(),
            )
        )
        if record is None:
            current = await self.guest_list_repo.get_by_id(entry_id=entry_id)
            lost = await self._rejection_for(entry=current) if current else None
            return lost or GuestCheckInRejected(
                reason=GuestCheckInRejectReason.ALREADY_CHECKED_IN
            )

        await self.event_broadcaster.broadcast(
            venue_id=venue_id,
            event_data=GuestCheckedInEvent(
                venue_id=venue_id,
                event_id=entry.event_id,
                guest_list_entry_id=entry_id,
                guest_name=entry.guest_name,
                party_size=entry.party_size,
                is_vip=entry.is_vip,
                staff_id=staff_id,
                checked_in_at=record.checked_in_at,
            ).to_dict(),
        )
        Logger.base.info(
            f'🚪 [GUEST_CHECK_IN] Entry {entry_id} party of {entry.party_size}'
            f'{" (VIP)" if entry.is_vip else ""} admitted by staff {staff_id}'
        )
        return CheckedIn(record=record)

    async def _rejection_for(self, *, entry: GuestListEntry) -> Optional[GuestCheckInRejected]:
        reason = entry.check_in_rejection()
        if reason is None:
            return None

        if reason == GuestCheckInRejectReason.ALREADY_CHECKED_IN:
            existing = await self.check_in_repo.get_by_guest_list_entry_id(
                guest_list_entry_id=entry.id  # type: ignore[arg-type]
            )
            return GuestCheckInRejected(
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

        return GuestCheckInRejected(reason=reason, context={'status': entry.status.value})
