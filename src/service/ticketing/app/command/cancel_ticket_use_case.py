from datetime import timedelta
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class CancelTicketUseCase:
    def __init__(
        self,
        *,
        inventory_ledger_repo: IInventoryLedgerRepo,
        ticket_repo: ITicketRepo,
        event_repo: IEventRepo,
        clock: IClock,
    ) -> None:
        self.inventory_ledger_repo = inventory_ledger_repo
        self.ticket_repo = ticket_repo
        self.event_repo = event_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        inventory_ledger_repo: IInventoryLedgerRepo = Depends(
            Provide[Container.inventory_ledger_repo]
        ),
        ticket_repo: ITicketRepo = Depends(Provide[Container.ticket_repo]),
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            inventory_ledger_repo=inventory_ledger_repo,
            ticket_repo=ticket_repo,
            event_repo=event_repo,
            clock=clock,
        )

    @Logger.io
    async def execute(self, *, ticket_id: int, owner_id: int) -> Ticket:
        """Owner cancels an ACTIVE ticket; the unit goes back on sale in the same transaction."""
        ticket = await self.ticket_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError(f'Ticket {ticket_id} not found')
        if ticket.owner_id != owner_id:
            raise ForbiddenError('Only the owner can cancel this ticket')
        if ticket.status != TicketStatus.ACTIVE:
            raise ConflictError(f'Ticket is {ticket.status} and cannot be cancelled')

        event = await self.event_repo.get_by_id(event_id=ticket.event_id)
        if event is None:
            raise NotFoundError(f'Event {ticket.event_id} not found')

        cutoff = event.starts_at - timedelta(hours=settings.TICKET_CANCEL_CUTOFF_HOURS)
        if self.clock.now() >= cutoff:
            raise DomainError(
                f'Tickets cannot be cancelled within {settings.TICKET_CANCEL_CUTOFF_HOURS}h '
                'of the event start'
            )

        cancelled = await self.inventory_ledger_repo.cancel_ticket(
            ticket_id=ticket_id, owner_id=owner_id
        )
        if cancelled is None:
            raise ConflictError('Ticket changed while cancelling (redeemed or transferred)')

        Logger.base.info(f'🗑️ [CANCEL_TICKET] Ticket {ticket_id} cancelled, tier {ticket.tier_id}')
        return cancelled
