from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus


class IssueTicketsUseCase:
    """
    Payment-confirmation callback: HELD → CONFIRMED plus one ticket per unit.

    A reservation that already expired or was released yields ConflictError;
    the payment layer is expected to refund in that case.
    """

    def __init__(
        self,
        *,
        inventory_ledger_repo: IInventoryLedgerRepo,
        ticket_repo: ITicketRepo,
        clock: IClock,
    ) -> None:
        self.inventory_ledger_repo = inventory_ledger_repo
        self.ticket_repo = ticket_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        inventory_ledger_repo: IInventoryLedgerRepo = Depends(
            Provide[Container.inventory_ledger_repo]
        ),
        ticket_repo: ITicketRepo = Depends(Provide[Container.ticket_repo]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            inventory_ledger_repo=inventory_ledger_repo, ticket_repo=ticket_repo, clock=clock
        )

    @Logger.io
    async def execute(self, *, reservation_id: UUID, owner_id: int) -> List[Ticket]:
        reservation = await self.inventory_ledger_repo.get_reservation(
            reservation_id=reservation_id
        )
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        if reservation.user_id != owner_id:
            raise ForbiddenError('Reservation belongs to another user')
        if reservation.status != ReservationStatus.HELD:
            raise ConflictError(f'Reservation is {reservation.status}, payment must be refunded')

        now = self.clock.now()
        if reservation.is_expired(now=now):
            # Give the units back now instead of waiting for the expiry job
            await self.inventory_ledger_repo.release(
                reservation_id=reservation_id, final_status=ReservationStatus.EXPIRED
            )
            raise ConflictError('Reservation hold expired, payment must be refunded')

        tickets = [
            Ticket.issue(
                event_id=reservation.event_id,
                tier_id=reservation.tier_id,
                owner_id=owner_id,
                reservation_id=reservation_id,
                now=now,
            )
            for _ in range(reservation.quantity)
        ]

        issued = await self.ticket_repo.issue_for_reservation(
            reservation_id=reservation_id, owner_id=owner_id, tickets=tickets
        )
        if issued is None:
            raise ConflictError('Reservation is no longer held, payment must be refunded')

        metrics.tickets_issued.labels(event_id=str(reservation.event_id)).inc(len(issued))
        Logger.base.info(
            f'🎫 [ISSUE] {len(issued)} tickets for reservation {reservation_id} → user {owner_id}'
        )
        return issued
