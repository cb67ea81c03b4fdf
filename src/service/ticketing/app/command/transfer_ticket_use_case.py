from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.ticketing.app.dto.transfer_outcome import (
    TransferOutcome,
    TransferRejected,
    Transferred,
)
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.enum.rejection_reason import TransferRejectReason


class TransferTicketUseCase:
    """
    Hand an ACTIVE ticket to another user, keeping its QR token.

    Transfer and check-in race on the same row: whichever guarded UPDATE
    commits first wins, and a redeemed ticket reports INVALID_STATE.
    """

    def __init__(self, *, ticket_repo: ITicketRepo, clock: IClock) -> None:
        self.ticket_repo = ticket_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        ticket_repo: ITicketRepo = Depends(Provide[Container.ticket_repo]),
        clock: IClock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(ticket_repo=ticket_repo, clock=clock)

    @Logger.io
    async def execute(
        self, *, ticket_id: int, from_user_id: int, to_user_id: int
    ) -> TransferOutcome:
        ticket = await self.ticket_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            return TransferRejected(reason=TransferRejectReason.NOT_FOUND)

        rejection = ticket.transfer_rejection(from_user_id=from_user_id, to_user_id=to_user_id)
        if rejection is not None:
            Logger.base.info(f'🔁 [TRANSFER] Ticket {ticket_id} rejected: {rejection}')
            return TransferRejected(reason=rejection)

        transferred = await self.ticket_repo.transfer(
            ticket_id=ticket_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            now=self.clock.now(),
        )
        if transferred is None:
            # Lost the race (redeemed, cancelled or already transferred away)
            current = await self.ticket_repo.get_by_id(ticket_id=ticket_id)
            reason = (
                current.transfer_rejection(from_user_id=from_user_id, to_user_id=to_user_id)
                if current is not None
                else TransferRejectReason.NOT_FOUND
            )
            Logger.base.info(f'🔁 [TRANSFER] Ticket {ticket_id} changed underneath: {reason}')
            return TransferRejected(reason=reason or TransferRejectReason.INVALID_STATE)

        Logger.base.info(f'🔁 [TRANSFER] Ticket {ticket_id}: user {from_user_id} → {to_user_id}')
        return Transferred(ticket=transferred)
