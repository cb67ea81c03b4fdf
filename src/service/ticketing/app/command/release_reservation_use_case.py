from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus


class ReleaseReservationUseCase:
    """
    Payment-failure rollback.

    Returns True when this call released the hold, False when it had already
    left HELD (released, expired or confirmed). Safe to call any number of times.
    """

    def __init__(self, *, inventory_ledger_repo: IInventoryLedgerRepo) -> None:
        self.inventory_ledger_repo = inventory_ledger_repo

    @classmethod
    @inject
    def depends(
        cls,
        inventory_ledger_repo: IInventoryLedgerRepo = Depends(
            Provide[Container.inventory_ledger_repo]
        ),
    ) -> Self:
        return cls(inventory_ledger_repo=inventory_ledger_repo)

    @Logger.io
    async def execute(self, *, principal: Principal, reservation_id: UUID) -> bool:
        reservation = await self.inventory_ledger_repo.get_reservation(
            reservation_id=reservation_id
        )
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        if reservation.user_id != principal.id and not principal.is_admin:
            raise ForbiddenError('Only the holder can release this reservation')

        released = await self.inventory_ledger_repo.release(
            reservation_id=reservation_id, final_status=ReservationStatus.RELEASED
        )
        if released is None:
            Logger.base.info(f'↩️ [RELEASE] Reservation {reservation_id} was no longer held')
            return False

        metrics.reservation_releases.labels(reason='payment_failed').inc()
        Logger.base.info(
            f'↩️ [RELEASE] Returned {released.quantity} × tier {released.tier_id} to inventory'
        )
        return True
