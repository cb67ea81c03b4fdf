from datetime import datetime

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.venue_access_metrics import metrics
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus


class ExpireReservationsUseCase:
    """Periodic job: lapsed holds go back to inventory through the same guarded release."""

    def __init__(
        self,
        *,
        inventory_ledger_repo: IInventoryLedgerRepo,
        clock: IClock,
        batch_size: int = 200,
    ) -> None:
        self.inventory_ledger_repo = inventory_ledger_repo
        self.clock = clock
        self.batch_size = batch_size

    @Logger.io
    async def execute(self) -> int:
        now: datetime = self.clock.now()
        expired = 0

        while True:
            reservation_ids = await self.inventory_ledger_repo.list_expired_hold_ids(
                now=now, limit=self.batch_size
            )
            if not reservation_ids:
                break

            for reservation_id in reservation_ids:
                released = await self.inventory_ledger_repo.release(
                    reservation_id=reservation_id, final_status=ReservationStatus.EXPIRED
                )
                # None: payment confirmed or released it between the scan and the update
                if released is not None:
                    expired += 1

            if len(reservation_ids) < self.batch_size:
                break

        if expired:
            metrics.reservation_releases.labels(reason='expired').inc(expired)
            Logger.base.info(f'⌛ [EXPIRE_HOLDS] Released {expired} lapsed reservations')
        return expired
