"""Ticketing use cases wired to real repositories on the per-test SQLite database."""

from datetime import timedelta

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.shared_kernel.domain.entity.principal_entity import Principal
from src.service.ticketing.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.ticketing.app.command.check_in_guest_use_case import CheckInGuestUseCase
from src.service.ticketing.app.command.check_in_ticket_use_case import CheckInTicketUseCase
from src.service.ticketing.app.command.create_event_with_tiers_use_case import (
    CreateEventWithTiersUseCase,
)
from src.service.ticketing.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from src.service.ticketing.app.command.issue_tickets_use_case import IssueTicketsUseCase
from src.service.ticketing.app.command.reconcile_no_shows_use_case import ReconcileNoShowsUseCase
from src.service.ticketing.app.command.release_reservation_use_case import (
    ReleaseReservationUseCase,
)
from src.service.ticketing.app.command.reserve_tickets_use_case import ReserveTicketsUseCase
from src.service.ticketing.app.command.transfer_ticket_use_case import TransferTicketUseCase
from src.service.ticketing.app.dto.event_detail import EventDetail, TierDraft
from src.service.ticketing.driven_adapter.repo.check_in_repo_impl import CheckInRepoImpl
from src.service.ticketing.driven_adapter.repo.event_repo_impl import EventRepoImpl
from src.service.ticketing.driven_adapter.repo.guest_list_repo_impl import GuestListRepoImpl
from src.service.ticketing.driven_adapter.repo.inventory_ledger_repo_impl import (
    InventoryLedgerRepoImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
from test.fixed_clock import FixedClock
from test.test_constants import VENUE_ID


@pytest.fixture
def event_repo(database: Database) -> EventRepoImpl:
    return EventRepoImpl(session_factory=database.session)


@pytest.fixture
def inventory_ledger_repo(database: Database) -> InventoryLedgerRepoImpl:
    return InventoryLedgerRepoImpl(session_factory=database.session)


@pytest.fixture
def ticket_repo(database: Database) -> TicketRepoImpl:
    return TicketRepoImpl(session_factory=database.session)


@pytest.fixture
def check_in_repo(database: Database) -> CheckInRepoImpl:
    return CheckInRepoImpl(session_factory=database.session)


@pytest.fixture
def guest_list_repo(database: Database) -> GuestListRepoImpl:
    return GuestListRepoImpl(session_factory=database.session)


@pytest.fixture
def broadcaster() -> InMemoryEventBroadcasterImpl:
    return InMemoryEventBroadcasterImpl(buffer_size=16)


@pytest.fixture
def create_event(event_repo) -> CreateEventWithTiersUseCase:
    return CreateEventWithTiersUseCase(event_repo=event_repo)


@pytest.fixture
def reserve(inventory_ledger_repo, event_repo, clock) -> ReserveTicketsUseCase:
    return ReserveTicketsUseCase(
        inventory_ledger_repo=inventory_ledger_repo, event_repo=event_repo, clock=clock
    )


@pytest.fixture
def issue(inventory_ledger_repo, ticket_repo, clock) -> IssueTicketsUseCase:
    return IssueTicketsUseCase(
        inventory_ledger_repo=inventory_ledger_repo, ticket_repo=ticket_repo, clock=clock
    )


@pytest.fixture
def release(inventory_ledger_repo) -> ReleaseReservationUseCase:
    return ReleaseReservationUseCase(inventory_ledger_repo=inventory_ledger_repo)


@pytest.fixture
def check_in_ticket(
    ticket_repo, event_repo, check_in_repo, broadcaster, clock
) -> CheckInTicketUseCase:
    return CheckInTicketUseCase(
        ticket_repo=ticket_repo,
        event_repo=event_repo,
        check_in_repo=check_in_repo,
        event_broadcaster=broadcaster,
        clock=clock,
    )


@pytest.fixture
def check_in_guest(guest_list_repo, check_in_repo, broadcaster, clock) -> CheckInGuestUseCase:
    return CheckInGuestUseCase(
        guest_list_repo=guest_list_repo,
        check_in_repo=check_in_repo,
        event_broadcaster=broadcaster,
        clock=clock,
    )


@pytest.fixture
def transfer(ticket_repo, clock) -> TransferTicketUseCase:
    return TransferTicketUseCase(ticket_repo=ticket_repo, clock=clock)


@pytest.fixture
def cancel(inventory_ledger_repo, ticket_repo, event_repo, clock) -> CancelTicketUseCase:
    return CancelTicketUseCase(
        inventory_ledger_repo=inventory_ledger_repo,
        ticket_repo=ticket_repo,
        event_repo=event_repo,
        clock=clock,
    )


@pytest.fixture
def expire_reservations(inventory_ledger_repo, clock) -> ExpireReservationsUseCase:
    return ExpireReservationsUseCase(inventory_ledger_repo=inventory_ledger_repo, clock=clock)


@pytest.fixture
def reconcile_no_shows(event_repo, guest_list_repo, clock) -> ReconcileNoShowsUseCase:
    return ReconcileNoShowsUseCase(
        event_repo=event_repo, guest_list_repo=guest_list_repo, clock=clock
    )


@pytest.fixture
def make_event(create_event, staff: Principal, clock: FixedClock):
    """One-tier event starting ``starts_in`` from now, on sale since yesterday."""

    async def _make(
        *, quantity: int = 100, starts_in: timedelta = timedelta(hours=1)
    ) -> EventDetail:
        now = clock.now()
        starts_at = now + starts_in
        return await create_event.execute(
            principal=staff,
            venue_id=VENUE_ID,
            name='Friday Night',
            starts_at=starts_at,
            ends_at=starts_at + timedelta(hours=6),
            tiers=[
                TierDraft(
                    name='GA',
                    price=2_500,
                    quantity=quantity,
                    sales_start=now - timedelta(days=1),
                    sales_end=starts_at,
                )
            ],
        )

    return _make
