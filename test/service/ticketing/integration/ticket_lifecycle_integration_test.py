"""
Reserve → issue → check in, against the real ledger.

Covers the oversell race (two buyers, one unit left), the double-scan race and
the transfer / cancel / expiry paths that move units back into inventory.
"""

from datetime import timedelta

import anyio
import pytest

from src.platform.exception.exceptions import ConflictError, DomainError, ForbiddenError
from src.service.ticketing.app.dto.check_in_outcome import CheckedIn, CheckInRejected
from src.service.ticketing.app.dto.reservation_outcome import ReservationRejected, Reserved
from src.service.ticketing.app.dto.transfer_outcome import TransferRejected, Transferred
from src.service.ticketing.domain.enum.rejection_reason import (
    CheckInRejectReason,
    ReservationRejectReason,
    TransferRejectReason,
)
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from test.test_constants import ANOTHER_CUSTOMER_ID, CUSTOMER_ID, OTHER_VENUE_ID


@pytest.mark.integration
class TestReserve:
    async def test_last_unit_goes_to_exactly_one_buyer(
        self, make_event, reserve, inventory_ledger_repo
    ):
        detail = await make_event(quantity=1)
        tier_id = detail.tiers[0].id
        outcomes = []

        async def buy(user_id: int) -> None:
            outcomes.append(await reserve.execute(user_id=user_id, tier_id=tier_id, quantity=1))

        async with anyio.create_task_group() as tg:
            tg.start_soon(buy, CUSTOMER_ID)
            tg.start_soon(buy, ANOTHER_CUSTOMER_ID)

        assert sum(isinstance(o, Reserved) for o in outcomes) == 1
        assert [o.reason for o in outcomes if isinstance(o, ReservationRejected)] == [
            ReservationRejectReason.SOLD_OUT
        ]
        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert tier.sold == tier.quantity == 1

    async def test_issued_tickets_never_exceed_capacity(
        self, make_event, reserve, issue, inventory_ledger_repo, ticket_repo
    ):
        detail = await make_event(quantity=5)
        tier_id = detail.tiers[0].id
        buyers = [CUSTOMER_ID + n for n in range(12)]
        outcomes = []

        async def buy(user_id: int) -> None:
            quantity = 2 if user_id % 3 == 0 else 1
            outcome = await reserve.execute(user_id=user_id, tier_id=tier_id, quantity=quantity)
            outcomes.append((user_id, outcome))

        async with anyio.create_task_group() as tg:
            for user_id in buyers:
                tg.start_soon(buy, user_id)

        issued = []
        for user_id, outcome in outcomes:
            if isinstance(outcome, Reserved):
                issued.extend(
                    await issue.execute(
                        reservation_id=outcome.reservation.id, owner_id=user_id
                    )
                )

        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert len(issued) == tier.sold <= tier.quantity
        assert len({t.qr_token for t in issued}) == len(issued)
        owned = [len(await ticket_repo.list_by_owner(owner_id=user_id)) for user_id in buyers]
        assert sum(owned) == len(issued)

    async def test_quantity_larger_than_remaining_is_sold_out(self, make_event, reserve):
        detail = await make_event(quantity=3)
        tier_id = detail.tiers[0].id

        assert isinstance(
            await reserve.execute(user_id=CUSTOMER_ID, tier_id=tier_id, quantity=2), Reserved
        )
        outcome = await reserve.execute(user_id=ANOTHER_CUSTOMER_ID, tier_id=tier_id, quantity=2)
        assert outcome == ReservationRejected(reason=ReservationRejectReason.SOLD_OUT)

    async def test_closed_sales_window(self, make_event, reserve, clock):
        detail = await make_event()
        clock.advance(hours=2)  # past sales_end (= event start)

        outcome = await reserve.execute(user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id)

        assert outcome == ReservationRejected(reason=ReservationRejectReason.WINDOW_CLOSED)

    async def test_staff_of_another_venue_cannot_create_events(
        self, create_event, other_venue_staff, clock
    ):
        with pytest.raises(ForbiddenError):
            await create_event.execute(
                principal=other_venue_staff,
                venue_id=1,
                name='Not yours',
                starts_at=clock.now(),
                ends_at=clock.now() + timedelta(hours=1),
                tiers=[],
            )


@pytest.mark.integration
class TestIssueAndExpire:
    async def test_issue_confirms_and_mints_one_ticket_per_unit(
        self, make_event, reserve, issue, inventory_ledger_repo
    ):
        detail = await make_event()
        reserved = await reserve.execute(
            user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id, quantity=3
        )

        tickets = await issue.execute(
            reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID
        )

        assert len(tickets) == 3
        assert len({t.qr_token for t in tickets}) == 3
        assert all(t.status == TicketStatus.ACTIVE for t in tickets)
        reservation = await inventory_ledger_repo.get_reservation(
            reservation_id=reserved.reservation.id
        )
        assert reservation.status == ReservationStatus.CONFIRMED

        with pytest.raises(ConflictError):
            await issue.execute(reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID)

    async def test_expired_hold_returns_units_and_blocks_payment(
        self, make_event, reserve, issue, expire_reservations, inventory_ledger_repo, clock
    ):
        detail = await make_event(quantity=2)
        tier_id = detail.tiers[0].id
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=tier_id, quantity=2)

        clock.advance(minutes=11)
        assert await expire_reservations.execute() == 1
        assert await expire_reservations.execute() == 0

        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert tier.sold == 0
        with pytest.raises(ConflictError):
            await issue.execute(reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID)


@pytest.mark.integration
class TestCheckIn:
    @pytest.fixture
    async def ticket(self, make_event, reserve, issue):
        detail = await make_event()
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id)
        (ticket,) = await issue.execute(
            reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID
        )
        return ticket

    async def test_second_scan_reports_the_first(
        self, ticket, check_in_ticket, staff, broadcaster, ticket_repo
    ):
        stream = await broadcaster.subscribe(venue_id=1)

        first = await check_in_ticket.execute(qr_token=ticket.qr_token, venue_id=1, staff=staff)
        second = await check_in_ticket.execute(qr_token=ticket.qr_token, venue_id=1, staff=staff)

        assert isinstance(first, CheckedIn)
        assert isinstance(second, CheckInRejected)
        assert second.reason == CheckInRejectReason.ALREADY_REDEEMED
        assert second.existing_record.id == first.record.id
        assert second.context['staff_id'] == staff.id

        event = stream.receive_nowait()
        assert event['event_type'] == 'ticket_checked_in'
        assert event['ticket_id'] == ticket.id

        redeemed = await ticket_repo.get_by_id(ticket_id=ticket.id)
        assert redeemed.status == TicketStatus.REDEEMED

    async def test_concurrent_scans_admit_once(
        self, ticket, check_in_ticket, check_in_repo, staff
    ):
        outcomes = []

        async def scan() -> None:
            outcomes.append(
                await check_in_ticket.execute(qr_token=ticket.qr_token, venue_id=1, staff=staff)
            )

        async with anyio.create_task_group() as tg:
            for _ in range(3):
                tg.start_soon(scan)

        assert sum(isinstance(o, CheckedIn) for o in outcomes) == 1
        assert {o.reason for o in outcomes if isinstance(o, CheckInRejected)} == {
            CheckInRejectReason.ALREADY_REDEEMED
        }
        # scalar_one_or_none: a second row for the ticket would raise here
        (admitted,) = [o for o in outcomes if isinstance(o, CheckedIn)]
        record = await check_in_repo.get_by_ticket_id(ticket_id=ticket.id)
        assert record.id == admitted.record.id

    async def test_unknown_token_and_wrong_venue(
        self, ticket, check_in_ticket, staff, other_venue_staff
    ):
        unknown = await check_in_ticket.execute(qr_token='nope', venue_id=1, staff=staff)
        assert unknown.reason == CheckInRejectReason.NOT_FOUND

        wrong_venue = await check_in_ticket.execute(
            qr_token=ticket.qr_token, venue_id=OTHER_VENUE_ID, staff=other_venue_staff
        )
        assert wrong_venue.reason == CheckInRejectReason.WRONG_VENUE

        with pytest.raises(ForbiddenError):
            await check_in_ticket.execute(
                qr_token=ticket.qr_token, venue_id=1, staff=other_venue_staff
            )

    async def test_doors_closed_before_early_entry(
        self, make_event, reserve, issue, check_in_ticket, staff
    ):
        detail = await make_event(starts_in=timedelta(hours=5))
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id)
        (ticket,) = await issue.execute(
            reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID
        )

        outcome = await check_in_ticket.execute(qr_token=ticket.qr_token, venue_id=1, staff=staff)

        assert outcome.reason == CheckInRejectReason.EVENT_NOT_LIVE


@pytest.mark.integration
class TestTransferAndCancel:
    @pytest.fixture
    async def ticket(self, make_event, reserve, issue):
        detail = await make_event(starts_in=timedelta(days=3))
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id)
        (ticket,) = await issue.execute(
            reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID
        )
        return ticket

    async def test_transfer_keeps_token(self, ticket, transfer):
        outcome = await transfer.execute(
            ticket_id=ticket.id, from_user_id=CUSTOMER_ID, to_user_id=ANOTHER_CUSTOMER_ID
        )

        assert isinstance(outcome, Transferred)
        assert outcome.ticket.owner_id == ANOTHER_CUSTOMER_ID
        assert outcome.ticket.transferred_from == CUSTOMER_ID
        assert outcome.ticket.qr_token == ticket.qr_token

        again = await transfer.execute(
            ticket_id=ticket.id, from_user_id=CUSTOMER_ID, to_user_id=ANOTHER_CUSTOMER_ID
        )
        assert again == TransferRejected(reason=TransferRejectReason.NOT_OWNER)

    async def test_redeemed_ticket_cannot_move(
        self, ticket, transfer, check_in_ticket, staff, clock
    ):
        clock.advance(days=3)
        await check_in_ticket.execute(qr_token=ticket.qr_token, venue_id=1, staff=staff)

        outcome = await transfer.execute(
            ticket_id=ticket.id, from_user_id=CUSTOMER_ID, to_user_id=ANOTHER_CUSTOMER_ID
        )

        assert outcome == TransferRejected(reason=TransferRejectReason.INVALID_STATE)

    async def test_missing_ticket(self, transfer):
        outcome = await transfer.execute(
            ticket_id=999, from_user_id=CUSTOMER_ID, to_user_id=ANOTHER_CUSTOMER_ID
        )
        assert outcome == TransferRejected(reason=TransferRejectReason.NOT_FOUND)

    async def test_cancel_returns_unit(self, ticket, cancel, inventory_ledger_repo):
        cancelled = await cancel.execute(ticket_id=ticket.id, owner_id=CUSTOMER_ID)

        assert cancelled.status == TicketStatus.CANCELLED
        tier = await inventory_ledger_repo.get_tier(tier_id=ticket.tier_id)
        assert tier.sold == 0

        with pytest.raises(ConflictError):
            await cancel.execute(ticket_id=ticket.id, owner_id=CUSTOMER_ID)

    async def test_cancel_cutoff_and_ownership(self, ticket, cancel, clock):
        with pytest.raises(ForbiddenError):
            await cancel.execute(ticket_id=ticket.id, owner_id=ANOTHER_CUSTOMER_ID)

        clock.advance(days=2, hours=1)  # 23h before start
        with pytest.raises(DomainError):
            await cancel.execute(ticket_id=ticket.id, owner_id=CUSTOMER_ID)


@pytest.mark.integration
class TestRelease:
    async def test_release_returns_units_exactly_once(
        self, make_event, reserve, release, issue, inventory_ledger_repo, customer
    ):
        detail = await make_event(quantity=2)
        tier_id = detail.tiers[0].id
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=tier_id, quantity=2)
        reservation_id = reserved.reservation.id

        assert await release.execute(principal=customer, reservation_id=reservation_id) is True
        assert await release.execute(principal=customer, reservation_id=reservation_id) is False

        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert tier.sold == 0
        reservation = await inventory_ledger_repo.get_reservation(reservation_id=reservation_id)
        assert reservation.status == ReservationStatus.RELEASED
        with pytest.raises(ConflictError):
            await issue.execute(reservation_id=reservation_id, owner_id=CUSTOMER_ID)

    async def test_confirmed_hold_is_not_released(
        self, make_event, reserve, release, issue, inventory_ledger_repo, customer
    ):
        detail = await make_event()
        tier_id = detail.tiers[0].id
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=tier_id, quantity=2)
        await issue.execute(reservation_id=reserved.reservation.id, owner_id=CUSTOMER_ID)

        released = await release.execute(
            principal=customer, reservation_id=reserved.reservation.id
        )

        assert released is False
        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert tier.sold == 2

    async def test_expired_hold_is_not_released_twice(
        self,
        make_event,
        reserve,
        release,
        expire_reservations,
        inventory_ledger_repo,
        customer,
        clock,
    ):
        detail = await make_event(quantity=1)
        tier_id = detail.tiers[0].id
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=tier_id)
        clock.advance(minutes=11)
        assert await expire_reservations.execute() == 1

        released = await release.execute(
            principal=customer, reservation_id=reserved.reservation.id
        )

        assert released is False
        tier = await inventory_ledger_repo.get_tier(tier_id=tier_id)
        assert tier.sold == 0
        reservation = await inventory_ledger_repo.get_reservation(
            reservation_id=reserved.reservation.id
        )
        assert reservation.status == ReservationStatus.EXPIRED

    async def test_only_the_holder_can_release(self, make_event, reserve, release, staff):
        detail = await make_event()
        reserved = await reserve.execute(user_id=CUSTOMER_ID, tier_id=detail.tiers[0].id)

        with pytest.raises(ForbiddenError):
            await release.execute(principal=staff, reservation_id=reserved.reservation.id)
