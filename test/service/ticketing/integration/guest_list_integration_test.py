from datetime import timedelta

import pytest

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.service.ticketing.app.command.add_guest_use_case import AddGuestUseCase
from src.service.ticketing.app.command.change_guest_status_use_case import (
    ChangeGuestStatusUseCase,
)
from src.service.ticketing.app.dto.check_in_outcome import CheckedIn, GuestCheckInRejected
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus
from src.service.ticketing.domain.enum.rejection_reason import GuestCheckInRejectReason
from test.test_constants import CUSTOMER_ID, OTHER_VENUE_ID, STAFF_ID, VENUE_ID


@pytest.fixture
def add_guest(guest_list_repo, event_repo) -> AddGuestUseCase:
    return AddGuestUseCase(guest_list_repo=guest_list_repo, event_repo=event_repo)


@pytest.fixture
def change_status(guest_list_repo) -> ChangeGuestStatusUseCase:
    return ChangeGuestStatusUseCase(guest_list_repo=guest_list_repo)


@pytest.mark.integration
class TestGuestList:
    async def test_guest_checks_in_once(self, add_guest, check_in_guest, staff, broadcaster):
        entry = await add_guest.execute(
            principal=staff, venue_id=VENUE_ID, guest_name='Ana', plus_ones=2, is_vip=True
        )
        stream = await broadcaster.subscribe(venue_id=VENUE_ID)

        first = await check_in_guest.execute(entry_id=entry.id, venue_id=VENUE_ID, staff=staff)
        second = await check_in_guest.execute(entry_id=entry.id, venue_id=VENUE_ID, staff=staff)

        assert isinstance(first, CheckedIn)
        assert isinstance(second, GuestCheckInRejected)
        assert second.reason == GuestCheckInRejectReason.ALREADY_CHECKED_IN
        assert second.existing_record.id == first.record.id

        event = stream.receive_nowait()
        assert event['event_type'] == 'guest_checked_in'
        assert event['party_size'] == 3
        assert event['is_vip'] is True

    async def test_removed_guest_is_turned_away(
        self, add_guest, change_status, check_in_guest, staff
    ):
        entry = await add_guest.execute(principal=staff, venue_id=VENUE_ID, user_id=CUSTOMER_ID)
        removed = await change_status.remove(principal=staff, entry_id=entry.id)
        assert removed.status == GuestListStatus.REMOVED

        outcome = await check_in_guest.execute(entry_id=entry.id, venue_id=VENUE_ID, staff=staff)

        assert outcome.reason == GuestCheckInRejectReason.REMOVED
        with pytest.raises(ConflictError):
            await change_status.confirm(principal=staff, entry_id=entry.id)

    async def test_wrong_venue_and_missing_entry(
        self, add_guest, check_in_guest, staff, other_venue_staff
    ):
        entry = await add_guest.execute(principal=staff, venue_id=VENUE_ID, guest_name='Bo')

        wrong_venue = await check_in_guest.execute(
            entry_id=entry.id, venue_id=OTHER_VENUE_ID, staff=other_venue_staff
        )
        missing = await check_in_guest.execute(entry_id=999, venue_id=VENUE_ID, staff=staff)

        assert wrong_venue.reason == GuestCheckInRejectReason.WRONG_VENUE
        assert missing.reason == GuestCheckInRejectReason.NOT_FOUND

    async def test_entry_must_reference_an_event_of_its_venue(
        self, make_event, add_guest, other_venue_staff, staff
    ):
        detail = await make_event()

        with pytest.raises(DomainError):
            await add_guest.execute(
                principal=other_venue_staff,
                venue_id=OTHER_VENUE_ID,
                event_id=detail.event.id,
                guest_name='Eve',
            )
        with pytest.raises(NotFoundError):
            await add_guest.execute(
                principal=staff, venue_id=VENUE_ID, event_id=999999, guest_name='Eve'
            )


@pytest.mark.integration
class TestNoShowReconciliation:
    async def test_confirmed_absentees_become_no_shows_once(
        self,
        make_event,
        add_guest,
        change_status,
        check_in_guest,
        reconcile_no_shows,
        guest_list_repo,
        staff,
        clock,
    ):
        detail = await make_event()
        event_id = detail.event.id
        entries = [
            await add_guest.execute(
                principal=staff, venue_id=VENUE_ID, event_id=event_id, guest_name=name
            )
            for name in ('Ana', 'Bo', 'Cy', 'Di')
        ]
        for entry in entries[:3]:
            await change_status.confirm(principal=staff, entry_id=entry.id)
        clock.advance(hours=1)
        await check_in_guest.execute(entry_id=entries[0].id, venue_id=VENUE_ID, staff=staff)

        with pytest.raises(DomainError):
            await reconcile_no_shows.execute(event_id=event_id)

        clock.advance(hours=6)
        assert await reconcile_no_shows.execute(event_id=event_id) == 2
        assert await reconcile_no_shows.execute(event_id=event_id) == 0

        statuses = [
            (await guest_list_repo.get_by_id(entry_id=entry.id)).status for entry in entries
        ]
        assert statuses == [
            GuestListStatus.CHECKED_IN,
            GuestListStatus.NO_SHOW,
            GuestListStatus.NO_SHOW,
            GuestListStatus.PENDING,
        ]

    async def test_periodic_job_finds_ended_events(
        self, make_event, add_guest, change_status, reconcile_no_shows, staff, clock
    ):
        detail = await make_event(starts_in=timedelta(minutes=30))
        entry = await add_guest.execute(
            principal=staff, venue_id=VENUE_ID, event_id=detail.event.id, guest_name='Ana'
        )
        await change_status.confirm(principal=staff, entry_id=entry.id)

        assert await reconcile_no_shows.reconcile_ended_events() == 0
        clock.advance(hours=7)
        assert await reconcile_no_shows.reconcile_ended_events() == 1
        assert await reconcile_no_shows.reconcile_ended_events() == 0

    async def test_reconciliation_leaves_other_venues_entries_alone(
        self,
        make_event,
        add_guest,
        change_status,
        reconcile_no_shows,
        guest_list_repo,
        staff,
        clock,
    ):
        detail = await make_event()
        event_id = detail.event.id
        own = await add_guest.execute(
            principal=staff, venue_id=VENUE_ID, event_id=event_id, guest_name='Ana'
        )
        await change_status.confirm(principal=staff, entry_id=own.id)
        # A row written before entries were tied to their event's venue
        stray = await guest_list_repo.add(
            entry=GuestListEntry.create(
                venue_id=OTHER_VENUE_ID, added_by=STAFF_ID, event_id=event_id, guest_name='Bo'
            )
        )
        await guest_list_repo.transition_status(
            entry_id=stray.id,
            from_statuses=(GuestListStatus.PENDING,),
            to_status=GuestListStatus.CONFIRMED,
        )

        clock.advance(hours=7)

        assert await reconcile_no_shows.execute(event_id=event_id) == 1
        assert (await guest_list_repo.get_by_id(entry_id=own.id)).status == GuestListStatus.NO_SHOW
        stray_after = await guest_list_repo.get_by_id(entry_id=stray.id)
        assert stray_after.status == GuestListStatus.CONFIRMED
