"""ORM row → domain entity conversions shared by the ticketing repositories."""

from uuid_utils import UUID

from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.guest_list_entry_entity import GuestListEntry
from src.service.ticketing.domain.entity.reservation_entity import Reservation
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_tier_entity import TicketTier
from src.service.ticketing.domain.enum.check_in_method import CheckInMethod
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.check_in_record_model import CheckInRecordModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.guest_list_entry_model import GuestListEntryModel
from src.service.ticketing.driven_adapter.model.reservation_model import ReservationModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_tier_model import TicketTierModel


def event_model_to_entity(event_model: EventModel) -> Event:
    return Event(
        id=event_model.id,
        venue_id=event_model.venue_id,
        name=event_model.name,
        starts_at=event_model.starts_at,
        ends_at=event_model.ends_at,
        status=EventStatus(event_model.status),
        created_by=event_model.created_by,
        created_at=event_model.created_at,
    )


def tier_model_to_entity(tier_model: TicketTierModel) -> TicketTier:
    return TicketTier(
        id=tier_model.id,
        event_id=tier_model.event_id,
        name=tier_model.name,
        price=tier_model.price,
        quantity=tier_model.quantity,
        sold=tier_model.sold,
        sales_start=tier_model.sales_start,
        sales_end=tier_model.sales_end,
        version=tier_model.version,
    )


def reservation_model_to_entity(reservation_model: ReservationModel) -> Reservation:
    return Reservation(
        id=UUID(reservation_model.id),
        tier_id=reservation_model.tier_id,
        event_id=reservation_model.event_id,
        user_id=reservation_model.user_id,
        quantity=reservation_model.quantity,
        status=ReservationStatus(reservation_model.status),
        expires_at=reservation_model.expires_at,
        created_at=reservation_model.created_at,
    )


def ticket_model_to_entity(ticket_model: TicketModel) -> Ticket:
    return Ticket(
        id=ticket_model.id,
        event_id=ticket_model.event_id,
        tier_id=ticket_model.tier_id,
        owner_id=ticket_model.owner_id,
        qr_token=ticket_model.qr_token,
        reservation_id=UUID(ticket_model.reservation_id) if ticket_model.reservation_id else None,
        status=TicketStatus(ticket_model.status),
        purchased_at=ticket_model.purchased_at,
        redeemed_at=ticket_model.redeemed_at,
        transferred_from=ticket_model.transferred_from,
        transferred_at=ticket_model.transferred_at,
    )


def check_in_record_model_to_entity(record_model: CheckInRecordModel) -> CheckInRecord:
    return CheckInRecord(
        id=record_model.id,
        venue_id=record_model.venue_id,
        event_id=record_model.event_id,
        ticket_id=record_model.ticket_id,
        guest_list_entry_id=record_model.guest_list_entry_id,
        method=CheckInMethod(record_model.method),
        staff_id=record_model.staff_id,
        checked_in_at=record_model.checked_in_at,
    )


def guest_list_entry_model_to_entity(entry_model: GuestListEntryModel) -> GuestListEntry:
    return GuestListEntry(
        id=entry_model.id,
        venue_id=entry_model.venue_id,
        event_id=entry_model.event_id,
        user_id=entry_model.user_id,
        guest_name=entry_model.guest_name,
        guest_email=entry_model.guest_email,
        guest_phone=entry_model.guest_phone,
        plus_ones=entry_model.plus_ones,
        is_vip=entry_model.is_vip,
        notes=entry_model.notes,
        status=GuestListStatus(entry_model.status),
        added_by=entry_model.added_by,
        checked_in_at=entry_model.checked_in_at,
        checked_in_by=entry_model.checked_in_by,
        created_at=entry_model.created_at,
    )
