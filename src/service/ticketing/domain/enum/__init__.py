"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.check_in_method import CheckInMethod
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.guest_list_status import GuestListStatus
from src.service.ticketing.domain.enum.reservation_status import ReservationStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus

__all__ = [
    'CheckInMethod',
    'EventStatus',
    'GuestListStatus',
    'ReservationStatus',
    'TicketStatus',
]
