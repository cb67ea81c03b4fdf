"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticketing.driven_adapter.model.check_in_record_model import CheckInRecordModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.guest_list_entry_model import GuestListEntryModel
from src.service.ticketing.driven_adapter.model.reservation_model import ReservationModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_tier_model import TicketTierModel

__all__ = [
    'CheckInRecordModel',
    'EventModel',
    'GuestListEntryModel',
    'ReservationModel',
    'TicketModel',
    'TicketTierModel',
]
