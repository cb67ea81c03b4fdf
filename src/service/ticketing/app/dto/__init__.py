"""Application layer DTOs"""

from src.service.ticketing.app.dto.check_in_outcome import (
    CheckedIn,
    CheckInOutcome,
    CheckInRejected,
    GuestCheckInOutcome,
    GuestCheckInRejected,
)
from src.service.ticketing.app.dto.event_detail import EventDetail, TierDraft
from src.service.ticketing.app.dto.reservation_outcome import (
    ReservationOutcome,
    ReservationRejected,
    Reserved,
)
from src.service.ticketing.app.dto.transfer_outcome import (
    TransferOutcome,
    TransferRejected,
    Transferred,
)

__all__ = [
    'CheckInOutcome',
    'CheckInRejected',
    'CheckedIn',
    'EventDetail',
    'GuestCheckInOutcome',
    'GuestCheckInRejected',
    'ReservationOutcome',
    'ReservationRejected',
    'Reserved',
    'TierDraft',
    'TransferOutcome',
    'TransferRejected',
    'Transferred',
]
