"""
Rejection codes returned as typed outcomes.

Callers branch on these (door staff respond differently to each), so they are
values, not exceptions.
"""

from enum import StrEnum


class ReservationRejectReason(StrEnum):
    SOLD_OUT = 'SOLD_OUT'
    WINDOW_CLOSED = 'WINDOW_CLOSED'


class TransferRejectReason(StrEnum):
    NOT_FOUND = 'NOT_FOUND'
    NOT_OWNER = 'NOT_OWNER'
    INVALID_STATE = 'INVALID_STATE'


class CheckInRejectReason(StrEnum):
    NOT_FOUND = 'NOT_FOUND'
    WRONG_VENUE = 'WRONG_VENUE'
    EVENT_NOT_LIVE = 'EVENT_NOT_LIVE'
    ALREADY_REDEEMED = 'ALREADY_REDEEMED'
    TICKET_NOT_ACTIVE = 'TICKET_NOT_ACTIVE'


class GuestCheckInRejectReason(StrEnum):
    NOT_FOUND = 'NOT_FOUND'
    WRONG_VENUE = 'WRONG_VENUE'
    ALREADY_CHECKED_IN = 'ALREADY_CHECKED_IN'
    REMOVED = 'REMOVED'
    NO_SHOW = 'NO_SHOW'
