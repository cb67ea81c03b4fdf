from enum import StrEnum


class ReservationStatus(StrEnum):
    HELD = 'held'
    CONFIRMED = 'confirmed'
    RELEASED = 'released'
    EXPIRED = 'expired'
