import attrs

from src.service.ticketing.domain.entity.reservation_entity import Reservation
from src.service.ticketing.domain.enum.rejection_reason import ReservationRejectReason


@attrs.define(frozen=True)
class Reserved:
    reservation: Reservation


@attrs.define(frozen=True)
class ReservationRejected:
    reason: ReservationRejectReason


ReservationOutcome = Reserved | ReservationRejected
