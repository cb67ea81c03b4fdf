import attrs

from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.rejection_reason import TransferRejectReason


@attrs.define(frozen=True)
class Transferred:
    ticket: Ticket


@attrs.define(frozen=True)
class TransferRejected:
    reason: TransferRejectReason


TransferOutcome = Transferred | TransferRejected
