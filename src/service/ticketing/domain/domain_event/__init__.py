"""Domain Events"""

from src.service.ticketing.domain.domain_event.check_in_domain_event import (
    GuestCheckedInEvent,
    TicketCheckedInEvent,
)

__all__ = ['GuestCheckedInEvent', 'TicketCheckedInEvent']
