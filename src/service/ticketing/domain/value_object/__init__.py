from src.service.ticketing.domain.value_object.qr_token import generate_qr_token
from src.service.ticketing.domain.value_object.ticket_ref import TicketRef

__all__ = ['TicketRef', 'generate_qr_token']
