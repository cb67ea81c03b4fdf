"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_check_in_repo import ICheckInRepo
from src.service.ticketing.app.interface.i_event_repo import IEventRepo
from src.service.ticketing.app.interface.i_guest_list_repo import IGuestListRepo
from src.service.ticketing.app.interface.i_inventory_ledger_repo import IInventoryLedgerRepo
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo

__all__ = [
    'ICheckInRepo',
    'IEventRepo',
    'IGuestListRepo',
    'IInventoryLedgerRepo',
    'ITicketRepo',
]
