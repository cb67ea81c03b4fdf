from src.service.venue_access.domain.value_object.live_window import LiveWindow
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction

__all__ = ['LiveWindow', 'RawTransaction']
