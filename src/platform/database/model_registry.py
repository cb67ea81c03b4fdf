"""Imports every ORM model so Base.metadata is complete before create_all."""

from src.service.ticketing.driven_adapter.model.check_in_record_model import (  # noqa: F401
    CheckInRecordModel,
)
from src.service.ticketing.driven_adapter.model.event_model import EventModel  # noqa: F401
from src.service.ticketing.driven_adapter.model.guest_list_entry_model import (  # noqa: F401
    GuestListEntryModel,
)
from src.service.ticketing.driven_adapter.model.reservation_model import (  # noqa: F401
    ReservationModel,
)
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel  # noqa: F401
from src.service.ticketing.driven_adapter.model.ticket_tier_model import (  # noqa: F401
    TicketTierModel,
)
from src.service.venue_access.driven_adapter.model.access_grant_model import (  # noqa: F401
    AccessGrantModel,
)
from src.service.venue_access.driven_adapter.model.card_link_model import (  # noqa: F401
    CardLinkModel,
)
from src.service.venue_access.driven_adapter.model.pos_integration_model import (  # noqa: F401
    PosIntegrationModel,
)
from src.service.venue_access.driven_adapter.model.pos_transaction_model import (  # noqa: F401
    PosTransactionModel,
)
from src.service.venue_access.driven_adapter.model.spend_rule_model import (  # noqa: F401
    SpendRuleModel,
)
