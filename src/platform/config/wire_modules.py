"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.shared_kernel.driving_adapter.auth import role_auth
from src.service.ticketing.app.command import (
    add_guest_use_case,
    cancel_ticket_use_case,
    change_guest_status_use_case,
    check_in_guest_use_case,
    check_in_ticket_use_case,
    create_event_with_tiers_use_case,
    issue_tickets_use_case,
    release_reservation_use_case,
    reserve_tickets_use_case,
    transfer_ticket_use_case,
    update_event_status_use_case,
)
from src.service.ticketing.app.query import (
    get_event_use_case,
    list_guest_list_use_case,
    list_my_tickets_use_case,
    validate_ticket_use_case,
)
from src.service.ticketing.driving_adapter.http_controller import guest_list_controller
from src.service.venue_access.app.command import (
    connect_pos_integration_use_case,
    create_spend_rule_use_case,
    disconnect_pos_integration_use_case,
    manage_access_grant_use_case,
    toggle_spend_rule_use_case,
    update_spend_rule_use_case,
)
from src.service.venue_access.app.query import (
    get_venue_revenue_use_case,
    list_access_grants_use_case,
    list_pos_integrations_use_case,
    list_pos_transactions_use_case,
    list_spend_rules_use_case,
)
from src.service.venue_access.driving_adapter.http_controller import (
    pos_controller,
    venue_stream_controller,
)


WIRE_MODULES: list[ModuleType] = [
    role_auth,
    # ticketing
    create_event_with_tiers_use_case,
    update_event_status_use_case,
    get_event_use_case,
    reserve_tickets_use_case,
    issue_tickets_use_case,
    release_reservation_use_case,
    list_my_tickets_use_case,
    validate_ticket_use_case,
    transfer_ticket_use_case,
    cancel_ticket_use_case,
    check_in_ticket_use_case,
    check_in_guest_use_case,
    add_guest_use_case,
    change_guest_status_use_case,
    list_guest_list_use_case,
    guest_list_controller,
    # venue access
    connect_pos_integration_use_case,
    disconnect_pos_integration_use_case,
    create_spend_rule_use_case,
    toggle_spend_rule_use_case,
    update_spend_rule_use_case,
    manage_access_grant_use_case,
    get_venue_revenue_use_case,
    list_access_grants_use_case,
    list_pos_integrations_use_case,
    list_pos_transactions_use_case,
    list_spend_rules_use_case,
    pos_controller,
    venue_stream_controller,
]
