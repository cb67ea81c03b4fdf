from enum import StrEnum


class TicketStatus(StrEnum):
    ACTIVE = 'active'
    # Only for token-regenerating transfers; transfers here keep the token and stay ACTIVE
    TRANSFERRED = 'transferred'
    REDEEMED = 'redeemed'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'
