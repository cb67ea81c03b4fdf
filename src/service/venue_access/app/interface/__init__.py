"""Venue access ports"""

from src.service.venue_access.app.interface.i_access_grant_repo import IAccessGrantRepo
from src.service.venue_access.app.interface.i_card_link_repo import ICardLinkRepo
from src.service.venue_access.app.interface.i_pos_integration_repo import IPosIntegrationRepo
from src.service.venue_access.app.interface.i_pos_payload_normalizer import IPosPayloadNormalizer
from src.service.venue_access.app.interface.i_pos_transaction_fetcher import (
    IPosTransactionFetcher,
)
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo
from src.service.venue_access.app.interface.i_spend_rule_repo import ISpendRuleRepo

__all__ = [
    'IAccessGrantRepo',
    'ICardLinkRepo',
    'IPosIntegrationRepo',
    'IPosPayloadNormalizer',
    'IPosTransactionFetcher',
    'IPosTransactionRepo',
    'ISpendRuleRepo',
]
