"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.venue_access.driven_adapter.model.access_grant_model import AccessGrantModel
from src.service.venue_access.driven_adapter.model.card_link_model import CardLinkModel
from src.service.venue_access.driven_adapter.model.pos_integration_model import (
    PosIntegrationModel,
)
from src.service.venue_access.driven_adapter.model.pos_transaction_model import (
    PosTransactionModel,
)
from src.service.venue_access.driven_adapter.model.spend_rule_model import SpendRuleModel

__all__ = [
    'AccessGrantModel',
    'CardLinkModel',
    'PosIntegrationModel',
    'PosTransactionModel',
    'SpendRuleModel',
]
