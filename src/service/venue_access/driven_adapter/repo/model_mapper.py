"""ORM row → domain entity conversions shared by the venue access repositories."""

from src.service.venue_access.domain.entity.access_grant_entity import AccessGrant
from src.service.venue_access.domain.entity.pos_integration_entity import PosIntegration
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.entity.spend_rule_entity import SpendRule
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.enum.sync_status import SyncStatus
from src.service.venue_access.driven_adapter.model.access_grant_model import AccessGrantModel
from src.service.venue_access.driven_adapter.model.pos_integration_model import (
    PosIntegrationModel,
)
from src.service.venue_access.driven_adapter.model.pos_transaction_model import (
    PosTransactionModel,
)
from src.service.venue_access.driven_adapter.model.spend_rule_model import SpendRuleModel


def pos_transaction_model_to_entity(txn_model: PosTransactionModel) -> PosTransaction:
    return PosTransaction(
        id=txn_model.id,
        provider=PosProvider(txn_model.provider),
        venue_id=txn_model.venue_id,
        provider_txn_id=txn_model.provider_txn_id,
        amount=txn_model.amount,
        currency=txn_model.currency,
        status=PosTransactionStatus(txn_model.status),
        occurred_at=txn_model.occurred_at,
        card_token=txn_model.card_token,
        user_id=txn_model.user_id,
        ingested_at=txn_model.ingested_at,
    )


def spend_rule_model_to_entity(rule_model: SpendRuleModel) -> SpendRule:
    return SpendRule(
        id=rule_model.id,
        venue_id=rule_model.venue_id,
        name=rule_model.name,
        description=rule_model.description,
        threshold=rule_model.threshold,
        window_days=rule_model.window_days,
        live_window_start=rule_model.live_window_start,
        live_window_end=rule_model.live_window_end,
        timezone=rule_model.timezone,
        tier=AccessTier(rule_model.tier),
        access_level=AccessLevel(rule_model.access_level),
        priority=rule_model.priority,
        is_active=rule_model.is_active,
        times_triggered=rule_model.times_triggered,
        last_triggered_at=rule_model.last_triggered_at,
        created_at=rule_model.created_at,
    )


def access_grant_model_to_entity(grant_model: AccessGrantModel) -> AccessGrant:
    return AccessGrant(
        id=grant_model.id,
        user_id=grant_model.user_id,
        venue_id=grant_model.venue_id,
        tier=AccessTier(grant_model.tier),
        access_level=AccessLevel(grant_model.access_level),
        unlocked_at=grant_model.unlocked_at,
        rule_id=grant_model.rule_id,
        granted_by=grant_model.granted_by,
        revoked_at=grant_model.revoked_at,
        revoked_by=grant_model.revoked_by,
    )


def pos_integration_model_to_entity(integration_model: PosIntegrationModel) -> PosIntegration:
    return PosIntegration(
        id=integration_model.id,
        venue_id=integration_model.venue_id,
        provider=PosProvider(integration_model.provider),
        location_id=integration_model.location_id,
        is_active=integration_model.is_active,
        last_sync_at=integration_model.last_sync_at,
        last_sync_status=SyncStatus(integration_model.last_sync_status),
        last_sync_error=integration_model.last_sync_error,
        created_at=integration_model.created_at,
    )
