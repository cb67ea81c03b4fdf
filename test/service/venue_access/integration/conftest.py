"""Real repositories over the per-test SQLite database, wired by hand."""

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.venue_access.app.command.connect_pos_integration_use_case import (
    ConnectPosIntegrationUseCase,
)
from src.service.venue_access.app.command.disconnect_pos_integration_use_case import (
    DisconnectPosIntegrationUseCase,
)
from src.service.venue_access.app.command.evaluate_spend_rules_use_case import (
    EvaluateSpendRulesUseCase,
)
from src.service.venue_access.app.command.ingest_pos_transaction_use_case import (
    IngestPosTransactionUseCase,
)
from src.service.venue_access.app.command.manage_access_grant_use_case import (
    ManageAccessGrantUseCase,
)
from src.service.venue_access.app.command.match_card_transactions_use_case import (
    MatchCardTransactionsUseCase,
)
from src.service.venue_access.app.command.sync_pos_transactions_use_case import (
    SyncPosTransactionsUseCase,
)
from src.service.venue_access.app.command.update_spend_rule_use_case import (
    UpdateSpendRuleUseCase,
)
from src.service.venue_access.app.query.list_pos_transactions_use_case import (
    ListPosTransactionsUseCase,
)
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.driven_adapter.pos.square_payload_normalizer import (
    SquarePayloadNormalizer,
)
from src.service.venue_access.driven_adapter.pos.stub_pos_transaction_fetcher import (
    StubPosTransactionFetcher,
)
from src.service.venue_access.driven_adapter.pos.toast_payload_normalizer import (
    ToastPayloadNormalizer,
)
from src.service.venue_access.driven_adapter.repo.access_grant_repo_impl import (
    AccessGrantRepoImpl,
)
from src.service.venue_access.driven_adapter.repo.card_link_repo_impl import CardLinkRepoImpl
from src.service.venue_access.driven_adapter.repo.pos_integration_repo_impl import (
    PosIntegrationRepoImpl,
)
from src.service.venue_access.driven_adapter.repo.pos_transaction_repo_impl import (
    PosTransactionRepoImpl,
)
from src.service.venue_access.driven_adapter.repo.spend_rule_repo_impl import SpendRuleRepoImpl
from test.fixed_clock import FixedClock


@pytest.fixture
def pos_transaction_repo(database: Database) -> PosTransactionRepoImpl:
    return PosTransactionRepoImpl(session_factory=database.session)


@pytest.fixture
def card_link_repo(database: Database) -> CardLinkRepoImpl:
    return CardLinkRepoImpl(session_factory=database.session)


@pytest.fixture
def spend_rule_repo(database: Database) -> SpendRuleRepoImpl:
    return SpendRuleRepoImpl(session_factory=database.session)


@pytest.fixture
def access_grant_repo(database: Database) -> AccessGrantRepoImpl:
    return AccessGrantRepoImpl(session_factory=database.session)


@pytest.fixture
def pos_integration_repo(database: Database) -> PosIntegrationRepoImpl:
    return PosIntegrationRepoImpl(session_factory=database.session)


@pytest.fixture
def broadcaster() -> InMemoryEventBroadcasterImpl:
    return InMemoryEventBroadcasterImpl()


@pytest.fixture
def stub_fetcher() -> StubPosTransactionFetcher:
    return StubPosTransactionFetcher()


@pytest.fixture
def evaluate_spend_rules(
    spend_rule_repo: SpendRuleRepoImpl,
    access_grant_repo: AccessGrantRepoImpl,
    pos_transaction_repo: PosTransactionRepoImpl,
    broadcaster: InMemoryEventBroadcasterImpl,
    clock: FixedClock,
) -> EvaluateSpendRulesUseCase:
    return EvaluateSpendRulesUseCase(
        spend_rule_repo=spend_rule_repo,
        access_grant_repo=access_grant_repo,
        pos_transaction_repo=pos_transaction_repo,
        event_broadcaster=broadcaster,
        clock=clock,
    )


@pytest.fixture
def ingest(
    pos_transaction_repo: PosTransactionRepoImpl,
    card_link_repo: CardLinkRepoImpl,
    evaluate_spend_rules: EvaluateSpendRulesUseCase,
    clock: FixedClock,
) -> IngestPosTransactionUseCase:
    return IngestPosTransactionUseCase(
        pos_transaction_repo=pos_transaction_repo,
        card_link_repo=card_link_repo,
        evaluate_spend_rules=evaluate_spend_rules,
        normalizers={
            PosProvider.SQUARE: SquarePayloadNormalizer(),
            PosProvider.TOAST: ToastPayloadNormalizer(),
        },
        clock=clock,
    )


@pytest.fixture
def sync(
    pos_integration_repo: PosIntegrationRepoImpl,
    stub_fetcher: StubPosTransactionFetcher,
    ingest: IngestPosTransactionUseCase,
    clock: FixedClock,
) -> SyncPosTransactionsUseCase:
    return SyncPosTransactionsUseCase(
        pos_integration_repo=pos_integration_repo,
        pos_transaction_fetcher=stub_fetcher,
        ingest_pos_transaction=ingest,
        clock=clock,
    )


@pytest.fixture
def match_card(
    card_link_repo: CardLinkRepoImpl,
    pos_transaction_repo: PosTransactionRepoImpl,
    evaluate_spend_rules: EvaluateSpendRulesUseCase,
) -> MatchCardTransactionsUseCase:
    return MatchCardTransactionsUseCase(
        card_link_repo=card_link_repo,
        pos_transaction_repo=pos_transaction_repo,
        evaluate_spend_rules=evaluate_spend_rules,
    )


@pytest.fixture
def manage_access_grant(
    access_grant_repo: AccessGrantRepoImpl,
    broadcaster: InMemoryEventBroadcasterImpl,
    clock: FixedClock,
) -> ManageAccessGrantUseCase:
    return ManageAccessGrantUseCase(
        access_grant_repo=access_grant_repo, event_broadcaster=broadcaster, clock=clock
    )


@pytest.fixture
def connect_pos_integration(
    pos_integration_repo: PosIntegrationRepoImpl,
) -> ConnectPosIntegrationUseCase:
    return ConnectPosIntegrationUseCase(pos_integration_repo=pos_integration_repo)


@pytest.fixture
def disconnect_pos_integration(
    pos_integration_repo: PosIntegrationRepoImpl,
) -> DisconnectPosIntegrationUseCase:
    return DisconnectPosIntegrationUseCase(pos_integration_repo=pos_integration_repo)


@pytest.fixture
def list_pos_transactions(
    pos_transaction_repo: PosTransactionRepoImpl,
) -> ListPosTransactionsUseCase:
    return ListPosTransactionsUseCase(pos_transaction_repo=pos_transaction_repo)


@pytest.fixture
def update_spend_rule(spend_rule_repo: SpendRuleRepoImpl) -> UpdateSpendRuleUseCase:
    return UpdateSpendRuleUseCase(spend_rule_repo=spend_rule_repo)
