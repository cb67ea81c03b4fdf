"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from src.service.shared_kernel.driven_adapter.system_clock import SystemClock
from src.service.shared_kernel.driving_adapter.auth.jwt_auth import JwtAuth
from src.service.ticketing.app.command.expire_reservations_use_case import (
    ExpireReservationsUseCase,
)
from src.service.ticketing.app.command.reconcile_no_shows_use_case import ReconcileNoShowsUseCase
from src.service.ticketing.driven_adapter.repo.check_in_repo_impl import CheckInRepoImpl
from src.service.ticketing.driven_adapter.repo.event_repo_impl import EventRepoImpl
from src.service.ticketing.driven_adapter.repo.guest_list_repo_impl import GuestListRepoImpl
from src.service.ticketing.driven_adapter.repo.inventory_ledger_repo_impl import (
    InventoryLedgerRepoImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
from src.service.venue_access.app.command.evaluate_spend_rules_use_case import (
    EvaluateSpendRulesUseCase,
)
from src.service.venue_access.app.command.ingest_pos_transaction_use_case import (
    IngestPosTransactionUseCase,
)
from src.service.venue_access.app.command.match_card_transactions_use_case import (
    MatchCardTransactionsUseCase,
)
from src.service.venue_access.app.command.sync_pos_transactions_use_case import (
    SyncPosTransactionsUseCase,
)
from src.service.venue_access.driven_adapter.pos.http_pos_transaction_fetcher import (
    HttpPosTransactionFetcher,
)
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


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine is created lazily per event loop)
    database = providers.Singleton(Database)

    # Infrastructure services
    clock = providers.Singleton(SystemClock)
    jwt_auth = providers.Singleton(JwtAuth)

    # Venue-scoped domain events (SSE stream for door staff)
    event_broadcaster = providers.Singleton(InMemoryEventBroadcasterImpl)

    # Ticketing repositories (stateless - use session_factory per-request)
    event_repo = providers.Singleton(EventRepoImpl, session_factory=database.provided.session)
    inventory_ledger_repo = providers.Singleton(
        InventoryLedgerRepoImpl, session_factory=database.provided.session
    )
    ticket_repo = providers.Singleton(TicketRepoImpl, session_factory=database.provided.session)
    check_in_repo = providers.Singleton(
        CheckInRepoImpl, session_factory=database.provided.session
    )
    guest_list_repo = providers.Singleton(
        GuestListRepoImpl, session_factory=database.provided.session
    )

    # Venue access repositories
    pos_transaction_repo = providers.Singleton(
        PosTransactionRepoImpl, session_factory=database.provided.session
    )
    card_link_repo = providers.Singleton(
        CardLinkRepoImpl, session_factory=database.provided.session
    )
    spend_rule_repo = providers.Singleton(
        SpendRuleRepoImpl, session_factory=database.provided.session
    )
    access_grant_repo = providers.Singleton(
        AccessGrantRepoImpl, session_factory=database.provided.session
    )
    pos_integration_repo = providers.Singleton(
        PosIntegrationRepoImpl, session_factory=database.provided.session
    )

    # POS adapters, keyed by PosProvider value
    pos_payload_normalizers = providers.Dict(
        square=providers.Singleton(SquarePayloadNormalizer),
        toast=providers.Singleton(ToastPayloadNormalizer),
    )
    pos_transaction_fetcher = providers.Selector(
        providers.Callable(
            lambda use_stub: 'stub' if use_stub else 'http',
            config_service.provided.POS_USE_STUB_FETCHER,
        ),
        stub=providers.Singleton(StubPosTransactionFetcher),
        http=providers.Singleton(HttpPosTransactionFetcher, normalizers=pos_payload_normalizers),
    )

    # Use cases shared by background jobs and controllers
    expire_reservations_use_case = providers.Singleton(
        ExpireReservationsUseCase, inventory_ledger_repo=inventory_ledger_repo, clock=clock
    )
    reconcile_no_shows_use_case = providers.Singleton(
        ReconcileNoShowsUseCase, event_repo=event_repo, guest_list_repo=guest_list_repo, clock=clock
    )
    evaluate_spend_rules_use_case = providers.Singleton(
        EvaluateSpendRulesUseCase,
        spend_rule_repo=spend_rule_repo,
        access_grant_repo=access_grant_repo,
        pos_transaction_repo=pos_transaction_repo,
        event_broadcaster=event_broadcaster,
        clock=clock,
    )
    ingest_pos_transaction_use_case = providers.Singleton(
        IngestPosTransactionUseCase,
        pos_transaction_repo=pos_transaction_repo,
        card_link_repo=card_link_repo,
        evaluate_spend_rules=evaluate_spend_rules_use_case,
        normalizers=pos_payload_normalizers,
        clock=clock,
    )
    sync_pos_transactions_use_case = providers.Singleton(
        SyncPosTransactionsUseCase,
        pos_integration_repo=pos_integration_repo,
        pos_transaction_fetcher=pos_transaction_fetcher,
        ingest_pos_transaction=ingest_pos_transaction_use_case,
        clock=clock,
    )
    match_card_transactions_use_case = providers.Singleton(
        MatchCardTransactionsUseCase,
        card_link_repo=card_link_repo,
        pos_transaction_repo=pos_transaction_repo,
        evaluate_spend_rules=evaluate_spend_rules_use_case,
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.database()


def cleanup() -> None:
    container.reset_singletons()
