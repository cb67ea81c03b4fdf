from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.command.evaluate_spend_rules_use_case import (
    EvaluateSpendRulesUseCase,
)
from src.service.venue_access.app.interface.i_card_link_repo import ICardLinkRepo
from src.service.venue_access.app.interface.i_pos_transaction_repo import IPosTransactionRepo


class MatchCardTransactionsUseCase:
    """
    Retroactive match: a card gets linked to a user after it was already used.

    Earlier unmatched transactions with that token are attributed to the user
    and every venue they touched is evaluated again.
    """

    def __init__(
        self,
        *,
        card_link_repo: ICardLinkRepo,
        pos_transaction_repo: IPosTransactionRepo,
        evaluate_spend_rules: EvaluateSpendRulesUseCase,
    ) -> None:
        self.card_link_repo = card_link_repo
        self.pos_transaction_repo = pos_transaction_repo
        self.evaluate_spend_rules = evaluate_spend_rules

    @Logger.io
    async def execute(self, *, card_token: str, user_id: int) -> int:
        await self.card_link_repo.upsert(card_token=card_token, user_id=user_id)
        matched_per_venue = await self.pos_transaction_repo.assign_user_by_card_token(
            card_token=card_token, user_id=user_id
        )

        for venue_id in sorted(matched_per_venue):
            await self.evaluate_spend_rules.execute(user_id=user_id, venue_id=venue_id)

        matched = sum(matched_per_venue.values())
        Logger.base.info(
            f'🔗 [CARD_MATCH] User {user_id}: {matched} transactions matched '
            f'across {len(matched_per_venue)} venues'
        )
        return matched
