from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.venue_access.app.interface.i_card_link_repo import ICardLinkRepo
from src.service.venue_access.driven_adapter.model.card_link_model import CardLinkModel


class CardLinkRepoImpl(ICardLinkRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_user_id(self, *, card_token: str) -> Optional[int]:
        async with self.session_factory() as session:
            return (
                await session.execute(
                    select(CardLinkModel.user_id).where(CardLinkModel.card_token == card_token)
                )
            ).scalar_one_or_none()

    @Logger.io
    async def upsert(self, *, card_token: str, user_id: int) -> None:
        async with self.session_factory() as session:
            if await self._relink(session=session, card_token=card_token, user_id=user_id):
                await session.commit()
                return

            session.add(CardLinkModel(card_token=card_token, user_id=user_id))
            try:
                await session.commit()
                return
            except IntegrityError:
                # Linked concurrently between the UPDATE and the INSERT
                await session.rollback()

        async with self.session_factory() as session:
            await self._relink(session=session, card_token=card_token, user_id=user_id)
            await session.commit()

    @staticmethod
    async def _relink(*, session: AsyncSession, card_token: str, user_id: int) -> bool:
        result = await session.execute(
            update(CardLinkModel)
            .where(CardLinkModel.card_token == card_token)
            .values(user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
