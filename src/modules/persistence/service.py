import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.modules.persistence.contracts import ItemStoreContract
from src.modules.persistence.models import ItemStatus, SavedItem

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "url", "user_id", "created_at"})


class PersistenceService(ItemStoreContract):
    """SQLAlchemy-backed store for saved items, scoped by owning user."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, url: str, user_id: str, status: ItemStatus) -> SavedItem:
        async with self._session_factory() as session:
            item = SavedItem(url=url, user_id=user_id, status=status, tags=[])
            session.add(item)
            await session.commit()
            await session.refresh(item)
            logger.debug("Created item %s (%s) for %s", item.id, status.value, url)
            return item

    async def update(
        self, item_id: uuid.UUID, user_id: str, **fields: Any
    ) -> SavedItem | None:
        locked = IMMUTABLE_FIELDS.intersection(fields)
        if locked:
            raise ValueError(f"Cannot update immutable fields: {sorted(locked)}")

        async with self._session_factory() as session:
            item = await session.get(SavedItem, item_id)
            if not item or item.user_id != user_id:
                return None
            for name, value in fields.items():
                setattr(item, name, value)
            await session.commit()
            await session.refresh(item)
            return item

    async def find_many(self, user_id: str) -> list[SavedItem]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SavedItem)
                .where(SavedItem.user_id == user_id)
                .order_by(SavedItem.created_at.desc())
            )
            return list(result.scalars().all())

    async def find_one(self, item_id: uuid.UUID, user_id: str) -> SavedItem | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SavedItem).where(
                    SavedItem.id == item_id, SavedItem.user_id == user_id
                )
            )
            return result.scalar_one_or_none()
