import uuid
from abc import ABC, abstractmethod
from typing import Any

from src.modules.persistence.models import ItemStatus, SavedItem


class ItemStoreContract(ABC):
    @abstractmethod
    async def create(
        self, url: str, user_id: str, status: ItemStatus
    ) -> SavedItem: ...

    @abstractmethod
    async def update(
        self, item_id: uuid.UUID, user_id: str, **fields: Any
    ) -> SavedItem | None: ...

    @abstractmethod
    async def find_many(self, user_id: str) -> list[SavedItem]: ...

    @abstractmethod
    async def find_one(
        self, item_id: uuid.UUID, user_id: str
    ) -> SavedItem | None: ...
