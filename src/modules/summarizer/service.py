import logging
import uuid
from collections.abc import AsyncIterator

from src.errors import ItemNotFoundError
from src.modules.inference.prompts import TAG_SYSTEM_PROMPT, TAG_USER_PROMPT_TEMPLATE
from src.modules.inference.service import InferenceService
from src.modules.persistence.contracts import ItemStoreContract
from src.modules.persistence.models import SavedItem

logger = logging.getLogger(__name__)

MAX_TAGS = 5


def parse_tags(text: str) -> list[str]:
    """Turn a comma-separated completion into at most MAX_TAGS clean tags."""
    seen: set[str] = set()
    tags: list[str] = []
    for raw in text.split(","):
        tag = raw.strip().lower()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
    return tags[:MAX_TAGS]


class SummaryService:
    def __init__(self, store: ItemStoreContract, inference: InferenceService) -> None:
        self._store = store
        self._inference = inference

    async def _get_owned(self, item_id: uuid.UUID, user_id: str) -> SavedItem:
        item = await self._store.find_one(item_id, user_id)
        if not item:
            raise ItemNotFoundError(item_id)
        return item

    async def open_summary_stream(
        self, item_id: uuid.UUID, user_id: str
    ) -> AsyncIterator[str]:
        """Validate the item and return its streamed summary.

        Lookup errors are raised here, before any chunk is produced.
        """
        item = await self._get_owned(item_id, user_id)
        if not item.content:
            raise ValueError("No content available to summarize.")
        return self._inference.stream_summary(item.content)

    async def save_summary_and_generate_tags(
        self, item_id: uuid.UUID, user_id: str, summary: str
    ) -> SavedItem:
        await self._get_owned(item_id, user_id)

        text = await self._inference.generate_text(
            TAG_SYSTEM_PROMPT, TAG_USER_PROMPT_TEMPLATE.format(summary=summary)
        )
        tags = parse_tags(text)
        logger.info("Generated %d tags for item %s", len(tags), item_id)

        item = await self._store.update(item_id, user_id, summary=summary, tags=tags)
        if not item:
            raise ItemNotFoundError(item_id)
        return item
