import uuid


class ExtractionError(Exception):
    """Raised when the Firecrawl API cannot produce a usable result."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ItemNotFoundError(Exception):
    """Raised when an item does not exist or belongs to another user."""

    def __init__(self, item_id: uuid.UUID) -> None:
        super().__init__(f"Item {item_id} not found")
        self.item_id = item_id
