"""Generic in-memory repository keyed by a string identifier.

This module provides the storage primitive the concrete adapters build on.
Values should be immutable; the repository hands out the stored objects
themselves.
"""

from collections.abc import Callable

from loguru import logger


class InMemoryRepository[T]:
    """Base repository class keeping entities in a dictionary.

    Initialize the repository with the name used in log messages.

    Args:
        entity_name: Human-readable name of the stored entity type.

    Example:
        class SnapshotRepository(InMemoryRepository[Snapshot]):
            def __init__(self) -> None:
                super().__init__("Snapshot")
    """

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        self._items: dict[str, T] = {}
        logger.debug("Initialized in-memory repository for {}", entity_name)

    async def get(self, key: str) -> T | None:
        """Retrieve an entity by key.

        Args:
            key: The identifier of the entity to retrieve.

        Returns:
            T | None: The entity if found, None otherwise.
        """
        logger.debug("Fetching {} by key: {}", self.entity_name, key)

        item = self._items.get(key)
        if item is None:
            logger.debug("{} not found with key: {}", self.entity_name, key)
        return item

    async def add(self, key: str, item: T) -> bool:
        """Store a new entity.

        Returns:
            bool: True if stored, False if the key was already taken.
        """
        if key in self._items:
            logger.debug("{} already exists with key: {}", self.entity_name, key)
            return False

        self._items[key] = item
        logger.info("Created {} with key: {}", self.entity_name, key)
        return True

    async def replace(self, key: str, item: T) -> bool:
        """Overwrite an existing entity.

        Returns:
            bool: True if replaced, False if no entity had that key.
        """
        if key not in self._items:
            logger.debug(
                "{} not found for update - key: {}", self.entity_name, key
            )
            return False

        self._items[key] = item
        logger.info("Updated {} with key: {}", self.entity_name, key)
        return True

    async def delete(self, key: str) -> bool:
        """Delete an entity by key.

        Returns:
            bool: True if the entity was deleted, False if not found.
        """
        deleted = self._items.pop(key, None) is not None

        if deleted:
            logger.info("Deleted {} with key: {}", self.entity_name, key)
        else:
            logger.debug(
                "{} not found for deletion - key: {}", self.entity_name, key
            )

        return deleted

    async def exists(self, key: str) -> bool:
        return key in self._items

    async def count(self) -> int:
        return len(self._items)

    async def filter_by(self, predicate: Callable[[T], bool]) -> list[T]:
        """Return every entity for which ``predicate`` holds, in insertion order."""
        items = [item for item in self._items.values() if predicate(item)]

        logger.debug(
            "Filtered {} - found {} of {} entities",
            self.entity_name,
            len(items),
            len(self._items),
        )

        return items
