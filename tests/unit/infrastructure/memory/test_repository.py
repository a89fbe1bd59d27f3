"""Unit tests for the generic in-memory repository."""

import pytest
import pytest_check
from pytest_mock import MockerFixture

from src.infrastructure.memory.repository import InMemoryRepository


@pytest.fixture
def repository() -> InMemoryRepository[str]:
    return InMemoryRepository("Note")


@pytest.mark.unit
@pytest.mark.asyncio
class TestInMemoryRepository:
    """Test cases for InMemoryRepository CRUD operations."""

    async def test_init(self, repository: InMemoryRepository[str]) -> None:
        assert repository.entity_name == "Note"
        assert await repository.count() == 0

    async def test_add_and_get(self, repository: InMemoryRepository[str]) -> None:
        added = await repository.add("a", "first")

        with pytest_check.check:
            assert added is True
        with pytest_check.check:
            assert await repository.get("a") == "first"
        with pytest_check.check:
            assert await repository.exists("a") is True

    async def test_get_missing(self, repository: InMemoryRepository[str]) -> None:
        assert await repository.get("missing") is None

    async def test_add_existing_key(self, repository: InMemoryRepository[str]) -> None:
        await repository.add("a", "first")

        added = await repository.add("a", "second")

        assert added is False
        assert await repository.get("a") == "first"

    async def test_replace(self, repository: InMemoryRepository[str]) -> None:
        await repository.add("a", "first")

        assert await repository.replace("a", "second") is True
        assert await repository.get("a") == "second"

    async def test_replace_missing(self, repository: InMemoryRepository[str]) -> None:
        assert await repository.replace("a", "second") is False
        assert await repository.exists("a") is False

    async def test_delete(self, repository: InMemoryRepository[str]) -> None:
        await repository.add("a", "first")

        assert await repository.delete("a") is True
        assert await repository.delete("a") is False
        assert await repository.count() == 0

    async def test_filter_by_keeps_insertion_order(
        self, repository: InMemoryRepository[str]
    ) -> None:
        for key, value in [("a", "apple"), ("b", "banana"), ("c", "avocado")]:
            await repository.add(key, value)

        result = await repository.filter_by(lambda value: value.startswith("a"))

        assert result == ["apple", "avocado"]

    async def test_logs_creation(
        self, repository: InMemoryRepository[str], mocker: MockerFixture
    ) -> None:
        mock_logger = mocker.patch("src.infrastructure.memory.repository.logger")

        await repository.add("a", "first")

        mock_logger.info.assert_called_once_with(
            "Created {} with key: {}", "Note", "a"
        )
