"""Process-local repository adapters.

Stored values are immutable snapshots, so nothing a caller does to a
returned aggregate leaks back into storage until it is saved again.
"""

from src.infrastructure.memory.fiscal import InMemoryFiscalConfigurationRepository
from src.infrastructure.memory.repository import InMemoryRepository

__all__ = ["InMemoryFiscalConfigurationRepository", "InMemoryRepository"]
