import pytest
from factories import FakeClock

from setgrouper.db.storage import MemoryCacheStorage
from setgrouper.services.card_cache import CardCache


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_storage() -> MemoryCacheStorage:
    return MemoryCacheStorage()


@pytest.fixture
def card_cache(memory_storage: MemoryCacheStorage, clock: FakeClock) -> CardCache:
    """Card cache over in-memory storage with a fake clock."""
    return CardCache(memory_storage, retention_count=50, clock=clock)


@pytest.fixture
def sample_deck_list() -> str:
    """Sample Arena-style deck list for testing."""
    return """Deck
1 Evolving Wilds (INR) 279
1 Birds of Paradise (SLD) 176
4 Fire // Ice (MH2) 290
// Lands
20 Forest

Sideboard
2 Delighted Halfling (LTR) 158
1 Sol Ring (CMM) 400 *F*"""
