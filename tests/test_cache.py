"""TTL cache expiry and the catalog/overlay cache."""

from leaguetracker.models.task import Task
from leaguetracker.services.cache import TaskCache, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache: TTLCache[str, int] = TTLCache(60, clock=clock)
    cache.set("a", 1)

    clock.advance(59)
    assert cache.get("a") == 1
    assert "a" in cache

    clock.advance(1)
    assert cache.get("a") is None
    assert "a" not in cache
    assert cache.peek("a") == 1
    assert cache.age("a") == 60


def test_invalidate_one_or_all():
    cache: TTLCache[str, int] = TTLCache(60)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.invalidate("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.invalidate()
    assert len(cache) == 0


def test_catalog_reads_are_idempotent_within_ttl():
    clock = FakeClock()
    cache = TaskCache(catalog_ttl=300, player_ttl=300, clock=clock)
    tasks = [Task(id="1", description="Do it", points=10)]
    cache.set_catalog(tasks)

    first = cache.get_catalog()
    clock.advance(120)
    second = cache.get_catalog()

    assert first is second
    assert cache.catalog_fetched_at is not None

    clock.advance(180)
    assert cache.get_catalog() is None


def test_invalidate_catalog_clears_fetch_time():
    cache = TaskCache()
    cache.set_catalog([])
    cache.invalidate_catalog()

    assert cache.get_catalog() is None
    assert cache.catalog_fetched_at is None


def test_player_overlays_are_per_player():
    cache = TaskCache()
    cache.set_player_overlay("Alice", [])
    cache.set_player_overlay("Bob", [])

    cache.invalidate_player("Alice")
    assert cache.get_player_overlay("Alice") is None
    assert cache.get_player_overlay("Bob") == []

    cache.invalidate_player()
    assert cache.get_player_overlay("Bob") is None
