from landmarks.client.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=300, clock=clock)
    cache.set(1, "detail")
    clock.now = 299.9
    assert cache.get(1) == "detail"
    clock.now = 300.0
    assert cache.get(1) is None
    assert len(cache) == 0


def test_least_recently_used_entry_evicted():
    cache = TTLCache(max_size=2, clock=FakeClock())
    cache.set(1, "a")
    cache.set(2, "b")
    cache.get(1)
    cache.set(3, "c")
    assert cache.get(2) is None
    assert cache.get(1) == "a"
    assert cache.get(3) == "c"
