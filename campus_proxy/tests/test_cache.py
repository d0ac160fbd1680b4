import unittest

from campus_proxy.cache import TableCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TableCacheTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = TableCache(["professors", "events"], ttl_seconds=300, clock=self.clock)
        self.fetches = 0

    def _fetch(self):
        self.fetches += 1
        return [{"id": self.fetches}]

    def test_read_within_ttl_uses_cache(self):
        first = self.cache.read("professors", self._fetch)
        self.clock.now += 299
        second = self.cache.read("professors", self._fetch)
        self.assertEqual(self.fetches, 1)
        self.assertIs(first, second)

    def test_read_after_ttl_fetches_once(self):
        self.cache.read("professors", self._fetch)
        self.clock.now += 300
        data = self.cache.read("professors", self._fetch)
        self.assertEqual(self.fetches, 2)
        self.assertEqual(data, [{"id": 2}])
        self.cache.read("professors", self._fetch)
        self.assertEqual(self.fetches, 2)

    def test_empty_result_is_cached(self):
        self.cache.read("events", lambda: [])
        self.assertEqual(self.cache.get("events"), [])

    def test_invalidate_resets_slot(self):
        self.cache.read("professors", self._fetch)
        self.cache.invalidate("professors")
        entry = self.cache.entry("professors")
        self.assertIsNone(entry.data)
        self.assertEqual(entry.timestamp, 0.0)
        self.cache.read("professors", self._fetch)
        self.assertEqual(self.fetches, 2)

    def test_clear_all_resets_every_slot(self):
        self.cache.set("professors", [1])
        self.cache.set("events", [2])
        self.cache.clear_all()
        self.assertIsNone(self.cache.get("professors"))
        self.assertIsNone(self.cache.get("events"))

    def test_fetch_error_leaves_slot_empty(self):
        def failing():
            raise RuntimeError("upstream down")

        with self.assertRaises(RuntimeError):
            self.cache.read("professors", failing)
        self.assertIsNone(self.cache.entry("professors").data)

    def test_unknown_slot(self):
        with self.assertRaises(KeyError):
            self.cache.get("students")
        with self.assertRaises(KeyError):
            self.cache.set("students", [])


if __name__ == "__main__":
    unittest.main()
