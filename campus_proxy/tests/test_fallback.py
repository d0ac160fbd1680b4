import unittest

from campus_proxy.fallback import (
    EVENT_TABLE_CANDIDATES,
    CandidatesExhausted,
    first_success,
)
from campus_proxy.store import StoreError


class FirstSuccessTests(unittest.TestCase):
    def test_candidate_order(self):
        self.assertEqual(EVENT_TABLE_CANDIDATES, ('"Event"', "Event", "event"))

    def test_stops_at_first_success(self):
        tried = []

        def operation(name):
            tried.append(name)
            if name == '"Event"':
                raise StoreError("not found")
            return [name]

        name, result = first_success(EVENT_TABLE_CANDIDATES, operation)
        self.assertEqual(name, "Event")
        self.assertEqual(result, ["Event"])
        self.assertEqual(tried, ['"Event"', "Event"])

    def test_third_candidate(self):
        def operation(name):
            if name != "event":
                raise StoreError(f"{name} missing")
            return "ok"

        self.assertEqual(first_success(EVENT_TABLE_CANDIDATES, operation), ("event", "ok"))

    def test_all_failures_are_reported(self):
        def operation(name):
            raise StoreError(f"{name} missing")

        with self.assertRaises(CandidatesExhausted) as ctx:
            first_success(EVENT_TABLE_CANDIDATES, operation)
        failures = ctx.exception.failures
        self.assertEqual([name for name, _ in failures], list(EVENT_TABLE_CANDIDATES))
        self.assertIn("event: event missing", ctx.exception.describe())

    def test_other_errors_propagate(self):
        def operation(name):
            raise ValueError("bug")

        with self.assertRaises(ValueError):
            first_success(EVENT_TABLE_CANDIDATES, operation)


if __name__ == "__main__":
    unittest.main()
