"""
Try a store operation against a list of table identifiers until one works.

Only the events table needs this: depending on how the table was created,
PostgREST exposes it as "Event", Event or event.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar

from campus_proxy.store import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

EVENT_TABLE_CANDIDATES = ('"Event"', "Event", "event")


class CandidatesExhausted(Exception):
    """Every candidate identifier was tried and each one failed."""

    def __init__(self, failures: list[tuple[str, StoreError]]):
        self.failures = failures
        super().__init__(self.describe())

    def describe(self) -> str:
        return "; ".join(f"{name}: {error.message}" for name, error in self.failures)


def first_success(
    candidates: Sequence[str], operation: Callable[[str], T]
) -> tuple[str, T]:
    """
    Run operation(candidate) in order and return the first result that does
    not raise StoreError, together with the candidate that produced it.

    Raises:
        CandidatesExhausted: if every candidate raised StoreError
    """
    failures: list[tuple[str, StoreError]] = []
    for candidate in candidates:
        try:
            result = operation(candidate)
        except StoreError as exc:
            logger.warning("Table identifier %s failed: %s", candidate, exc.message)
            failures.append((candidate, exc))
            continue
        return candidate, result
    raise CandidatesExhausted(failures)
