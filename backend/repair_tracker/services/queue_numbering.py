"""Queue number policies.

`daily`: one past the highest number handed out since local midnight; the first job of a
day gets 1. Derived from persisted jobs on every call, never from a process counter.
`count`: total number of stored jobs plus one.

Neither policy is transactional: two concurrent creations may read the same value.
Treat queue numbers as an arrival-order hint, not a key.
"""
from __future__ import annotations
from datetime import datetime

from repair_tracker.config.settings import QUEUE_POLICY_COUNT, QUEUE_POLICY_DAILY
from repair_tracker.services.store import JobStore
from repair_tracker.utils.clock import start_of_day


class DailyQueueNumbering:
    name = QUEUE_POLICY_DAILY

    def next_number(self, store: JobStore, now: datetime) -> int:
        latest = store.query({'created_from': start_of_day(now)}, order_by='-queue_number', limit=1)
        if not latest:
            return 1
        return int(latest[0].get('queue_number') or 0) + 1


class CountQueueNumbering:
    name = QUEUE_POLICY_COUNT

    def next_number(self, store: JobStore, now: datetime) -> int:
        return store.count() + 1


POLICIES = {
    QUEUE_POLICY_DAILY: DailyQueueNumbering,
    QUEUE_POLICY_COUNT: CountQueueNumbering,
}


def build_numbering(policy: str):
    try:
        return POLICIES[policy]()
    except KeyError:
        raise ValueError(f'Unknown queue number policy {policy!r}; expected one of {sorted(POLICIES)}')

__all__ = ['DailyQueueNumbering', 'CountQueueNumbering', 'build_numbering']
