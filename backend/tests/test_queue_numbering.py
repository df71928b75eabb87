from datetime import datetime, timedelta, timezone
import pytest
from repair_tracker.services.queue_numbering import DailyQueueNumbering, CountQueueNumbering, build_numbering
from repair_tracker.services.store import MemoryJobStore
from tests.test_utils_seed import make_job

BKK = timezone(timedelta(hours=7))


def test_daily_policy_starts_at_one_on_empty_store():
    assert DailyQueueNumbering().next_number(MemoryJobStore(), datetime(2026, 10, 19, 9, 0, tzinfo=BKK)) == 1


def test_daily_policy_resets_at_local_midnight():
    yesterday = datetime(2026, 10, 18, 16, 0, tzinfo=BKK)
    store = MemoryJobStore([
        make_job('Y1', queue_number=1, created_at=yesterday),
        make_job('Y2', queue_number=2, created_at=yesterday + timedelta(hours=1)),
    ])
    today = datetime(2026, 10, 19, 8, 0, tzinfo=BKK)
    numbering = DailyQueueNumbering()
    assert numbering.next_number(store, today) == 1
    store.put('T1', make_job('T1', queue_number=1, created_at=today))
    assert numbering.next_number(store, today + timedelta(minutes=5)) == 2


def test_count_policy_counts_everything():
    store = MemoryJobStore([make_job('C1', queue_number=1), make_job('C2', queue_number=1)])
    assert CountQueueNumbering().next_number(store, datetime.now(timezone.utc)) == 3


def test_build_numbering_rejects_unknown_policy():
    assert build_numbering('count').name == 'count'
    with pytest.raises(ValueError):
        build_numbering('global')


def test_demo_seed_job_continues_the_daily_sequence():
    from repair_tracker.seeds.demo_jobs import demo_jobs
    now = datetime(2026, 10, 19, 10, 0, tzinfo=BKK)
    store = MemoryJobStore(demo_jobs(now))
    [job] = store.all()
    assert job['status'] == 'RECEIVED_AT_DROP'
    assert job['job_id'].startswith('261019')
    assert [h['status'] for h in job['history']] == ['NEW_QUEUE', 'RECEIVED_AT_DROP']
    assert DailyQueueNumbering().next_number(store, now) == 2
