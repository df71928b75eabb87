"""Aggregate statistics over the full job set.

Pure functions: callers pass every job and a timezone-aware `now`; nothing is cached
between calls. "Today" means on or after local midnight of `now`.
"""
from __future__ import annotations
import math
from datetime import datetime
from typing import Any, Dict, Iterable, List

from repair_tracker.constants.statuses import ALL_PRIORITIES, ALL_STATUSES, STATUS_COMPLETED, STATUS_NEW_QUEUE
from repair_tracker.utils.clock import as_utc, day_bounds, start_of_day

SECONDS_PER_DAY = 24 * 60 * 60


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(jobs: Iterable[Dict[str, Any]], now: datetime) -> Dict[str, Any]:
    jobs = list(jobs)
    total = len(jobs)
    breakdown = {status: 0 for status in ALL_STATUSES}
    for job in jobs:
        if job.get('status') in breakdown:
            breakdown[job['status']] += 1
    completed = sum(1 for j in jobs if j.get('status') == STATUS_COMPLETED)
    pending = sum(1 for j in jobs if j.get('status') == STATUS_NEW_QUEUE)

    durations = [
        (as_utc(j['completed_at']) - as_utc(j['created_at'])).total_seconds()
        for j in jobs if j.get('completed_at') and j.get('created_at')
    ]
    avg_days = _round_half_up(sum(durations) / len(durations) / SECONDS_PER_DAY) if durations else 0

    midnight = as_utc(start_of_day(now))
    today = sum(1 for j in jobs if j.get('created_at') and as_utc(j['created_at']) >= midnight)

    return {
        'total': total,
        'completed': completed,
        'pending': pending,
        'in_progress': total - completed - pending,
        'completion_rate': _round_half_up(completed / total * 100) if total else 0,
        'status_breakdown': breakdown,
        'avg_completion_time': avg_days,
        'current_queue': max((j.get('queue_number') or 0 for j in jobs), default=0),
        'today_jobs': today,
    }


def priority_breakdown(jobs: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    counts = {p: 0 for p in ALL_PRIORITIES}
    for job in jobs:
        if job.get('priority') in counts:
            counts[job['priority']] += 1
    return counts


def _within(ts, start: datetime, end: datetime) -> bool:
    return ts is not None and as_utc(start) <= as_utc(ts) < as_utc(end)


def daily_series(jobs: Iterable[Dict[str, Any]], now: datetime, days: int = 7) -> List[Dict[str, Any]]:
    """Per local day, oldest first: jobs created, jobs completed and revenue (actual cost of completions)."""
    jobs = list(jobs)
    series = []
    for back in range(days - 1, -1, -1):
        start, end = day_bounds(now, back)
        done = [j for j in jobs if _within(j.get('completed_at'), start, end)]
        series.append({
            'date': start.date().isoformat(),
            'created': sum(1 for j in jobs if _within(j.get('created_at'), start, end)),
            'completed': len(done),
            'revenue': sum(float(j.get('actual_cost') or 0) for j in done),
        })
    return series


__all__ = ['compute_stats', 'priority_breakdown', 'daily_series']
