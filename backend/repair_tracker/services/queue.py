"""Public queue view: the next waiting jobs with a naive ready-time estimate."""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable

from repair_tracker.constants.statuses import QUEUE_STATUSES
from repair_tracker.utils.clock import iso

DEFAULT_SLOT_MINUTES = 30
DEFAULT_VIEW_SIZE = 10


def current_queue_view(jobs: Iterable[Dict[str, Any]], stats: Dict[str, Any], now: datetime,
                       slot_minutes: int = DEFAULT_SLOT_MINUTES, size: int = DEFAULT_VIEW_SIZE) -> Dict[str, Any]:
    """Waiting jobs ordered by queue number, each estimated at `slot_minutes` per position from now.

    `average_wait_time` echoes the slot length; it is not derived from history.
    """
    waiting = sorted(
        (j for j in jobs if j.get('status') in QUEUE_STATUSES),
        key=lambda j: (j.get('queue_number') or 0, j.get('job_id') or ''),
    )[:size]
    entries = []
    for position, job in enumerate(waiting, start=1):
        ready_at = now + timedelta(minutes=slot_minutes * position)
        entries.append({
            'queue_number': job.get('queue_number'),
            'job_id': job.get('job_id'),
            'customer_name': job.get('customer_name'),
            'status': job.get('status'),
            'position': position,
            'estimated_ready_at': iso(ready_at),
            'estimated_time': ready_at.strftime('%H:%M'),
        })
    return {
        'current_queue': stats.get('current_queue', 0),
        'total_today': stats.get('today_jobs', 0),
        'average_wait_time': slot_minutes,
        'last_updated': iso(now),
        'queue_list': entries,
    }


__all__ = ['current_queue_view']
