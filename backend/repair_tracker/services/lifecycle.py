"""Job lifecycle: creation, status updates, lookups and listing.

Every function takes the store explicitly; nothing here holds module level state.
Status changes append to the job's history and never rewrite earlier entries.
`completed_at` is stamped the first time a job enters COMPLETED and kept on re-entry.
"""
from __future__ import annotations
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from repair_tracker.constants.statuses import (
    ALL_STATUSES, DEFAULT_WARRANTY_DAYS, STATUS_COMPLETED, STATUS_NEW_QUEUE,
)
from repair_tracker.errors import NotFoundError, StoreUnavailable
from repair_tracker.schemas import JobCreateInput, JobFilters, StatusUpdateInput
from repair_tracker.services.store import JobStore
from repair_tracker.utils.clock import as_utc, utcnow
from repair_tracker.utils.fsm import TransitionValidator
from repair_tracker.utils.validation import validate_status

JOB_ID_ATTEMPTS = 5
SYSTEM_ACTOR_ID = 'system'
SYSTEM_ACTOR_NAME = 'System'
DEFAULT_UPDATER_NAME = 'System User'
SEARCH_FIELDS = ('job_id', 'customer_name', 'customer_phone', 'device_model')


@dataclass
class JobPage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def generate_job_id(now: datetime, rng=random) -> str:
    """YYMMDD of the local day followed by four random digits."""
    return f"{now:%y%m%d}{rng.randrange(10000):04d}"


def _unused_job_id(store: JobStore, now: datetime, rng) -> str:
    # A same-day collision is possible; retry a few times before giving up.
    for _ in range(JOB_ID_ATTEMPTS):
        job_id = generate_job_id(now, rng)
        if store.get(job_id) is None:
            return job_id
    raise StoreUnavailable('Could not allocate a free job id')


def history_entry(status: str, updated_by: str, updated_by_name: str, timestamp: datetime,
                  note: str, location: str) -> Dict[str, Any]:
    return {
        'status': status,
        'updated_by': updated_by,
        'updated_by_name': updated_by_name,
        'timestamp': as_utc(timestamp),
        'note': note,
        'location': location,
    }


def create_job(store: JobStore, data: JobCreateInput, numbering, now: datetime, rng=random) -> Dict[str, Any]:
    """Persist a new NEW_QUEUE job and return the stored record."""
    job_id = _unused_job_id(store, now, rng)
    queue_number = numbering.next_number(store, now)
    ts = as_utc(now)
    record = {
        'job_id': job_id,
        'customer_name': data.customer_name,
        'customer_phone': data.customer_phone,
        'customer_email': data.customer_email,
        'device_model': data.device_model,
        'device_serial': data.device_serial,
        'problem_description': data.problem_description,
        'problem_category': data.problem_category,
        'status': STATUS_NEW_QUEUE,
        'priority': data.priority,
        'queue_number': queue_number,
        'estimated_cost': 0.0,
        'actual_cost': 0.0,
        'drop_app_id': data.drop_app_id,
        'asp_id': None,
        'assigned_technician': None,
        'notes': data.notes,
        'source': data.source,
        'warranty_period_days': DEFAULT_WARRANTY_DAYS,
        'history': [history_entry(STATUS_NEW_QUEUE, SYSTEM_ACTOR_ID, SYSTEM_ACTOR_NAME, ts, 'Job created', data.source)],
        'is_active': True,
        'created_at': ts,
        'updated_at': ts,
        'completed_at': None,
    }
    store.put(job_id, record)
    return record


def get_job(store: JobStore, job_id: str) -> Dict[str, Any]:
    record = store.get(job_id)
    if record is None:
        raise NotFoundError(job_id)
    return record


def update_status(store: JobStore, job_id: str, data: StatusUpdateInput, actor=None, now: Optional[datetime] = None,
                  transitions: Optional[TransitionValidator] = None) -> Dict[str, Any]:
    """Apply a status update and append one history entry.

    An entry is appended on every call, including when the status is unchanged.
    `actor` needs `subject_id` and `display_name`; None records the system user.
    """
    current = get_job(store, job_id)
    new_status = validate_status(data.status, ALL_STATUSES)
    old_status = current['status']
    if transitions is not None and new_status != old_status:
        transitions.assert_can_transition(old_status, new_status)
    ts = as_utc(now or utcnow())
    entry = history_entry(
        new_status,
        actor.subject_id if actor else SYSTEM_ACTOR_ID,
        (actor.display_name if actor else None) or DEFAULT_UPDATER_NAME,
        ts,
        data.note or f'Status changed from {old_status} to {new_status}',
        data.location,
    )
    updates: Dict[str, Any] = {
        'status': new_status,
        'updated_at': ts,
        'history': list(current.get('history') or []) + [entry],
    }
    if new_status == STATUS_COMPLETED and current.get('completed_at') is None:
        updates['completed_at'] = ts
    for key in ('estimated_cost', 'actual_cost', 'asp_id', 'assigned_technician'):
        value = getattr(data, key)
        if value is not None:
            updates[key] = value
    store.update(job_id, updates)
    return {'job_id': job_id, 'old_status': old_status, 'new_status': new_status, 'updated_at': ts}


def _matches_search(record: Dict[str, Any], needle: str) -> bool:
    needle = needle.lower()
    return any(needle in str(record.get(key) or '').lower() for key in SEARCH_FIELDS)


def list_jobs(store: JobStore, filters: JobFilters) -> JobPage:
    """Store-level equality filters, then the free-text search, then the page slice."""
    rows = store.query(filters.store_filters(), order_by='-created_at')
    if filters.search:
        rows = [r for r in rows if _matches_search(r, filters.search)]
    start = (filters.page - 1) * filters.limit
    return JobPage(items=rows[start:start + filters.limit], total=len(rows), page=filters.page, limit=filters.limit)


__all__ = ['JobPage', 'generate_job_id', 'history_entry', 'create_job', 'get_job', 'update_status', 'list_jobs']
