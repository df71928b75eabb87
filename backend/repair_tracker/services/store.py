"""Job Store collaborator: document-style persistence for repair jobs.

Two implementations share one contract (`put`, `get`, `query`, `update`, `count`):

* `SqlJobStore`   SQLAlchemy session backed; history lives in a JSON column.
* `MemoryJobStore` process-local dict for demos and unit tests.

Records are plain dicts keyed by the snake_case column names of `RepairJob`. Both
stores hand out copies, so callers can never mutate persisted state by accident.

Supported filters: `status` (string, or list/tuple for membership), `drop_app_id`,
`asp_id` (equality) and `created_from` (created_at >= value). `order_by` takes a
field name (`created_at`, `queue_number`) with an optional leading '-' for descending.
"""
from __future__ import annotations
import copy
from datetime import datetime
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from repair_tracker.errors import NotFoundError, StoreUnavailable
from repair_tracker.models.repair_job import RepairJob
from repair_tracker.utils.clock import as_utc
from repair_tracker.utils.filters import apply_filters

ORDERABLE_FIELDS = ('created_at', 'queue_number')
FILTER_KEYS = ('status', 'drop_app_id', 'asp_id', 'created_from')

Record = Dict[str, Any]


def _split_order(order_by: Optional[str]):
    if not order_by:
        return None, False
    desc = order_by.startswith('-')
    field = order_by[1:] if desc else order_by
    if field not in ORDERABLE_FIELDS:
        raise ValueError(f'Unsupported order field {field}')
    return field, desc


def _status_values(value) -> List[str]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


class JobStore:
    """Contract shared by the store implementations."""

    def put(self, job_id: str, record: Record) -> None:
        raise NotImplementedError

    def get(self, job_id: str) -> Optional[Record]:
        raise NotImplementedError

    def query(self, filters: Optional[Dict[str, Any]] = None, order_by: Optional[str] = None,
              limit: Optional[int] = None) -> List[Record]:
        raise NotImplementedError

    def update(self, job_id: str, partial: Record) -> None:
        raise NotImplementedError

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        raise NotImplementedError

    def all(self) -> List[Record]:
        return self.query()


# ---------- SQL ---------- #

def _encode_history(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out = []
    for entry in history or []:
        item = dict(entry)
        ts = item.get('timestamp')
        if isinstance(ts, datetime):
            item['timestamp'] = as_utc(ts).isoformat()
        out.append(item)
    return out


def _decode_history(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    out = []
    for entry in history or []:
        item = dict(entry)
        ts = item.get('timestamp')
        if isinstance(ts, str):
            item['timestamp'] = as_utc(datetime.fromisoformat(ts))
        out.append(item)
    return out


def _row_to_record(row: RepairJob) -> Record:
    record = {col: getattr(row, col) for col in RepairJob.COLUMNS}
    for key in ('created_at', 'updated_at', 'completed_at'):
        record[key] = as_utc(record[key])
    record['history'] = _decode_history(record['history'])
    return record


def _encode_values(values: Record) -> Record:
    out = {k: v for k, v in values.items() if k in RepairJob.COLUMNS}
    if 'history' in out:
        out['history'] = _encode_history(out['history'])
    return out


SQL_FILTER_SPECS = {
    'status': {'op': lambda q, v: q.where(RepairJob.status.in_(_status_values(v)))},
    'drop_app_id': {'op': lambda q, v: q.where(RepairJob.drop_app_id == v), 'coerce': str},
    'asp_id': {'op': lambda q, v: q.where(RepairJob.asp_id == v), 'coerce': str},
    'created_from': {'op': lambda q, v: q.where(RepairJob.created_at >= as_utc(v)),
                     'validate': lambda v: isinstance(v, datetime)},
}


class SqlJobStore(JobStore):
    def __init__(self, session_factory: Callable):
        self._session_factory = session_factory

    def _run(self, fn):
        session = self._session_factory()
        try:
            result = fn(session)
            session.commit()
            return result
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreUnavailable(f'Job store error: {e.__class__.__name__}') from e

    def put(self, job_id: str, record: Record) -> None:
        values = _encode_values(record)
        values['job_id'] = job_id
        for key in ('created_at', 'updated_at', 'completed_at'):
            if values.get(key) is not None:
                values[key] = as_utc(values[key])
        self._run(lambda s: s.merge(RepairJob(**values)))

    def get(self, job_id: str) -> Optional[Record]:
        def op(session):
            row = session.execute(select(RepairJob).where(RepairJob.job_id == job_id)).scalar_one_or_none()
            return _row_to_record(row) if row else None
        return self._run(op)

    def query(self, filters=None, order_by=None, limit=None) -> List[Record]:
        field, desc = _split_order(order_by)

        def op(session):
            stmt = apply_filters(select(RepairJob), SQL_FILTER_SPECS, dict(filters or {}))
            if field:
                col = getattr(RepairJob, field)
                stmt = stmt.order_by(col.desc() if desc else col.asc(), RepairJob.job_id.asc())
            if limit:
                stmt = stmt.limit(int(limit))
            return [_row_to_record(r) for r in session.execute(stmt).scalars().all()]
        return self._run(op)

    def update(self, job_id: str, partial: Record) -> None:
        values = _encode_values(partial)
        values.pop('job_id', None)

        def op(session):
            row = session.execute(select(RepairJob).where(RepairJob.job_id == job_id)).scalar_one_or_none()
            if row is None:
                raise NotFoundError(job_id)
            for key, value in values.items():
                if key in ('created_at', 'updated_at', 'completed_at') and value is not None:
                    value = as_utc(value)
                setattr(row, key, value)
        self._run(op)

    def count(self, filters=None) -> int:
        def op(session):
            stmt = apply_filters(select(func.count()).select_from(RepairJob), SQL_FILTER_SPECS, dict(filters or {}))
            return int(session.execute(stmt).scalar_one())
        return self._run(op)


# ---------- In-memory ---------- #

def _checked_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    filters = dict(filters or {})
    unknown = set(filters) - set(FILTER_KEYS)
    if unknown:
        raise ValueError(f'Unsupported filters: {sorted(unknown)}')
    return filters


def _matches(record: Record, filters: Dict[str, Any]) -> bool:
    for key, value in filters.items():
        if value is None:
            continue
        if key == 'status':
            if record.get('status') not in _status_values(value):
                return False
        elif key == 'created_from':
            if record.get('created_at') is None or as_utc(record['created_at']) < as_utc(value):
                return False
        elif record.get(key) != value:
            return False
    return True


class MemoryJobStore(JobStore):
    """Process-local store for demos and tests. Not shared between workers."""

    def __init__(self, records: Optional[List[Record]] = None):
        self._jobs: Dict[str, Record] = {}
        self._lock = Lock()
        for record in records or []:
            self.put(record['job_id'], record)

    def put(self, job_id: str, record: Record) -> None:
        with self._lock:
            stored = copy.deepcopy(record)
            stored['job_id'] = job_id
            self._jobs[job_id] = stored

    def get(self, job_id: str) -> Optional[Record]:
        with self._lock:
            record = self._jobs.get(job_id)
            return copy.deepcopy(record) if record is not None else None

    def query(self, filters=None, order_by=None, limit=None) -> List[Record]:
        field, desc = _split_order(order_by)
        filters = _checked_filters(filters)
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._jobs.values() if _matches(r, filters)]
        if field:
            rows.sort(key=lambda r: r['job_id'])
            rows.sort(key=lambda r: r.get(field) or 0, reverse=desc)
        if limit:
            rows = rows[:int(limit)]
        return rows

    def update(self, job_id: str, partial: Record) -> None:
        with self._lock:
            if job_id not in self._jobs:
                raise NotFoundError(job_id)
            values = copy.deepcopy(partial)
            values.pop('job_id', None)
            self._jobs[job_id].update(values)

    def count(self, filters=None) -> int:
        filters = _checked_filters(filters)
        with self._lock:
            return sum(1 for r in self._jobs.values() if _matches(r, filters))


__all__ = ['JobStore', 'SqlJobStore', 'MemoryJobStore', 'ORDERABLE_FIELDS', 'FILTER_KEYS']
