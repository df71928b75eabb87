from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
from flask import request, make_response, jsonify
import hashlib
from datetime import datetime, timezone, timedelta
from email.utils import parsedate_to_datetime, format_datetime

TIMESTAMP_TOLERANCE = timedelta(seconds=1)

def canonicalize_timestamp(dt: datetime) -> datetime:
    """Return UTC tz-aware timestamp truncated to whole seconds (microseconds removed)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0)

def compute_etag(ids: Iterable[str], total: int, page: int, limit: int, latest_ts: Optional[str] = '') -> str:
    seed = f"{list(ids)}|{total}|{page}|{limit}|{latest_ts or ''}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]

def envelope(data: Any = None, message: Optional[str] = None, **extra) -> Dict[str, Any]:
    body: Dict[str, Any] = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return body

def build_list_payload(rows: list, total: int, page: int, limit: int, total_pages: int):
    return envelope(rows, pagination={
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
    })

def _http_date(dt: datetime) -> str:
    """Return RFC1123 HTTP-date string in GMT."""
    return format_datetime(dt, usegmt=True)

def _iso(dt: datetime) -> str:
    return dt.isoformat().replace('+00:00', 'Z')

def make_cached_response(body: Dict[str, Any], etag: str, latest_ts: Optional[datetime] = None):
    resp = make_response(jsonify(body))
    resp.headers['ETag'] = etag
    if latest_ts:
        latest_c = canonicalize_timestamp(latest_ts)
        resp.headers['Last-Modified'] = _http_date(latest_c)
        resp.headers['X-Last-Modified-ISO'] = _iso(latest_c)
    return resp

def make_cached_list_response(rows: list, total: int, page: int, limit: int, total_pages: int,
                              latest_ts: Optional[datetime] = None):
    ids = [r.get('jobId') for r in rows]
    latest_iso = _iso(canonicalize_timestamp(latest_ts)) if latest_ts else ''
    etag = compute_etag(ids, total, page, limit, latest_iso)
    resp = make_cached_response(build_list_payload(rows, total, page, limit, total_pages), etag, latest_ts)
    return resp, etag

def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    if not header_val:
        return None
    # Try ISO 8601 first
    try:
        dt = datetime.fromisoformat(header_val.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        pass
    # Try HTTP-date (RFC 1123)
    try:
        dt = parsedate_to_datetime(header_val)
    except (TypeError, ValueError):
        return None
    if dt and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Evaluate conditional request headers.

    Precedence: If-None-Match over If-Modified-Since (per RFC 9110 semantics).
    Returns a 304 response object if conditions satisfied, else None.
    """
    inm = request.headers.get('If-None-Match')
    if inm and inm.strip('"') == etag_value:
        return _not_modified(etag_value, latest_ts)
    # Only evaluate If-Modified-Since if If-None-Match was not a match / absent
    ims_raw = request.headers.get('If-Modified-Since')
    if ims_raw and latest_ts:
        ims_dt = _parse_if_modified_since(ims_raw)
        if ims_dt and canonicalize_timestamp(latest_ts) <= canonicalize_timestamp(ims_dt) + TIMESTAMP_TOLERANCE:
            return _not_modified(etag_value, latest_ts)
    return None

def _not_modified(etag_value: str, latest_ts: Optional[datetime]):
    resp = make_response('', 304)
    resp.headers['ETag'] = etag_value
    if latest_ts:
        latest_c = canonicalize_timestamp(latest_ts)
        resp.headers['Last-Modified'] = _http_date(latest_c)
        resp.headers['X-Last-Modified-ISO'] = _iso(latest_c)
    return resp
