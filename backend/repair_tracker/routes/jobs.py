from __future__ import annotations
from flask import Blueprint, request, current_app, g
from repair_tracker.constants.statuses import REPAIR_JOB_TRANSITIONS
from repair_tracker.decorators.auth import require_staff, optional_identity
from repair_tracker.errors import ValidationError
from repair_tracker.schemas import JobCreateInput, StatusUpdateInput, JobFilters
from repair_tracker.services.lifecycle import create_job, get_job, update_status, list_jobs
from repair_tracker.services.stats import compute_stats, priority_breakdown, daily_series
from repair_tracker.services.queue import current_queue_view
from repair_tracker.utils.clock import iso, local_now, utcnow
from repair_tracker.utils.fsm import TransitionValidator
from repair_tracker.utils.listing import envelope, make_cached_list_response, make_cached_response, handle_conditional, compute_etag

jobs_bp = Blueprint('jobs', __name__)

JOB_FSM = TransitionValidator(REPAIR_JOB_TRANSITIONS)

MAX_DAILY_WINDOW = 31


def _store():
    return current_app.extensions['job_store']


def _now():
    return local_now(current_app.config.get('APP_TIMEZONE', ''))


def _transitions():
    return JOB_FSM if current_app.config.get('ENFORCE_STATUS_TRANSITIONS') else None


@jobs_bp.get('')
@require_staff
def list_jobs_route():
    filters = JobFilters.from_args(request.args)
    page = list_jobs(_store(), filters)
    rows_json = [_job_json(j) for j in page.items]
    latest_ts = max((j['updated_at'] for j in page.items), default=None)
    resp, etag = make_cached_list_response(rows_json, page.total, page.page, page.limit, page.total_pages, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@jobs_bp.post('')
def create_job_route():
    data = JobCreateInput.from_payload(request.get_json(silent=True))
    numbering = current_app.extensions['queue_numbering']
    job = create_job(_store(), data, numbering, _now())
    current_app.logger.info('Created job %s for %s (queue %s)', job['job_id'], job['customer_name'], job['queue_number'])
    return envelope({
        'jobId': job['job_id'],
        'queueNumber': job['queue_number'],
        'customerName': job['customer_name'],
    }, 'Repair job created'), 201


@jobs_bp.get('/<job_id>')
@optional_identity
def get_job_route(job_id: str):
    job = get_job(_store(), job_id)
    public = not (g.actor and g.actor.is_staff)
    latest_ts = job['updated_at']
    etag = compute_etag([job['job_id']], 1, 1, 1, f"{iso(latest_ts)}|{'public' if public else 'staff'}")
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return make_cached_response(envelope(_job_json(job, public=public)), etag, latest_ts)


@jobs_bp.put('/<job_id>')
@require_staff
def update_job_route(job_id: str):
    data = StatusUpdateInput.from_payload(request.get_json(silent=True))
    result = update_status(_store(), job_id, data, actor=g.actor, now=utcnow(), transitions=_transitions())
    current_app.logger.info('Updated job %s: %s -> %s by %s', job_id, result['old_status'], result['new_status'], g.actor.subject_id)
    return envelope({
        'jobId': result['job_id'],
        'oldStatus': result['old_status'],
        'newStatus': result['new_status'],
        'updatedAt': iso(result['updated_at']),
    }, 'Status updated')


@jobs_bp.get('/stats/summary')
def stats_summary():
    return envelope(_stats_json(compute_stats(_store().all(), _now())))


@jobs_bp.get('/queue/current')
def current_queue():
    jobs = _store().all()
    now = _now()
    view = current_queue_view(
        jobs,
        compute_stats(jobs, now),
        now,
        slot_minutes=current_app.config['QUEUE_SLOT_MINUTES'],
        size=current_app.config['QUEUE_VIEW_SIZE'],
    )
    return envelope({
        'currentQueue': view['current_queue'],
        'totalToday': view['total_today'],
        'averageWaitTime': view['average_wait_time'],
        'lastUpdated': view['last_updated'],
        'queueList': [{
            'queueNumber': e['queue_number'],
            'jobId': e['job_id'],
            'customerName': e['customer_name'],
            'status': e['status'],
            'position': e['position'],
            'estimatedReadyAt': e['estimated_ready_at'],
            'estimatedTime': e['estimated_time'],
        } for e in view['queue_list']],
    })


@jobs_bp.get('/analytics/overview')
@require_staff
def analytics_overview():
    jobs = _store().all()
    stats = compute_stats(jobs, _now())
    performance = {
        'totalJobs': stats['total'],
        'completedJobs': stats['completed'],
        'inProgressJobs': stats['in_progress'],
        'pendingJobs': stats['pending'],
        'avgCompletionTime': stats['avg_completion_time'],
        'completionRate': stats['completion_rate'],
        'priorityBreakdown': priority_breakdown(jobs),
        'currentQueue': stats['current_queue'],
        'todayJobs': stats['today_jobs'],
        'statusBreakdown': stats['status_breakdown'],
    }
    return envelope({'performance': performance, 'lastUpdated': iso(utcnow())})


@jobs_bp.get('/analytics/daily')
@require_staff
def analytics_daily():
    try:
        days = int(request.args.get('days', 7))
    except ValueError:
        raise ValidationError.single('days', 'days must be int')
    if not 1 <= days <= MAX_DAILY_WINDOW:
        raise ValidationError.single('days', f'days must be between 1 and {MAX_DAILY_WINDOW}')
    return envelope(daily_series(_store().all(), _now(), days))


def _mask_phone(phone: str) -> str:
    if not phone or len(phone) < 4:
        return phone
    return '*' * (len(phone) - 4) + phone[-4:]


def _history_json(entry: dict, public: bool):
    out = {
        'status': entry.get('status'),
        'updatedByName': entry.get('updated_by_name'),
        'timestamp': iso(entry.get('timestamp')),
        'note': entry.get('note'),
        'location': entry.get('location'),
    }
    if not public:
        out['updatedBy'] = entry.get('updated_by')
    return out


def _job_json(j: dict, public: bool = False):
    body = {
        'jobId': j['job_id'],
        'customerName': j['customer_name'],
        'customerPhone': _mask_phone(j['customer_phone']) if public else j['customer_phone'],
        'deviceModel': j['device_model'],
        'deviceSerial': j.get('device_serial'),
        'problemDescription': j['problem_description'],
        'problemCategory': j.get('problem_category'),
        'status': j['status'],
        'priority': j.get('priority'),
        'queueNumber': j.get('queue_number'),
        'estimatedCost': j.get('estimated_cost'),
        'actualCost': j.get('actual_cost'),
        'dropAppId': j.get('drop_app_id'),
        'aspId': j.get('asp_id'),
        'assignedTechnician': j.get('assigned_technician'),
        'warrantyPeriod': j.get('warranty_period_days'),
        'createdAt': iso(j.get('created_at')),
        'updatedAt': iso(j.get('updated_at')),
        'completedAt': iso(j.get('completed_at')),
        'history': [_history_json(h, public) for h in j.get('history') or []],
    }
    if not public:
        body.update({
            'customerEmail': j.get('customer_email'),
            'notes': j.get('notes'),
            'source': j.get('source'),
            'isActive': j.get('is_active'),
        })
    return body


def _stats_json(s: dict):
    return {
        'total': s['total'],
        'completed': s['completed'],
        'inProgress': s['in_progress'],
        'pending': s['pending'],
        'avgCompletionTime': s['avg_completion_time'],
        'completionRate': s['completion_rate'],
        'statusBreakdown': s['status_breakdown'],
        'currentQueue': s['current_queue'],
        'todayJobs': s['today_jobs'],
    }
