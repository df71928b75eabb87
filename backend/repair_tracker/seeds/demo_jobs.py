"""Demo seed for the in-memory job store (JOB_STORE=memory, SEED_DEMO_JOBS=true).

One job already handed in at the drop point, with its creation and receipt history.
"""
from __future__ import annotations
import random
from datetime import timedelta
from typing import Any, Dict, List, Optional

from repair_tracker.constants.statuses import (
    DEFAULT_PROBLEM_CATEGORY, DEFAULT_WARRANTY_DAYS, LOCATION_DROP_APP, LOCATION_ONLINE, PRIORITY_NORMAL,
    STATUS_NEW_QUEUE, STATUS_RECEIVED_AT_DROP,
)
from repair_tracker.services.lifecycle import generate_job_id, history_entry
from repair_tracker.utils.clock import as_utc, local_now

DEMO_DROP_APP_ID = 'drop_app_001'


def demo_jobs(now=None, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    now = now or local_now()
    ts = as_utc(now)
    created = ts - timedelta(minutes=30)
    return [{
        'job_id': generate_job_id(now, rng or random),
        'customer_name': 'Somchai Jaidee',
        'customer_phone': '0812345678',
        'customer_email': None,
        'device_model': 'iPhone 14 Pro',
        'device_serial': None,
        'problem_description': 'Cracked screen',
        'problem_category': DEFAULT_PROBLEM_CATEGORY,
        'status': STATUS_RECEIVED_AT_DROP,
        'priority': PRIORITY_NORMAL,
        'queue_number': 1,
        'estimated_cost': 0.0,
        'actual_cost': 0.0,
        'drop_app_id': DEMO_DROP_APP_ID,
        'asp_id': None,
        'assigned_technician': None,
        'notes': '',
        'source': LOCATION_ONLINE,
        'warranty_period_days': DEFAULT_WARRANTY_DAYS,
        'history': [
            history_entry(STATUS_NEW_QUEUE, 'system', 'System', created, 'Job created from online registration', LOCATION_ONLINE),
            history_entry(STATUS_RECEIVED_AT_DROP, 'drop001', 'Drop-APP Staff', ts, 'Device received from customer', LOCATION_DROP_APP),
        ],
        'is_active': True,
        'created_at': created,
        'updated_at': ts,
        'completed_at': None,
    }]
