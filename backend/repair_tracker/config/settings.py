"""Default application settings, read from the environment once `load_dotenv()` has run.

`create_app(config)` overlays caller supplied values on top of these, which is how
tests switch to in-memory SQLite or the memory job store.
"""
from __future__ import annotations
import os
from typing import Any, Dict

JOB_STORE_SQL = 'sql'
JOB_STORE_MEMORY = 'memory'

QUEUE_POLICY_DAILY = 'daily'
QUEUE_POLICY_COUNT = 'count'


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def load_settings() -> Dict[str, Any]:
    return {
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        'JOB_STORE': os.getenv('JOB_STORE', JOB_STORE_SQL),
        'QUEUE_NUMBER_POLICY': os.getenv('QUEUE_NUMBER_POLICY', QUEUE_POLICY_DAILY),
        'QUEUE_SLOT_MINUTES': int(os.getenv('QUEUE_SLOT_MINUTES', '30')),
        'QUEUE_VIEW_SIZE': int(os.getenv('QUEUE_VIEW_SIZE', '10')),
        'ENFORCE_STATUS_TRANSITIONS': _env_bool('ENFORCE_STATUS_TRANSITIONS', False),
        'SEED_DEMO_JOBS': _env_bool('SEED_DEMO_JOBS', False),
        'APP_TIMEZONE': os.getenv('APP_TIMEZONE', ''),
    }
