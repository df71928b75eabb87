"""Central enum-like definitions for repair job statuses, priorities and roles.
Extend cautiously; stored documents keep the raw strings, so never rename a value silently.
"""
from __future__ import annotations
from typing import Dict, Set

STATUS_NEW_QUEUE = 'NEW_QUEUE'
STATUS_RECEIVED_AT_DROP = 'RECEIVED_AT_DROP'
STATUS_TRANSFERRING_TO_ASP = 'TRANSFERRING_TO_ASP'
STATUS_RECEIVED_AT_ASP = 'RECEIVED_AT_ASP'
STATUS_EVALUATING = 'EVALUATING'
STATUS_WAITING_PARTS = 'WAITING_PARTS'
STATUS_REPAIRING = 'REPAIRING'
STATUS_QUALITY_CHECK = 'QUALITY_CHECK'
STATUS_READY_FOR_RETURN = 'READY_FOR_RETURN'
STATUS_RETURNED_TO_DROP = 'RETURNED_TO_DROP'
STATUS_READY_FOR_PICKUP = 'READY_FOR_PICKUP'
STATUS_COMPLETED = 'COMPLETED'

# Declaration order doubles as the display order of status breakdowns
ALL_STATUSES = (
    STATUS_NEW_QUEUE, STATUS_RECEIVED_AT_DROP, STATUS_TRANSFERRING_TO_ASP, STATUS_RECEIVED_AT_ASP,
    STATUS_EVALUATING, STATUS_WAITING_PARTS, STATUS_REPAIRING, STATUS_QUALITY_CHECK,
    STATUS_READY_FOR_RETURN, STATUS_RETURNED_TO_DROP, STATUS_READY_FOR_PICKUP, STATUS_COMPLETED,
)

QUEUE_STATUSES = (STATUS_NEW_QUEUE, STATUS_RECEIVED_AT_DROP)

PRIORITY_LOW = 'LOW'
PRIORITY_NORMAL = 'NORMAL'
PRIORITY_HIGH = 'HIGH'
PRIORITY_URGENT = 'URGENT'
ALL_PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)

DEFAULT_PROBLEM_CATEGORY = 'OTHER'
DEFAULT_WARRANTY_DAYS = 90

LOCATION_ONLINE = 'ONLINE'
LOCATION_DROP_APP = 'DROP_APP'
LOCATION_API = 'API'

ROLE_ADMIN = 'ADMIN'
ROLE_DROP_APP = 'DROP_APP'
ROLE_ASP = 'ASP'
ROLE_CUSTOMER = 'CUSTOMER'
ALL_ROLES = (ROLE_ADMIN, ROLE_DROP_APP, ROLE_ASP, ROLE_CUSTOMER)
STAFF_ROLES = frozenset({ROLE_ADMIN, ROLE_DROP_APP, ROLE_ASP})

# Only consulted when ENFORCE_STATUS_TRANSITIONS is on; the default flow accepts any known status.
# Forward path follows the drop-point -> ASP -> drop-point round trip; QUALITY_CHECK may bounce back to REPAIRING.
REPAIR_JOB_TRANSITIONS: Dict[str, Set[str]] = {
    STATUS_NEW_QUEUE: {STATUS_RECEIVED_AT_DROP},
    STATUS_RECEIVED_AT_DROP: {STATUS_TRANSFERRING_TO_ASP, STATUS_EVALUATING},
    STATUS_TRANSFERRING_TO_ASP: {STATUS_RECEIVED_AT_ASP},
    STATUS_RECEIVED_AT_ASP: {STATUS_EVALUATING},
    STATUS_EVALUATING: {STATUS_WAITING_PARTS, STATUS_REPAIRING, STATUS_READY_FOR_RETURN},
    STATUS_WAITING_PARTS: {STATUS_REPAIRING},
    STATUS_REPAIRING: {STATUS_QUALITY_CHECK, STATUS_WAITING_PARTS, STATUS_COMPLETED},
    STATUS_QUALITY_CHECK: {STATUS_READY_FOR_RETURN, STATUS_REPAIRING},
    STATUS_READY_FOR_RETURN: {STATUS_RETURNED_TO_DROP, STATUS_READY_FOR_PICKUP},
    STATUS_RETURNED_TO_DROP: {STATUS_READY_FOR_PICKUP},
    STATUS_READY_FOR_PICKUP: {STATUS_COMPLETED},
    STATUS_COMPLETED: set(),
}
