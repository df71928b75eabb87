"""Reusable test helpers for the job API lifecycle to reduce duplication.

Patterns unified:
 - Auth header creation using direct JWT tokens (bypassing /api/auth/login).
 - Creation + status update sequencing with assertion helpers.

Focused API tests should stay lightweight and lean on these.
"""
from __future__ import annotations
from typing import Dict, Optional
from flask_jwt_extended import create_access_token
from tests.test_utils_seed import ensure_staff_user

VALID_JOB = {
    'customerName': 'Somchai',
    'customerPhone': '0812345678',
    'deviceModel': 'iPhone 14',
    'problemDescription': 'Screen cracked',
    'dropAppId': 'drop_app_001',
}

# ---------- Generic Auth Helpers ---------- #

def jwt_headers(user_id: str, email: Optional[str] = None):
    token = create_access_token(identity=str(user_id), additional_claims={'email': email})
    return {'Authorization': f'Bearer {token}'}


def staff_headers(email: str = 'staff@example.com', role: str = 'ADMIN'):
    user = ensure_staff_user(email, role=role)
    return jwt_headers(user.id, user.email)

# ---------- Assertion Helpers ---------- #

def create_job_and_assert(client, payload: Optional[dict] = None, expected_status: int = 201):
    resp = client.post('/api/jobs', json=payload or VALID_JOB)
    assert resp.status_code == expected_status, resp.get_json()
    body = resp.get_json()
    if expected_status == 201:
        assert body['success'] is True
    return body


def assert_status_update(client, job_id: str, status: str, headers: Dict[str, str], expected_http: int = 200, **extra):
    resp = client.put(f'/api/jobs/{job_id}', json={'status': status, **extra}, headers=headers)
    assert resp.status_code == expected_http, resp.get_json()
    body = resp.get_json()
    if expected_http < 400:
        assert body['data']['newStatus'] == status
    return body

# ---------- Domain Wrapper ---------- #

def exercise_repair_job_lifecycle(client, headers):
    created = create_job_and_assert(client)
    job_id = created['data']['jobId']
    for status in ('RECEIVED_AT_DROP', 'TRANSFERRING_TO_ASP', 'RECEIVED_AT_ASP', 'EVALUATING', 'REPAIRING',
                   'QUALITY_CHECK', 'READY_FOR_RETURN', 'RETURNED_TO_DROP', 'READY_FOR_PICKUP', 'COMPLETED'):
        assert_status_update(client, job_id, status, headers)
    return job_id

__all__ = [
    'VALID_JOB', 'jwt_headers', 'staff_headers', 'create_job_and_assert', 'assert_status_update',
    'exercise_repair_job_lifecycle',
]
