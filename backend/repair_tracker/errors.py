"""Typed failures raised by the job services and mapped to JSON by the app factory.

Each error carries the HTTP status the API layer should answer with, so route
handlers never translate exceptions themselves.
"""
from __future__ import annotations
from typing import Dict, List, Optional


class RepairTrackerError(Exception):
    status_code = 500
    default_message = 'Unexpected error'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> Dict:
        return {'success': False, 'message': self.message}


class ValidationError(RepairTrackerError):
    status_code = 400
    default_message = 'Invalid input'

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e['field'] for e in self.errors]

    @classmethod
    def single(cls, field: str, message: str) -> 'ValidationError':
        return cls([{'field': field, 'message': message}])

    def to_dict(self) -> Dict:
        body = super().to_dict()
        body['errors'] = self.errors
        return body


class NotFoundError(RepairTrackerError):
    status_code = 404
    default_message = 'Job not found'

    def __init__(self, job_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message)
        self.job_id = job_id


class AuthenticationError(RepairTrackerError):
    status_code = 401
    default_message = 'Invalid token'

    # reason: missing | invalid | expired
    def __init__(self, reason: str = 'invalid', message: Optional[str] = None):
        if message is None and reason == 'expired':
            message = 'Token expired, please log in again'
        elif message is None and reason == 'missing':
            message = 'Authorization token not found'
        super().__init__(message)
        self.reason = reason


class AuthorizationError(RepairTrackerError):
    status_code = 403
    default_message = 'Access denied'


class StoreUnavailable(RepairTrackerError):
    status_code = 503
    default_message = 'Job store unavailable'


__all__ = [
    'RepairTrackerError', 'ValidationError', 'NotFoundError', 'AuthenticationError',
    'AuthorizationError', 'StoreUnavailable',
]
