from functools import wraps
from flask import g
from repair_tracker.services.identity import assert_staff, authenticate, try_authenticate


def require_staff(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.actor = assert_staff(authenticate())
        return fn(*args, **kwargs)
    return wrapper


def require_identity(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.actor = authenticate()
        return fn(*args, **kwargs)
    return wrapper


def optional_identity(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.actor = try_authenticate()
        return fn(*args, **kwargs)
    return wrapper
