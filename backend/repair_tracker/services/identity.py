"""Identity collaborator: request credential, account lookup and the staff rule.

Tokens are JWTs minted by flask_jwt_extended at /api/auth/login; the subject is the
StaffUser id. Verification is flask_jwt_extended's `verify_jwt_in_request`; its
failures are answered by the loaders registered in `register_token_errors`.
Staff means role in STAFF_ROLES and an active account.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from repair_tracker.constants.statuses import STAFF_ROLES
from repair_tracker.errors import AuthenticationError, AuthorizationError, StoreUnavailable
from repair_tracker.models.authz import StaffUser
from repair_tracker import get_db


@dataclass(frozen=True)
class Credential:
    subject_id: str
    email: Optional[str]


@dataclass(frozen=True)
class Actor:
    subject_id: str
    email: Optional[str]
    role: str
    is_active: bool
    display_name: str

    @property
    def is_staff(self) -> bool:
        return self.is_active and self.role in STAFF_ROLES


def verify_credential(optional: bool = False) -> Optional[Credential]:
    """Verify the request's access token; None only when optional and no token was sent."""
    verify_jwt_in_request(optional=optional)
    subject = get_jwt_identity()
    if subject is None:
        return None
    return Credential(subject_id=str(subject), email=get_jwt().get('email'))


def load_actor(subject_id: str) -> Optional[Actor]:
    session = get_db()
    try:
        user = session.execute(select(StaffUser).where(StaffUser.id == subject_id)).scalar_one_or_none()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreUnavailable('User lookup failed') from e
    if not user:
        return None
    return Actor(
        subject_id=user.id,
        email=user.email,
        role=user.role,
        is_active=bool(user.is_active),
        display_name=user.display_name,
    )


def assert_active(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise AuthorizationError('User not found')
    if not actor.is_active:
        raise AuthorizationError('User account is suspended')
    return actor


def assert_staff(actor: Optional[Actor]) -> Actor:
    assert_active(actor)
    if actor.role not in STAFF_ROLES:
        raise AuthorizationError('Staff access required')
    return actor


def authenticate() -> Actor:
    credential = verify_credential()
    return assert_active(load_actor(credential.subject_id))


def try_authenticate() -> Optional[Actor]:
    """Optional identity: any failure (bad token, unknown or inactive user) means anonymous."""
    try:
        credential = verify_credential(optional=True)
    except (JWTExtendedException, PyJWTError):
        return None
    if credential is None:
        return None
    actor = load_actor(credential.subject_id)
    return actor if actor and actor.is_active else None


def register_token_errors(jwt) -> None:
    """Answer flask_jwt_extended failures with the AuthenticationError body."""

    @jwt.expired_token_loader
    def expired(jwt_header, jwt_payload):
        err = AuthenticationError('expired')
        return err.to_dict(), err.status_code

    @jwt.invalid_token_loader
    def invalid(reason):
        err = AuthenticationError('invalid')
        return err.to_dict(), err.status_code

    @jwt.unauthorized_loader
    def missing(reason):
        err = AuthenticationError('missing')
        return err.to_dict(), err.status_code


__all__ = [
    'Credential', 'Actor', 'verify_credential', 'load_actor', 'assert_active',
    'assert_staff', 'authenticate', 'try_authenticate', 'register_token_errors',
]
