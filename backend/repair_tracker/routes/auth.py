from __future__ import annotations
from flask import Blueprint, request, g
from flask_jwt_extended import create_access_token
from sqlalchemy import select
from repair_tracker.decorators.auth import require_identity
from repair_tracker.errors import AuthenticationError, AuthorizationError, ValidationError
from repair_tracker.models.authz import StaffUser
from repair_tracker.utils.listing import envelope
from repair_tracker import get_db

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    email = data.get('email'); password = data.get('password')
    if not email or not password:
        raise ValidationError([{'field': f, 'message': f'{f} required'} for f in ('email', 'password') if not data.get(f)])
    session = get_db()
    user = session.execute(select(StaffUser).where(StaffUser.email==email)).scalar_one_or_none()
    if not user or not user.verify_password(password):
        raise AuthenticationError('invalid', 'Invalid credentials')
    if not user.is_active:
        raise AuthorizationError('User account is suspended')
    token = create_access_token(identity=user.id, additional_claims={'email': user.email, 'role': user.role})
    return envelope({'accessToken': token, 'role': user.role})


@auth_bp.get('/me')
@require_identity
def me():
    actor = g.actor
    return envelope({
        'uid': actor.subject_id,
        'email': actor.email,
        'displayName': actor.display_name,
        'role': actor.role,
        'isActive': actor.is_active,
        'isStaff': actor.is_staff,
    })
