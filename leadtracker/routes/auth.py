"""
Auth routes — registration, session login/logout and the current principal.
"""
import logging
from flask import Blueprint, g, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from leadtracker.auth import log_in, log_out, login_required
from leadtracker.database import get_session
from leadtracker.errors import AuthenticationError, ConflictError, ValidationError
from leadtracker.models.user import User
from leadtracker.validation import validate_registration

logger = logging.getLogger('routes.auth')

bp = Blueprint('auth', __name__, url_prefix='/api/auth')

USER_EXISTS = 'User with this email already exists'


@bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    errors = []
    if not email:
        errors.append({'field': 'email', 'message': 'is required'})
    if not password:
        errors.append({'field': 'password', 'message': 'is required'})
    if errors:
        raise ValidationError(errors=errors)

    session = get_session()
    try:
        user = session.query(User).filter_by(email=email).first()
        if user is None or not check_password_hash(user.password_hash, password):
            raise AuthenticationError('Invalid credentials')
        log_in(user)
        return jsonify(user.to_dict())
    finally:
        session.close()


@bp.route('/register', methods=['POST'])
def register():
    """Create an account and start a session for it."""
    data = validate_registration(request.get_json(silent=True))

    session = get_session()
    try:
        if session.query(User.id).filter_by(email=data['email']).first() is not None:
            raise ConflictError(USER_EXISTS)

        user = User(
            email=data['email'],
            password_hash=generate_password_hash(data['password']),
            first_name=data['first_name'],
            last_name=data['last_name'],
        )
        session.add(user)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise ConflictError(USER_EXISTS) from e

        log_in(user)
        logger.info("User %s registered", user.id)
        return jsonify(user.to_dict()), 201
    finally:
        session.close()


@bp.route('/logout', methods=['POST'])
def logout():
    log_out()
    return jsonify({'message': 'Logged out successfully'})


@bp.route('/me')
@login_required
def me():
    return jsonify(g.principal)
