"""
Principal resolution from Flask's signed session cookie.

Login stores `user_id` in the session; every lead route resolves it back to
an existing user before doing anything else.
"""
import logging
from functools import wraps

from flask import g, session

from leadtracker.database import get_session
from leadtracker.errors import AuthenticationError
from leadtracker.models.user import User

logger = logging.getLogger('leadtracker.auth')

SESSION_KEY = 'user_id'


def get_current_principal():
    """Return the logged-in user as a dict or raise AuthenticationError."""
    user_id = session.get(SESSION_KEY)
    if not user_id:
        raise AuthenticationError('Not authenticated')

    db = get_session()
    try:
        user = db.get(User, user_id)
        if user is None:
            session.pop(SESSION_KEY, None)
            raise AuthenticationError('User not found')
        return user.to_dict()
    finally:
        db.close()


def login_required(view):
    """Decorator: resolve the principal into g.principal_id or 401."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        principal = get_current_principal()
        g.principal_id = principal['id']
        g.principal = principal
        return view(*args, **kwargs)
    return wrapped


def log_in(user):
    session.clear()
    session[SESSION_KEY] = user.id
    session.permanent = True
    logger.info("User %s logged in", user.id)


def log_out():
    session.clear()
