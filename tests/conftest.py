"""Shared test fixtures."""
import os

# Point the app at an in-memory DB before leadtracker.config is imported.
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('AUTO_CREATE_SCHEMA', 'false')

from contextlib import ExitStack
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.security import generate_password_hash

from leadtracker.database import Base

# Every module that did `from leadtracker.database import get_session`
SESSION_CONSUMERS = [
    'leadtracker.database.get_session',
    'leadtracker.auth.get_session',
    'leadtracker.routes.auth.get_session',
    'leadtracker.routes.leads.get_session',
]

TEST_PASSWORD = 'correct horse battery staple'


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine('sqlite:///:memory:')
    import leadtracker.models.user
    import leadtracker.models.lead
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route all get_session() calls to the test session.

    We disable close() so that route handlers calling session.close()
    in their finally blocks don't invalidate the shared test session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with ExitStack() as stack:
        for target in SESSION_CONSUMERS:
            stack.enter_context(patch(target, return_value=db_session))
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def app():
    """Flask test app."""
    from leadtracker import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_user(db_session):
    """Factory fixture — inserts a User and returns it."""
    def _make(email='owner@example.com', **overrides):
        from leadtracker.models.user import User
        defaults = dict(
            email=email,
            password_hash=generate_password_hash(TEST_PASSWORD, method='pbkdf2:sha256:1000'),
            first_name='Test',
            last_name='Owner',
        )
        defaults.update(overrides)
        user = User(**defaults)
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def owner(make_user):
    return make_user('owner-a@example.com', first_name='Alice')


@pytest.fixture
def other_owner(make_user):
    return make_user('owner-b@example.com', first_name='Bob')


@pytest.fixture
def make_lead(db_session):
    """Factory fixture — inserts Leads with strictly increasing created_at."""
    from leadtracker.models.lead import Lead
    base = datetime(2026, 1, 1, 9, 0, 0)
    counter = {'n': 0}

    def _make(owner, **overrides):
        counter['n'] += 1
        n = counter['n']
        created = base + timedelta(minutes=n)
        defaults = dict(
            owner_id=owner.id,
            first_name='Lead',
            last_name=f'Number{n}',
            email=f'lead{n}@example.com',
            source='website',
            status='new',
            score=0,
            lead_value=0,
            is_qualified=False,
            created_at=created,
            updated_at=created,
        )
        defaults.update(overrides)
        lead = Lead(**defaults)
        db_session.add(lead)
        db_session.commit()
        return lead
    return _make


@pytest.fixture
def login(client):
    """Put a user id into the client's session cookie."""
    def _login(user):
        with client.session_transaction() as sess:
            sess['user_id'] = user.id
        return client
    return _login


@pytest.fixture
def auth_client(login, owner):
    """Test client logged in as `owner`."""
    return login(owner)
