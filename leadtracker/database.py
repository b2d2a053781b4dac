"""
Database engine + session factory.

Always initializes — defaults to SQLite for local dev, Postgres in production.
get_session() always returns a real session.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from leadtracker.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


# Hosting providers inject postgres:// but SQLAlchemy 2.x requires postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

# SQLite needs different engine kwargs than Postgres
if url.startswith('sqlite'):
    engine = create_engine(url, connect_args={'check_same_thread': False})
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

SessionLocal = sessionmaker(bind=engine)

# Isolation level for the count + page pair on stores that need it
SNAPSHOT_ISOLATION = {'postgresql': 'REPEATABLE READ'}


def get_session():
    """Return a new DB session."""
    return SessionLocal()


def init_db(bind=None):
    """Create all tables that do not exist yet."""
    import leadtracker.models  # noqa: F401  (registers tables on Base.metadata)
    Base.metadata.create_all(bind or engine)


def begin_read_snapshot(session):
    """
    Pin the session's next transaction to a single snapshot.

    Postgres' default READ COMMITTED gives every statement its own snapshot,
    so COUNT and the page SELECT could disagree under concurrent writes.
    Must be called before the session has executed anything; a session
    that already holds a transaction keeps it.
    """
    if session.in_transaction():
        return
    level = SNAPSHOT_ISOLATION.get(session.get_bind().dialect.name)
    if level:
        session.connection(execution_options={'isolation_level': level})
