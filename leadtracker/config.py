"""
Centralized configuration — env vars and lead constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# Create tables on startup (no migration tooling)
AUTO_CREATE_SCHEMA = os.getenv('AUTO_CREATE_SCHEMA', 'true').lower() in ('1', 'true', 'yes')

# ── Auth ─────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
SESSION_LIFETIME_HOURS = int(os.getenv('SESSION_LIFETIME_HOURS', '24'))

# ── Pagination ───────────────────────────────────────────────────────────────
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# ── Lead enums ───────────────────────────────────────────────────────────────
LEAD_SOURCES = [
    'website',
    'facebook_ads',
    'google_ads',
    'referral',
    'events',
    'other',
]

LEAD_STATUSES = [
    'new',
    'contacted',
    'qualified',
    'lost',
    'won',
]

MAX_SCORE = 100
