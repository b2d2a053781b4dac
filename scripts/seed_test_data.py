#!/usr/bin/env python3
"""
Seed a test user and random leads for trying the API locally.

Creates test@example.com / password123 (if missing) and tops its leads up to
--count (default 100) with randomized names, sources, statuses and scores.

Usage:
    python scripts/seed_test_data.py              # seed up to 100 leads
    python scripts/seed_test_data.py --count 250
    python scripts/seed_test_data.py --clear      # wipe the test user's leads first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import random
import argparse
import logging
from datetime import datetime, timezone, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from leadtracker.config import LEAD_SOURCES, LEAD_STATUSES
from leadtracker.database import get_session, init_db
from leadtracker.logging_config import configure_logging
from leadtracker.models.lead import Lead
from leadtracker.models.user import User

logger = logging.getLogger('scripts.seed')

TEST_EMAIL = 'test@example.com'
TEST_PASSWORD = 'password123'

COMPANIES = [
    'TechCorp', 'DataSoft', 'CloudSys', 'InfoTech', 'WebPro', 'AppDev', 'DigitalMax',
    'InnovateLab', 'SmartSolutions', 'NextGen Tech', 'Future Systems', 'Prime Digital',
]
CITIES = ['New York', 'Los Angeles', 'Chicago', 'Houston', 'Phoenix',
          'Philadelphia', 'San Antonio', 'San Diego', 'Dallas', 'San Jose']
STATES = ['NY', 'CA', 'IL', 'TX', 'AZ', 'PA', 'FL', 'OH', 'NC', 'GA']
FIRST_NAMES = ['John', 'Jane', 'Mike', 'Sarah', 'David', 'Lisa', 'Chris', 'Emma',
               'Ryan', 'Ashley', 'Kevin', 'Nicole', 'Brian', 'Jessica', 'Matt']
LAST_NAMES = ['Smith', 'Johnson', 'Williams', 'Brown', 'Jones', 'Garcia', 'Miller',
              'Davis', 'Rodriguez', 'Martinez', 'Hernandez', 'Lopez', 'Gonzales']


def get_or_create_user(session):
    user = session.query(User).filter_by(email=TEST_EMAIL).first()
    if user:
        logger.info("Test user already exists")
        return user
    user = User(
        email=TEST_EMAIL,
        password_hash=generate_password_hash(TEST_PASSWORD),
        first_name='Test',
        last_name='User',
    )
    session.add(user)
    session.flush()
    logger.info("Test user created")
    return user


def make_lead(owner_id, index, rng):
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    created = datetime.now(timezone.utc) - timedelta(days=rng.randint(0, 90), minutes=rng.randint(0, 1440))
    activity = created + timedelta(days=rng.randint(0, 30)) if rng.random() > 0.3 else None
    return Lead(
        owner_id=owner_id,
        first_name=first,
        last_name=last,
        email=f'{first.lower()}.{last.lower()}{index}@example.com',
        phone=f'+1-{rng.randint(200, 999)}-{rng.randint(200, 999)}-{rng.randint(1000, 9999)}',
        company=rng.choice(COMPANIES),
        city=rng.choice(CITIES),
        state=rng.choice(STATES),
        source=rng.choice(LEAD_SOURCES),
        status=rng.choice(LEAD_STATUSES),
        score=rng.randint(0, 100),
        lead_value=round(rng.uniform(100, 10000), 2),
        is_qualified=rng.random() > 0.7,
        last_activity_at=activity,
        created_at=created,
        updated_at=created,
    )


def seed(count=100, clear=False, seed_value=None):
    rng = random.Random(seed_value)
    init_db()
    session = get_session()
    try:
        user = get_or_create_user(session)
        if clear:
            deleted = session.query(Lead).filter_by(owner_id=user.id).delete()
            logger.info("Cleared %d leads", deleted)

        existing = session.query(Lead).filter_by(owner_id=user.id).count()
        if existing >= count:
            logger.info("Already have %d leads, skipping", existing)
            session.commit()
            return 0

        # Emails are globally unique; index past everything already stored
        offset = session.query(Lead).count()
        to_create = count - existing
        for i in range(to_create):
            session.add(make_lead(user.id, offset + i, rng))
        session.commit()
        logger.info("Generated %d leads for %s", to_create, TEST_EMAIL)
        return to_create
    except Exception:
        session.rollback()
        logger.error("Seeding failed", exc_info=True)
        raise
    finally:
        session.close()


def main():
    parser = argparse.ArgumentParser(description='Seed a test user and random leads')
    parser.add_argument('--count', type=int, default=100, help='target number of leads for the test user')
    parser.add_argument('--clear', action='store_true', help="delete the test user's leads first")
    parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible data')
    args = parser.parse_args()

    configure_logging()
    seed(count=args.count, clear=args.clear, seed_value=args.seed)
    print(f"Log in with {TEST_EMAIL} / {TEST_PASSWORD}")


if __name__ == '__main__':
    main()
