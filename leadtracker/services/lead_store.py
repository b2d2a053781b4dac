"""
Lead persistence — executes compiled statements against a caller-owned session.

Every function takes the session explicitly; routes open it and close it in
their finally blocks. Writes commit here and roll back on failure. Store
errors are remapped: unique-constraint violations become ConflictError,
everything else is logged and raised as InternalError. Nothing is retried.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from leadtracker.database import begin_read_snapshot
from leadtracker.errors import ConflictError, InternalError, NotFoundError
from leadtracker.models.lead import Lead
from leadtracker.services.clauses import to_sqlalchemy
from leadtracker.services.field_registry import LEAD_FIELDS
from leadtracker.services.filter_compiler import compile_filters
from leadtracker.services.ownership import OwnerScope
from leadtracker.services.pagination import plan_page
from leadtracker.services.patch_compiler import compile_patch

logger = logging.getLogger('services.lead_store')

UNIQUE_VIOLATION = '23505'


def _is_unique_violation(err):
    orig = getattr(err, 'orig', None)
    if getattr(orig, 'pgcode', None) == UNIQUE_VIOLATION:
        return True
    message = str(orig or err).lower()
    return 'unique' in message or 'duplicate key' in message


def _store_error(err, action):
    """Map a SQLAlchemy error to the API taxonomy."""
    if isinstance(err, IntegrityError) and _is_unique_violation(err):
        logger.info("Unique constraint hit while trying to %s", action)
        return ConflictError()
    logger.error("Store failure while trying to %s", action, exc_info=True)
    return InternalError()


def _fetch_leads(session, sql, params):
    stmt = select(Lead).from_statement(to_sqlalchemy(sql, params))
    return session.execute(stmt.execution_options(populate_existing=True)).scalars().all()


def _fetch_scoped(session, scope, lead_id):
    builder = scope.begin()
    builder.add(f'id = {builder.bind(lead_id)}')
    where = builder.build()
    rows = _fetch_leads(session, f'SELECT * FROM {LEAD_FIELDS.table} WHERE {where.sql}', where.params)
    return rows[0] if rows else None


def _email_taken(session, email, exclude_id=None):
    """Advisory pre-check; the unique index is the real guard."""
    query = session.query(Lead.id).filter(Lead.email == email)
    if exclude_id is not None:
        query = query.filter(Lead.id != exclude_id)
    return query.first() is not None


# ── Reads ────────────────────────────────────────────────────────────────────

def list_leads(session, owner_id, filter_request=None, page=None, limit=None):
    """
    Count + fetch one page of the caller's leads matching the filters.

    Both statements share the WHERE clause and run in one transaction at
    snapshot isolation, so total and data agree.

    Returns: {data, page, limit, total, total_pages}
    """
    scope = OwnerScope(owner_id)
    where = compile_filters(filter_request, scope)
    plan = plan_page(page, limit, start=where.next_index)
    table = LEAD_FIELDS.table

    try:
        begin_read_snapshot(session)
        total = session.execute(
            to_sqlalchemy(f'SELECT COUNT(*) FROM {table} WHERE {where.sql}', where.params)
        ).scalar_one()

        leads = _fetch_leads(
            session,
            f'SELECT * FROM {table} WHERE {where.sql} ORDER BY created_at DESC {plan.sql}',
            where.params + plan.params,
        )
    except SQLAlchemyError as e:
        session.rollback()
        raise _store_error(e, 'list leads') from e

    return {
        'data': [lead.to_dict() for lead in leads],
        'page': plan.page,
        'limit': plan.limit,
        'total': int(total),
        'total_pages': plan.total_pages(int(total)),
    }


def get_lead(session, owner_id, lead_id):
    """Return the caller's lead or raise NotFoundError."""
    try:
        lead = _fetch_scoped(session, OwnerScope(owner_id), lead_id)
    except SQLAlchemyError as e:
        session.rollback()
        raise _store_error(e, 'get lead') from e
    if lead is None:
        raise NotFoundError()
    return lead


# ── Writes ───────────────────────────────────────────────────────────────────

def create_lead(session, owner_id, data):
    """
    Insert a lead stamped with the caller as owner.

    `data` is a validated create body (external names, defaults filled).
    """
    try:
        if _email_taken(session, data['email']):
            raise ConflictError()

        lead = Lead(owner_id=owner_id)
        for name, value in data.items():
            spec = LEAD_FIELDS.lookup(name)
            if spec is not None:
                setattr(lead, spec.column, value)
        session.add(lead)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise _store_error(e, 'create lead') from e

    logger.info("Lead %s created for owner %s", lead.id, owner_id)
    return lead


def update_lead(session, owner_id, lead_id, patch, now=None):
    """
    Apply a validated sparse patch to the caller's lead.

    Raises NothingToUpdateError before touching the store, NotFoundError
    when no row matches id + owner (checked before anything else), then
    ConflictError if the new email is held by another lead.
    """
    scope = OwnerScope(owner_id)
    compiled = compile_patch(patch, scope, lead_id, now=now)

    try:
        # Ownership is checked before email uniqueness
        if _fetch_scoped(session, scope, lead_id) is None:
            session.rollback()
            raise NotFoundError()

        if 'email' in patch and _email_taken(session, patch['email'], exclude_id=lead_id):
            session.rollback()
            raise ConflictError()

        result = session.execute(to_sqlalchemy(compiled.sql, compiled.params))
        if result.rowcount == 0:
            session.rollback()
            raise NotFoundError()

        lead = _fetch_scoped(session, scope, lead_id)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise _store_error(e, 'update lead') from e

    logger.info("Lead %s updated (%s)", lead_id, ', '.join(compiled.columns))
    return lead


def delete_lead(session, owner_id, lead_id):
    """Delete the caller's lead or raise NotFoundError."""
    builder = OwnerScope(owner_id).begin()
    builder.add(f'id = {builder.bind(lead_id)}')
    where = builder.build()

    try:
        result = session.execute(
            to_sqlalchemy(f'DELETE FROM {LEAD_FIELDS.table} WHERE {where.sql}', where.params)
        )
        if result.rowcount == 0:
            session.rollback()
            raise NotFoundError()
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise _store_error(e, 'delete lead') from e

    logger.info("Lead %s deleted by owner %s", lead_id, owner_id)
