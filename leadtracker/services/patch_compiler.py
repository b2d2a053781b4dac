"""
Patch compiler — sparse patch document → parameterized UPDATE.

Only keys the registry marks updatable are assigned, in the document's order.
The two audit timestamps are always appended, but an empty patch is refused
before that: a write that only bumps timestamps is not an update.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Tuple

from leadtracker.errors import NothingToUpdateError
from leadtracker.services.field_registry import LEAD_FIELDS

logger = logging.getLogger('services.patch_compiler')

# System-maintained columns refreshed on every accepted patch
AUDIT_COLUMNS = ('updated_at', 'last_activity_at')


@dataclass(frozen=True)
class CompiledUpdate:
    sql: str
    params: Tuple[Any, ...]
    columns: Tuple[str, ...]
    timestamp: datetime


def compile_patch(patch, scope, lead_id, registry=LEAD_FIELDS, now=None):
    """
    Build `UPDATE <table> SET ... WHERE owner_id = $1 AND id = $k`.

    Args:
        patch:    mapping of external field name → new value. Present keys
                  are applied as-is, including None.
        scope:    OwnerScope — owns $1.
        lead_id:  target record id, bound last.
        now:      audit timestamp (defaults to current UTC time).

    Raises:
        NothingToUpdateError: no caller-supplied updatable field.
    """
    builder = scope.begin()
    assignments = []
    columns = []

    for name, value in (patch or {}).items():
        spec = registry.lookup(name)
        if spec is None or not spec.updatable:
            continue
        assignments.append(f'{spec.column} = {builder.bind(value)}')
        columns.append(spec.column)

    if not assignments:
        raise NothingToUpdateError()

    now = now or datetime.now(timezone.utc)
    for column in AUDIT_COLUMNS:
        assignments.append(f'{column} = {builder.bind(now)}')

    builder.add(f'id = {builder.bind(lead_id)}')
    where = builder.build()

    sql = f'UPDATE {registry.table} SET {", ".join(assignments)} WHERE {where.sql}'
    logger.debug("Compiled patch: %s", sql)
    return CompiledUpdate(sql=sql, params=where.params, columns=tuple(columns), timestamp=now)
