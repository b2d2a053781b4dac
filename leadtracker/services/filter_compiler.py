"""
Filter compiler — query-string filters → parameterized WHERE clause.

Lenient: unknown keys, empty values and suffixes that do
not fit the field's kind are skipped, and a malformed number is compiled as a
NaN sentinel rather than rejected. Column names come from the registry and
every value is bound, never interpolated.
"""
import logging
import math
import re

from leadtracker.services.field_registry import (
    LEAD_FIELDS, TEXT, ENUM, NUMBER, BOOLEAN, CONTAINS, GT, LT,
)

logger = logging.getLogger('services.filter_compiler')

# Leading decimal literal; trailing text is ignored ("40abc" is 40)
_NUMBER_RE = re.compile(r'\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)')

_COMPARATORS = {GT: '>', LT: '<'}


def parse_number(raw):
    """Parse the leading decimal number of a string; no number (or a non-finite one) is NaN."""
    if isinstance(raw, bool):
        return float('nan')
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        match = _NUMBER_RE.match(raw) if isinstance(raw, str) else None
        if match is None:
            return float('nan')
        number = float(match.group(1))
    return number if math.isfinite(number) else float('nan')


def escape_like(value):
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def _is_empty(value):
    return value is None or value == ''


def _normalize(raw):
    """Drop empty members from list values; None means 'skip this key'."""
    if isinstance(raw, (list, tuple)):
        values = [v for v in raw if not _is_empty(v)]
        return values or None
    return None if _is_empty(raw) else raw


def _first(value):
    return value[0] if isinstance(value, list) else value


def compile_filters(filter_request, scope, registry=LEAD_FIELDS):
    """
    Compile a FilterRequest into a CompiledPredicate.

    Args:
        filter_request: mapping of parameter name → str or list of str.
        scope:          OwnerScope — its predicate is always first ($1).
        registry:       FieldRegistry naming the filterable fields.

    Returns:
        CompiledPredicate whose params line up with $1..$n.
    """
    builder = scope.begin()

    for key, raw in (filter_request or {}).items():
        resolved = registry.resolve_filter(key)
        if resolved is None:
            continue
        value = _normalize(raw)
        if value is None:
            continue

        spec, op = resolved
        column = spec.column

        if spec.kind == TEXT:
            value = str(_first(value))
            if op == CONTAINS:
                ph = builder.bind(f'%{escape_like(value)}%')
                builder.add(f"LOWER({column}) LIKE LOWER({ph}) ESCAPE '\\'")
            else:
                builder.add(f'{column} = {builder.bind(value)}')

        elif spec.kind == ENUM:
            if isinstance(value, list):
                placeholders = ', '.join(builder.bind(str(v)) for v in value)
                builder.add(f'{column} IN ({placeholders})')
            else:
                builder.add(f'{column} = {builder.bind(str(value))}')

        elif spec.kind == NUMBER:
            number = parse_number(_first(value))
            comparator = _COMPARATORS.get(op, '=')
            builder.add(f'{column} {comparator} {builder.bind(number)}')

        elif spec.kind == BOOLEAN:
            builder.add(f'{column} = {builder.bind(_first(value) == "true")}')

        else:
            builder.add(f'{column} = {builder.bind(_first(value))}')

    compiled = builder.build()
    logger.debug("Compiled filters: %s (%d params)", compiled.sql, len(compiled.params))
    return compiled
