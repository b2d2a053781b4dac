"""
Request-body validation for lead create / patch.

Returns cleaned dicts keyed by external field names, or raises ValidationError
listing every offending field. Runs before anything touches the store.
"""
import re

from leadtracker.config import MAX_SCORE
from leadtracker.errors import ValidationError
from leadtracker.services.field_registry import LEAD_FIELDS, TEXT, ENUM, NUMBER, BOOLEAN

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

REQUIRED_ON_CREATE = ('first_name', 'last_name', 'email', 'source')

CREATE_DEFAULTS = {
    'status': 'new',
    'score': 0,
    'value': 0,
    'qualified': False,
}


def _clean_text(spec, value):
    if not isinstance(value, str):
        raise ValueError('must be a string')
    value = value.strip()
    if spec.name == 'email':
        value = value.lower()
        if not EMAIL_RE.match(value):
            raise ValueError('must be a valid email address')
    elif not spec.nullable and not value:
        raise ValueError('must not be empty')
    return value


def _clean_enum(spec, value):
    if value not in spec.choices:
        raise ValueError(f"must be one of: {', '.join(spec.choices)}")
    return value


def _clean_number(spec, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError('must be a number')
    if spec.name == 'score':
        if not float(value).is_integer() or not 0 <= value <= MAX_SCORE:
            raise ValueError(f'must be an integer between 0 and {MAX_SCORE}')
        return int(value)
    if value < 0:
        raise ValueError('must be greater than or equal to 0')
    return float(value)


def _clean_boolean(spec, value):
    if not isinstance(value, bool):
        raise ValueError('must be a boolean')
    return value


_CLEANERS = {
    TEXT: _clean_text,
    ENUM: _clean_enum,
    NUMBER: _clean_number,
    BOOLEAN: _clean_boolean,
}


def _clean_fields(body, registry):
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    cleaned = {}
    errors = []
    for name, value in body.items():
        spec = registry.lookup(name)
        if spec is None or not spec.updatable:
            continue
        if value is None:
            if spec.nullable:
                cleaned[name] = None
            else:
                errors.append({'field': name, 'message': 'must not be null'})
            continue
        try:
            cleaned[name] = _CLEANERS[spec.kind](spec, value)
        except ValueError as e:
            errors.append({'field': name, 'message': str(e)})
    return cleaned, errors


def validate_create(body, registry=LEAD_FIELDS):
    """Validate a create body; fills defaults for omitted optional fields."""
    cleaned, errors = _clean_fields(body, registry)
    seen = {e['field'] for e in errors}
    for name in REQUIRED_ON_CREATE:
        if name not in cleaned and name not in seen:
            errors.append({'field': name, 'message': 'is required'})
    if errors:
        raise ValidationError(errors=errors)

    for name, default in CREATE_DEFAULTS.items():
        cleaned.setdefault(name, default)
    return cleaned


def validate_patch(body, registry=LEAD_FIELDS):
    """Validate a sparse patch; only present keys are returned."""
    cleaned, errors = _clean_fields(body, registry)
    if errors:
        raise ValidationError(errors=errors)
    return cleaned


MIN_PASSWORD_LENGTH = 6


def validate_registration(body):
    """Validate a sign-up body: email, password and both names."""
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    cleaned = {}
    errors = []
    for name in ('first_name', 'last_name', 'email'):
        value = body.get(name)
        if value is None:
            errors.append({'field': name, 'message': 'is required'})
            continue
        try:
            cleaned[name] = _clean_text(LEAD_FIELDS.lookup(name), value)
        except ValueError as e:
            errors.append({'field': name, 'message': str(e)})

    password = body.get('password')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append({
            'field': 'password',
            'message': f'must be at least {MIN_PASSWORD_LENGTH} characters',
        })
    else:
        cleaned['password'] = password

    if errors:
        raise ValidationError(errors=errors)
    return cleaned
