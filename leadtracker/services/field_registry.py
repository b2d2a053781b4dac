"""
Field schema registry — the allow-list of lead fields the API may touch.

Maps an external field name to its trusted column, its value kind and whether
it takes part in filtering and/or updating. Anything not listed here is inert:
column identifiers in generated SQL only ever come from this table.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from leadtracker.config import LEAD_SOURCES, LEAD_STATUSES

# Value kinds
TEXT = 'text'
ENUM = 'enum'
NUMBER = 'number'
BOOLEAN = 'boolean'

# Filter operators
EQ = 'eq'
CONTAINS = 'contains'
GT = 'gt'
LT = 'lt'

# Key suffix → (operator, kinds it applies to)
FILTER_SUFFIXES = [
    ('_contains', CONTAINS, (TEXT,)),
    ('_gt', GT, (NUMBER,)),
    ('_lt', LT, (NUMBER,)),
]


@dataclass(frozen=True)
class FieldSpec:
    """One externally visible lead field."""
    name: str
    column: str
    kind: str
    filterable: bool = True
    updatable: bool = True
    nullable: bool = False
    choices: Tuple[str, ...] = ()


class FieldRegistry:
    """Static lookup table for one resource table."""

    def __init__(self, table: str, specs: Iterable[FieldSpec]):
        self.table = table
        self._specs: Dict[str, FieldSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"Duplicate field '{spec.name}' in registry for {table}")
            self._specs[spec.name] = spec

    def __iter__(self):
        return iter(self._specs.values())

    def __contains__(self, name):
        return name in self._specs

    def lookup(self, name: str) -> Optional[FieldSpec]:
        """Return the FieldSpec for an external name, or None."""
        if not isinstance(name, str):
            return None
        return self._specs.get(name)

    def resolve_filter(self, key: str) -> Optional[Tuple[FieldSpec, str]]:
        """
        Resolve a query-string key to (FieldSpec, operator).

        `score` → (score, eq); `score_gt` → (score, gt);
        `first_name_contains` → (first_name, contains). A suffix only counts
        when it applies to the base field's kind. Returns None otherwise.
        """
        spec = self.lookup(key)
        if spec is not None:
            return (spec, EQ) if spec.filterable else None

        if not isinstance(key, str):
            return None
        for suffix, op, kinds in FILTER_SUFFIXES:
            if key.endswith(suffix):
                base = self.lookup(key[:-len(suffix)])
                if base is not None and base.filterable and base.kind in kinds:
                    return base, op
        return None

    def updatable(self) -> List[FieldSpec]:
        return [s for s in self._specs.values() if s.updatable]


LEAD_FIELDS = FieldRegistry('leads', [
    FieldSpec('first_name', 'first_name', TEXT),
    FieldSpec('last_name', 'last_name', TEXT),
    FieldSpec('email', 'email', TEXT),
    FieldSpec('phone', 'phone', TEXT, nullable=True),
    FieldSpec('company', 'company', TEXT, nullable=True),
    FieldSpec('city', 'city', TEXT, nullable=True),
    FieldSpec('state', 'state', TEXT, nullable=True),
    FieldSpec('source', 'source', ENUM, choices=tuple(LEAD_SOURCES)),
    FieldSpec('status', 'status', ENUM, choices=tuple(LEAD_STATUSES)),
    FieldSpec('score', 'score', NUMBER),
    FieldSpec('value', 'lead_value', NUMBER),
    FieldSpec('qualified', 'is_qualified', BOOLEAN),
])
