"""
Positional SQL clause assembly.

Compilers write fragments with `$n` placeholders and hand every literal to the
builder as a bound parameter. Numbering is strictly sequential, so a
downstream appender (pagination, the UPDATE's id predicate) can resume from
`next_index`. `to_sqlalchemy()` converts the `$n` dialect to a bound
SQLAlchemy text() statement at execution time.
"""
import math
import re
from dataclasses import dataclass
from typing import Any, List, Tuple

from sqlalchemy import bindparam, text

PLACEHOLDER_RE = re.compile(r'\$(\d+)')


@dataclass(frozen=True)
class CompiledPredicate:
    """A SQL fragment and its ordered bound parameters."""
    sql: str
    params: Tuple[Any, ...]
    start: int = 1

    @property
    def next_index(self) -> int:
        return self.start + len(self.params)


class ClauseBuilder:
    """Accumulates AND-ed predicates and their parameters."""

    def __init__(self, start: int = 1):
        self.start = start
        self.fragments: List[str] = []
        self.params: List[Any] = []

    @property
    def next_index(self) -> int:
        return self.start + len(self.params)

    def bind(self, value) -> str:
        """Register a parameter and return its placeholder."""
        placeholder = f'${self.next_index}'
        self.params.append(value)
        return placeholder

    def add(self, fragment: str):
        self.fragments.append(fragment)
        return self

    def build(self, joiner=' AND ') -> CompiledPredicate:
        return CompiledPredicate(joiner.join(self.fragments), tuple(self.params), self.start)


def placeholder_count(sql: str) -> int:
    return len(PLACEHOLDER_RE.findall(sql))


def _bind_value(value):
    # NaN from an unparseable number filter binds as NULL: the comparison
    # then matches nothing on every backend instead of being store-dependent.
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def to_sqlalchemy(sql: str, params):
    """
    Turn `$n` SQL + positional params into a bound text() clause.

    `$3` becomes `:p3` bound to params[2]; types are inferred from the Python
    values so datetimes and booleans get the dialect's processing.
    """
    params = list(params)
    used = sorted({int(n) for n in PLACEHOLDER_RE.findall(sql)})
    if used and (used[0] < 1 or used[-1] > len(params)):
        raise ValueError(f"Placeholders {used} do not match {len(params)} parameters")

    named_sql = PLACEHOLDER_RE.sub(lambda m: f':p{m.group(1)}', sql)
    binds = [bindparam(f'p{n}', _bind_value(params[n - 1])) for n in used]
    stmt = text(named_sql)
    if binds:
        stmt = stmt.bindparams(*binds)
    return stmt
