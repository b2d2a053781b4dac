"""
Pagination planner — page/limit request values → LIMIT/OFFSET placeholders.

Never rejects: missing or unparseable values fall back to the defaults and
out-of-range numbers are clamped.
"""
from dataclasses import dataclass
from typing import Tuple

from leadtracker.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT

# OFFSET is bound as a signed 64-bit integer on every supported store
MAX_OFFSET = 2 ** 63 - 1


@dataclass(frozen=True)
class PagePlan:
    page: int
    limit: int
    offset: int
    sql: str
    params: Tuple[int, int]

    def total_pages(self, total):
        """ceil(total / limit); 0 when there is nothing to show."""
        if total <= 0:
            return 0
        return -(-total // self.limit)


def _to_int(raw, default):
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def plan_page(page=None, limit=None, start=1):
    """
    Normalize page/limit and allocate `$start` (limit) and `$start+1` (offset).

    `start` is the next free placeholder index after the WHERE clause.
    """
    limit = min(max(_to_int(limit, DEFAULT_PAGE_LIMIT), 1), MAX_PAGE_LIMIT)
    page = min(max(_to_int(page, 1), 1), MAX_OFFSET // limit + 1)
    offset = (page - 1) * limit
    sql = f'LIMIT ${start} OFFSET ${start + 1}'
    return PagePlan(page=page, limit=limit, offset=offset, sql=sql, params=(limit, offset))
