"""
Ownership guard — every read, update and delete starts from `owner_id = $1`.

This is the only place an owner predicate is written. The field registry has
no owner field, so filters and patches cannot add or override one.
"""
from leadtracker.services.clauses import ClauseBuilder

OWNER_COLUMN = 'owner_id'


class OwnerScope:
    """Tenant scope for one authenticated principal."""

    def __init__(self, owner_id):
        if owner_id is None or owner_id == '':
            raise ValueError("OwnerScope requires a principal id")
        self.owner_id = owner_id

    def begin(self) -> ClauseBuilder:
        """New builder whose first predicate (and $1) is the owner scope."""
        builder = ClauseBuilder(start=1)
        builder.add(f'{OWNER_COLUMN} = {builder.bind(self.owner_id)}')
        return builder

    def __repr__(self):
        return f'OwnerScope({self.owner_id!r})'
