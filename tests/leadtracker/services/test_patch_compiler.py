"""Tests for leadtracker.services.patch_compiler — sparse patch → UPDATE."""
from datetime import datetime, timezone

import pytest

from leadtracker.errors import NothingToUpdateError, ValidationError
from leadtracker.services.clauses import placeholder_count
from leadtracker.services.ownership import OwnerScope
from leadtracker.services.patch_compiler import compile_patch

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def scope():
    return OwnerScope('owner-1')


class TestCompilePatch:

    def test_single_field(self, scope):
        compiled = compile_patch({'source': 'referral'}, scope, 'lead-9', now=NOW)
        assert compiled.sql == (
            'UPDATE leads SET source = $2, updated_at = $3, last_activity_at = $4 '
            'WHERE owner_id = $1 AND id = $5'
        )
        assert compiled.params == ('owner-1', 'referral', NOW, NOW, 'lead-9')
        assert compiled.columns == ('source',)

    def test_external_names_map_to_columns(self, scope):
        compiled = compile_patch({'value': 10.0, 'qualified': True}, scope, 'x', now=NOW)
        assert 'lead_value = $2' in compiled.sql
        assert 'is_qualified = $3' in compiled.sql
        assert compiled.columns == ('lead_value', 'is_qualified')

    def test_unknown_keys_ignored(self, scope):
        compiled = compile_patch({'owner_id': 'evil', 'id': 'other', 'score': 5}, scope, 'x', now=NOW)
        assert compiled.columns == ('score',)
        assert 'evil' not in compiled.params

    def test_explicit_none_is_forwarded(self, scope):
        compiled = compile_patch({'phone': None}, scope, 'x', now=NOW)
        assert compiled.params[1] is None

    def test_audit_timestamps_always_appended(self, scope):
        compiled = compile_patch({'city': 'Austin'}, scope, 'x', now=NOW)
        assert 'updated_at = $3' in compiled.sql
        assert 'last_activity_at = $4' in compiled.sql

    def test_defaults_now_to_current_utc(self, scope):
        before = datetime.now(timezone.utc)
        compiled = compile_patch({'city': 'Austin'}, scope, 'x')
        assert compiled.timestamp >= before
        assert compiled.timestamp.tzinfo is not None

    def test_placeholder_count_matches_params(self, scope):
        patch = {'first_name': 'A', 'last_name': 'B', 'email': 'a@b.co', 'score': 1, 'status': 'won'}
        compiled = compile_patch(patch, scope, 'x', now=NOW)
        assert placeholder_count(compiled.sql) == len(compiled.params)

    def test_where_always_scopes_by_owner_and_id(self, scope):
        compiled = compile_patch({'score': 1}, scope, 'lead-1', now=NOW)
        assert compiled.sql.endswith('WHERE owner_id = $1 AND id = $5')


class TestNothingToUpdate:

    def test_empty_patch_raises(self, scope):
        with pytest.raises(NothingToUpdateError):
            compile_patch({}, scope, 'x', now=NOW)

    def test_only_unknown_keys_raises(self, scope):
        with pytest.raises(NothingToUpdateError):
            compile_patch({'created_at': 'yesterday', 'nope': 1}, scope, 'x', now=NOW)

    def test_is_a_validation_error(self):
        assert issubclass(NothingToUpdateError, ValidationError)
        assert NothingToUpdateError().status_code == 400
