"""Tests for leadtracker.services.field_registry — the field allow-list."""
import pytest

from leadtracker.services.field_registry import (
    LEAD_FIELDS, FieldRegistry, FieldSpec, TEXT, NUMBER, ENUM, BOOLEAN, EQ, CONTAINS, GT, LT,
)


class TestLookup:

    def test_known_field(self):
        spec = LEAD_FIELDS.lookup('value')
        assert spec.column == 'lead_value'
        assert spec.kind == NUMBER

    def test_unknown_field_is_none(self):
        assert LEAD_FIELDS.lookup('password') is None

    def test_column_name_is_not_an_alias(self):
        assert LEAD_FIELDS.lookup('lead_value') is None
        assert LEAD_FIELDS.lookup('is_qualified') is None

    def test_owner_and_system_columns_absent(self):
        for name in ('id', 'owner_id', 'created_at', 'updated_at', 'last_activity_at'):
            assert LEAD_FIELDS.lookup(name) is None

    def test_non_string_name_is_none(self):
        assert LEAD_FIELDS.lookup(None) is None
        assert LEAD_FIELDS.lookup(42) is None

    def test_enum_fields_carry_choices(self):
        assert 'referral' in LEAD_FIELDS.lookup('source').choices
        assert LEAD_FIELDS.lookup('status').choices[0] == 'new'

    def test_kinds(self):
        assert LEAD_FIELDS.lookup('email').kind == TEXT
        assert LEAD_FIELDS.lookup('status').kind == ENUM
        assert LEAD_FIELDS.lookup('qualified').kind == BOOLEAN


class TestResolveFilter:

    @pytest.mark.parametrize('key,name,op', [
        ('score', 'score', EQ),
        ('score_gt', 'score', GT),
        ('value_lt', 'value', LT),
        ('first_name_contains', 'first_name', CONTAINS),
        ('company', 'company', EQ),
    ])
    def test_resolves(self, key, name, op):
        spec, resolved_op = LEAD_FIELDS.resolve_filter(key)
        assert spec.name == name
        assert resolved_op == op

    @pytest.mark.parametrize('key', [
        'status_contains', 'qualified_gt', 'email_lt', 'nothing_contains', '_gt', 'score_gte',
    ])
    def test_inapplicable_or_unknown(self, key):
        assert LEAD_FIELDS.resolve_filter(key) is None

    def test_non_filterable_field_is_not_resolved(self):
        registry = FieldRegistry('t', [FieldSpec('secret', 'secret', TEXT, filterable=False)])
        assert registry.resolve_filter('secret') is None
        assert registry.resolve_filter('secret_contains') is None


class TestRegistry:

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError):
            FieldRegistry('t', [FieldSpec('a', 'a', TEXT), FieldSpec('a', 'b', TEXT)])

    def test_updatable_lists_all_lead_fields(self):
        names = {s.name for s in LEAD_FIELDS.updatable()}
        assert names == {
            'first_name', 'last_name', 'email', 'phone', 'company', 'city', 'state',
            'source', 'status', 'score', 'value', 'qualified',
        }

    def test_contains(self):
        assert 'email' in LEAD_FIELDS
        assert 'owner_id' not in LEAD_FIELDS
