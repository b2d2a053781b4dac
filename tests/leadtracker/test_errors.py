"""Tests for leadtracker.errors — taxonomy and JSON rendering."""
import pytest

from leadtracker.errors import (
    ConflictError, InternalError, NotFoundError, NothingToUpdateError, ValidationError,
)


class TestTaxonomy:

    @pytest.mark.parametrize('error,status,message', [
        (ValidationError(), 400, 'Validation errors'),
        (NothingToUpdateError(), 400, 'No valid fields to update'),
        (NotFoundError(), 404, 'Lead not found'),
        (ConflictError(), 409, 'Lead with this email already exists'),
        (InternalError(), 500, 'Internal server error'),
    ])
    def test_defaults(self, error, status, message):
        assert error.status_code == status
        assert error.to_dict() == {'error': message}

    def test_nothing_to_update_is_a_validation_error(self):
        assert isinstance(NothingToUpdateError(), ValidationError)

    def test_validation_errors_listed(self):
        err = ValidationError(errors=[{'field': 'email', 'message': 'is required'}])
        assert err.to_dict()['errors'] == [{'field': 'email', 'message': 'is required'}]


class TestHandlers:

    def test_unexpected_exception_is_generic_500(self, app):
        def explode():
            raise RuntimeError('connection string with password')
        app.add_url_rule('/explode', 'explode', explode)

        resp = app.test_client().get('/explode')
        assert resp.status_code == 500
        assert resp.json == {'error': 'Internal server error'}

    def test_method_not_allowed_is_json(self, client):
        resp = client.post('/health')
        assert resp.status_code == 405
        assert 'error' in resp.json
