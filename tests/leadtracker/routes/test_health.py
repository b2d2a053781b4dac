"""Tests for the /health route."""


class TestHealthCheck:
    """GET /health returns a simple health status."""

    def test_returns_200_with_healthy_status(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.json == {"status": "healthy"}

    def test_does_not_require_login(self, client):
        assert client.get('/health').status_code == 200

    def test_unknown_route_is_json_404(self, client):
        resp = client.get('/nope')
        assert resp.status_code == 404
        assert 'error' in resp.json
