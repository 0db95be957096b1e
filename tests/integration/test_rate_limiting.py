from fastapi.testclient import TestClient

from landmarks.core.config import Settings


def test_sixty_first_request_is_rejected(client, upstream):
    for i in range(60):
        r = client.get('/api/landmarks/search?lat=40.7&lon=-74.0')
        assert r.status_code == 200, f"request {i + 1} should be admitted"

    r = client.get('/api/landmarks/search?lat=40.7&lon=-74.0')
    assert r.status_code == 429
    body = r.json()
    assert body['error'] == 'Too many requests'
    assert body['message']
    assert 0 < body['retryAfter'] <= 60
    assert r.headers['Retry-After'] == str(body['retryAfter'])
    # Throttled requests never reach upstream
    assert len(upstream.requests) == 60


def test_limit_is_shared_by_search_and_detail(client):
    for _ in range(30):
        assert client.get('/api/landmarks/search?lat=40.7&lon=-74.0').status_code == 200
        assert client.get('/api/landmarks/645042').status_code == 200
    assert client.get('/api/landmarks/645042').status_code == 429


def test_invalid_requests_count_against_the_limit(client):
    for _ in range(60):
        assert client.get('/api/landmarks/search?lat=999&lon=0').status_code == 400
    assert client.get('/api/landmarks/search?lat=40.7&lon=-74.0').status_code == 429


def test_health_is_not_rate_limited(client):
    for _ in range(61):
        client.get('/api/landmarks/search?lat=40.7&lon=-74.0')
    assert client.get('/health').status_code == 200


def test_rate_limit_headers_on_admitted_requests(client):
    r = client.get('/api/landmarks/search?lat=40.7&lon=-74.0')
    assert r.headers['X-RateLimit-Limit'] == '60'
    assert r.headers['X-RateLimit-Remaining'] == '59'
    assert int(r.headers['X-RateLimit-Reset']) > 0


def test_forwarded_for_ignored_by_default(client):
    for i in range(60):
        client.get('/api/landmarks/search?lat=40.7&lon=-74.0', headers={'X-Forwarded-For': f'10.0.0.{i}'})
    r = client.get('/api/landmarks/search?lat=40.7&lon=-74.0', headers={'X-Forwarded-For': '10.0.1.1'})
    assert r.status_code == 429


def test_forwarded_for_honoured_when_trusted(app, monkeypatch):
    monkeypatch.setattr('landmarks.utils.security.settings', Settings(TRUST_FORWARDED_FOR=True))
    with TestClient(app) as c:
        for _ in range(60):
            c.get('/api/landmarks/search?lat=40.7&lon=-74.0', headers={'X-Forwarded-For': '203.0.113.5'})
        blocked = c.get('/api/landmarks/search?lat=40.7&lon=-74.0', headers={'X-Forwarded-For': '203.0.113.5'})
        other = c.get('/api/landmarks/search?lat=40.7&lon=-74.0', headers={'X-Forwarded-For': '198.51.100.7, 10.0.0.1'})
    assert blocked.status_code == 429
    assert other.status_code == 200
