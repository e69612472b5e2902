from sqlalchemy.exc import SQLAlchemyError
from roster import db


def test_health_ok(client):
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.json['status'] == 'operational'
    assert resp.json['database'] == 'connected'
    assert resp.json['timestamp'].endswith('Z')


def test_apis_health_alias(client):
    resp = client.get('/apis/health')
    assert resp.status_code == 200
    assert resp.json['database'] == 'connected'


def test_health_db_error(monkeypatch, client):
    def raise_error(*args, **kwargs):
        raise SQLAlchemyError("fail")
    monkeypatch.setattr(db.session, 'execute', raise_error)
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.json['database'] == 'disconnected'


def test_home_banner(client):
    resp = client.get('/')
    assert resp.status_code == 200
    assert resp.json['status'] == 'ok'


def test_unknown_route_is_json_404(client):
    resp = client.get('/nope')
    assert resp.status_code == 404
    assert resp.json == {'message': 'Not found'}


def test_health_is_never_rate_limited(client):
    statuses = {client.get('/health').status_code for _ in range(210)}
    statuses |= {client.get('/apis/health').status_code for _ in range(210)}
    assert statuses == {200}


def test_reads_have_no_global_rate_limit(client, student_headers):
    statuses = {client.get('/apis/students', headers=student_headers).status_code for _ in range(210)}
    assert statuses == {200}
