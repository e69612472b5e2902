def test_health_allowed_during_maintenance(client, monkeypatch):
    monkeypatch.setenv("MAINTENANCE_MODE", "1")
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json["status"] == "operational"


def test_requests_get_maintenance_response(client, monkeypatch, student_headers):
    monkeypatch.setenv("MAINTENANCE_MODE", "true")
    monkeypatch.setenv("MAINTENANCE_MESSAGE", "Routine upgrade in progress")
    response = client.get("/apis/students", headers=student_headers)
    assert response.status_code == 503
    assert response.json == {"message": "Routine upgrade in progress", "maintenance": True}


def test_default_maintenance_message(client, monkeypatch):
    monkeypatch.setenv("MAINTENANCE_MODE", "yes")
    monkeypatch.delenv("MAINTENANCE_MESSAGE", raising=False)
    response = client.get("/")
    assert response.status_code == 503
    assert "maintenance" in response.json["message"]


def test_bypass_token(client, monkeypatch, student_headers):
    monkeypatch.setenv("MAINTENANCE_MODE", "on")
    monkeypatch.setenv("MAINTENANCE_BYPASS_TOKEN", "letmein")
    assert client.get("/apis/students?maintenance_bypass=nope", headers=student_headers).status_code == 503
    assert client.get("/apis/students?maintenance_bypass=letmein", headers=student_headers).status_code == 200


def test_maintenance_off_by_default(client, monkeypatch):
    monkeypatch.delenv("MAINTENANCE_MODE", raising=False)
    assert client.get("/").status_code == 200
