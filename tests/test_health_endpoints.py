def test_liveness(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_health_without_key_configured(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")
    assert body["env_key_set"] is False
    assert body["auth_valid"] is True
    assert body["api_key_provided"] is False
    assert body["test_params"] == {
        "advertiser_id": "not provided",
        "range_days": "not provided",
    }


def test_health_reports_key_mismatch_without_rejecting(client, test_settings):
    test_settings.proxy_api_key = "s3cret"
    r = client.get(
        "/api/health",
        params={"advertiser_id": "77", "range_days": "30"},
        headers={"X-API-Key": "wrong"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["env_key_set"] is True
    assert body["auth_valid"] is False
    assert body["api_key_provided"] is True
    assert body["test_params"] == {"advertiser_id": "77", "range_days": "30"}


def test_health_reports_key_match(client, test_settings):
    test_settings.proxy_api_key = "s3cret"
    r = client.get("/api/health", headers={"X-API-Key": "s3cret"})
    assert r.json()["auth_valid"] is True
