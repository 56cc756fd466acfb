from app.tests.fakes import USER_HEADERS, FakeEmbedder, failing_model, good_model


def test_analyze_batch(client, override_deps, store, quota):
    response = client.post(
        "/api/analyze",
        json={
            "items": [
                {"text": "Love it", "rating": 5, "productId": "sku-1"},
                {"text": "Arrived broken", "source": "email"},
            ]
        },
        headers=USER_HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    data = body["data"]
    assert data["success"] is True
    assert (data["total"], data["succeeded"], data["failed"]) == (2, 2, 0)
    assert [r["index"] for r in data["results"]] == [0, 1]
    assert data["results"][0]["analysis"]["topics"] == ["shipping", "quality"]
    assert quota.increments == [2]

    saved = {f.text: f for f in store.feedback.values()}
    assert saved["Love it"].product_id == "sku-1"
    assert saved["Love it"].user_id == "user_123"


def test_missing_items_is_bad_request(client, override_deps):
    response = client.post("/api/analyze", json={}, headers=USER_HEADERS)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "ITEMS_REQUIRED"


def test_invalid_item_is_bad_request(client, override_deps, store, quota):
    response = client.post(
        "/api/analyze",
        json={"items": [{"text": "ok"}, {"text": ""}]},
        headers=USER_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "INVALID_BATCH",
        "message": "Invalid item at index 1: text is required and must be a non-empty string",
    }
    assert store.insert_calls == 0
    assert quota.increments == []


def test_oversized_batch_is_bad_request(client, override_deps):
    response = client.post(
        "/api/analyze",
        json={"items": [{"text": f"t{i}"} for i in range(201)]},
        headers=USER_HEADERS,
    )

    assert response.status_code == 400
    assert "maximum is 200" in response.json()["error"]["message"]


def test_quota_exhausted(client, override_deps, store, quota):
    quota.allowed = False

    response = client.post(
        "/api/analyze", json={"items": [{"text": "hello"}]}, headers=USER_HEADERS
    )

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "QUOTA_EXCEEDED"
    assert store.insert_calls == 0


def test_total_insert_failure_is_server_error(client, override_deps, store, quota):
    store.raise_on_texts = {"a", "b"}

    response = client.post(
        "/api/analyze",
        json={"items": [{"text": "a"}, {"text": "b"}]},
        headers=USER_HEADERS,
    )

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "All feedback insertions failed"
    assert quota.increments == []


def test_provider_outage_returns_warning(client, override_deps):
    override_deps(model=failing_model(), embedder=FakeEmbedder(fail=True))

    response = client.post(
        "/api/analyze", json={"items": [{"text": "a"}]}, headers=USER_HEADERS
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert "platform.openai.com/usage" in data["warning"]
    assert "sentiment_score" not in data["results"][0]["analysis"]


def test_missing_user_header_is_unauthorized(client, override_deps):
    response = client.post("/api/analyze", json={"items": [{"text": "a"}]})
    assert response.status_code == 401


def test_disable_auth_uses_test_user(client, override_deps, store, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "DISABLE_AUTH", True)

    response = client.post("/api/analyze", json={"items": [{"text": "a"}]})

    assert response.status_code == 200
    assert [f.user_id for f in store.feedback.values()] == [settings.TEST_USER_ID]


def test_analyze_single(client, override_deps, quota):
    response = client.post(
        "/api/analyze/single",
        json={"text": "Support was slow", "rating": 2, "productId": "sku-9"},
        headers=USER_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["results"][0]["analysis"]["sentiment"] == "positive"
    assert quota.increments == [1]


def test_analyze_single_requires_text(client, override_deps):
    response = client.post(
        "/api/analyze/single", json={"rating": 2}, headers=USER_HEADERS
    )

    assert response.status_code == 400
    assert "index 0" in response.json()["error"]["message"]


def test_nan_confidence_degrades_only_sentiment(client, override_deps, quota):
    model = good_model()
    model.responses["sentiment"] = '{"sentiment": "positive", "confidence": NaN}'
    override_deps(model=model)

    response = client.post(
        "/api/analyze", json={"items": [{"text": "a"}]}, headers=USER_HEADERS
    )

    assert response.status_code == 200
    analysis = response.json()["data"]["results"][0]["analysis"]
    assert analysis["sentiment"] == "neutral"
    assert "sentiment_score" not in analysis
    assert analysis["summary"] == "Customer liked the product"
    assert quota.increments == [1]
