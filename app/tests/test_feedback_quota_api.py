import asyncio

from app.tests.fakes import USER_HEADERS, make_service


async def seed(store):
    service = make_service(store=store)
    await service.analyze_batch("user_123", [{"text": "first"}, {"text": "second"}])
    await service.analyze_batch("someone_else", [{"text": "other"}])


def test_feedback_lists_recent_with_analysis(client, override_deps, store):
    asyncio.run(seed(store))

    response = client.get("/api/feedback?limit=10", headers=USER_HEADERS)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["count"] == 2
    assert {item["text"] for item in data["items"]} == {"first", "second"}
    assert all(item["analysis"]["sentiment"] == "positive" for item in data["items"])


def test_feedback_limit_is_bounded(client, override_deps):
    response = client.get("/api/feedback?limit=0", headers=USER_HEADERS)
    assert response.status_code == 422


def test_quota_endpoint(client, override_deps, quota):
    quota.used = 12

    response = client.get("/api/quota", headers=USER_HEADERS)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["plan"] == "free"
    assert (data["used"], data["limit"], data["remaining"]) == (12, 50, 38)
    assert data["allowed"] is True
    assert data["resets_at"].startswith("2030-01-01")


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/liveness").status_code == 204
