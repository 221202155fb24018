"""Tests for the issue API."""

import pytest


def issue_payload(title, city="Springfield", **fields):
    payload = {
        "title": title,
        "description": fields.pop("description", f"Details about {title}"),
        "city": city,
        "confirm_not_duplicate": True,
    }
    payload.update(fields)
    return payload


@pytest.fixture
async def seeded(client):
    """Create the plastic bag scenario through the API."""
    ids = {}
    for name, title, city in [
        ("bags", "Ban plastic bags in stores", "Springfield"),
        ("bikes", "Improve bike lanes downtown", "Springfield"),
        ("single_use", "ban single use plastic bags now", "Springfield"),
        ("elsewhere", "Ban single-use plastic bags", "Shelbyville"),
    ]:
        response = await client.post("/api/issues", json=issue_payload(title, city))
        assert response.status_code == 201
        ids[name] = response.json()["id"]
    return ids


async def test_create_and_get_issue(client):
    response = await client.post(
        "/api/issues",
        json=issue_payload("Fix potholes on Main St", category="Infrastructure", zip_code="02101"),
    )
    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "Open"
    assert created["vote_count"] == 0
    assert created["category"] == "Infrastructure"

    response = await client.get(f"/api/issues/{created['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == "Fix potholes on Main St"


async def test_get_unknown_issue(client):
    response = await client.get("/api/issues/does-not-exist")
    assert response.status_code == 404


async def test_create_rejects_invalid_zip_code(client):
    response = await client.post(
        "/api/issues", json=issue_payload("Fix potholes on Main St", zip_code="abc")
    )
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["title", "description", "city"])
async def test_create_rejects_blank_fields(client, field):
    payload = issue_payload("Fix potholes on Main St")
    payload[field] = "   "
    response = await client.post("/api/issues", json=payload)
    assert response.status_code == 400

    # Nothing was stored, so listing still works
    response = await client.get("/api/issues", params={"city": "Springfield"})
    assert response.status_code == 200
    assert response.json()["total"] == 0


async def test_create_strips_whitespace(client):
    response = await client.post(
        "/api/issues", json=issue_payload("  Fix potholes on Main St  ", city=" Springfield ")
    )
    assert response.status_code == 201
    assert response.json()["title"] == "Fix potholes on Main St"
    assert response.json()["city"] == "Springfield"


async def test_create_rejects_long_title(client):
    response = await client.post("/api/issues", json=issue_payload("pothole " * 30))
    assert response.status_code == 400


async def test_short_titles_skip_duplicate_gate(client):
    response = await client.post("/api/issues", json=issue_payload("Potholes!"))
    assert response.status_code == 201

    # Identical once normalized, but too short to be checked
    response = await client.post(
        "/api/issues", json=issue_payload("Potholes", confirm_not_duplicate=False)
    )
    assert response.status_code == 201


async def test_delete_issue(client, seeded):
    response = await client.delete(f"/api/issues/{seeded['bikes']}")
    assert response.status_code == 200

    response = await client.get(f"/api/issues/{seeded['bikes']}")
    assert response.status_code == 404

    response = await client.delete(f"/api/issues/{seeded['bikes']}")
    assert response.status_code == 404


async def test_create_duplicate_needs_confirmation(client):
    response = await client.post("/api/issues", json=issue_payload("Fix potholes on Main St"))
    assert response.status_code == 201
    original_id = response.json()["id"]

    duplicate = issue_payload("Fix potholes on main street", confirm_not_duplicate=False)
    response = await client.post("/api/issues", json=duplicate)
    assert response.status_code == 409
    body = response.json()
    assert [issue["id"] for issue in body["extra"]["duplicates"]] == [original_id]

    # Same title in another city is not a duplicate
    response = await client.post(
        "/api/issues",
        json=issue_payload("Fix potholes on main street", city="Shelbyville", confirm_not_duplicate=False),
    )
    assert response.status_code == 201

    duplicate["confirm_not_duplicate"] = True
    response = await client.post("/api/issues", json=duplicate)
    assert response.status_code == 201


async def test_similar_issues(client, seeded):
    response = await client.get(
        "/api/issues/similar",
        params={"title": "Ban single-use plastic bags", "city": "springfield"},
    )
    assert response.status_code == 200
    data = response.json()
    assert [issue["id"] for issue in data["items"]] == [seeded["single_use"], seeded["bags"]]
    assert data["keywords"] == ["ban", "singleuse", "plastic", "bags"]


async def test_similar_issues_other_city(client, seeded):
    response = await client.get(
        "/api/issues/similar",
        params={"title": "Improve bike lanes downtown", "city": "Shelbyville"},
    )
    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_similar_issues_short_title(client, seeded):
    response = await client.get(
        "/api/issues/similar", params={"title": "Ban bags", "city": "Springfield"}
    )
    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_similar_issues_threshold(client, seeded):
    response = await client.get(
        "/api/issues/similar",
        params={"title": "Ban single-use plastic bags", "city": "Springfield", "threshold": 0.55},
    )
    assert [issue["id"] for issue in response.json()["items"]] == [seeded["single_use"]]

    response = await client.get(
        "/api/issues/similar",
        params={"title": "Ban single-use plastic bags", "city": "Springfield", "threshold": 2},
    )
    assert response.status_code == 400


async def test_check_duplicate(client):
    response = await client.post(
        "/api/issues/check-duplicate",
        json={"title_a": "Fix potholes on Main St", "title_b": "Fix potholes on main street"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["is_duplicate"] is True
    assert data["word_similarity"] == pytest.approx(0.75)
    assert data["threshold"] == 0.65


async def test_check_duplicate_empty_titles(client):
    response = await client.post(
        "/api/issues/check-duplicate", json={"title_a": "", "title_b": ""}
    )
    data = response.json()
    assert data["is_duplicate"] is False
    assert data["score"] == pytest.approx(0.3)


async def test_check_duplicate_rejects_long_titles(client):
    long_title = "a" * 3200
    response = await client.post(
        "/api/issues/check-duplicate", json={"title_a": long_title, "title_b": "Fix potholes"}
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/issues/check-duplicate", json={"title_a": "Fix potholes", "title_b": long_title}
    )
    assert response.status_code == 400


async def test_similar_issues_rejects_long_title(client, seeded):
    response = await client.get(
        "/api/issues/similar", params={"title": "b" * 201, "city": "Springfield"}
    )
    assert response.status_code == 400


async def test_keywords(client):
    response = await client.get(
        "/api/issues/keywords", params={"title": "Should the city fix the potholes on Main St?"}
    )
    assert response.status_code == 200
    assert response.json()["keywords"] == ["city", "fix", "potholes", "main"]


async def test_search_issues(client, seeded):
    response = await client.get("/api/issues/search", params={"q": "plastic"})
    assert response.status_code == 200
    assert response.json()["total"] == 3

    response = await client.get("/api/issues/search", params={"q": "plastic", "city": "Springfield"})
    ids = {issue["id"] for issue in response.json()["items"]}
    assert ids == {seeded["bags"], seeded["single_use"]}


async def test_search_query_too_short(client, seeded):
    response = await client.get("/api/issues/search", params={"q": "p"})
    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_list_issues_by_city(client, seeded):
    response = await client.get("/api/issues", params={"city": "Springfield"})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert all(issue["city"] == "Springfield" for issue in data["items"])

    response = await client.get("/api/issues/cities")
    assert response.json()["cities"] == ["Shelbyville", "Springfield"]
