"""Donor Routes — HTTP contract of /api/v1/donors.

Tests cover:
    - Success envelope {success, message, data} with camelCase fields
    - Error envelope {success: false, message, error: {kind, ...}} and status codes
    - PUT cannot change status; PATCH /status is the only path
    - Listing query validation (limit cap, date range order)
    - Missing or malformed X-User-Id on create
    - Health and readiness endpoints
"""

from datetime import datetime
from uuid import UUID, uuid4

import pytest

from hundi.models import Donation


CREATE_BODY = {
    "hundiNo": "H1",
    "name": "Ravi Kumar",
    "mobileNumber": "+91 98765 43210",
    "address": "12 Temple Street",
}


@pytest.fixture
def headers(actor_id):
    return {"X-User-Id": str(actor_id)}


async def _create(client, headers, **overrides) -> dict:
    response = await client.post(
        "/api/v1/donors", json={**CREATE_BODY, **overrides}, headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["donor"]


# ─── Create ──────────────────────────────────────────────────────

async def test_create_returns_201_envelope(client, headers):
    response = await client.post("/api/v1/donors", json=CREATE_BODY, headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Donor created successfully"
    donor = body["data"]["donor"]
    assert donor["hundiNo"] == "H1"
    assert donor["status"] == "pending"
    assert donor["group"]["name"] == "Group A"
    assert donor["createdBy"]["email"] == "collector@example.com"
    assert donor["statusHistory"][0]["notes"] == "Donor created"


async def test_create_duplicate_returns_409(client, headers):
    await _create(client, headers)

    response = await client.post("/api/v1/donors", json=CREATE_BODY, headers=headers)

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "DuplicateKey"
    assert body["errors"][0]["field"] == "hundiNo"


async def test_create_validation_failure_returns_400(client, headers):
    response = await client.post(
        "/api/v1/donors", json={"name": "No Hundi"}, headers=headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["kind"] == "ValidationFailed"
    fields = {e["field"] for e in body["errors"]}
    assert {"hundiNo", "mobileNumber", "address"} <= fields


async def test_create_without_actor_header(client, seed_user):
    response = await client.post("/api/v1/donors", json=CREATE_BODY)

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "ValidationFailed"


async def test_create_with_malformed_actor_header(client, seed_user):
    response = await client.post(
        "/api/v1/donors", json=CREATE_BODY, headers={"X-User-Id": "someone"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "InvalidIdFormat"


async def test_create_with_unknown_group_returns_404(client, headers):
    response = await client.post(
        "/api/v1/donors", json={**CREATE_BODY, "group": str(uuid4())}, headers=headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Group not found"


# ─── Read ────────────────────────────────────────────────────────

async def test_list_donors(client, headers):
    await _create(client, headers)
    await _create(client, headers, hundiNo="H2", name="Meena Iyer")

    response = await client.get("/api/v1/donors", params={"search": "meena"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [d["hundiNo"] for d in data["donors"]] == ["H2"]
    assert data["pagination"] == {"total": 1, "page": 1, "pages": 1}


async def test_list_rejects_limit_over_cap(client):
    response = await client.get("/api/v1/donors", params={"limit": 500})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "limit"


async def test_list_rejects_inverted_date_range(client):
    response = await client.get(
        "/api/v1/donors",
        params={"startDate": "2026-05-01", "endDate": "2026-04-01"},
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "startDate"


async def test_get_donor(client, headers):
    created = await _create(client, headers)

    response = await client.get(f"/api/v1/donors/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["donor"]["id"] == created["id"]


async def test_get_donor_malformed_id(client):
    response = await client.get("/api/v1/donors/not-a-uuid")

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["kind"] == "InvalidIdFormat"
    assert body["message"] == "Invalid donor ID format"


async def test_get_donor_not_found(client):
    response = await client.get(f"/api/v1/donors/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["kind"] == "NotFound"


async def test_get_donor_status(client, headers):
    created = await _create(client, headers)

    response = await client.get(f"/api/v1/donors/{created['id']}/status")

    assert response.status_code == 200
    donor = response.json()["data"]["donor"]
    assert donor["status"] == "pending"
    assert donor["donatedThisMonth"] is False
    assert len(donor["statusHistory"]) == 1


# ─── Update ──────────────────────────────────────────────────────

async def test_put_updates_descriptive_fields(client, headers):
    created = await _create(client, headers)

    response = await client.put(
        f"/api/v1/donors/{created['id']}", json={"address": "7 Hill Road"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["donor"]["address"] == "7 Hill Road"


async def test_put_with_status_is_rejected(client, headers):
    created = await _create(client, headers)

    response = await client.put(
        f"/api/v1/donors/{created['id']}", json={"status": "collected"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "ValidationFailed"
    donor = (await client.get(f"/api/v1/donors/{created['id']}")).json()["data"]["donor"]
    assert donor["status"] == "pending"


async def test_patch_status(client, headers):
    created = await _create(client, headers)

    response = await client.patch(
        f"/api/v1/donors/{created['id']}/status",
        json={"status": "collected", "notes": "Paid in cash"},
    )

    assert response.status_code == 200
    donor = response.json()["data"]["donor"]
    assert donor["status"] == "collected"
    assert donor["statusHistory"][-1]["notes"] == "Paid in cash"


async def test_patch_invalid_transition_returns_400(client, headers):
    created = await _create(client, headers)
    url = f"/api/v1/donors/{created['id']}/status"
    await client.patch(url, json={"status": "collected"})

    response = await client.patch(url, json={"status": "skipped"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["kind"] == "InvalidTransition"
    assert body["message"] == "Invalid status transition from collected to skipped"


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_donor(client, headers):
    created = await _create(client, headers)

    response = await client.delete(f"/api/v1/donors/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Donor deleted successfully"}
    assert (await client.get(f"/api/v1/donors/{created['id']}")).status_code == 404


async def test_delete_donor_with_donations_returns_409(
    client, headers, test_session_factory,
):
    created = await _create(client, headers)
    async with test_session_factory() as session:
        session.add(Donation(
            donor_id=UUID(created["id"]),
            amount=250,
            collection_date=datetime(2026, 3, 1),
        ))
        await session.commit()

    response = await client.delete(f"/api/v1/donors/{created['id']}")

    assert response.status_code == 409
    assert response.json()["error"]["kind"] == "HasDependentRecords"


# ─── Rollover & health ───────────────────────────────────────────

async def test_status_rollover_endpoint(client):
    response = await client.post("/api/v1/donors/status-rollover")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Donor status update completed successfully"
    assert body["data"] == {"checked": 0, "updated": 0, "failed": 0}


async def test_health(client):
    response = await client.get("/api/v1/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness(client):
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"
