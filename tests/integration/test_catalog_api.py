"""End-to-end API tests for the team, category, service and contact endpoints."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from clinic_cms.infrastructure.dependencies import get_media_host, get_content_record_repository
from clinic_cms.main import app

from tests.fakes import FakeMediaHost, FakeContentRecordRepository


@asynccontextmanager
async def _client(
    repository: FakeContentRecordRepository, media_host: FakeMediaHost
) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_content_record_repository] = lambda: repository
    app.dependency_overrides[get_media_host] = lambda: media_host
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def repository() -> FakeContentRecordRepository:
    return FakeContentRecordRepository()


@pytest.fixture
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


async def _create_member(client: AsyncClient, name: str, team: str = "DOCTORS") -> dict:
    response = await client.post(
        "/api/v1/team-members",
        data={"name": name, "team": team, "description": "Dentist", "designation": "BDS"},
        files={"imageFile": (f"{name}.png", b"png-bytes", "image/png")},
    )
    assert response.status_code == 201
    return response.json()["data"]


# ── Team members ──


@pytest.mark.asyncio
async def test_create_team_member_from_multipart_form(repository, media_host):
    async with _client(repository, media_host) as client:
        response = await client.post(
            "/api/v1/team-members",
            data={"name": "Dr. Lee", "team": "DOCTORS", "description": "Implant surgeon"},
            files={"imageFile": ("lee.png", b"png-bytes", "image/png")},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Team member created successfully"
    member = body["data"]
    assert member["kind"] == "team-member"
    assert member["fields"]["sort_order"] == 1
    assert member["fields"]["is_active"] is True
    assert member["media"]["image"]["url"].startswith("https://media.test/image/upload/v1/team-members/")


@pytest.mark.asyncio
async def test_team_member_with_unknown_team_is_rejected(repository, media_host):
    async with _client(repository, media_host) as client:
        response = await client.post(
            "/api/v1/team-members",
            json={"name": "Dr. Lee", "team": "NURSES", "description": "d"},
        )

    assert response.status_code == 400
    assert "Invalid team selected" in response.json()["error"]
    assert repository.record_count == 0


@pytest.mark.asyncio
async def test_grouped_roster_and_soft_delete(repository, media_host):
    async with _client(repository, media_host) as client:
        ana = await _create_member(client, "Ana")
        await _create_member(client, "Ben", team="CONSULTANT_SPECIALISTS")

        deleted = await client.delete(f"/api/v1/team-members/{ana['id']}")
        grouped = await client.get("/api/v1/team-members", params={"grouped": "true"})
        inactive = await client.get("/api/v1/team-members", params={"isActive": "false"})

    assert deleted.json()["message"] == "Team member deactivated"
    data = grouped.json()["data"]
    assert data["DOCTORS"] == []
    assert [m["fields"]["name"] for m in data["CONSULTANT_SPECIALISTS"]] == ["Ben"]
    assert [m["id"] for m in inactive.json()["data"]] == [ana["id"]]
    assert media_host.deleted == []


@pytest.mark.asyncio
async def test_reorder_team_member(repository, media_host):
    async with _client(repository, media_host) as client:
        ana = await _create_member(client, "Ana")
        await _create_member(client, "Ben")

        reordered = await client.put(f"/api/v1/team-members/{ana['id']}/order", json={"sortOrder": 9})
        listed = await client.get("/api/v1/team-members", params={"team": "DOCTORS"})

    assert reordered.json()["message"] == "Member order updated successfully"
    assert [m["fields"]["name"] for m in listed.json()["data"]] == ["Ben", "Ana"]


@pytest.mark.asyncio
async def test_unknown_team_member_is_404(repository, media_host):
    async with _client(repository, media_host) as client:
        response = await client.get("/api/v1/team-members/rec-404")

    assert response.status_code == 404
    assert response.json()["success"] is False


# ── Categories and services ──


@pytest.mark.asyncio
async def test_duplicate_category_title_is_a_conflict(repository, media_host):
    async with _client(repository, media_host) as client:
        first = await client.post("/api/v1/categories", json={"title": "Implants"})
        second = await client.post("/api/v1/categories", json={"title": "implants"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"] == "Category with this title already exists"
    assert repository.record_count == 1


@pytest.mark.asyncio
async def test_service_under_unknown_category_is_404(repository, media_host):
    async with _client(repository, media_host) as client:
        response = await client.post(
            "/api/v1/services",
            data={"categoryId": "rec-404", "name": "Implant", "overview": "o"},
            files={"imageFile": ("i.png", b"png-bytes", "image/png")},
        )

    assert response.status_code == 404
    assert media_host.uploads == []


@pytest.mark.asyncio
async def test_deleting_category_deletes_its_services(repository, media_host):
    async with _client(repository, media_host) as client:
        category = (await client.post("/api/v1/categories", json={"title": "Implants"})).json()["data"]
        created = await client.post(
            "/api/v1/services",
            data={
                "categoryId": category["id"],
                "name": "Single implant",
                "overview": "o",
                "section5PriceRangesCount": "1",
                "section5PriceRanges[0][title]": "Single",
                "section5PriceRanges[0][startPrice]": "1200",
                "section5PriceRanges[0][endPrice]": "1800",
            },
            files={"imageFile": ("i.png", b"png-bytes", "image/png")},
        )
        listed = await client.get("/api/v1/categories")
        deleted = await client.delete(f"/api/v1/categories/{category['id']}")
        services = await client.get("/api/v1/services")

    assert created.status_code == 201
    ranges = created.json()["data"]["children"]["section5_price_ranges"]
    assert ranges[0]["fields"]["start_price"] == 1200.0
    assert listed.json()["data"][0]["services_count"] == 1
    assert deleted.json()["message"] == "Category deleted successfully"
    assert services.json()["data"] == []
    assert repository.record_count == 0
    assert media_host.deleted == [created.json()["data"]["media"]["image"]["url"]]


# ── Contact messages ──


@pytest.mark.asyncio
async def test_contact_messages_are_paginated(repository, media_host):
    async with _client(repository, media_host) as client:
        for name in ("Ann", "Bob", "Cat"):
            response = await client.post(
                "/api/v1/contact",
                json={
                    "name": name,
                    "emailId": f"{name.lower()}@example.com",
                    "mobileNumber": "0123456789",
                    "message": "Please call me back.",
                },
            )
            assert response.status_code == 201
        page = await client.get("/api/v1/contact", params={"limit": 2})
        found = await client.get("/api/v1/contact", params={"search": "BOB"})

    body = page.json()
    assert [m["fields"]["name"] for m in body["data"]] == ["Cat", "Bob"]
    assert body["pagination"] == {"total": 3, "limit": 2, "offset": 0, "has_more": True}
    assert [m["fields"]["name"] for m in found.json()["data"]] == ["Bob"]


@pytest.mark.asyncio
async def test_contact_message_with_bad_email_is_rejected(repository, media_host):
    async with _client(repository, media_host) as client:
        response = await client.post(
            "/api/v1/contact",
            json={
                "name": "Ann",
                "emailId": "ann-at-example",
                "mobileNumber": "0123456789",
                "message": "Please call me back.",
            },
        )

    assert response.status_code == 400
    assert "Please enter a valid email address." in response.json()["error"]
