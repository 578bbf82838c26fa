# tests/v1/test_providers_api.py
"""Tests for streaming provider endpoints."""

from fastapi import status

from whattowatch.services.catalog import CatalogError

PROVIDERS = [
    {"provider_id": 8, "provider_name": "Netflix", "display_priority": 1},
    {"provider_id": 337, "provider_name": "Disney Plus", "display_priority": 2},
]


def test_list_providers_for_group(client, family, fake_catalog) -> None:
    fake_catalog.providers = PROVIDERS
    client.post("/api/v1/providers", json={"userId": "alice", "providerIds": [8]})
    client.post("/api/v1/providers", json={"userId": "bob", "providerIds": [337, 8]})

    response = client.get("/api/v1/providers", params={"groupId": "group-1"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"providers": PROVIDERS, "selected": [8, 337]}


def test_list_providers_for_user(client, family, fake_catalog) -> None:
    client.post("/api/v1/providers", json={"userId": "carol", "providerIds": [15]})

    response = client.get("/api/v1/providers", params={"userId": "carol"})

    assert response.json()["selected"] == [15]


def test_save_replaces_previous_selection(client, family) -> None:
    client.post("/api/v1/providers", json={"userId": "alice", "providerIds": [8, 9]})
    response = client.post("/api/v1/providers", json={"userId": "alice", "providerIds": [337]})

    assert response.json() == {"success": True}
    selected = client.get("/api/v1/providers", params={"userId": "alice"}).json()["selected"]
    assert selected == [337]


def test_departed_member_providers_are_dropped(client, family) -> None:
    client.post("/api/v1/providers", json={"userId": "carol", "providerIds": [15]})
    client.delete("/api/v1/groups/group-1/members/carol")

    response = client.get("/api/v1/providers", params={"groupId": "group-1"})

    assert response.json()["selected"] == []


def test_unknown_user_cannot_save(client) -> None:
    response = client.post("/api/v1/providers", json={"userId": "ghost", "providerIds": [8]})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_catalog_failure(client, fake_catalog) -> None:
    fake_catalog.fail_with = CatalogError("boom")

    response = client.get("/api/v1/providers")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Failed to fetch providers"
