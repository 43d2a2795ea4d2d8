"""API contract tests for saved import mappings."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_import_mapping_crud(org_client: AsyncClient):
    payload = {
        "name": "Creditor export",
        "description": "Monthly placement file",
        "importType": "accounts",
        "isDefault": True,
        "fieldMappings": {"Acct": "accountNumber", "SSN": "ssn", "Branch": "custom1"},
    }

    create_resp = await org_client.post("/import-mappings", json=payload)
    assert create_resp.status_code == 201, create_resp.text
    created = create_resp.json()
    mapping_id = created["id"]
    assert created["isDefault"] is True
    assert created["usageCount"] == 0

    list_resp = await org_client.get("/import-mappings", params={"importType": "accounts"})
    assert list_resp.status_code == 200, list_resp.text
    assert [m["id"] for m in list_resp.json()] == [mapping_id]

    contacts_resp = await org_client.get("/import-mappings", params={"importType": "contacts"})
    assert contacts_resp.json() == []

    patch_resp = await org_client.patch(
        f"/import-mappings/{mapping_id}",
        json={"name": "Creditor export v2"},
    )
    assert patch_resp.status_code == 200, patch_resp.text
    assert patch_resp.json()["name"] == "Creditor export v2"
    assert patch_resp.json()["fieldMappings"]["Branch"] == "custom1"

    delete_resp = await org_client.delete(f"/import-mappings/{mapping_id}")
    assert delete_resp.status_code == 204, delete_resp.text

    get_resp = await org_client.get(f"/import-mappings/{mapping_id}")
    assert get_resp.status_code == 404


@pytest.mark.asyncio
async def test_new_default_clears_previous_default(org_client: AsyncClient):
    first = await org_client.post(
        "/import-mappings",
        json={
            "name": "Old",
            "importType": "accounts",
            "isDefault": True,
            "fieldMappings": {"Acct": "accountNumber"},
        },
    )
    second = await org_client.post(
        "/import-mappings",
        json={
            "name": "New",
            "importType": "accounts",
            "isDefault": True,
            "fieldMappings": {"Account": "accountNumber"},
        },
    )
    assert second.status_code == 201, second.text

    old = await org_client.get(f"/import-mappings/{first.json()['id']}")
    assert old.json()["isDefault"] is False


@pytest.mark.asyncio
async def test_default_is_per_import_type(org_client: AsyncClient):
    for import_type in ("accounts", "contacts"):
        resp = await org_client.post(
            "/import-mappings",
            json={
                "name": f"{import_type} default",
                "importType": import_type,
                "isDefault": True,
                "fieldMappings": {"Acct": "accountNumber"},
            },
        )
        assert resp.status_code == 201, resp.text

    listed = (await org_client.get("/import-mappings")).json()
    assert all(m["isDefault"] for m in listed)


@pytest.mark.asyncio
async def test_reserved_target_is_rejected(org_client: AsyncClient):
    resp = await org_client.post(
        "/import-mappings",
        json={
            "name": "Bad",
            "importType": "accounts",
            "fieldMappings": {"Id": "id"},
        },
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_unknown_import_type_is_422(org_client: AsyncClient):
    resp = await org_client.post(
        "/import-mappings",
        json={"name": "Bad", "importType": "payments", "fieldMappings": {}},
    )
    assert resp.status_code == 422
