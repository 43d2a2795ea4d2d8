"""
API contract tests for the import endpoints.

Tests account/contact import, CSV preview, batch history and tenant scoping.
"""
import io
import uuid

import pytest
from httpx import AsyncClient

from debtdesk.db.enums import ImportType
from debtdesk.services import import_mapping_service


def create_csv_content(rows: list[dict]) -> bytes:
    """Helper to create CSV content from list of dicts."""
    if not rows:
        return b""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(str(row.get(h, "")) for h in headers))
    return "\n".join(lines).encode("utf-8")


def account_payload(portfolio, client, records, **extra) -> dict:
    return {
        "portfolioId": str(portfolio.id),
        "clientId": str(client.id),
        "records": records,
        "mappings": {"Acct": "accountNumber", "SSN": "ssn", "Balance": "originalBalance"},
        **extra,
    }


@pytest.mark.asyncio
async def test_import_accounts_response_shape(org_client: AsyncClient, test_portfolio, test_client):
    payload = account_payload(
        test_portfolio,
        test_client,
        [{"Acct": "A1", "SSN": "111223333", "Balance": "$1,250.00"}, {"Acct": "", "SSN": ""}],
        fileNumberStart=1,
    )

    response = await org_client.post("/import/accounts", json=payload)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    assert data["results"]["created"] == 1
    assert data["results"]["updated"] == 0
    assert data["results"]["linked"] == 0
    assert data["results"]["errors"] == ["Row 2: Row missing account number and SSN - skipped"]
    assert data["results"]["warnings"] == []
    assert data["message"] == "Import complete: 1 created, 0 updated, 0 linked across portfolios"
    assert uuid.UUID(data["batchId"])


@pytest.mark.asyncio
async def test_import_accounts_twice_updates(org_client: AsyncClient, test_portfolio, test_client):
    payload = account_payload(test_portfolio, test_client, [{"Acct": "A1", "Balance": "10"}])

    first = await org_client.post("/import/accounts", json=payload)
    second = await org_client.post("/import/accounts", json=payload)

    assert first.json()["results"]["created"] == 1
    assert second.json()["results"]["created"] == 0
    assert second.json()["results"]["updated"] == 1


@pytest.mark.asyncio
async def test_import_accounts_missing_required_fields(org_client: AsyncClient, test_portfolio):
    response = await org_client.post(
        "/import/accounts",
        json={"portfolioId": str(test_portfolio.id), "records": []},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_import_accounts_unknown_portfolio(org_client: AsyncClient, test_client):
    payload = {
        "portfolioId": str(uuid.uuid4()),
        "clientId": str(test_client.id),
        "records": [{"Acct": "A1"}],
        "mappings": {"Acct": "accountNumber"},
    }
    response = await org_client.post("/import/accounts", json=payload)
    assert response.status_code == 404
    assert response.json()["detail"] == "Portfolio not found"


@pytest.mark.asyncio
async def test_import_accounts_reserved_target(org_client: AsyncClient, test_portfolio, test_client):
    payload = account_payload(test_portfolio, test_client, [{"Acct": "A1"}])
    payload["mappings"] = {"Acct": "accountNumber", "Link": "linkedAccountId"}

    response = await org_client.post("/import/accounts", json=payload)

    assert response.status_code == 400
    assert "linkedAccountId" in response.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_tenant_is_404(client: AsyncClient, test_portfolio, test_client):
    response = await client.post(
        "/import/accounts",
        json=account_payload(test_portfolio, test_client, [{"Acct": "A1"}]),
        headers={"X-Organization-Id": str(uuid.uuid4())},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_missing_tenant_header_is_422(client: AsyncClient, test_portfolio, test_client):
    response = await client.post(
        "/import/accounts",
        json=account_payload(test_portfolio, test_client, [{"Acct": "A1"}]),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_import_contacts_endpoint(org_client: AsyncClient, test_portfolio, test_client):
    await org_client.post(
        "/import/accounts",
        json=account_payload(test_portfolio, test_client, [{"Acct": "A1"}]),
    )

    response = await org_client.post(
        "/import/contacts",
        json={
            "portfolioId": str(test_portfolio.id),
            "records": [
                {"Acct": "A1", "Phone": "555-0100"},
                {"Acct": "ZZ", "Phone": "555-0101"},
            ],
            "mappings": {"Acct": "accountNumber", "Phone": "phone"},
        },
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["results"] == {
        "added": 1,
        "matched": 1,
        "errors": ["Row 2: No matching account found"],
    }
    assert data["message"] == "Import complete: 1 contacts added to 1 accounts"


@pytest.mark.asyncio
async def test_preview_applies_default_mapping(db, org_client: AsyncClient, test_org):
    import_mapping_service.create_mapping(
        db,
        test_org.id,
        name="Creditor export",
        import_type=ImportType.ACCOUNTS,
        field_mappings={"Acct": "accountNumber", "Unrelated": "ssn"},
        is_default=True,
    )
    csv_data = create_csv_content(
        [
            {"Acct": "A1", "First Name": "Ann", "Notes": "x"},
            {"Acct": "A2", "First Name": "Bob", "Notes": "y"},
        ]
    )

    response = await org_client.post(
        "/import/preview",
        files={"file": ("accounts.csv", io.BytesIO(csv_data), "text/csv")},
        data={"import_type": "accounts"},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["headers"] == ["Acct", "First Name", "Notes"]
    assert data["totalRows"] == 2
    assert len(data["sampleRows"]) == 2
    assert data["mapping"] == {"Acct": "accountNumber", "First Name": "skip", "Notes": "skip"}
    assert data["suggestedMapping"]["First Name"] == "firstName"
    assert "phone5Label" in data["availableFields"]
    assert data["appliedMappingId"] is not None


@pytest.mark.asyncio
async def test_preview_rejects_mapping_for_other_import_type(db, org_client: AsyncClient, test_org):
    contacts_mapping = import_mapping_service.create_mapping(
        db,
        test_org.id,
        name="Phone list",
        import_type=ImportType.CONTACTS,
        field_mappings={"Acct": "accountNumber", "Phone": "phone"},
    )
    csv_data = create_csv_content([{"Acct": "A1", "Phone": "555-0100"}])

    response = await org_client.post(
        "/import/preview",
        files={"file": ("accounts.csv", io.BytesIO(csv_data), "text/csv")},
        data={"import_type": "accounts", "mapping_id": str(contacts_mapping.id)},
    )

    assert response.status_code == 400
    assert "contacts" in response.json()["detail"]


@pytest.mark.asyncio
async def test_preview_rejects_non_csv(org_client: AsyncClient):
    response = await org_client.post(
        "/import/preview",
        files={"file": ("accounts.xlsx", io.BytesIO(b"PK\x03\x04"), "application/octet-stream")},
        data={"import_type": "accounts"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_preview_rejects_empty_csv(org_client: AsyncClient):
    response = await org_client.post(
        "/import/preview",
        files={"file": ("empty.csv", io.BytesIO(b""), "text/csv")},
        data={"import_type": "contacts"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_batch_history_and_detail(org_client: AsyncClient, test_portfolio, test_client):
    created = await org_client.post(
        "/import/accounts",
        json=account_payload(test_portfolio, test_client, [{"Acct": "A1"}], fileName="a.csv"),
    )
    batch_id = created.json()["batchId"]

    list_resp = await org_client.get("/import/batches")
    assert list_resp.status_code == 200, list_resp.text
    batches = list_resp.json()
    assert [b["id"] for b in batches] == [batch_id]
    assert batches[0]["createdCount"] == 1

    detail = await org_client.get(f"/import/batches/{batch_id}")
    assert detail.status_code == 200, detail.text
    body = detail.json()
    assert body["status"] == "completed"
    assert body["fileName"] == "a.csv"
    assert body["fanoutFailures"] is None

    incomplete = await org_client.get(f"/import/batches/{batch_id}/incomplete")
    assert incomplete.status_code == 200
    assert incomplete.json() == []


@pytest.mark.asyncio
async def test_batch_not_found(org_client: AsyncClient):
    response = await org_client.get(f"/import/batches/{uuid.uuid4()}")
    assert response.status_code == 404
