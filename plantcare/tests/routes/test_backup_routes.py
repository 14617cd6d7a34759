import pytest

from plantcare.app.helpers.care_kinds import CareKind


async def _seed(client):
    fern = (await client.post("/api/plants", json={"personal_name": "Fern", "location": "bathroom"})).json()
    cactus = (await client.post("/api/plants", json={"personal_name": "Spike", "watering_frequency_days": 21})).json()
    await client.post(
        f"/api/plants/{fern['id']}/watering-logs", json={"occurred_at": "2025-03-01T09:30:00Z", "amount": "200ml"}
    )
    await client.post(f"/api/plants/{cactus['id']}/repotting-logs", json={"pot_size": "10cm"})
    await client.post("/api/locations", json={"name": "bathroom"})
    return fern, cactus


@pytest.mark.anyio
async def test_export_contains_every_collection(async_client, repo):
    fern, _ = await _seed(async_client)

    resp = await async_client.get("/api/backup/export")

    assert resp.status_code == 200
    doc = resp.json()
    assert doc["version"] == 1
    assert doc["exported_at"].endswith("Z")
    assert [p["personal_name"] for p in doc["plants"]] == ["Fern", "Spike"]
    assert [loc["name"] for loc in doc["custom_locations"]] == ["bathroom"]
    for kind in CareKind:
        assert kind.table in doc
    watering = doc["watering_logs"][0]
    assert watering["plant_id"] == fern["id"]
    assert watering["amount"] == "200ml"
    assert watering["occurred_at"] == "2025-03-01T09:30:00Z"


@pytest.mark.anyio
async def test_export_import_round_trip_preserves_data(async_client, repo):
    await _seed(async_client)
    exported = (await async_client.get("/api/backup/export")).json()

    # Wipe and add unrelated data, then restore
    await async_client.post("/api/plants", json={"personal_name": "Intruder"})
    resp = await async_client.post("/api/backup/import", json=exported)

    assert resp.status_code == 200
    assert resp.json() == {
        "ok": True,
        "plants": 2,
        "custom_locations": 1,
        "logs": {
            "watering_logs": 1,
            "feeding_logs": 0,
            "repotting_logs": 1,
            "soil_top_up_logs": 0,
            "pruning_logs": 0,
        },
    }

    again = (await async_client.get("/api/backup/export")).json()
    exported.pop("exported_at")
    again.pop("exported_at")
    assert again == exported


@pytest.mark.anyio
async def test_import_then_create_continues_numbering(async_client, repo):
    await _seed(async_client)
    exported = (await async_client.get("/api/backup/export")).json()
    await async_client.post("/api/backup/import", json=exported)

    created = (await async_client.post("/api/plants", json={"personal_name": "New"})).json()

    assert created["plant_number"] == 3
    assert created["id"] not in [p["id"] for p in exported["plants"]]


@pytest.mark.anyio
async def test_import_rejects_orphan_logs_and_keeps_data(async_client, repo):
    await _seed(async_client)
    before = dict(repo.plants)
    doc = {
        "version": 1,
        "plants": [{"id": 1, "plant_number": 1, "personal_name": "Solo"}],
        "watering_logs": [{"id": 1, "plant_id": 2, "occurred_at": "2025-03-01T00:00:00Z"}],
    }

    resp = await async_client.post("/api/backup/import", json=doc)

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "invalid_backup"
    assert "watering_logs reference unknown plants [2]" in body["detail"]
    assert repo.plants == before


@pytest.mark.anyio
async def test_import_rejects_duplicate_plant_numbers(async_client, repo):
    doc = {
        "plants": [
            {"id": 1, "plant_number": 1, "personal_name": "A"},
            {"id": 2, "plant_number": 1, "personal_name": "B"},
        ],
    }

    resp = await async_client.post("/api/backup/import", json=doc)

    assert resp.status_code == 400
    assert "duplicate plant numbers [1]" in resp.json()["detail"]


@pytest.mark.anyio
async def test_import_schema_errors_are_validation_failures(async_client, repo):
    resp = await async_client.post("/api/backup/import", json={"plants": [{"id": 1}]})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Validation failed"


def _doc(**overrides):
    doc = {
        "version": 1,
        "plants": [{"id": 1, "plant_number": 1, "personal_name": "Solo"}],
        "watering_logs": [{"id": 1, "plant_id": 1, "occurred_at": "2025-03-01T00:00:00Z"}],
    }
    doc.update(overrides)
    return doc


@pytest.mark.anyio
@pytest.mark.parametrize(
    "doc, field",
    [
        (_doc(plants=[{"id": 1, "plant_number": 1, "personal_name": "Solo", "name": "n" * 300}]), "plants.0.name"),
        (_doc(plants=[{"id": 1, "plant_number": 1, "personal_name": "   "}]), "plants.0.personal_name"),
        (
            _doc(watering_logs=[{"id": 1, "plant_id": 1, "occurred_at": "2025-03-01T00:00:00Z", "amount": "a" * 500}]),
            "watering_logs.0.amount",
        ),
        (
            _doc(pruning_logs=[{"id": 1, "plant_id": 1, "occurred_at": "2025-03-01T00:00:00Z", "reason": "r" * 101}]),
            "pruning_logs.0.reason",
        ),
        (
            _doc(watering_logs=[{"id": 1, "plant_id": 1, "occurred_at": "2025-03-01T00:00:00Z", "notes": "x" * 2001}]),
            "watering_logs.0.notes",
        ),
        (_doc(custom_locations=[{"id": 1, "name": "  "}]), "custom_locations.0.name"),
        (_doc(version=2), "version"),
    ],
)
async def test_import_enforces_column_limits(async_client, repo, doc, field):
    await _seed(async_client)
    before = dict(repo.plants)

    resp = await async_client.post("/api/backup/import", json=doc)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Validation failed"
    assert field in [e["field"] for e in resp.json()["errors"]]
    assert repo.plants == before


@pytest.mark.anyio
async def test_import_normalizes_names_and_keeps_details(async_client, repo):
    doc = _doc(
        plants=[{"id": 1, "plant_number": 1, "personal_name": "  Solo   Fern ", "name": "  "}],
        watering_logs=[{"id": 1, "plant_id": 1, "occurred_at": "2025-03-01T00:00:00Z", "amount": "200ml"}],
    )

    resp = await async_client.post("/api/backup/import", json=doc)

    assert resp.status_code == 200
    assert repo.plants[1]["personal_name"] == "Solo Fern"
    assert repo.plants[1]["name"] == "Solo Fern"
    assert repo.logs[CareKind.WATERING][1]["amount"] == "200ml"
