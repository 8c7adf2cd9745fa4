"""Tests for the HTTP API."""

import asyncio

from fastapi.testclient import TestClient

from carbon_ledger.api.app import create_app
from carbon_ledger.containers import AppContainer
from tests.conftest import TODAY_KEY, InMemoryLedgerRepository, food


def test_health_reports_load_finished(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "loading": False}


def test_add_activity_and_read_today(container: AppContainer) -> None:
    payload = {
        "category": "transport",
        "name": "Bus to work",
        "carbon_kg": 1.5,
        "details": {"kind": "transport", "mode": "bus", "distance_km": 12},
    }

    with TestClient(create_app(container)) as client:
        created = client.post("/ledger/activities", json=payload)
        today = client.get("/ledger/today")

    assert created.status_code == 201
    assert created.json()["activity"]["details"]["mode"] == "bus"
    data = today.json()
    assert data["log"]["date"] == TODAY_KEY
    assert data["log"]["total_carbon_kg"] == 1.5
    assert data["log"]["category_totals"]["transport"] == 1.5
    assert data["budget"]["remaining_kg"] == 6.5
    assert data["budget"]["progress"] == 0.1875


def test_mismatched_details_are_rejected(container: AppContainer) -> None:
    payload = {
        "category": "food",
        "name": "Bus",
        "carbon_kg": 1.0,
        "details": {"kind": "transport", "mode": "bus", "distance_km": 3},
    }

    with TestClient(create_app(container)) as client:
        response = client.post("/ledger/activities", json=payload)

    assert response.status_code == 422
    assert container.ledger_service.state.logs == {}


def test_activity_on_past_date(container: AppContainer) -> None:
    payload = {
        "category": "food",
        "name": "Steak",
        "carbon_kg": 7.0,
        "details": {"kind": "food", "food_category": "beef"},
        "day": "2024-03-11",
    }

    with TestClient(create_app(container)) as client:
        client.post("/ledger/activities", json=payload)
        response = client.get("/ledger/days/2024-03-11")

    assert response.json()["log"]["total_carbon_kg"] == 7.0


def test_invalid_date_is_rejected(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.get("/ledger/days/13-03-2024")

    assert response.status_code == 422


def test_remove_activity(container: AppContainer) -> None:
    activity = asyncio.run(container.ledger_service.add_activity(food(2.0)))

    client = TestClient(create_app(container))
    removed = client.delete(f"/ledger/days/{TODAY_KEY}/activities/{activity.id}")
    missing = client.delete(f"/ledger/days/{TODAY_KEY}/activities/{activity.id}")

    assert removed.status_code == 200
    assert removed.json()["log"]["total_carbon_kg"] == 0
    assert missing.status_code == 404


def test_persistence_failure_maps_to_503(
    container: AppContainer, ledger_repository: InMemoryLedgerRepository
) -> None:
    ledger_repository.fail_on.add("add_activity")
    payload = {"category": "food", "name": "Lunch", "carbon_kg": 1.0}

    with TestClient(create_app(container)) as client:
        response = client.post("/ledger/activities", json=payload)

    assert response.status_code == 503
    assert response.json()["operation"] == "add_activity"


def test_product_scan_and_summary(container: AppContainer) -> None:
    payload = {
        "objects": [
            {"id": "o1", "name": "Bottle", "carbon_kg": 2, "severity": "medium"},
            {"id": "o2", "name": "Mug", "carbon_kg": 3},
        ]
    }

    with TestClient(create_app(container)) as client:
        created = client.post("/ledger/scans", json=payload)
        scans = client.get(f"/ledger/days/{TODAY_KEY}/scans")
        summary = client.get("/ledger/scans/summary")

    assert created.status_code == 201
    assert created.json()["activity"]["quantity"] == 2
    assert len(scans.json()["scans"]) == 1
    assert summary.json()["summary"]["total_objects"] == 2


def test_empty_scan_is_rejected(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.post("/ledger/scans", json={"objects": []})

    assert response.status_code == 422


def test_energy_entry(container: AppContainer) -> None:
    payload = {"energy_type": "electricity", "amount": 300, "period": "monthly"}

    with TestClient(create_app(container)) as client:
        response = client.post("/ledger/energy", json=payload)
        today = client.get("/ledger/today")

    assert response.status_code == 201
    activity = today.json()["log"]["activities"][0]
    assert activity["id"] == response.json()["id"]
    assert activity["category"] == "energy"


def test_week_and_streak(container: AppContainer) -> None:
    asyncio.run(container.ledger_service.add_activity(food(2.0)))

    client = TestClient(create_app(container))
    week = client.get("/ledger/week").json()["summary"]
    streak = client.get("/ledger/streak").json()

    assert week["week_start"] == "2024-03-10"
    assert len(week["dates"]) == 7
    assert week["days_under_budget"] == 1
    assert streak == {"streak": 1}


def test_streak_includes_over_budget_day(container: AppContainer) -> None:
    asyncio.run(container.ledger_service.add_activity(food(20.0)))

    client = TestClient(create_app(container))
    streak = client.get("/ledger/streak").json()
    week = client.get("/ledger/week").json()["summary"]

    assert streak == {"streak": 1}
    assert week["days_under_budget"] == 0
    assert week["is_under_weekly_target"] is True


def test_range_rejects_reversed_dates(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/ledger/range", params={"start": "2024-03-13", "end": "2024-03-01"}
    )

    assert response.status_code == 422


def test_settings_patch_and_baseline(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        patched = client.patch("/settings", json={"daily_budget_kg": 6.0})
        baseline = client.put(
            "/settings/baselines/electricity", json={"monthly_amount": 600}
        )
        settings = client.get("/settings")
        today = client.get("/ledger/today")

    assert patched.json()["settings"]["daily_budget_kg"] == 6.0
    assert baseline.json()["baselines"]["total_daily_carbon_kg"] == 8.0
    data = settings.json()["settings"]
    assert data["energy_baselines"]["baselines"]["electricity"]["enabled"] is True
    assert today.json()["budget_with_baseline"]["is_over_budget"] is True


def test_empty_settings_patch_is_rejected(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.patch("/settings", json={})

    assert response.status_code == 422


def test_unknown_energy_type_is_rejected(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.put("/settings/baselines/solar", json={"monthly_amount": 1})

    assert response.status_code == 422
