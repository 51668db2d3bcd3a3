"""Tests for the public HTTP API."""

from fastapi.testclient import TestClient

from espresso_tracker.api.app import create_app
from espresso_tracker.containers import AppContainer
from espresso_tracker.domain.shots import TasteDescriptor
from tests.conftest import InMemoryShotRepository, make_shot


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health(container: AppContainer) -> None:
    response = _client(container).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_compute_recommendation_without_shots(container: AppContainer) -> None:
    response = _client(container).post("/beans/bean-1/recommendation")

    assert response.status_code == 404


def test_recommendation_lifecycle(
    container: AppContainer, shot_repository: InMemoryShotRepository
) -> None:
    client = _client(container)
    shot_repository.shots.append(make_shot(22, TasteDescriptor.SOUR))

    created = client.post("/beans/bean-1/recommendation")
    assert created.status_code == 200
    body = created.json()
    assert body["bean_id"] == "bean-1"
    assert body["suggested_grind_setting"] == "4.5"
    assert body["adjustment_direction"] == "FINER"
    assert body["adjustment_description"] == "Grind finer"
    assert body["confidence"] == "HIGH"
    assert body["target_extraction_time"] == "25-30s"
    assert body["recommended_dose"] == 18.0
    assert body["was_followed"] is False

    fetched = client.get("/beans/bean-1/recommendation").json()
    assert fetched["recommendation"]["suggested_grind_setting"] == "4.5"

    followed = client.post("/beans/bean-1/recommendation/followed").json()
    assert followed["recommendation"]["was_followed"] is True

    cleared = client.delete("/beans/bean-1/recommendation")
    assert cleared.json() == {"status": "ok"}
    assert client.get("/beans/bean-1/recommendation").json() == {
        "recommendation": None
    }


def test_followed_without_recommendation_is_null(container: AppContainer) -> None:
    response = _client(container).post("/beans/bean-1/recommendation/followed")

    assert response.status_code == 200
    assert response.json() == {"recommendation": None}


def test_taste_refresh(
    container: AppContainer, shot_repository: InMemoryShotRepository
) -> None:
    client = _client(container)
    shot_repository.shots.append(make_shot(34))
    client.post("/beans/bean-1/recommendation")

    shot_repository.shots[0] = make_shot(34, TasteDescriptor.BITTER)
    response = client.post("/beans/bean-1/recommendation/taste")

    recommendation = response.json()["recommendation"]
    assert recommendation["based_on_taste"] is True
    assert recommendation["confidence"] == "HIGH"


def test_bean_status_and_quality(
    container: AppContainer, shot_repository: InMemoryShotRepository
) -> None:
    client = _client(container)

    assert client.get("/beans/bean-1/status").json() == {
        "bean_id": "bean-1",
        "status": "FRESH_START",
    }

    shot_repository.shots.extend(
        make_shot(27, TasteDescriptor.PERFECT, minutes_after=index)
        for index in range(3)
    )

    assert client.get("/beans/bean-1/status").json()["status"] == "DIALED_IN"
    quality = client.get("/beans/bean-1/quality").json()
    assert quality["total_shots"] == 3
    assert quality["quality_tier"] == "EXCELLENT"


def test_classify_posted_shots(container: AppContainer) -> None:
    shots = [
        {
            "id": f"shot-{index}",
            "bean_id": "bean-9",
            "coffee_weight_in": 18.0,
            "coffee_weight_out": 36.0,
            "extraction_time_seconds": 50,
            "grinder_setting": "5.0",
            "timestamp": f"2026-03-14T08:3{index}:00",
            "taste_primary": "BITTER",
        }
        for index in range(3)
    ]

    response = _client(container).post("/bean-status", json={"shots": shots})

    assert response.status_code == 200
    assert response.json() == {"bean_id": "bean-9", "status": "NEEDS_WORK"}


def test_classify_posted_shots_with_mixed_timezones(container: AppContainer) -> None:
    timestamps = [
        "2026-03-14T08:30:00Z",
        "2026-03-14T08:31:00",
        "2026-03-14T09:32:00+01:00",
    ]
    shots = [
        {
            "id": f"shot-{index}",
            "bean_id": "bean-9",
            "coffee_weight_in": 18.0,
            "coffee_weight_out": 36.0,
            "extraction_time_seconds": 50,
            "grinder_setting": "5.0",
            "timestamp": timestamp,
            "taste_primary": "BITTER",
        }
        for index, timestamp in enumerate(timestamps)
    ]

    response = _client(container).post("/bean-status", json={"shots": shots})

    assert response.status_code == 200
    assert response.json() == {"bean_id": "bean-9", "status": "NEEDS_WORK"}


def test_classify_rejects_invalid_shot(container: AppContainer) -> None:
    response = _client(container).post(
        "/bean-status",
        json={
            "shots": [
                {
                    "id": "shot-1",
                    "bean_id": "bean-9",
                    "coffee_weight_in": 0,
                    "coffee_weight_out": 36.0,
                    "extraction_time_seconds": 27,
                    "grinder_setting": "5.0",
                    "timestamp": "2026-03-14T08:30:00",
                }
            ]
        },
    )

    assert response.status_code == 422


def test_taste_preselection(container: AppContainer) -> None:
    client = _client(container)

    assert client.get("/taste-preselection", params={"extraction_time": 22}).json() == {
        "extraction_time_seconds": 22.0,
        "taste": "SOUR",
    }
    assert client.get("/taste-preselection").json()["taste"] is None
