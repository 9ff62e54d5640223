from fastapi.testclient import TestClient

from sandstone.consts import VERSION
from sandstone.server import app

client = TestClient(app)

NOW = "2026-10-19T12:00:00Z"


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_compute_review():
    response = client.post(
        "/review/compute",
        json={"quality": 5, "interval": 6, "repetition_count": 2, "ease_factor": 2.5, "now": NOW},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["interval"] == 15
    assert data["repetition_count"] == 3
    assert data["lapses"] == 0
    assert data["next_review_date"].startswith("2026-11-03T12:00:00")


def test_compute_review_lapse_with_defaults():
    response = client.post("/review/compute", json={"quality": 1, "now": NOW})

    data = response.json()
    assert data["lapses"] == 1
    assert data["repetition_count"] == 0
    assert data["interval"] == 1


def test_compute_review_strict_rejects():
    response = client.post("/review/compute", json={"quality": 9, "strict": True})

    assert response.status_code == 400
    assert "[0, 5]" in response.json()["detail"]


def test_apply_review_to_card():
    response = client.post(
        "/cards/review",
        json={"card": {"id": "c1", "front": "Q"}, "quality": 4, "time_spent": 700, "now": NOW},
    )

    assert response.status_code == 200
    card = response.json()
    assert card["id"] == "c1"
    assert card["repetition_count"] == 1
    assert card["last_review"].startswith("2026-10-19T12:00:00")
    assert len(card["review_history"]) == 1
    assert card["review_history"][0]["time_spent"] == 700


def test_card_status():
    response = client.post(
        "/cards/status",
        json={
            "cards": [
                {"id": "a"},
                {"id": "b", "lapses": 1},
                {"id": "c", "repetition_count": 6},
            ]
        },
    )

    assert response.status_code == 200
    assert response.json() == [
        {"id": "a", "status": "new", "mastered": False},
        {"id": "b", "status": "relearning", "mastered": False},
        {"id": "c", "status": "review", "mastered": True},
    ]


def test_deck_stats_empty():
    response = client.post("/deck/stats", json={"cards": []})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 0
    assert data["average_ease_factor"] == 2.5
    assert data["average_difficulty"] == 0.3


def test_deck_stats_naive_timestamps_are_utc():
    response = client.post(
        "/deck/stats",
        json={
            "cards": [
                {"id": "a", "next_review": "2026-10-19T11:00:00"},
                {"id": "b", "next_review": "2026-10-20T11:00:00+00:00"},
            ],
            "now": NOW,
        },
    )

    assert response.json()["due"] == 1


def test_study_filter_with_preset():
    cards = [{"id": "n1"}, {"id": "n2"}, {"id": "r", "repetition_count": 4}]

    response = client.post("/study/filter", json={"cards": cards, "mode": "learn", "seed": 3})

    assert response.status_code == 200
    assert sorted(c["id"] for c in response.json()) == ["n1", "n2"]


def test_study_filter_with_config_limit():
    cards = [{"id": f"c{i}"} for i in range(8)]

    response = client.post(
        "/study/filter", json={"cards": cards, "config": {"card_limit": 5, "shuffle": True}}
    )

    assert response.status_code == 200
    assert len(response.json()) == 5


def test_invalid_card_payload():
    response = client.post("/deck/stats", json={"cards": [{"id": "a", "interval": -1}]})
    assert response.status_code == 422
