"""Integration tests for API endpoints using Starlette TestClient."""

import pytest
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch
from starlette.testclient import TestClient

from wellnessforge.core.models import FitnessGoal, MealEntry, ScoreSnapshot, UserContext
from wellnessforge.main import create_app
from wellnessforge.shell import mcp_server


@pytest.fixture
def mock_db():
    """Mock Firestore-backed store with nothing stored yet."""
    db = MagicMock()
    db.get_profile.return_value = None
    db.get_meals.return_value = []
    db.get_score_snapshot.return_value = None
    db.save_score_snapshot.return_value = True
    with patch.object(mcp_server, "_firestore_client", db), patch.object(mcp_server, "_score_board", None):
        yield db


@pytest.fixture
def client(mock_db, monkeypatch):
    """Create test client with mocked persistence and no thinking delay."""
    monkeypatch.setenv("WELLNESSFORGE_THINKING_DELAY", "0")
    return TestClient(create_app())


REFERENCE_METRICS = {"steps": 5000, "heart_rate_bpm": 70, "sleep_hours": 7, "hrv": 50}


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_json(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "wellnessforge"}


class TestScoreEndpoints:
    """Tests for /v1/score and /v1/score/latest."""

    def test_latest_before_publish(self, client):
        response = client.get("/v1/score/latest")
        assert response.status_code == 404

    def test_score_publishes(self, client, mock_db):
        response = client.post("/v1/score", json={"metrics": REFERENCE_METRICS})
        assert response.status_code == 200
        assert response.json()["score"] == 81
        mock_db.save_score_snapshot.assert_called_once()

        latest = client.get("/v1/score/latest")
        assert latest.status_code == 200
        assert latest.json()["score"] == 81

    def test_published_at_is_utc(self, client, mock_db):
        client.post("/v1/score", json={"metrics": REFERENCE_METRICS})
        snapshot = mock_db.save_score_snapshot.call_args[0][0]
        assert snapshot.published_at.utcoffset() == timedelta(0)

    def test_latest_served_from_store(self, client, mock_db):
        mock_db.get_score_snapshot.return_value = ScoreSnapshot(
            score=64, published_at=datetime(2024, 12, 28, 8, 30)
        )
        response = client.get("/v1/score/latest")
        assert response.json()["score"] == 64

    def test_empty_metrics_score_10(self, client):
        response = client.post("/v1/score", json={})
        assert response.json()["score"] == 10

    def test_negative_metric_rejected(self, client):
        response = client.post("/v1/score", json={"metrics": {"steps": -5}})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_non_json_rejected(self, client):
        response = client.post("/v1/score", content=b"not json")
        assert response.status_code == 400


class TestForecastEndpoint:
    """Tests for /v1/forecast."""

    def test_forecast(self, client):
        response = client.post(
            "/v1/forecast",
            json={"metrics": {"sleep_hours": 8, "hrv": 100}, "hour_of_day": 22},
        )
        data = response.json()
        assert response.status_code == 200
        assert data["state"] == "steady"
        assert data["confidence"] == 0.92

    def test_uses_stored_profile_goal(self, client, mock_db):
        """Index 60 with Maintenance is only 40 with Performance."""
        metrics = {"sleep_hours": 8, "hrv": 25}
        body = {"metrics": metrics, "hour_of_day": 10}
        assert client.post("/v1/forecast", json=body).json()["state"] == "impending_slump"

        mock_db.get_profile.return_value = UserContext(fitness_goal=FitnessGoal.PERFORMANCE)
        assert client.post("/v1/forecast", json=body).json()["state"] == "steady"

    def test_hour_out_of_range(self, client):
        response = client.post("/v1/forecast", json={"hour_of_day": 24})
        assert response.status_code == 400


class TestOracleEndpoint:
    """Tests for /v1/oracle."""

    def test_oracle_with_meals(self, client, mock_db):
        response = client.post(
            "/v1/oracle",
            json={
                "metrics": {"steps": 8000, "heart_rate_bpm": 70, "sleep_hours": 7, "hrv": 35},
                "meals": [{"name": "Toast", "calories": 200, "protein": 8, "carbs": 30, "fats": 4}],
                "hour_of_day": 8,
            },
        )
        data = response.json()
        assert response.status_code == 200
        assert data["mood"] == "steady"
        assert data["score"] == 84
        assert data["greeting"] == "Good Morning"
        assert [d["title"] for d in data["directives"]] == ["Protein Focus"]
        mock_db.get_meals.assert_not_called()

    def test_oracle_reads_todays_meals(self, client, mock_db):
        mock_db.get_meals.return_value = [
            MealEntry(name="Steak", calories=700, protein=60, carbs=0, fats=45),
        ]
        response = client.post(
            "/v1/oracle",
            json={"metrics": {"steps": 8000, "heart_rate_bpm": 70, "sleep_hours": 7, "hrv": 35}},
        )
        assert response.json()["directives"] == []
        mock_db.get_meals.assert_called_once()


class TestChatEndpoint:
    """Tests for /v1/chat."""

    def test_precedence(self, client):
        response = client.post("/v1/chat", json={"message": "hi, what is my plan", "hour_of_day": 9})
        data = response.json()
        assert data["intent"] == "health_inquiry"
        assert data["reply"].startswith("Current Metric Snapshot")

    def test_greeting_with_request_user(self, client):
        response = client.post(
            "/v1/chat",
            json={"message": "hello", "user": {"name": "Ada"}, "metrics": {"steps": 1200}},
        )
        assert response.json()["reply"].startswith("Hello Ada!")

    def test_missing_message(self, client):
        response = client.post("/v1/chat", json={})
        assert response.status_code == 400


class TestScanEndpoint:
    """Tests for /v1/meals/scan."""

    def test_match_without_logging(self, client, mock_db):
        response = client.post(
            "/v1/meals/scan",
            json={"classifications": [{"label": "banana split", "confidence": 0.7}]},
        )
        assert response.json()["match"]["name"] == "Banana"
        mock_db.add_meal.assert_not_called()

    def test_match_and_log(self, client, mock_db):
        mock_db.add_meal.return_value = []
        response = client.post(
            "/v1/meals/scan",
            json={"classifications": [{"label": "pizza", "confidence": 0.9}], "log": True},
        )
        data = response.json()
        assert data["entry"]["name"] == "Pizza Slice"
        mock_db.add_meal.assert_called_once()

    def test_no_match(self, client):
        response = client.post(
            "/v1/meals/scan",
            json={"classifications": [{"label": "keyboard", "confidence": 0.9}]},
        )
        assert response.json() == {"match": None}


class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_preflight_allowed_origin(self, client):
        response = client.options(
            "/v1/score",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
