"""Tests for Firestore persistence with a mocked client."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from wellnessforge.core.models import FitnessGoal, MealEntry, ScoreSnapshot, UserContext
from wellnessforge.shell.firestore_client import FirestoreConfig, WellnessFirestoreClient


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def db(mock_client):
    """Firestore wrapper with the underlying client replaced."""
    wrapper = WellnessFirestoreClient(FirestoreConfig(profile_id="p1"))
    wrapper._client = mock_client
    return wrapper


def doc_ref(mock_client):
    """The document reference every nested lookup resolves to."""
    return mock_client.collection.return_value.document.return_value.collection.return_value.document.return_value


class TestProfile:
    """Tests for profile operations."""

    def test_missing_profile(self, db, mock_client):
        doc_ref(mock_client).get.return_value.exists = False
        assert db.get_profile() is None

    def test_existing_profile(self, db, mock_client):
        doc = doc_ref(mock_client).get.return_value
        doc.exists = True
        doc.to_dict.return_value = {"name": "Ada", "fitness_goal": "Performance"}

        profile = db.get_profile()

        assert profile == UserContext(name="Ada", fitness_goal=FitnessGoal.PERFORMANCE)
        mock_client.collection.assert_called_with("profiles")
        mock_client.collection.return_value.document.assert_called_with("p1")

    def test_fetch_failure_degrades_to_none(self, db, mock_client):
        doc_ref(mock_client).get.side_effect = RuntimeError("unavailable")
        assert db.get_profile() is None

    def test_save_profile(self, db, mock_client):
        assert db.save_profile(UserContext(name="Ada", fitness_goal=FitnessGoal.WEIGHT_LOSS)) is True
        saved = doc_ref(mock_client).set.call_args[0][0]
        assert saved["name"] == "Ada"
        assert saved["fitness_goal"] == "Weight Loss"


class TestMeals:
    """Tests for meal operations."""

    def test_no_meals_logged(self, db, mock_client):
        doc_ref(mock_client).get.return_value.exists = False
        assert db.get_meals(date(2024, 12, 28)) == []

    def test_meals_are_parsed(self, db, mock_client):
        doc = doc_ref(mock_client).get.return_value
        doc.exists = True
        doc.to_dict.return_value = {
            "entries": [
                {"name": "Oats", "calories": 300, "protein": 10, "carbs": 54, "fats": 5,
                 "logged_at": datetime(2024, 12, 28, 7, 0)},
            ]
        }

        meals = db.get_meals(date(2024, 12, 28))

        assert [m.name for m in meals] == ["Oats"]

    def test_fetch_failure_degrades_to_empty(self, db, mock_client):
        doc_ref(mock_client).get.side_effect = RuntimeError("unavailable")
        assert db.get_meals(date(2024, 12, 28)) == []

    def test_add_meal_saves_under_its_day(self, db, mock_client):
        doc_ref(mock_client).get.return_value.exists = False
        entry = MealEntry(name="Salad", calories=50, protein=2, carbs=10, fats=0,
                          logged_at=datetime(2024, 12, 28, 13, 0))

        entries = db.add_meal(entry)

        assert entries == [entry]
        saved = doc_ref(mock_client).set.call_args[0][0]
        assert saved["log_date"] == "2024-12-28"
        assert saved["entries"][0]["name"] == "Salad"

    def test_add_meal_failure(self, db, mock_client):
        doc_ref(mock_client).get.return_value.exists = False
        doc_ref(mock_client).set.side_effect = RuntimeError("unavailable")
        entry = MealEntry(name="Salad", calories=50, protein=2, carbs=10, fats=0)
        assert db.add_meal(entry) is None

    def test_add_meal_read_failure_does_not_overwrite(self, db, mock_client):
        doc_ref(mock_client).get.side_effect = RuntimeError("unavailable")
        entry = MealEntry(name="Salad", calories=50, protein=2, carbs=10, fats=0)
        assert db.add_meal(entry) is None
        doc_ref(mock_client).set.assert_not_called()

    def test_delete_meal_read_failure_does_not_overwrite(self, db, mock_client):
        doc_ref(mock_client).get.side_effect = RuntimeError("unavailable")
        assert db.delete_meal("any", date(2024, 12, 28)) is None
        doc_ref(mock_client).set.assert_not_called()

    def test_delete_meal_keeps_the_rest(self, db, mock_client):
        keep = MealEntry(name="Egg", calories=78, protein=6, carbs=1, fats=5)
        drop = MealEntry(name="Pizza", calories=285, protein=12, carbs=36, fats=10)
        doc = doc_ref(mock_client).get.return_value
        doc.exists = True
        doc.to_dict.return_value = {"entries": [keep.model_dump(), drop.model_dump()]}

        remaining = db.delete_meal(drop.id, date(2024, 12, 28))

        assert [e.id for e in remaining] == [keep.id]
        saved = doc_ref(mock_client).set.call_args[0][0]
        assert [e["id"] for e in saved["entries"]] == [keep.id]

    def test_delete_missing_meal(self, db, mock_client):
        doc_ref(mock_client).get.return_value.exists = False
        assert db.delete_meal("nope", date(2024, 12, 28)) is None


class TestScoreSnapshot:
    """Tests for score snapshot operations."""

    def test_round_trip(self, db, mock_client):
        snapshot = ScoreSnapshot(score=81, published_at=datetime(2024, 12, 28, 8, 30))
        assert db.save_score_snapshot(snapshot) is True

        doc = doc_ref(mock_client).get.return_value
        doc.exists = True
        doc.to_dict.return_value = doc_ref(mock_client).set.call_args[0][0]

        assert db.get_score_snapshot() == snapshot
