"""Firestore Client - Persistence for meals, profile and the published score.

This module handles all database I/O for the wellness service.
All I/O is contained here; business logic is in the core module.
Failures are logged and degrade to empty/default values so the engines
always receive usable input.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from google.cloud import firestore

from ..core.models import MealEntry, ScoreSnapshot, UserContext


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        profile_id: Profile document all data is stored under
    """

    project_id: str | None = None
    database: str | None = None
    profile_id: str = "default"


class WellnessFirestoreClient:
    """Client for persisting wellness data to Firestore.

    Document structure:
        profiles/{profile_id}/
            settings/profile: { name, fitness_goal }
            meals/{YYYY-MM-DD}: { log_date, entries: [...] }
            snapshots/latest: { score, published_at }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _profile_ref(self) -> firestore.DocumentReference:
        return self.client.collection("profiles").document(self.config.profile_id)

    def _settings_ref(self) -> firestore.DocumentReference:
        return self._profile_ref().collection("settings").document("profile")

    def _meals_ref(self, log_date: date) -> firestore.DocumentReference:
        return self._profile_ref().collection("meals").document(log_date.isoformat())

    def _snapshot_ref(self) -> firestore.DocumentReference:
        return self._profile_ref().collection("snapshots").document("latest")

    # ==================== Profile Operations ====================

    def get_profile(self) -> UserContext | None:
        """Fetch the user profile.

        Returns:
            UserContext if found, None otherwise
        """
        logger.debug("Fetching profile %s", self.config.profile_id)
        try:
            doc = self._settings_ref().get()
            if not doc.exists:
                return None
            return UserContext(**doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch profile: %s", str(e))
            return None

    def save_profile(self, profile: UserContext) -> bool:
        """Save the user profile.

        Returns:
            True if successful
        """
        logger.info("Saving profile %s", self.config.profile_id)
        try:
            data = profile.model_dump(mode="json")
            data["updated_at"] = datetime.utcnow()
            self._settings_ref().set(data)
            return True
        except Exception as e:
            logger.error("Failed to save profile: %s", str(e))
            return False

    # ==================== Meal Operations ====================

    def get_meals(self, log_date: date) -> list[MealEntry]:
        """Fetch the meals logged on a day.

        Args:
            log_date: Day to fetch

        Returns:
            Meal entries in logging order (empty if none or on failure)
        """
        logger.debug("Fetching meals for %s", log_date)
        try:
            return self._read_meals(log_date)
        except Exception as e:
            logger.error("Failed to fetch meals: %s", str(e))
            return []

    def _read_meals(self, log_date: date) -> list[MealEntry]:
        """Read a day's meals, letting storage errors propagate."""
        doc = self._meals_ref(log_date).get()
        if not doc.exists:
            return []
        return [MealEntry(**e) for e in doc.to_dict().get("entries", [])]

    def _save_meals(self, log_date: date, entries: list[MealEntry]) -> bool:
        try:
            self._meals_ref(log_date).set({
                "log_date": log_date.isoformat(),
                "entries": [e.model_dump() for e in entries],
                "updated_at": datetime.utcnow(),
            })
            return True
        except Exception as e:
            logger.error("Failed to save meals: %s", str(e))
            return False

    def add_meal(self, entry: MealEntry) -> list[MealEntry] | None:
        """Append a meal to the log of the day it was eaten.

        Args:
            entry: The meal to add

        Returns:
            Updated entries for that day if successful, None otherwise
        """
        log_date = entry.logged_at.date()
        logger.info("Logging meal %r on %s", entry.name, log_date)

        try:
            entries = self._read_meals(log_date)
        except Exception as e:
            logger.error("Failed to read meals before logging: %s", str(e))
            return None
        entries.append(entry)

        if self._save_meals(log_date, entries):
            return entries
        return None

    def delete_meal(self, entry_id: str, log_date: date) -> list[MealEntry] | None:
        """Delete a meal from a day's log.

        Returns:
            Remaining entries if successful, None if not found or on failure
        """
        try:
            entries = self._read_meals(log_date)
        except Exception as e:
            logger.error("Failed to read meals before deleting: %s", str(e))
            return None
        remaining = [e for e in entries if e.id != entry_id]

        if len(remaining) == len(entries):
            logger.warning("Meal not found: %s", entry_id)
            return None

        if self._save_meals(log_date, remaining):
            return remaining
        return None

    # ==================== Score Snapshot Operations ====================

    def get_score_snapshot(self) -> ScoreSnapshot | None:
        """Fetch the last published score, if any."""
        try:
            doc = self._snapshot_ref().get()
            if not doc.exists:
                return None
            return ScoreSnapshot(**doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch score snapshot: %s", str(e))
            return None

    def save_score_snapshot(self, snapshot: ScoreSnapshot) -> bool:
        """Persist the latest published score.

        Returns:
            True if successful
        """
        logger.debug("Publishing score %d", snapshot.score)
        try:
            self._snapshot_ref().set(snapshot.model_dump())
            return True
        except Exception as e:
            logger.error("Failed to save score snapshot: %s", str(e))
            return False
