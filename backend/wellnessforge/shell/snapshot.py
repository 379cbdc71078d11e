"""Score Board - Publishes the latest wellness score for read-only consumers.

The host scores each refreshed metrics frame through publish(); the voice
shortcut and widget surfaces only ever call latest().
"""

import logging
import threading
from datetime import datetime

from ..core.models import MetricsFrame, ScoreSnapshot
from ..core.scoring import wellness_score
from .firestore_client import WellnessFirestoreClient


logger = logging.getLogger(__name__)


class ScoreBoard:
    """Holds the most recently published ScoreSnapshot.

    Snapshots are immutable and replaced whole. When a store is given,
    every publish is persisted and latest() falls back to the stored
    snapshot after a restart.
    """

    def __init__(self, store: WellnessFirestoreClient | None = None) -> None:
        self._store = store
        self._latest: ScoreSnapshot | None = None
        self._lock = threading.Lock()

    def publish(self, frame: MetricsFrame, published_at: datetime) -> ScoreSnapshot:
        """Score a frame and publish the result.

        Args:
            frame: Freshly fetched metrics
            published_at: Time of the scoring pass

        Returns:
            The published snapshot
        """
        snapshot = ScoreSnapshot(score=wellness_score(frame), published_at=published_at)

        with self._lock:
            self._latest = snapshot

        if self._store is not None and not self._store.save_score_snapshot(snapshot):
            logger.warning("Score %d published in memory only", snapshot.score)

        return snapshot

    def latest(self) -> ScoreSnapshot | None:
        """Return the last published snapshot, or None if nothing was published."""
        with self._lock:
            snapshot = self._latest

        if snapshot is None and self._store is not None:
            snapshot = self._store.get_score_snapshot()
            if snapshot is not None:
                with self._lock:
                    if self._latest is None:
                        self._latest = snapshot
        return snapshot
