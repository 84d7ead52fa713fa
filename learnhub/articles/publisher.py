"""
Daily publisher for scheduled articles.

Once per day, every article still marked `Scheduled` whose `published_at`
falls inside the current UTC calendar day is flipped to `Published` in a
single atomic WriteBatch.

The window is relative to "now" and there is no persisted watermark: a
skipped run leaves that day's articles `Scheduled` until someone publishes
them by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from learnhub.common.logging import log_event
from learnhub.common.timeutils import utc_day_window

logger = logging.getLogger(__name__)

ARTICLES_COLLECTION = "articles"
# Firestore rejects a WriteBatch with more than 500 operations.
MAX_BATCH_WRITES = 500


class ArticleStatus(str, Enum):
    SCHEDULED = "Scheduled"
    PUBLISHED = "Published"


class PublishBatchTooLarge(RuntimeError):
    """More articles are due than fit in one atomic batch."""


@dataclass(frozen=True)
class PublishOutcome:
    window_start: datetime
    window_end: datetime
    published: int


class ScheduledPublisher:
    def __init__(self, db: Any, *, collection: str = ARTICLES_COLLECTION) -> None:
        self._db = db
        self._collection = collection

    def run(self, now: datetime | None = None) -> PublishOutcome:
        start, end = utc_day_window(now)
        due = (
            self._db.collection(self._collection)
            .where("status", "==", ArticleStatus.SCHEDULED.value)
            .where("published_at", ">=", start)
            .where("published_at", "<", end)
            .get()
        )
        due = list(due)

        if not due:
            logger.info("No scheduled articles to publish today.")
            return PublishOutcome(window_start=start, window_end=end, published=0)

        if len(due) > MAX_BATCH_WRITES:
            raise PublishBatchTooLarge(
                f"{len(due)} articles are due in [{start.isoformat()}, {end.isoformat()}); "
                f"a single batch holds at most {MAX_BATCH_WRITES}"
            )

        batch = self._db.batch()
        for snap in due:
            batch.update(snap.reference, {"status": ArticleStatus.PUBLISHED.value})
        batch.commit()

        log_event(
            logger,
            "articles.published",
            message=f"Published {len(due)} scheduled articles.",
            published=len(due),
            window_start=start.isoformat(),
            window_end=end.isoformat(),
        )
        return PublishOutcome(window_start=start, window_end=end, published=len(due))
