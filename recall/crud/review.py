import logging
import threading
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recall.lifecycle import plan_review
from recall.models import LearningItem, ReviewHistoryEntry
from recall.schemas import ReviewOutcome

logger = logging.getLogger(__name__)

# One pending review per item within this process
_item_locks: Dict[int, threading.Lock] = {}
_item_locks_guard = threading.Lock()


class BackdatedReviewError(ValueError):
    """A review dated before the item's last review"""

    def __init__(self, item_id: int, reviewed_at: datetime, last_reviewed_date: datetime):
        super().__init__(
            f"Review of item {item_id} at {reviewed_at:%Y-%m-%d %H:%M} is before "
            f"its last review at {last_reviewed_date:%Y-%m-%d %H:%M}"
        )
        self.item_id = item_id
        self.reviewed_at = reviewed_at
        self.last_reviewed_date = last_reviewed_date


def item_lock(item_id: int) -> threading.Lock:
    """Get the lock that serializes review completions for an item"""
    with _item_locks_guard:
        return _item_locks.setdefault(item_id, threading.Lock())


def release_item_lock(item_id: int):
    """Forget an item's lock once the item is gone"""
    with _item_locks_guard:
        _item_locks.pop(item_id, None)


def to_store_time(value: datetime) -> datetime:
    """Convert to the naive local time the database stores"""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def record_review(
    db: Session,
    item_id: int,
    recall_score: int,
    reviewed_at: Optional[datetime] = None
) -> Optional[ReviewOutcome]:
    """
    Record a completed review and reschedule the item.

    Appends one history entry, recomputes the perfect-recall streak, the
    retention score and the next review date. Concurrent reviews of the same
    item are serialized; the item row is locked for update where the
    database supports it.

    Returns:
        ReviewOutcome, or None if the item does not exist

    Raises:
        BackdatedReviewError: reviewed_at is before the item's last review
    """
    with item_lock(item_id):
        reviewed_at = to_store_time(reviewed_at) if reviewed_at else datetime.now()

        item = db.query(LearningItem).filter(
            LearningItem.id == item_id
        ).with_for_update().first()
        if not item:
            logger.warning("Review for unknown item %s ignored", item_id)
            return None

        last_reviewed_date = item.last_reviewed_date
        if last_reviewed_date and reviewed_at < last_reviewed_date:
            db.rollback()
            raise BackdatedReviewError(item_id, reviewed_at, last_reviewed_date)

        plan = plan_review(item.history, item.last_reviewed_date, recall_score, reviewed_at)

        item.history.append(ReviewHistoryEntry(**plan.entry.model_dump()))
        item.recall_score = plan.entry.recall_score
        item.perfect_recall_count = plan.perfect_recall_count
        item.last_reviewed_date = reviewed_at
        item.next_review_date = plan.next_review_date

        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to save review for item %s", item_id)
            raise
        db.refresh(item)

    logger.info(
        "Reviewed item %s: recall=%s retention=%s streak=%s next=%s",
        item_id,
        plan.entry.recall_score,
        plan.retention_score,
        plan.perfect_recall_count,
        plan.next_review_date.date()
    )
    if plan.mastery_suggested:
        logger.info("Item %s is eligible for archiving (streak %s)", item_id, plan.perfect_recall_count)

    return ReviewOutcome(
        item_id=item.id,
        recall_score=plan.entry.recall_score,
        retention_score=plan.retention_score,
        perfect_recall_count=plan.perfect_recall_count,
        last_reviewed_date=reviewed_at,
        next_review_date=plan.next_review_date,
        mastery_suggested=plan.mastery_suggested
    )
