import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from recall.crud.review import item_lock, record_review, release_item_lock
from recall.models import LearningItem, ReviewHistoryEntry
from recall.schemas import LearningItemCreate
from recall.streak import MASTERY_STREAK

logger = logging.getLogger(__name__)


def create_learning_item(db: Session, item: LearningItemCreate) -> LearningItem:
    """Create a learning item; its first save is recorded as its first review"""
    db_item = LearningItem(
        title=item.title,
        content=item.content,
        recall_score=item.recall_score
    )
    db.add(db_item)
    db.flush()
    logger.info("Created item %s (%s)", db_item.id, db_item.title)

    record_review(db, db_item.id, item.recall_score, reviewed_at=item.reviewed_at)
    return db_item


def get_learning_item(db: Session, item_id: int) -> Optional[LearningItem]:
    """Get learning item by ID"""
    return db.query(LearningItem).filter(LearningItem.id == item_id).first()


def list_learning_items(db: Session) -> List[LearningItem]:
    """Get all learning items, soonest review first"""
    return db.query(LearningItem).order_by(
        LearningItem.next_review_date.asc(),
        LearningItem.id.asc()
    ).all()


def get_due_items(db: Session, now: Optional[datetime] = None) -> List[LearningItem]:
    """Get all items due for review"""
    now = now or datetime.now()
    return db.query(LearningItem).filter(
        LearningItem.next_review_date <= now
    ).order_by(LearningItem.next_review_date.asc()).all()


def get_mastered_items(db: Session) -> List[LearningItem]:
    """Get items whose streak earns the archive suggestion"""
    return db.query(LearningItem).filter(
        LearningItem.perfect_recall_count >= MASTERY_STREAK
    ).order_by(LearningItem.id.asc()).all()


def get_history(db: Session, item_id: int) -> List[ReviewHistoryEntry]:
    """Get an item's review history, newest first"""
    return db.query(ReviewHistoryEntry).filter(
        ReviewHistoryEntry.item_id == item_id
    ).order_by(ReviewHistoryEntry.date.desc(), ReviewHistoryEntry.id.desc()).all()


def archive_learning_item(db: Session, item_id: int) -> bool:
    """Archive an item: delete it together with its history"""
    with item_lock(item_id):
        db_item = get_learning_item(db, item_id)
        if not db_item:
            return False
        db.delete(db_item)
        db.commit()
    release_item_lock(item_id)
    logger.info("Archived item %s", item_id)
    return True
