"""Item review lifecycle: derived states and the pure part of a review completion."""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from recall.retention import compute_retention_score
from recall.review_scheduler import compute_next_review_date, is_overdue
from recall.schemas import ReviewHistoryEntry
from recall.streak import (
    align_timezones,
    compute_days_since_last_review,
    compute_high_score_streak,
    is_mastery_suggested,
    newest_first,
)


class ItemState(str, Enum):
    NEW = "new"
    SCHEDULED = "scheduled"
    OVERDUE = "overdue"
    MASTERED = "mastered"  # advisory only, never forced
    ARCHIVED = "archived"


class ReviewPlan(BaseModel):
    """Everything a review completion writes back to the item"""
    entry: ReviewHistoryEntry
    perfect_recall_count: int
    retention_score: int
    next_review_date: datetime
    mastery_suggested: bool

    class Config:
        frozen = True


def derive_state(item, now: Optional[datetime] = None) -> ItemState:
    """
    Derive the lifecycle state of a stored item.

    Overdue is a predicate on the schedule, not a stored state, and mastered
    is a suggestion to archive. Archived items no longer exist, so that state
    is never derived here.
    """
    if not item.history:
        return ItemState.NEW
    if is_overdue(item.next_review_date, now):
        return ItemState.OVERDUE
    if is_mastery_suggested(item.perfect_recall_count):
        return ItemState.MASTERED
    return ItemState.SCHEDULED


def plan_review(
    history: Iterable,
    last_reviewed_date: Optional[datetime],
    recall_score: int,
    reviewed_at: datetime
) -> ReviewPlan:
    """
    Compute the outcome of a review without touching storage.

    Args:
        history: The item's existing review entries, in any order
        last_reviewed_date: Item's last review time (falls back to the newest entry)
        recall_score: Self-rated recall for this review (0-100)
        reviewed_at: When this review happened. A time before the newest
            entry is moved up to that entry, so history stays append-only.

    Returns:
        ReviewPlan with the new entry, streak, retention and next review date
    """
    recall_score = max(0, min(100, recall_score))
    previous = newest_first(history)
    review_count = len(previous)

    if previous:
        newest, aligned = align_timezones(previous[0].date, reviewed_at)
        if aligned < newest:
            if previous[0].date.tzinfo is not None and reviewed_at.tzinfo is not None:
                reviewed_at = newest.astimezone(reviewed_at.tzinfo)
            else:
                reviewed_at = newest.replace(tzinfo=reviewed_at.tzinfo)

    days_since_last_review = 0
    high_score_streak = 0
    if review_count:
        last_reviewed_date = last_reviewed_date or previous[0].date
        days_since_last_review = compute_days_since_last_review(last_reviewed_date, now=reviewed_at)
        high_score_streak = compute_high_score_streak(previous)

    retention_score = compute_retention_score(
        recall_score,
        days_since_last_review,
        review_count,
        high_score_streak
    )

    entry = ReviewHistoryEntry(
        date=reviewed_at,
        recall_score=recall_score,
        retention_score=retention_score
    )
    updated = newest_first([entry, *previous])
    perfect_recall_count = compute_high_score_streak(updated)

    return ReviewPlan(
        entry=entry,
        perfect_recall_count=perfect_recall_count,
        retention_score=retention_score,
        next_review_date=compute_next_review_date(
            recall_score,
            reviewed_at,
            perfect_recall_count,
            updated
        ),
        mastery_suggested=is_mastery_suggested(perfect_recall_count)
    )
