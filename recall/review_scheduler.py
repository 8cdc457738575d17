import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from recall.streak import compute_high_score_streak, align_timezones

# Per-stage review spacing in days, indexed by perfect-recall streak
BASE_INTERVALS = [1, 3, 7, 14, 30, 60, 120]

FAILED_RECALL_BELOW = 50
STRONG_RECALL_FROM = 80

MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = int(BASE_INTERVALS[-1] * 1.5)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_interval_days(recall_score: int, perfect_recall_count: int) -> int:
    """
    Days until the next review for a given recall and confidence stage.

    Args:
        recall_score: Self-rated recall for this review (0-100)
        perfect_recall_count: Trailing perfect-recall streak, used as the stage

    Returns:
        Interval in whole days, between 1 and 180
    """
    recall_score = max(0, min(100, recall_score))
    perfect_recall_count = max(0, perfect_recall_count)

    stage = min(perfect_recall_count, len(BASE_INTERVALS) - 1)
    current_interval = BASE_INTERVALS[stage]
    next_interval = BASE_INTERVALS[min(stage + 1, len(BASE_INTERVALS) - 1)]

    if recall_score < FAILED_RECALL_BELOW:
        # Failed recall: start the ladder over
        interval = BASE_INTERVALS[0]
    elif recall_score < STRONG_RECALL_FROM:
        interval = current_interval
    else:
        # Strong recall: move part of the way toward the next stage
        progress_factor = (recall_score - STRONG_RECALL_FROM) / 20
        blended_interval = current_interval + (next_interval - current_interval) * progress_factor
        score_factor = 0.5 + recall_score / 100
        interval = blended_interval * score_factor

    days = _round_half_up(interval or current_interval or 1)
    return max(MIN_INTERVAL_DAYS, min(MAX_INTERVAL_DAYS, days))


def compute_next_review_date(
    recall_score: int,
    last_reviewed_date: datetime,
    perfect_recall_count: Optional[int],
    history: Sequence = ()
) -> datetime:
    """
    Calculate the next review date after a review.

    Args:
        recall_score: Self-rated recall for this review (0-100)
        last_reviewed_date: When this review happened
        perfect_recall_count: Current perfect-recall streak. When None it is
            derived from ``history``.
        history: Review entries sorted newest-first

    Returns:
        Next review date, 1 to 180 days after ``last_reviewed_date``
    """
    if perfect_recall_count is None:
        perfect_recall_count = compute_high_score_streak(history)

    days = compute_interval_days(recall_score, perfect_recall_count)
    return last_reviewed_date + timedelta(days=days)


def is_due_for_review(next_review_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Check if an item is due for review"""
    if next_review_date is None:
        return False
    now, next_review_date = align_timezones(now or datetime.now(next_review_date.tzinfo), next_review_date)
    return now >= next_review_date


def is_overdue(next_review_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Check if the scheduled review date has passed"""
    if next_review_date is None:
        return False
    now, next_review_date = align_timezones(now or datetime.now(next_review_date.tzinfo), next_review_date)
    return now > next_review_date


def get_days_overdue(next_review_date: Optional[datetime], now: Optional[datetime] = None) -> int:
    """Calculate how many whole days overdue a review is"""
    if not is_overdue(next_review_date, now):
        return 0
    now, next_review_date = align_timezones(now or datetime.now(next_review_date.tzinfo), next_review_date)
    return (now - next_review_date).days
