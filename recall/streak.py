from datetime import datetime
from typing import Iterable, List, Optional, Sequence

PERFECT_RECALL_THRESHOLD = 90
MASTERY_STREAK = 4


def compute_high_score_streak(history: Sequence) -> int:
    """
    Count the trailing run of perfect recalls.

    Args:
        history: Review entries sorted newest-first. Anything with a
            ``recall_score`` attribute works (schemas or ORM rows).

    Returns:
        Number of consecutive most-recent entries with recall_score >= 90
    """
    streak = 0
    for entry in history:
        if entry.recall_score < PERFECT_RECALL_THRESHOLD:
            break
        streak += 1
    return streak


def compute_days_since_last_review(
    last_reviewed_date: Optional[datetime],
    now: Optional[datetime] = None
) -> int:
    """
    Whole days elapsed since the last review.

    Args:
        last_reviewed_date: When the item was last reviewed, or None
        now: Reference time (defaults to the current clock)

    Returns:
        Elapsed whole days, 0 when there is no prior review
    """
    if last_reviewed_date is None:
        return 0

    if now is None:
        now = datetime.now(last_reviewed_date.tzinfo)
    now, last_reviewed_date = align_timezones(now, last_reviewed_date)

    return max(0, (now - last_reviewed_date).days)


def newest_first(entries: Iterable) -> List:
    """Sort review entries by date, most recent first"""
    entries = list(entries)
    mixed = (
        any(entry.date.tzinfo is None for entry in entries)
        and any(entry.date.tzinfo is not None for entry in entries)
    )
    if mixed:
        # Compare wall-clock times, the same rule align_timezones applies
        return sorted(entries, key=lambda entry: entry.date.replace(tzinfo=None), reverse=True)
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def is_mastery_suggested(perfect_recall_count: int) -> bool:
    """Check if an item has earned the archive suggestion"""
    return perfect_recall_count >= MASTERY_STREAK


def align_timezones(a: datetime, b: datetime):
    # Naive values are taken to be in the same zone as the aware one
    if a.tzinfo is None and b.tzinfo is not None:
        a = a.replace(tzinfo=b.tzinfo)
    elif b.tzinfo is None and a.tzinfo is not None:
        b = b.replace(tzinfo=a.tzinfo)
    return a, b
