from pydantic import BaseModel
from typing import Iterable, List, Sequence

MAX_SPACING_BONUS = 20
MAX_REINFORCEMENT_BONUS = 15
SPACING_MIN_RECALL = 50


class RetentionSummary(BaseModel):
    """Aggregate retention across a set of items"""
    item_count: int
    average_retention: float
    # [low (<= 40), medium (<= 70), high]
    distribution: List[int]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def compute_retention_score(
    recall_score: int,
    days_since_last_review: int,
    review_count: int,
    high_score_streak: int
) -> int:
    """
    Estimate long-term memory strength right after a review.

    Successful recall after a long gap earns a spacing bonus; a run of
    perfect recalls earns a reinforcement bonus. A failed recall (< 50)
    gets no credit for elapsed time, since the gap led to forgetting.

    Args:
        recall_score: Self-rated recall for this review (0-100)
        days_since_last_review: Whole days since the previous review
        review_count: Number of reviews before this one
        high_score_streak: Current perfect-recall streak before this review

    Returns:
        Retention score (0-100)
    """
    recall_score = _clamp(recall_score, 0, 100)
    days_since_last_review = max(0, days_since_last_review)
    high_score_streak = max(0, high_score_streak)

    # No prior data on the first review
    if review_count <= 0:
        days_since_last_review = 0
        high_score_streak = 0

    spacing_bonus = 0
    if recall_score >= SPACING_MIN_RECALL:
        spacing_bonus = min(MAX_SPACING_BONUS, days_since_last_review // 3)

    reinforcement_bonus = min(MAX_REINFORCEMENT_BONUS, high_score_streak * 3)

    return _clamp(recall_score + spacing_bonus + reinforcement_bonus, 0, 100)


def estimate_item_retention(recall_score: int, perfect_recall_count: int, history: Sequence) -> int:
    """Retention shown for an item: latest stored score, else a rough estimate"""
    if history:
        return history[0].retention_score
    estimate = _clamp(recall_score, 0, 100) * 0.8 + max(0, perfect_recall_count) * 5.0
    return int(min(100, estimate))


def summarize_retention(scores: Iterable[int]) -> RetentionSummary:
    scores = list(scores)
    distribution = [0, 0, 0]
    for score in scores:
        if score <= 40:
            distribution[0] += 1
        elif score <= 70:
            distribution[1] += 1
        else:
            distribution[2] += 1

    average = sum(scores) / len(scores) if scores else 0.0
    return RetentionSummary(
        item_count=len(scores),
        average_retention=average,
        distribution=distribution
    )
