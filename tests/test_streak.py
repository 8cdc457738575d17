from datetime import datetime, timedelta, timezone

from recall.schemas import ReviewHistoryEntry
from recall.streak import (
    compute_days_since_last_review,
    compute_high_score_streak,
    is_mastery_suggested,
    newest_first,
)


def _append(history, score, when):
    entry = ReviewHistoryEntry(date=when, recall_score=score, retention_score=score)
    return [entry] + history


def test_empty_history_has_no_streak():
    assert compute_high_score_streak([]) == 0


def test_streak_stops_at_first_miss(make_history):
    assert compute_high_score_streak(make_history([95, 90, 80, 100])) == 2
    assert compute_high_score_streak(make_history([80, 100, 100])) == 0
    assert compute_high_score_streak(make_history([90, 90, 90])) == 3


def test_streak_dynamics(make_history, now):
    history = make_history([100, 92])
    k = compute_high_score_streak(history)

    extended = _append(history, 90, now)
    assert compute_high_score_streak(extended) == k + 1

    broken = _append(extended, 89, now + timedelta(days=1))
    assert compute_high_score_streak(broken) == 0


def test_four_perfect_recalls_suggest_mastery(make_history):
    streak = compute_high_score_streak(make_history([90, 95, 100, 91]))

    assert streak == 4
    assert is_mastery_suggested(streak)
    assert not is_mastery_suggested(3)


def test_days_since_last_review():
    last = datetime(2024, 1, 1, 9, 0)

    assert compute_days_since_last_review(None) == 0
    assert compute_days_since_last_review(last, now=datetime(2024, 1, 11, 9, 0)) == 10
    assert compute_days_since_last_review(last, now=datetime(2024, 1, 11, 8, 59)) == 9
    assert compute_days_since_last_review(last, now=datetime(2023, 12, 25)) == 0


def test_days_since_last_review_mixed_timezones():
    last = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert compute_days_since_last_review(last, now=datetime(2024, 1, 4)) == 3


def test_days_since_last_review_defaults_to_clock():
    last = datetime.now() - timedelta(days=5, hours=1)
    assert compute_days_since_last_review(last) == 5


def test_newest_first_sorts_by_date(now):
    entries = [
        ReviewHistoryEntry(date=now - timedelta(days=d), recall_score=s, retention_score=s)
        for d, s in [(3, 95), (1, 40), (2, 100)]
    ]
    ordered = newest_first(entries)

    assert [e.recall_score for e in ordered] == [40, 100, 95]
    assert compute_high_score_streak(ordered) == 0


def test_newest_first_mixed_timezones():
    entries = [
        ReviewHistoryEntry(date=datetime(2024, 1, 1), recall_score=60, retention_score=60),
        ReviewHistoryEntry(date=datetime(2024, 1, 3, tzinfo=timezone.utc), recall_score=95, retention_score=95),
        ReviewHistoryEntry(date=datetime(2024, 1, 2), recall_score=80, retention_score=80),
    ]

    assert [e.recall_score for e in newest_first(entries)] == [95, 80, 60]
