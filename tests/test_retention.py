from recall.retention import (
    compute_retention_score,
    estimate_item_retention,
    summarize_retention,
)


def test_first_review_has_no_bonus():
    assert compute_retention_score(50, 0, 0, 0) == 50


def test_first_review_ignores_stale_inputs():
    assert compute_retention_score(80, 30, 0, 4) == 80


def test_spacing_bonus_for_successful_recall():
    assert compute_retention_score(70, 30, 3, 0) == 80
    assert compute_retention_score(70, 2, 3, 0) == 70  # 2 // 3 == 0
    assert compute_retention_score(60, 300, 3, 0) == 80  # capped at 20


def test_no_spacing_credit_for_failed_recall():
    assert compute_retention_score(40, 60, 5, 2) == 46


def test_reinforcement_bonus_is_capped():
    assert compute_retention_score(50, 0, 10, 2) == 56
    assert compute_retention_score(50, 0, 10, 10) == 65


def test_result_is_clamped():
    assert compute_retention_score(100, 60, 5, 5) == 100
    assert compute_retention_score(-10, -5, 3, -2) == 0
    assert compute_retention_score(250, 0, 1, 0) == 100


def test_monotonic_in_recall_score():
    for days in (0, 5, 30, 90):
        for streak in (0, 1, 4):
            scores = [compute_retention_score(s, days, 3, streak) for s in range(0, 101)]
            assert scores == sorted(scores)


def test_monotonic_in_days_and_streak_for_passing_recall():
    for recall in (50, 75, 90):
        by_days = [compute_retention_score(recall, d, 3, 1) for d in range(0, 120)]
        assert by_days == sorted(by_days)

        by_streak = [compute_retention_score(recall, 10, 3, k) for k in range(0, 10)]
        assert by_streak == sorted(by_streak)


def test_failed_recall_never_exceeds_reinforcement_bound():
    for recall in range(0, 50):
        for days in (0, 10, 100):
            for streak in range(0, 7):
                bonus = min(15, streak * 3)
                assert compute_retention_score(recall, days, 3, streak) <= recall + bonus


def test_item_retention_uses_latest_entry(make_history):
    history = make_history([72, 40])
    assert estimate_item_retention(90, 1, history) == 72


def test_item_retention_estimate_without_history():
    assert estimate_item_retention(80, 2, []) == 74
    assert estimate_item_retention(100, 10, []) == 100


def test_summarize_retention():
    summary = summarize_retention([30, 40, 55, 70, 90])

    assert summary.item_count == 5
    assert summary.average_retention == 57.0
    assert summary.distribution == [2, 2, 1]


def test_summarize_retention_empty():
    summary = summarize_retention([])

    assert summary.item_count == 0
    assert summary.average_retention == 0.0
    assert summary.distribution == [0, 0, 0]
