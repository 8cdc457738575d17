from recall.models.learning_item import LearningItem
from recall.models.review_history import ReviewHistoryEntry

__all__ = [
    "LearningItem",
    "ReviewHistoryEntry"
]
