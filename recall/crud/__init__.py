from recall.crud.learning_item import (
    create_learning_item,
    get_learning_item,
    list_learning_items,
    get_due_items,
    get_mastered_items,
    get_history,
    archive_learning_item
)
from recall.crud.review import (
    BackdatedReviewError,
    item_lock,
    record_review,
    release_item_lock,
    to_store_time
)

__all__ = [
    "create_learning_item",
    "get_learning_item",
    "list_learning_items",
    "get_due_items",
    "get_mastered_items",
    "get_history",
    "archive_learning_item",
    "record_review",
    "item_lock",
    "release_item_lock",
    "to_store_time",
    "BackdatedReviewError",
]
