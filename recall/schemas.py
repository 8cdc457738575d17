from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class ReviewHistoryEntry(BaseModel):
    """One completed study/review event. Immutable once created."""
    date: datetime
    recall_score: int = Field(ge=0, le=100)
    retention_score: int = Field(ge=0, le=100)

    class Config:
        from_attributes = True
        frozen = True

class LearningItemCreate(BaseModel):
    """Schema for creating a learning item (its first save is its first review)"""
    title: str = Field(min_length=1)
    recall_score: int = Field(ge=0, le=100)
    content: Optional[str] = None
    reviewed_at: Optional[datetime] = None

class ReviewOutcome(BaseModel):
    """Result of a review completion, as stored on the item"""
    item_id: int
    recall_score: int
    retention_score: int
    perfect_recall_count: int
    last_reviewed_date: datetime
    next_review_date: datetime
    mastery_suggested: bool = False

class LearningItemResponse(BaseModel):
    """Schema for learning item response"""
    id: int
    title: str
    content: Optional[str] = None
    recall_score: int
    perfect_recall_count: int
    last_reviewed_date: Optional[datetime] = None
    next_review_date: Optional[datetime] = None
    history: List[ReviewHistoryEntry] = []

    class Config:
        from_attributes = True
