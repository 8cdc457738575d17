from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from recall.database import Base

class LearningItem(Base):
    """Something the user is memorizing, with its review schedule"""
    __tablename__ = "learning_items"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text)
    
    recall_score = Column(Integer, nullable=False, default=0)  # latest self-rating, 0-100
    perfect_recall_count = Column(Integer, nullable=False, default=0)  # trailing run of >= 90
    
    last_reviewed_date = Column(DateTime)
    next_review_date = Column(DateTime, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    
    history = relationship(
        "ReviewHistoryEntry",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="ReviewHistoryEntry.date.desc()"
    )
