from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from recall.database import Base

class ReviewHistoryEntry(Base):
    """Append-only record of one study/review event"""
    __tablename__ = "review_history_entries"
    
    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("learning_items.id", ondelete="CASCADE"), nullable=False, index=True)
    
    date = Column(DateTime, nullable=False)
    recall_score = Column(Integer, nullable=False)
    retention_score = Column(Integer, nullable=False)
    
    item = relationship("LearningItem", back_populates="history")
